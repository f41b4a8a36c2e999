"""Public façade for the spotify_top.core package.

This module exposes logging helpers, filesystem utilities, and the shared
models that are safe to import from other packages. Callers should import
these cross-cutting concerns from this façade instead of the submodules.
"""

from .fs_utils import ensure_parent_dir, read_json, write_json
from .logging_config import configure_logging
from .logging_utils import (
    log_error,
    log_info,
    log_step,
    log_success,
    log_suppressed,
    log_warning,
    mask_token,
)
from .models import (
    DEFAULT_TOP_ITEMS_LIMIT,
    ArtistsList,
    ItemType,
    ProcessedArtistsResponse,
    ResolutionError,
    SimplifiedArtist,
    SpotifyProfile,
    TimeRange,
    TokenPair,
    TokenValidationResult,
    TopItemsQuery,
    UserProfile,
    UserRecord,
    utc_now,
)

__all__ = [
    "configure_logging",
    "log_info",
    "log_step",
    "log_success",
    "log_warning",
    "log_error",
    "log_suppressed",
    "mask_token",
    "ensure_parent_dir",
    "write_json",
    "read_json",
    "DEFAULT_TOP_ITEMS_LIMIT",
    "ItemType",
    "TimeRange",
    "TopItemsQuery",
    "UserRecord",
    "UserProfile",
    "SpotifyProfile",
    "TokenPair",
    "ResolutionError",
    "TokenValidationResult",
    "SimplifiedArtist",
    "ArtistsList",
    "ProcessedArtistsResponse",
    "utc_now",
]
