"""Public façade for the spotify_top.spotify package.

This module exposes the Spotify Web API integration: the token client used
for OAuth and token validation, the top items fetcher, and the error types
they raise. Callers should import these symbols from this façade.
"""

from .auth import SpotifyTokenClient, spotify_headers
from .errors import (
    SpotifyAuthError,
    SpotifyBadRequest,
    SpotifyError,
    SpotifyForbidden,
    SpotifyRateLimited,
    SpotifyUnauthorized,
    SpotifyUpstreamFailure,
    error_for_status,
)
from .top_items import TopItemsFetcher, format_auth_token

__all__ = [
    "SpotifyTokenClient",
    "spotify_headers",
    "TopItemsFetcher",
    "format_auth_token",
    "SpotifyError",
    "SpotifyAuthError",
    "SpotifyBadRequest",
    "SpotifyUnauthorized",
    "SpotifyForbidden",
    "SpotifyRateLimited",
    "SpotifyUpstreamFailure",
    "error_for_status",
]
