"""Public façade for the spotify_top.data package.

This module exposes the JSON-backed user store and the top items cache.
Callers should use this façade instead of importing from the internal
users or top_items_cache modules directly.
"""

from .top_items_cache import TopItemsCache, TopItemsCacheEntry, build_cache_key
from .users import DuplicateUserError, UserStore

__all__ = [
    "UserStore",
    "DuplicateUserError",
    "TopItemsCache",
    "TopItemsCacheEntry",
    "build_cache_key",
]
