"""Public façade for the spotify_top.services package.

This module exposes the identity/token orchestration and the pure top
artists processing helpers. Callers (the API routers, tests) should import
these from this façade.
"""

from .artists import (
    average_popularity,
    distribute_top_artists,
    is_well_formed_top_items_response,
    process_top_artists_response,
)
from .auth_service import AuthService

__all__ = [
    "AuthService",
    "average_popularity",
    "distribute_top_artists",
    "is_well_formed_top_items_response",
    "process_top_artists_response",
]
