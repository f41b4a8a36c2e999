from typing import Any, Dict, Optional

import requests

from spotify_top.config import SPOTIFY_API_BASE, Settings
from spotify_top.core import (
    ItemType,
    TopItemsQuery,
    log_error,
    log_info,
    log_step,
    mask_token,
)
from spotify_top.data import TopItemsCache

from .errors import SpotifyBadRequest, SpotifyUpstreamFailure, error_for_status

BEARER_PREFIX = "Bearer "


def format_auth_token(authorization: Optional[str]) -> str:
    """
    Normalize a credential into an Authorization header value.

    "abc", "Bearer abc" and "bearer abc" all become "Bearer abc".
    An empty or missing credential raises SpotifyBadRequest.
    """
    if authorization is None or not authorization.strip():
        raise SpotifyBadRequest("Authorization token is required.")

    value = authorization.lstrip()
    if value[: len(BEARER_PREFIX)].lower() == BEARER_PREFIX.lower():
        token = value[len(BEARER_PREFIX):].strip()
        if not token:
            raise SpotifyBadRequest("Authorization token is required.")
        return f"{BEARER_PREFIX}{token}"
    return f"{BEARER_PREFIX}{value.rstrip()}"


class TopItemsFetcher:
    """
    Fetches /me/top/{artists|tracks} with a read-through, write-after cache.

    The cache is only consulted when a user id is known. No retries are made:
    each upstream failure is raised once, mapped to a SpotifyError subclass.
    """

    def __init__(
        self,
        settings: Settings,
        cache: Optional[TopItemsCache] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.settings = settings
        self.cache = cache
        self.session = session or requests.Session()

    def fetch(self, query: TopItemsQuery, user_id: Optional[str] = None) -> Dict[str, Any]:
        if user_id and self.cache is not None:
            cached = self.cache.get(user_id, query)
            if cached is not None:
                log_info(f"Returning cached top {query.item_type.value} for user {user_id}.")
                return cached

        auth_header = format_auth_token(query.authorization)

        url = f"{SPOTIFY_API_BASE}/me/top/{query.item_type.value}"
        params = {
            "time_range": query.time_range.value,
            "limit": query.limit,
            "offset": query.offset,
        }
        log_step(
            f"GET {url} ({mask_token(auth_header[len(BEARER_PREFIX):])}, "
            f"time_range={params['time_range']}, limit={params['limit']}, "
            f"offset={params['offset']})"
        )

        try:
            r = self.session.get(
                url,
                headers={
                    "Authorization": auth_header,
                    "Content-Type": "application/json",
                },
                params=params,
                timeout=self.settings.http_timeout,
            )
        except requests.RequestException as e:
            log_error(f"Error fetching top items from Spotify: {e}")
            raise SpotifyUpstreamFailure() from e

        if r.status_code != 200:
            log_error(
                f"Error fetching top items from Spotify ({r.status_code}): {r.text[:200]}"
            )
            raise error_for_status(r.status_code)

        try:
            data = r.json()
        except ValueError as e:
            log_error("Spotify returned a non-JSON top items body.")
            raise SpotifyUpstreamFailure() from e

        if user_id and self.cache is not None:
            self.cache.put(user_id, query, data)

        return data

    def fetch_top_artists(
        self, query: TopItemsQuery, user_id: Optional[str] = None
    ) -> Dict[str, Any]:
        return self.fetch(query.model_copy(update={"item_type": ItemType.ARTISTS}), user_id)

    def fetch_top_tracks(
        self, query: TopItemsQuery, user_id: Optional[str] = None
    ) -> Dict[str, Any]:
        return self.fetch(query.model_copy(update={"item_type": ItemType.TRACKS}), user_id)
