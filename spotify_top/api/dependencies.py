from typing import Optional

from fastapi import HTTPException, Request

from spotify_top.config import Settings
from spotify_top.core import log_suppressed
from spotify_top.services import AuthService
from spotify_top.spotify import SpotifyError, SpotifyTokenClient, TopItemsFetcher


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_token_client(request: Request) -> SpotifyTokenClient:
    return request.app.state.token_client


def get_fetcher(request: Request) -> TopItemsFetcher:
    return request.app.state.fetcher


def strip_bearer(authorization: Optional[str]) -> str:
    """Return the bare token from an Authorization value ("" if absent)."""
    if not authorization:
        return ""
    value = authorization.lstrip()
    if value[:7].lower() == "bearer ":
        return value[7:].strip()
    return value.rstrip()


def resolve_cache_user_id(
    auth_service: AuthService, authorization: Optional[str]
) -> Optional[str]:
    """
    Spotify id of the stored user owning the bearer token, if any.

    Used to key the top items cache. A storage failure here only disables
    caching for the request.
    """
    token = strip_bearer(authorization)
    if not token:
        return None
    try:
        user = auth_service.find_user_by_access_token(token)
    except Exception as e:
        log_suppressed("Looking up cache user", e)
        return None
    return user.spotify_id if user else None


def raise_http(e: SpotifyError) -> None:
    raise HTTPException(status_code=e.status_code, detail=e.message)
