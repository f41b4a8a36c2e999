import logging
import time
from typing import Optional

import requests
from fastapi import FastAPI, Request

from spotify_top import __version__
from spotify_top.api.auth.routes import router as auth_router
from spotify_top.api.spotify.routes import router as spotify_router
from spotify_top.config import Settings, load_settings
from spotify_top.core import configure_logging, log_warning
from spotify_top.data import TopItemsCache, UserStore
from spotify_top.services import AuthService
from spotify_top.spotify import SpotifyTokenClient, TopItemsFetcher

http_logger = logging.getLogger("spotify_top.http")


def create_app(
    settings: Optional[Settings] = None,
    session: Optional[requests.Session] = None,
) -> FastAPI:
    """
    Build the API with its services wired from `settings`.

    `session` is shared by the Spotify clients; tests pass a fake one.
    """
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    if not settings.has_client_credentials:
        log_warning(
            "SPOTIFY_CLIENT_ID / SPOTIFY_CLIENT_SECRET are not set; "
            "login and token refresh will fail."
        )

    session = session or requests.Session()
    users = UserStore(settings.users_file)
    cache = TopItemsCache(settings.cache_file, ttl_seconds=settings.cache_ttl_seconds)
    token_client = SpotifyTokenClient(settings, session=session)

    app = FastAPI(
        title="Spotify Top Items API",
        version=__version__,
        description="Backend-for-frontend for Spotify login and top artists/tracks.",
    )
    app.state.settings = settings
    app.state.token_client = token_client
    app.state.auth_service = AuthService(users, token_client)
    app.state.fetcher = TopItemsFetcher(settings, cache=cache, session=session)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        http_logger.info(
            "%s %s %d %.0fms",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response

    app.include_router(auth_router, prefix="/auth", tags=["auth"])
    app.include_router(spotify_router, prefix="/spotify", tags=["spotify"])

    return app
