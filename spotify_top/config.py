import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# Spotify API constants
SPOTIFY_AUTH_URL = "https://accounts.spotify.com/authorize"
SPOTIFY_TOKEN_URL = "https://accounts.spotify.com/api/token"
SPOTIFY_API_BASE = "https://api.spotify.com/v1"

SCOPES = [
    "user-read-email",
    "user-read-private",
    "user-top-read",
]

DEFAULT_CALLBACK_URL = "http://localhost:8000/auth/spotify/callback"
DEFAULT_FRONTEND_URL = "http://localhost:3000"
DEFAULT_DATA_DIR = "data"

# Top items cache entries expire one hour after they were written
DEFAULT_CACHE_TTL_SECONDS = 3600


@dataclass(frozen=True)
class Settings:
    """
    Process-wide configuration, loaded once at startup and handed to the
    services that need it.

    - client id / secret : Spotify application credentials
    - callback_url       : OAuth redirect target registered on Spotify
    - frontend_url       : where the browser lands after login
    - data_dir           : directory holding users.json and top_items_cache.json
    - http_timeout       : seconds, None keeps the requests default (no timeout)
    """

    spotify_client_id: Optional[str] = None
    spotify_client_secret: Optional[str] = None
    callback_url: str = DEFAULT_CALLBACK_URL
    frontend_url: str = DEFAULT_FRONTEND_URL
    data_dir: str = DEFAULT_DATA_DIR
    cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS
    http_timeout: Optional[float] = None
    log_level: str = "INFO"

    @property
    def users_file(self) -> str:
        return os.path.join(self.data_dir, "users.json")

    @property
    def cache_file(self) -> str:
        return os.path.join(self.data_dir, "top_items_cache.json")

    @property
    def has_client_credentials(self) -> bool:
        return bool(self.spotify_client_id and self.spotify_client_secret)


def _optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or not value.strip():
        return None
    return float(value)


def load_settings() -> Settings:
    """
    Build Settings from the environment (and a local .env file, if present).
    """
    load_dotenv()

    return Settings(
        spotify_client_id=os.getenv("SPOTIFY_CLIENT_ID"),
        spotify_client_secret=os.getenv("SPOTIFY_CLIENT_SECRET"),
        callback_url=os.getenv("CALLBACK_URL", DEFAULT_CALLBACK_URL),
        frontend_url=os.getenv("FRONTEND_URL", DEFAULT_FRONTEND_URL).rstrip("/"),
        data_dir=os.getenv("DATA_DIR", DEFAULT_DATA_DIR),
        cache_ttl_seconds=int(
            os.getenv("TOP_ITEMS_CACHE_TTL_SECONDS", str(DEFAULT_CACHE_TTL_SECONDS))
        ),
        http_timeout=_optional_float(os.getenv("SPOTIFY_HTTP_TIMEOUT")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
