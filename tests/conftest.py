from pathlib import Path

import pytest

from fakes import FrozenClock
from spotify_top.config import Settings
from spotify_top.data import TopItemsCache, UserStore


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        spotify_client_id="client-id",
        spotify_client_secret="client-secret",
        callback_url="http://localhost:8000/auth/spotify/callback",
        frontend_url="http://localhost:3000",
        data_dir=str(tmp_path / "data"),
    )


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def cache(settings: Settings, clock: FrozenClock) -> TopItemsCache:
    return TopItemsCache(settings.cache_file, ttl_seconds=3600, clock=clock)


@pytest.fixture
def user_store(settings: Settings) -> UserStore:
    return UserStore(settings.users_file)
