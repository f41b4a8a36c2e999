from typing import Dict, Optional, Set

from fakes import FakeResponse, FakeSession
from spotify_top.config import Settings
from spotify_top.core import ResolutionError, SpotifyProfile, UserRecord
from spotify_top.data import UserStore
from spotify_top.services import AuthService
from spotify_top.spotify import SpotifyTokenClient


def _spotify(
    valid_tokens: Set[str],
    refresh_results: Optional[Dict[str, dict]] = None,
) -> FakeSession:
    """
    GET /me is 200 for `valid_tokens`, 401 otherwise.
    POST /api/token answers from `refresh_results[refresh_token]`, else 400.
    """
    refresh_results = refresh_results or {}

    def handler(method, url, kwargs):
        if method == "GET":
            token = kwargs["headers"]["Authorization"][len("Bearer "):]
            return FakeResponse(200 if token in valid_tokens else 401, {"id": "x"})
        refresh_token = kwargs["data"]["refresh_token"]
        if refresh_token in refresh_results:
            return FakeResponse(200, refresh_results[refresh_token])
        return FakeResponse(400, {"error": "invalid_grant"})

    return FakeSession(handler)


def _service(settings: Settings, users: UserStore, session: FakeSession) -> AuthService:
    return AuthService(users, SpotifyTokenClient(settings, session=session))


def _alice(users: UserStore, **overrides) -> UserRecord:
    values = {
        "spotify_id": "spotify-1",
        "display_name": "Alice",
        "access_token": "access-1",
        "refresh_token": "refresh-1",
    }
    values.update(overrides)
    return users.insert(UserRecord(**values))


def test_valid_token_with_known_user(settings: Settings, user_store: UserStore) -> None:
    alice = _alice(user_store)
    session = _spotify(valid_tokens={"access-1"})
    service = _service(settings, user_store, session)

    result = service.validate_token("access-1")

    assert result.is_valid is True
    assert result.new_access_token is None
    assert result.error is None
    assert result.user.id == alice.id
    assert result.user.spotify_id == "spotify-1"
    # No refresh attempted
    assert [c["method"] for c in session.calls] == ["GET"]


def test_expired_token_is_refreshed_and_persisted(
    settings: Settings, user_store: UserStore
) -> None:
    _alice(user_store)
    session = _spotify(
        valid_tokens=set(),
        refresh_results={"refresh-1": {"access_token": "access-2"}},
    )
    service = _service(settings, user_store, session)

    result = service.validate_token("access-1")

    assert result.is_valid is True
    assert result.new_access_token == "access-2"
    assert result.user.display_name == "Alice"

    stored = user_store.find_by_spotify_id("spotify-1")
    assert stored.access_token == "access-2"
    # Not rotated by Spotify, so the old one is kept
    assert stored.refresh_token == "refresh-1"


def test_rotated_refresh_token_is_stored(settings: Settings, user_store: UserStore) -> None:
    _alice(user_store)
    session = _spotify(
        valid_tokens=set(),
        refresh_results={
            "refresh-1": {"access_token": "access-2", "refresh_token": "refresh-2"}
        },
    )

    _service(settings, user_store, session).validate_token("access-1")

    stored = user_store.find_by_spotify_id("spotify-1")
    assert stored.refresh_token == "refresh-2"


def test_revoked_refresh_token(settings: Settings, user_store: UserStore) -> None:
    _alice(user_store)
    session = _spotify(valid_tokens=set(), refresh_results={})

    result = _service(settings, user_store, session).validate_token("access-1")

    assert result.is_valid is False
    assert result.error == ResolutionError.INVALID_REFRESH_TOKEN
    assert user_store.find_by_spotify_id("spotify-1").access_token == "access-1"


def test_unknown_token_is_user_not_found(settings: Settings, user_store: UserStore) -> None:
    session = _spotify(valid_tokens=set())

    result = _service(settings, user_store, session).validate_token("nobody")

    assert result.is_valid is False
    assert result.error == ResolutionError.USER_NOT_FOUND
    assert [c["method"] for c in session.calls] == ["GET"]


def test_valid_token_without_stored_user_is_user_not_found(
    settings: Settings, user_store: UserStore
) -> None:
    session = _spotify(valid_tokens={"orphan"})

    result = _service(settings, user_store, session).validate_token("orphan")

    assert result.is_valid is False
    assert result.error == ResolutionError.USER_NOT_FOUND


def test_unexpected_failure_becomes_internal_error(
    settings: Settings, user_store: UserStore, monkeypatch
) -> None:
    _alice(user_store)
    service = _service(settings, user_store, _spotify(valid_tokens={"access-1"}))

    def _boom(token):
        raise RuntimeError("store exploded")

    monkeypatch.setattr(user_store, "find_by_access_token", _boom)

    result = service.validate_token("access-1")

    assert result.is_valid is False
    assert result.error == ResolutionError.INTERNAL_ERROR


def test_logout_clears_tokens(settings: Settings, user_store: UserStore) -> None:
    _alice(user_store)
    service = _service(settings, user_store, _spotify(valid_tokens=set()))

    service.logout("access-1")

    stored = user_store.find_by_spotify_id("spotify-1")
    assert stored.access_token is None
    assert stored.refresh_token is None


def test_logout_swallows_storage_errors(
    settings: Settings, user_store: UserStore, monkeypatch
) -> None:
    service = _service(settings, user_store, _spotify(valid_tokens=set()))

    def _boom(token):
        raise OSError("read-only filesystem")

    monkeypatch.setattr(user_store, "clear_tokens_by_access_token", _boom)

    service.logout("access-1")


def test_find_or_create_user_creates_then_updates(
    settings: Settings, user_store: UserStore
) -> None:
    service = _service(settings, user_store, _spotify(valid_tokens=set()))
    profile = SpotifyProfile(
        id="spotify-9", display_name="Bob", email="bob@example.com", image_url=None
    )

    created = service.find_or_create_user(profile, "a1", "r1")
    updated = service.find_or_create_user(profile, "a2", "r2")

    assert updated.id == created.id
    assert updated.display_name == "Bob"
    stored = user_store.find_by_spotify_id("spotify-9")
    assert stored.access_token == "a2"
    assert stored.refresh_token == "r2"
    assert stored.email == "bob@example.com"
