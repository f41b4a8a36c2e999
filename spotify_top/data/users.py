import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from spotify_top.core import UserRecord, log_warning, read_json, utc_now, write_json


def _serialize_user(user: UserRecord) -> Dict[str, Any]:
    return {
        "id": user.id,
        "spotify_id": user.spotify_id,
        "display_name": user.display_name,
        "access_token": user.access_token,
        "refresh_token": user.refresh_token,
        "email": user.email,
        "profile_image_url": user.profile_image_url,
        "created_at": user.created_at.isoformat(),
        "updated_at": user.updated_at.isoformat(),
    }


def _parse_dt(value: Optional[str]) -> datetime:
    if not value:
        return utc_now()
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _deserialize_user(data: Dict[str, Any]) -> UserRecord:
    return UserRecord(
        id=data["id"],
        spotify_id=data["spotify_id"],
        display_name=data.get("display_name") or data["spotify_id"],
        access_token=data.get("access_token"),
        refresh_token=data.get("refresh_token"),
        email=data.get("email"),
        profile_image_url=data.get("profile_image_url"),
        created_at=_parse_dt(data.get("created_at")),
        updated_at=_parse_dt(data.get("updated_at")),
    )


class DuplicateUserError(Exception):
    """Raised when inserting a second record for an existing spotify_id."""


class UserStore:
    """
    JSON-backed store of UserRecord, keyed by spotify_id.

    On-disk structure:
      {
        "<spotify_id>": { "id": "...", "access_token": "...", ... },
        ...
      }

    Every mutation is a read-modify-write of the whole document, serialized
    by an instance lock so concurrent request workers cannot tear the file.
    Storage errors propagate; callers decide whether they are fatal.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        self._lock = threading.Lock()

    def _load(self) -> Dict[str, UserRecord]:
        def _on_error(e: Exception) -> None:
            log_warning(f"Users file {self.path} is corrupted; ignoring it.")

        raw = read_json(self.path, default={}, on_error=_on_error)
        if not isinstance(raw, dict):
            return {}

        users: Dict[str, UserRecord] = {}
        for spotify_id, payload in raw.items():
            if not isinstance(payload, dict):
                continue
            payload = dict(payload)
            payload.setdefault("spotify_id", spotify_id)
            try:
                user = _deserialize_user(payload)
            except (KeyError, TypeError, ValueError):
                log_warning(f"Skipping malformed user entry '{spotify_id}'.")
                continue
            users[user.spotify_id] = user
        return users

    def _save(self, users: Dict[str, UserRecord]) -> None:
        write_json(
            self.path,
            {spotify_id: _serialize_user(u) for spotify_id, u in users.items()},
        )

    def find_by_spotify_id(self, spotify_id: str) -> Optional[UserRecord]:
        return self._load().get(spotify_id)

    def find_by_access_token(self, access_token: str) -> Optional[UserRecord]:
        if not access_token:
            return None
        for user in self._load().values():
            if user.access_token == access_token:
                return user
        return None

    def insert(self, user: UserRecord) -> UserRecord:
        with self._lock:
            users = self._load()
            if user.spotify_id in users:
                raise DuplicateUserError(
                    f"User with spotify_id '{user.spotify_id}' already exists."
                )
            users[user.spotify_id] = user
            self._save(users)
        return user

    def save(self, user: UserRecord) -> UserRecord:
        """
        Persist `user` over the stored record sharing its spotify_id.

        The stored `id` and `created_at` are kept, so a record can never be
        re-keyed by a save.
        """
        with self._lock:
            users = self._load()
            existing = users.get(user.spotify_id)
            user.updated_at = utc_now()
            if existing is not None:
                user = replace(user, id=existing.id, created_at=existing.created_at)
            users[user.spotify_id] = user
            self._save(users)
        return user

    def clear_tokens_by_access_token(self, access_token: str) -> bool:
        """
        Unset access and refresh tokens on the record owning `access_token`.

        Returns True if a record was updated.
        """
        if not access_token:
            return False
        with self._lock:
            users = self._load()
            for user in users.values():
                if user.access_token == access_token:
                    user.access_token = None
                    user.refresh_token = None
                    user.updated_at = utc_now()
                    self._save(users)
                    return True
        return False
