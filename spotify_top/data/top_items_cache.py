import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional, Tuple

from spotify_top.config import DEFAULT_CACHE_TTL_SECONDS
from spotify_top.core import (
    TopItemsQuery,
    log_info,
    log_suppressed,
    log_warning,
    read_json,
    utc_now,
    write_json,
)

CacheKey = Tuple[str, str, str, int, int]


@dataclass
class TopItemsCacheEntry:
    user_id: str
    item_type: str
    time_range: str
    limit: int
    offset: int
    payload: Dict[str, Any]
    created_at: datetime

    @property
    def key(self) -> CacheKey:
        return (self.user_id, self.item_type, self.time_range, self.limit, self.offset)


def build_cache_key(user_id: str, query: TopItemsQuery) -> CacheKey:
    return (
        user_id,
        query.item_type.value,
        query.time_range.value,
        query.limit,
        query.offset,
    )


def _storage_key(key: CacheKey) -> str:
    return "|".join(str(part) for part in key)


def _serialize_entry(entry: TopItemsCacheEntry) -> Dict[str, Any]:
    return {
        "user_id": entry.user_id,
        "item_type": entry.item_type,
        "time_range": entry.time_range,
        "limit": entry.limit,
        "offset": entry.offset,
        "payload": entry.payload,
        "created_at": entry.created_at.isoformat(),
    }


def _deserialize_entry(data: Dict[str, Any]) -> TopItemsCacheEntry:
    created_at = datetime.fromisoformat(data["created_at"])
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return TopItemsCacheEntry(
        user_id=str(data["user_id"]),
        item_type=str(data["item_type"]),
        time_range=str(data["time_range"]),
        limit=int(data["limit"]),
        offset=int(data["offset"]),
        payload=data["payload"],
        created_at=created_at,
    )


class TopItemsCache:
    """
    Short-lived cache of Spotify "top items" responses.

    Entries are keyed by (user_id, item_type, time_range, limit, offset) and
    stored in a single JSON document. An entry is expired once `ttl_seconds`
    have elapsed since it was written: `get` treats it as a miss and evicts
    it, `put` prunes every expired entry while it rewrites the file.

    The cache is best-effort. Any storage fault is logged and turned into a
    miss (`get`) or a no-op (`put`, `clear`); it never fails the request.
    """

    def __init__(
        self,
        path: str,
        ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.path = path
        self.ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock
        self._lock = threading.Lock()

    def _is_expired(self, entry: TopItemsCacheEntry, now: datetime) -> bool:
        return now >= entry.created_at + self.ttl

    def _load(self) -> Dict[str, TopItemsCacheEntry]:
        def _on_error(e: Exception) -> None:
            log_warning("Top items cache file is corrupted; ignoring it.")

        raw = read_json(self.path, default={}, on_error=_on_error)
        if not isinstance(raw, dict):
            return {}

        entries: Dict[str, TopItemsCacheEntry] = {}
        for payload in raw.values():
            if not isinstance(payload, dict):
                continue
            try:
                entry = _deserialize_entry(payload)
            except (KeyError, TypeError, ValueError):
                # Ignore malformed entries
                continue
            entries[_storage_key(entry.key)] = entry
        return entries

    def _save(self, entries: Dict[str, TopItemsCacheEntry]) -> None:
        write_json(
            self.path,
            {key: _serialize_entry(entry) for key, entry in entries.items()},
        )

    def get(self, user_id: str, query: TopItemsQuery) -> Optional[Dict[str, Any]]:
        key = _storage_key(build_cache_key(user_id, query))
        try:
            with self._lock:
                entries = self._load()
                entry = entries.get(key)
                if entry is None:
                    return None
                if self._is_expired(entry, self._clock()):
                    del entries[key]
                    self._save(entries)
                    return None
                return entry.payload
        except Exception as e:
            log_suppressed(f"Reading top items cache for user {user_id}", e)
            return None

    def put(self, user_id: str, query: TopItemsQuery, payload: Dict[str, Any]) -> None:
        now = self._clock()
        entry = TopItemsCacheEntry(
            user_id=user_id,
            item_type=query.item_type.value,
            time_range=query.time_range.value,
            limit=query.limit,
            offset=query.offset,
            payload=payload,
            created_at=now,
        )
        try:
            with self._lock:
                entries = {
                    key: e
                    for key, e in self._load().items()
                    if not self._is_expired(e, now)
                }
                entries[_storage_key(entry.key)] = entry
                self._save(entries)
            log_info(f"Top {entry.item_type} cached for user {user_id}.")
        except Exception as e:
            log_suppressed(f"Writing top items cache for user {user_id}", e)

    def clear(self, user_id: str) -> None:
        try:
            with self._lock:
                entries = self._load()
                kept = {k: e for k, e in entries.items() if e.user_id != user_id}
                if len(kept) != len(entries):
                    self._save(kept)
            log_info(f"Top items cache cleared for user {user_id}.")
        except Exception as e:
            log_suppressed(f"Clearing top items cache for user {user_id}", e)

    def count(self, user_id: Optional[str] = None) -> int:
        """Number of stored entries (expired ones included), optionally per user."""
        entries = self._load().values()
        if user_id is None:
            return len(entries)
        return sum(1 for e in entries if e.user_id == user_id)
