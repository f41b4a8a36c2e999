"""Test doubles for the Spotify HTTP layer and the cache clock."""

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text or ("" if payload is None else str(payload))

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload


class FakeSession:
    """
    Stand-in for requests.Session.

    `handler(method, url, kwargs)` returns a FakeResponse or raises; every
    call is recorded in `calls`.
    """

    def __init__(self, handler: Callable[[str, str, Dict[str, Any]], FakeResponse]) -> None:
        self.handler = handler
        self.calls: List[Dict[str, Any]] = []

    def _request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        return self.handler(method, url, kwargs)

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._request("GET", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._request("POST", url, **kwargs)


def always(response: FakeResponse) -> Callable[[str, str, Dict[str, Any]], FakeResponse]:
    return lambda method, url, kwargs: response


def raising(exc: Exception) -> Callable[[str, str, Dict[str, Any]], FakeResponse]:
    def _handler(method: str, url: str, kwargs: Dict[str, Any]) -> FakeResponse:
        raise exc

    return _handler


class FrozenClock:
    def __init__(self, start: Optional[datetime] = None) -> None:
        self.now = start or datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


def artists_payload(*artists: tuple) -> Dict[str, Any]:
    items = [
        {"id": f"id-{name}", "name": name, "popularity": popularity, "type": "artist"}
        for name, popularity in artists
    ]
    return {
        "items": items,
        "total": len(items),
        "limit": 39,
        "offset": 0,
        "next": None,
        "previous": None,
    }


