"""Key-value stores backing the user cache: process-local (cachetools) or shared (Redis)."""

import json
import logging
import threading
import time
from typing import Any, Callable, NamedTuple, Protocol

from cachetools import TLRUCache
from redis import Redis, RedisError

from app.core.errors import CacheError

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Minimal TTL store interface; values are JSON-compatible dicts."""

    def get(self, key: str) -> dict[str, Any] | None: ...

    def set(self, key: str, value: dict[str, Any], ttl: int) -> None: ...

    def delete(self, key: str) -> None: ...


class _Entry(NamedTuple):
    value: dict[str, Any]
    ttl: float


def _expires_at(_key: str, entry: _Entry, now: float) -> float:
    return now + entry.ttl


class MemoryStore:
    """Process-local store with a per-entry TTL and bounded size."""

    def __init__(self, maxsize: int = 10_000, timer: Callable[[], float] = time.monotonic) -> None:
        self._data: TLRUCache = TLRUCache(maxsize=maxsize, ttu=_expires_at, timer=timer)
        self._lock = threading.Lock()

    def get(self, key: str) -> dict[str, Any] | None:
        with self._lock:
            entry = self._data.get(key)
        return dict(entry.value) if entry is not None else None

    def set(self, key: str, value: dict[str, Any], ttl: int) -> None:
        with self._lock:
            self._data[key] = _Entry(dict(value), ttl)

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


class RedisStore:
    """Shared store; values are serialised as JSON strings with an EX expiry."""

    def __init__(self, client: Redis, namespace: str = "tasklane:") -> None:
        self._redis = client
        self._namespace = namespace

    @classmethod
    def from_url(cls, url: str, **kwargs: Any) -> "RedisStore":
        client = Redis.from_url(
            url,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=5,
            socket_keepalive=True,
            health_check_interval=30,
        )
        return cls(client, **kwargs)

    def _key(self, key: str) -> str:
        return f"{self._namespace}{key}"

    def get(self, key: str) -> dict[str, Any] | None:
        try:
            raw = self._redis.get(self._key(key))
        except RedisError as e:
            raise CacheError(cause=e) from e
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Discarding undecodable cache entry", extra={"key": key})
            return None

    def set(self, key: str, value: dict[str, Any], ttl: int) -> None:
        try:
            self._redis.set(self._key(key), json.dumps(value, default=str), ex=ttl)
        except RedisError as e:
            raise CacheError(cause=e) from e

    def delete(self, key: str) -> None:
        try:
            self._redis.delete(self._key(key))
        except RedisError as e:
            raise CacheError(cause=e) from e

    def close(self) -> None:
        self._redis.close()
