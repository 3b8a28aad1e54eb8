"""Read-through cache of user snapshots consulted by the auth dependency."""

import logging
import threading
from typing import Callable
from uuid import UUID

from cachetools import TTLCache
from sqlalchemy.orm import Session

from app.cache.store import KeyValueStore
from app.core.errors import CacheError
from app.repositories.user import UserRepository
from app.schemas.auth import CurrentUser

logger = logging.getLogger(__name__)


class UserCache:
    """
    Cache of CurrentUser snapshots keyed by user id, backed by the users table.

    On a miss only one caller per user id loads from the database; concurrent
    callers for the same id wait on a per-key lock and then read the populated
    entry. Lookups for different ids never wait on each other. Store failures
    are logged and degrade to a direct database read.
    """

    def __init__(
        self,
        store: KeyValueStore,
        session_factory: Callable[[], Session],
        ttl_seconds: int = 7200,
        lock_ttl_seconds: int = 300,
    ) -> None:
        self._store = store
        self._session_factory = session_factory
        self._ttl = ttl_seconds
        # Locks outlive the slowest load; expired locks are dropped automatically.
        self._locks: TTLCache = TTLCache(maxsize=10_000, ttl=lock_ttl_seconds)
        self._locks_guard = threading.Lock()
        self._stats_lock = threading.Lock()
        self.stats = {"hits": 0, "misses": 0, "loads": 0, "errors": 0}

    def _count(self, name: str) -> None:
        with self._stats_lock:
            self.stats[name] += 1

    @staticmethod
    def key_for(user_id: UUID) -> str:
        return f"user:{user_id}"

    def _lock_for(self, key: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    def _read(self, key: str) -> CurrentUser | None:
        try:
            raw = self._store.get(key)
        except CacheError as e:
            self._count("errors")
            logger.warning("User cache read failed: %s", e.cause, extra={"key": key})
            return None
        if raw is None:
            return None
        return CurrentUser.model_validate(raw)

    def _load(self, user_id: UUID) -> CurrentUser:
        self._count("loads")
        with self._session_factory() as session:
            user = UserRepository(session).get({"id": user_id})
            return CurrentUser.model_validate(user)

    def get(self, user_id: UUID) -> CurrentUser:
        """Return the user snapshot; raises NotFoundError if the user does not exist."""
        key = self.key_for(user_id)
        cached = self._read(key)
        if cached is not None:
            self._count("hits")
            return cached

        with self._lock_for(key):
            # Another caller may have populated the entry while we waited.
            cached = self._read(key)
            if cached is not None:
                self._count("hits")
                return cached

            self._count("misses")
            user = self._load(user_id)
            try:
                self._store.set(key, user.model_dump(mode="json"), self._ttl)
            except CacheError as e:
                self._count("errors")
                logger.warning("User cache populate failed: %s", e.cause, extra={"key": key})
            return user

    def invalidate(self, user_id: UUID) -> None:
        """Drop the cached snapshot so the next lookup reloads it."""
        key = self.key_for(user_id)
        try:
            self._store.delete(key)
        except CacheError as e:
            self._count("errors")
            logger.warning("User cache invalidate failed: %s", e.cause, extra={"key": key})
