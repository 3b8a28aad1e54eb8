"""Key-value stores and the read-through user cache."""

from app.cache.store import KeyValueStore, MemoryStore, RedisStore
from app.cache.user_cache import UserCache

__all__ = ["KeyValueStore", "MemoryStore", "RedisStore", "UserCache"]
