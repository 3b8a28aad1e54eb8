"""Dependency providers: services, the user cache, the rate limiter, and paging."""

import logging
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Query
from sqlalchemy.orm import Session

from app.cache.store import MemoryStore, RedisStore
from app.cache.user_cache import UserCache
from app.core.config import settings
from app.core.database import SessionLocal, get_db
from app.core.rate_limit import FixedWindowRateLimiter
from app.repositories.item import ItemRepository
from app.repositories.user import UserRepository
from app.schemas.common import MAX_PAGE, Paging
from app.services.item_service import ItemService
from app.services.user_service import UserService

logger = logging.getLogger(__name__)


@lru_cache
def get_user_cache() -> UserCache:
    """Process-wide user cache built from settings (memory or Redis store)."""
    if settings.CACHE_BACKEND == "redis":
        store = RedisStore.from_url(settings.REDIS_URL)
    else:
        store = MemoryStore(maxsize=settings.USER_CACHE_MAXSIZE)
    logger.info("User cache ready (backend=%s)", settings.CACHE_BACKEND)
    return UserCache(store, SessionLocal, ttl_seconds=settings.USER_CACHE_TTL_SECONDS)


@lru_cache
def get_rate_limiter() -> FixedWindowRateLimiter | None:
    """Process-wide limiter, or None when RATE_LIMIT_ENABLED is false."""
    if not settings.RATE_LIMIT_ENABLED:
        return None
    return FixedWindowRateLimiter(
        limit=settings.RATE_LIMIT_REQUESTS,
        period_seconds=settings.RATE_LIMIT_PERIOD_SECONDS,
    )


def get_item_service(db: Annotated[Session, Depends(get_db)]) -> ItemService:
    return ItemService(ItemRepository(db))


def get_user_service(
    db: Annotated[Session, Depends(get_db)],
    user_cache: Annotated[UserCache, Depends(get_user_cache)],
) -> UserService:
    return UserService(UserRepository(db), user_cache)


def get_paging(
    page: Annotated[int, Query(le=MAX_PAGE, description="1-based page number")] = 1,
    limit: Annotated[int | None, Query(description="Rows per page")] = None,
) -> Paging:
    return Paging(page=page, limit=limit or settings.DEFAULT_PAGE_LIMIT).process(
        settings.DEFAULT_PAGE_LIMIT, settings.MAX_PAGE_LIMIT
    )
