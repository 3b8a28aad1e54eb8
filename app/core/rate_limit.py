"""Fixed-window request counting per client key (usually the client IP)."""

import threading
import time
from dataclasses import dataclass
from typing import Callable

from cachetools import TTLCache


@dataclass
class _Window:
    count: int
    reset_at: float


@dataclass(frozen=True)
class RateLimitResult:
    limit: int
    remaining: int
    reset_at: float
    reached: bool


class FixedWindowRateLimiter:
    """
    Allow `limit` hits per key in each `period_seconds` window.

    A window opens on the first hit for a key and its counter is dropped by the
    TTLCache when the period ends, so the next hit opens a fresh window. The
    entry is never reassigned while live, which keeps its original expiry.
    """

    def __init__(
        self,
        limit: int,
        period_seconds: int,
        maxsize: int = 100_000,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        if limit < 1 or period_seconds < 1:
            raise ValueError("limit and period_seconds must be positive")
        self.limit = limit
        self.period = period_seconds
        self._timer = timer
        self._windows: TTLCache = TTLCache(maxsize=maxsize, ttl=period_seconds, timer=timer)
        self._lock = threading.Lock()

    def hit(self, key: str) -> RateLimitResult:
        """Count one request for key and report whether the limit was exceeded."""
        with self._lock:
            window = self._windows.get(key)
            if window is None:
                window = _Window(count=0, reset_at=self._timer() + self.period)
                self._windows[key] = window
            window.count += 1
            count, reset_at = window.count, window.reset_at
        return RateLimitResult(
            limit=self.limit,
            remaining=max(self.limit - count, 0),
            reset_at=reset_at,
            reached=count > self.limit,
        )

    def seconds_until_reset(self, result: RateLimitResult) -> int:
        return max(int(result.reset_at - self._timer() + 0.999), 0)
