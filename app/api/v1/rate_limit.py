"""Per-client-IP throttling dependency."""

import logging
from typing import Annotated

from fastapi import Depends, Request, Response

from app.api.deps import get_rate_limiter
from app.core.errors import TooManyRequestsError
from app.core.rate_limit import FixedWindowRateLimiter

logger = logging.getLogger(__name__)


def client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def rate_limit(
    request: Request,
    response: Response,
    limiter: Annotated[FixedWindowRateLimiter | None, Depends(get_rate_limiter)],
) -> None:
    """Count the request against the caller's window; 429 once the window is exhausted."""
    if limiter is None:
        return
    ip = client_ip(request)
    result = limiter.hit(ip)
    reset_in = limiter.seconds_until_reset(result)
    headers = {
        "X-RateLimit-Limit": str(result.limit),
        "X-RateLimit-Remaining": str(result.remaining),
        "X-RateLimit-Reset": str(reset_in),
    }
    if result.reached:
        logger.warning("Rate limit exceeded", extra={"client_ip": ip, "path": request.url.path})
        raise TooManyRequestsError(headers={**headers, "Retry-After": str(reset_in)})
    response.headers.update(headers)
