"""Bearer-token auth dependency: validates the JWT and resolves the requester through the user cache."""

import logging
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.api.deps import get_user_cache
from app.cache.user_cache import UserCache
from app.core.errors import NotFoundError, PermissionDeniedError, UnauthorizedError
from app.core.security import decode_access_token
from app.schemas.auth import CurrentUser

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    user_cache: Annotated[UserCache, Depends(get_user_cache)],
) -> CurrentUser:
    """
    Dependency: require `Authorization: Bearer <token>` and return the requester.

    401 for a missing/malformed header, an invalid or expired token, or an
    unknown user; 403 when the account has been deleted or banned.
    """
    if credentials is None:
        raise UnauthorizedError("wrong authentication header")
    payload = decode_access_token(credentials.credentials)
    try:
        user = user_cache.get(payload.user_id)
    except NotFoundError:
        raise UnauthorizedError("user not found") from None
    if not user.is_active:
        logger.info("Rejected inactive user", extra={"user_id": str(user.id)})
        raise PermissionDeniedError("user has been deleted or banned")

    request.state.current_user = user
    return user


CurrentUserDep = Annotated[CurrentUser, Depends(get_current_user)]
