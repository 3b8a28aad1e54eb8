"""Tagged application errors and the JSON error envelope returned to clients."""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

logger = logging.getLogger(__name__)


class AppError(Exception):
    """
    Base for every failure surfaced to clients.

    `key` is a stable machine-readable tag (e.g. ErrNotFound); `message` is safe
    to show to the caller; `cause` is the underlying exception, logged but never
    returned.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    key: str = "ErrInternal"
    default_message: str = "something went wrong with the server"

    def __init__(
        self,
        message: str | None = None,
        *,
        cause: Exception | None = None,
        details: Any = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.cause = cause
        self.details = details
        self.headers = headers
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    key = "ErrInvalidRequest"
    default_message = "invalid request"


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    key = "ErrUnauthorized"
    default_message = "authentication required"

    def __init__(self, message: str | None = None, **kwargs: Any) -> None:
        kwargs.setdefault("headers", {"WWW-Authenticate": "Bearer"})
        super().__init__(message, **kwargs)


class InvalidCredentialsError(UnauthorizedError):
    key = "ErrInvalidCredentials"
    default_message = "email or password invalid"


class InvalidTokenError(UnauthorizedError):
    key = "ErrInvalidToken"
    default_message = "invalid token provided"


class PermissionDeniedError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    key = "ErrNoPermission"
    default_message = "you have no permission"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    key = "ErrRecordNotFound"
    default_message = "record not found"


class DuplicateEntityError(AppError):
    status_code = status.HTTP_409_CONFLICT
    key = "ErrEntityExisted"
    default_message = "entity already exists"


class TooManyRequestsError(AppError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    key = "ErrTooManyRequests"
    default_message = "too many requests"


class DatabaseError(AppError):
    key = "ErrDB"
    default_message = "something went wrong with the database"


class CacheError(AppError):
    key = "ErrCache"
    default_message = "something went wrong with the cache"


def error_response(
    request: Request,
    status_code: int,
    key: str,
    message: str,
    details: Any = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build the `{"error": {...}}` envelope shared by every failure response."""
    body: dict[str, Any] = {
        "status_code": status_code,
        "key": key,
        "message": message,
        "request_id": getattr(request.state, "request_id", None),
    }
    if details is not None:
        body["details"] = jsonable_encoder(details)
    return JSONResponse(status_code=status_code, content={"error": body}, headers=headers)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "%s: %s",
            exc.key,
            exc.message,
            exc_info=exc.cause,
            extra={"path": request.url.path},
        )
    return error_response(
        request,
        exc.status_code,
        exc.key,
        exc.message,
        details=exc.details,
        headers=exc.headers,
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    # ctx may hold the raw exception object; keep only serialisable fields.
    errors = [
        {"loc": e.get("loc"), "msg": e.get("msg"), "type": e.get("type")}
        for e in exc.errors()
    ]
    return error_response(
        request,
        ValidationError.status_code,
        ValidationError.key,
        "request validation failed",
        details=errors,
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error", exc_info=exc, extra={"path": request.url.path})
    return error_response(
        request,
        AppError.status_code,
        AppError.key,
        AppError.default_message,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Route every failure, expected or not, through the error envelope."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
