"""Salted password hashing and JWT creation/verification for authentication."""

import hmac
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

import bcrypt
import jwt

from app.core.config import settings
from app.core.errors import InvalidTokenError

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

# Min/max lengths for email and password validation.
EMAIL_MAX_LEN = 255
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128


@dataclass(frozen=True)
class TokenPayload:
    """Claims carried by an access token."""

    user_id: UUID
    role: str


def generate_salt(rounds: int | None = None) -> str:
    """Return a fresh bcrypt salt (it also encodes the cost factor)."""
    return bcrypt.gensalt(rounds=rounds or BCRYPT_ROUNDS).decode("utf-8")


def hash_password(plain_password: str, salt: str) -> str:
    """Hash a plain-text password with the given salt. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, salt.encode("utf-8")).decode("utf-8")


def verify_password(plain_password: str, salt: str, hashed: str) -> bool:
    """Recompute the hash with the stored salt and compare in constant time."""
    try:
        candidate = hash_password(plain_password, salt)
    except (ValueError, TypeError):
        return False
    return hmac.compare_digest(candidate.encode("utf-8"), hashed.encode("utf-8"))


def create_access_token(user_id: UUID, role: str) -> tuple[str, int]:
    """Create a JWT access token with sub (user id), role, and exp. Returns (token, expires_in seconds)."""
    now = datetime.now(UTC)
    expires_in = settings.JWT_EXPIRE_MINUTES * 60
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "role": role,
        "exp": now + timedelta(seconds=expires_in),
        "iat": now,
    }
    secret = settings.JWT_SECRET.get_secret_value()
    token = jwt.encode(payload, secret, algorithm=settings.JWT_ALGORITHM)
    return token, expires_in


def decode_access_token(token: str) -> TokenPayload:
    """
    Decode and validate a JWT and return its claims.
    Raises InvalidTokenError on a bad signature, expiry, or malformed payload.
    """
    secret = settings.JWT_SECRET.get_secret_value()
    try:
        payload = jwt.decode(token, secret, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError as e:
        raise InvalidTokenError("token has expired", cause=e) from e
    except jwt.PyJWTError as e:
        raise InvalidTokenError(cause=e) from e

    sub = payload.get("sub")
    role = payload.get("role")
    if not sub or not isinstance(role, str):
        raise InvalidTokenError("invalid token payload")
    try:
        user_id = UUID(sub)
    except (TypeError, ValueError) as e:
        raise InvalidTokenError("invalid token payload", cause=e) from e
    return TokenPayload(user_id=user_id, role=role)
