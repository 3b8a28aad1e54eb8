"""User business logic: registration, login, and role-gated account management."""

import logging
import uuid
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any
from uuid import UUID

from app.cache.user_cache import UserCache
from app.core.errors import (
    DuplicateEntityError,
    InvalidCredentialsError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from app.core.security import create_access_token, generate_salt, hash_password, verify_password
from app.models.enums import INACTIVE_USER_STATUSES, Role, UserStatus
from app.models.user import User
from app.repositories.user import UserRepository
from app.schemas.auth import CurrentUser, TokenResponse, UserLogin, UserRegister
from app.schemas.common import Paging
from app.schemas.user import UserUpdate

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _dummy_credentials() -> tuple[str, str]:
    """Salt and hash checked for unknown emails so every login pays the bcrypt cost."""
    salt = generate_salt()
    return salt, hash_password("no-such-account", salt)


class UserService:
    """
    Account operations. Administrators may act on any account; standard users
    only on their own. Writes drop the account's cached snapshot so status
    changes (ban, delete) apply to the very next authenticated request.
    """

    def __init__(self, repository: UserRepository, user_cache: UserCache | None = None) -> None:
        self.repository = repository
        self.user_cache = user_cache

    def register(self, data: UserRegister) -> UUID:
        if self.repository.email_exists(data.email):
            raise DuplicateEntityError("email already exists")
        salt = generate_salt()
        now = datetime.now(timezone.utc)
        user = User(
            id=uuid.uuid4(),
            email=data.email,
            password_hash=hash_password(data.password, salt),
            salt=salt,
            first_name=data.first_name.strip(),
            last_name=data.last_name.strip(),
            phone=data.phone.strip(),
            role=int(Role.USER),
            status=int(UserStatus.ACTIVE),
            created_at=now,
            updated_at=now,
        )
        self.repository.create(user)
        logger.info("User registered", extra={"user_id": str(user.id)})
        return user.id

    def login(self, data: UserLogin) -> TokenResponse:
        """Issue an access token; every failure reads the same so callers cannot probe accounts."""
        try:
            user = self.repository.get({"email": data.email})
        except NotFoundError:
            verify_password(data.password, *_dummy_credentials())
            raise InvalidCredentialsError() from None
        if not verify_password(data.password, user.salt, user.password_hash):
            raise InvalidCredentialsError()
        if user.status in INACTIVE_USER_STATUSES:
            raise InvalidCredentialsError()

        token, expires_in = create_access_token(user.id, Role(user.role).name.lower())
        return TokenResponse(access_token=token, expires_in=expires_in)

    @staticmethod
    def _ensure_can_target(requester: CurrentUser, user_id: UUID) -> None:
        if not requester.is_admin and requester.id != user_id:
            raise PermissionDeniedError()

    def list_users(self, requester: CurrentUser, paging: Paging) -> list[User]:
        filters = None if requester.is_admin else {"id": requester.id}
        return self.repository.list(filters, paging)

    def get_user(self, requester: CurrentUser, user_id: UUID) -> User:
        self._ensure_can_target(requester, user_id)
        return self.repository.get({"id": user_id})

    def update_user(self, requester: CurrentUser, user_id: UUID, data: UserUpdate) -> User:
        self._ensure_can_target(requester, user_id)
        values: dict[str, Any] = data.model_dump(exclude_unset=True, exclude_none=True)
        if not values:
            raise ValidationError("no fields to update")
        if ("role" in values or "status" in values) and not requester.is_admin:
            raise PermissionDeniedError("only administrators may change role or status")

        for field in ("role", "status"):
            if field in values:
                values[field] = int(values[field])
        for field in ("first_name", "last_name", "phone"):
            if field in values:
                values[field] = values[field].strip()
        if "email" in values:
            current = self.repository.get({"id": user_id})
            if values["email"] != current.email and self.repository.email_exists(values["email"]):
                raise DuplicateEntityError("email already exists")
        if "password" in values:
            salt = generate_salt()
            values["password_hash"] = hash_password(values.pop("password"), salt)
            values["salt"] = salt
        values["updated_at"] = datetime.now(timezone.utc)

        if self.repository.update({"id": user_id}, values) == 0:
            raise NotFoundError()
        self._invalidate(user_id)
        return self.repository.get({"id": user_id})

    def delete_user(self, requester: CurrentUser, user_id: UUID) -> None:
        """Soft delete: the row stays (items still reference it) with status DELETED."""
        self._ensure_can_target(requester, user_id)
        values = {"status": int(UserStatus.DELETED), "updated_at": datetime.now(timezone.utc)}
        if self.repository.update({"id": user_id}, values) == 0:
            raise NotFoundError()
        self._invalidate(user_id)
        logger.info(
            "User deleted",
            extra={"user_id": str(user_id), "actor_id": str(requester.id)},
        )

    def _invalidate(self, user_id: UUID) -> None:
        if self.user_cache is not None:
            self.user_cache.invalidate(user_id)
