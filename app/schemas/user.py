"""Schemas for reading and updating user accounts."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.security import EMAIL_MAX_LEN, PASSWORD_MAX_LEN, PASSWORD_MIN_LEN
from app.models.enums import Role, UserStatus
from app.schemas.auth import EMAIL_PATTERN, normalize_email


class UserUpdate(BaseModel):
    """Partial update; only fields present in the request body are applied."""

    email: str | None = Field(default=None, max_length=EMAIL_MAX_LEN, pattern=EMAIL_PATTERN)
    password: str | None = Field(
        default=None, min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN
    )
    first_name: str | None = Field(default=None, max_length=255)
    last_name: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=32)
    # Admin only
    role: Role | None = None
    status: UserStatus | None = None

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email_field(cls, v: object) -> object:
        return normalize_email(v) if isinstance(v, str) else v


class UserOut(BaseModel):
    """Public view of a user (no password hash or salt)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    first_name: str
    last_name: str
    phone: str
    role: Role
    status: UserStatus
    created_at: datetime
    updated_at: datetime
