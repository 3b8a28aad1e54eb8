"""Request/response schemas for registration, login, and the authenticated requester."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.security import EMAIL_MAX_LEN, PASSWORD_MAX_LEN, PASSWORD_MIN_LEN
from app.models.enums import INACTIVE_USER_STATUSES, Role, UserStatus

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


def normalize_email(v: str) -> str:
    return v.strip().lower()


class UserRegister(BaseModel):
    """Payload for self-service registration."""

    email: str = Field(..., max_length=EMAIL_MAX_LEN, pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    first_name: str = Field(default="", max_length=255)
    last_name: str = Field(default="", max_length=255)
    phone: str = Field(default="", max_length=32)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email_field(cls, v: object) -> object:
        return normalize_email(v) if isinstance(v, str) else v


class UserLogin(BaseModel):
    """Credentials for login."""

    email: str = Field(..., min_length=1, max_length=EMAIL_MAX_LEN)
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email_field(cls, v: object) -> object:
        return normalize_email(v) if isinstance(v, str) else v


class TokenResponse(BaseModel):
    """JWT access token returned after successful login."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Seconds until the token expires")


class CurrentUser(BaseModel):
    """Authenticated requester resolved by the auth dependency (also the cached user snapshot)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    first_name: str = ""
    last_name: str = ""
    phone: str = ""
    role: Role
    status: UserStatus

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_active(self) -> bool:
        return self.status not in INACTIVE_USER_STATUSES
