"""Schemas for creating, updating, and reading items."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.enums import ItemStatus

TITLE_MAX_LEN = 255
DESCRIPTION_MAX_LEN = 10_000


def _strip_title(v: object) -> object:
    if isinstance(v, str):
        v = v.strip()
        if not v:
            raise ValueError("title cannot be blank")
    return v


class ItemCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LEN)
    description: str = Field(default="", max_length=DESCRIPTION_MAX_LEN)
    status: ItemStatus = ItemStatus.TODO

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v: object) -> object:
        return _strip_title(v)


class ItemUpdate(BaseModel):
    """Partial update; omitted fields keep their stored value."""

    title: str | None = Field(default=None, min_length=1, max_length=TITLE_MAX_LEN)
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LEN)
    status: ItemStatus | None = None

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v: object) -> object:
        return _strip_title(v)


class ItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    title: str
    description: str
    status: ItemStatus
    created_at: datetime
    updated_at: datetime
