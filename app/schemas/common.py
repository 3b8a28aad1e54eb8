"""Response envelopes and pagination shared by every endpoint."""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")

# Keeps the row offset inside a 64-bit integer for any allowed limit.
MAX_PAGE = 1_000_000


class Paging(BaseModel):
    """Page request plus the total row count filled in by the list query."""

    page: int = Field(default=1, description="1-based page number")
    limit: int = Field(default=10, description="Rows per page")
    total: int = Field(default=0, ge=0, description="Rows matching the filter")

    def process(self, default_limit: int, max_limit: int) -> "Paging":
        """Clamp page and limit into range in place and return self."""
        if self.page < 1:
            self.page = 1
        if self.limit < 1:
            self.limit = default_limit
        if self.limit > max_limit:
            self.limit = max_limit
        return self

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class DataResponse(BaseModel, Generic[T]):
    """Success envelope: {"data": ...}."""

    data: T


class ListResponse(BaseModel, Generic[T]):
    """Success envelope for paged lists: {"data": [...], "paging": {...}}."""

    data: list[T]
    paging: Paging
