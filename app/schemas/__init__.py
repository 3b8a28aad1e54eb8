"""Pydantic request/response schemas."""

from app.schemas.auth import CurrentUser, TokenResponse, UserLogin, UserRegister
from app.schemas.common import DataResponse, ListResponse, Paging
from app.schemas.health import HealthResponse
from app.schemas.item import ItemCreate, ItemOut, ItemUpdate
from app.schemas.user import UserOut, UserUpdate

__all__ = [
    "CurrentUser",
    "DataResponse",
    "HealthResponse",
    "ItemCreate",
    "ItemOut",
    "ItemUpdate",
    "ListResponse",
    "Paging",
    "TokenResponse",
    "UserLogin",
    "UserOut",
    "UserRegister",
    "UserUpdate",
]
