"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.enums import ItemStatus, Role, UserStatus
from app.models.item import Item
from app.models.user import User

__all__ = ["Base", "Item", "ItemStatus", "Role", "User", "UserStatus"]
