"""Repositories: per-entity data access over a SQLAlchemy session."""

from app.repositories.item import ItemRepository
from app.repositories.user import UserRepository

__all__ = ["ItemRepository", "UserRepository"]
