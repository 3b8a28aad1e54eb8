"""ORM model for to-do items owned by a user."""

from sqlalchemy import Column, DateTime, ForeignKey, SmallInteger, String, Text, Uuid, func

from app.models.base import Base
from app.models.enums import ItemStatus


class Item(Base):
    """A to-do record; readable and writable only by its owner or an admin."""

    __tablename__ = "items"

    id = Column(Uuid, primary_key=True)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    status = Column(SmallInteger, nullable=False, default=int(ItemStatus.TODO), index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
