"""ORM model for application users (auth and RBAC)."""

from sqlalchemy import Column, DateTime, SmallInteger, String, Uuid, func

from app.models.base import Base
from app.models.enums import Role, UserStatus


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    role: Role (0 user, 1 admin); status: UserStatus (0 deleted, 1 active, 2 banned).
    The bcrypt salt is kept next to the hash so login can recompute it.
    """

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    salt = Column(String(64), nullable=False)
    first_name = Column(String(255), nullable=False, default="")
    last_name = Column(String(255), nullable=False, default="")
    phone = Column(String(32), nullable=False, default="")
    role = Column(SmallInteger, nullable=False, default=int(Role.USER))
    status = Column(SmallInteger, nullable=False, default=int(UserStatus.ACTIVE))
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
