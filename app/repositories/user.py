"""Data access for users."""

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from app.models.user import User
from app.repositories.base import Repository


class UserRepository(Repository[User]):
    model = User

    def email_exists(self, email: str) -> bool:
        stmt = select(User.id).where(User.email == email).limit(1)
        try:
            return self.session.scalar(stmt) is not None
        except SQLAlchemyError as e:
            raise self._fail(e) from e
