"""Filter-map data access shared by the per-entity repositories."""

import logging
from typing import Any, ClassVar, Generic, TypeVar

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import DatabaseError, DuplicateEntityError, NotFoundError, ValidationError
from app.models.base import Base
from app.schemas.common import Paging

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class Repository(Generic[ModelT]):
    """
    CRUD over one table, addressed by filter maps of column name -> value.

    Every write is a single statement followed by a commit. Store failures are
    rolled back and re-raised as tagged AppErrors.
    """

    model: ClassVar[type[Base]]

    def __init__(self, session: Session) -> None:
        self.session = session

    def _conditions(self, filters: dict[str, Any] | None) -> list:
        if not filters:
            return []
        columns = self.model.__table__.columns
        unknown = [k for k in filters if k not in columns]
        if unknown:
            raise ValidationError(f"unknown filter field(s): {', '.join(sorted(unknown))}")
        return [columns[k] == v for k, v in filters.items()]

    def _fail(self, e: SQLAlchemyError) -> DatabaseError:
        self.session.rollback()
        logger.error("%s query failed: %s", self.model.__tablename__, e)
        return DatabaseError(cause=e)

    def create(self, entity: ModelT) -> ModelT:
        try:
            self.session.add(entity)
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise DuplicateEntityError(cause=e) from e
        except SQLAlchemyError as e:
            raise self._fail(e) from e
        self.session.refresh(entity)
        return entity

    def get(self, filters: dict[str, Any]) -> ModelT:
        stmt = select(self.model).where(*self._conditions(filters)).limit(1)
        try:
            entity = self.session.scalars(stmt).first()
        except SQLAlchemyError as e:
            raise self._fail(e) from e
        if entity is None:
            raise NotFoundError()
        return entity

    def list(self, filters: dict[str, Any] | None, paging: Paging) -> list[ModelT]:
        """Return one page of rows (newest first) and set paging.total for the same filter."""
        conditions = self._conditions(filters)
        count_stmt = select(func.count()).select_from(self.model).where(*conditions)
        stmt = (
            select(self.model)
            .where(*conditions)
            .order_by(self.model.created_at.desc(), self.model.id)
            .offset(paging.offset)
            .limit(paging.limit)
        )
        try:
            paging.total = self.session.scalar(count_stmt) or 0
            return list(self.session.scalars(stmt).all())
        except SQLAlchemyError as e:
            raise self._fail(e) from e

    def update(self, filters: dict[str, Any], values: dict[str, Any]) -> int:
        """Apply values to every matching row; returns the affected row count."""
        if not filters:
            raise ValidationError("refusing to update without a filter")
        conditions = self._conditions(filters)
        self._conditions(values)
        stmt = update(self.model).where(*conditions).values(**values)
        try:
            result = self.session.execute(stmt, execution_options={"synchronize_session": False})
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise DuplicateEntityError(cause=e) from e
        except SQLAlchemyError as e:
            raise self._fail(e) from e
        return result.rowcount

    def delete(self, filters: dict[str, Any]) -> int:
        """Delete every matching row; returns the affected row count."""
        if not filters:
            raise ValidationError("refusing to delete without a filter")
        stmt = delete(self.model).where(*self._conditions(filters))
        try:
            result = self.session.execute(stmt, execution_options={"synchronize_session": False})
            self.session.commit()
        except SQLAlchemyError as e:
            raise self._fail(e) from e
        return result.rowcount
