"""Item business logic: every query is scoped to the owning user unless the caller is an admin."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from app.core.errors import NotFoundError, ValidationError
from app.models.enums import ItemStatus
from app.models.item import Item
from app.repositories.item import ItemRepository
from app.schemas.common import Paging
from app.schemas.item import ItemCreate, ItemUpdate

logger = logging.getLogger(__name__)


def _scope(item_id: UUID | None, owner_id: UUID | None) -> dict[str, Any]:
    """Filter map for one item or many; owner_id None means no ownership restriction."""
    filters: dict[str, Any] = {}
    if item_id is not None:
        filters["id"] = item_id
    if owner_id is not None:
        filters["user_id"] = owner_id
    return filters


class ItemService:
    def __init__(self, repository: ItemRepository) -> None:
        self.repository = repository

    def create_item(self, owner_id: UUID, data: ItemCreate) -> UUID:
        title = data.title.strip()
        if not title:
            raise ValidationError("title cannot be blank")
        now = datetime.now(timezone.utc)
        item = Item(
            id=uuid.uuid4(),
            user_id=owner_id,
            title=title,
            description=data.description,
            status=int(data.status),
            created_at=now,
            updated_at=now,
        )
        self.repository.create(item)
        logger.info("Item created", extra={"item_id": str(item.id), "user_id": str(owner_id)})
        return item.id

    def list_items(
        self,
        owner_id: UUID | None,
        paging: Paging,
        status: ItemStatus | None = None,
    ) -> list[Item]:
        filters = _scope(None, owner_id)
        if status is not None:
            filters["status"] = int(status)
        return self.repository.list(filters, paging)

    def get_item(self, item_id: UUID, owner_id: UUID | None) -> Item:
        return self.repository.get(_scope(item_id, owner_id))

    def update_item(self, item_id: UUID, owner_id: UUID | None, data: ItemUpdate) -> Item:
        """Apply only the fields present in data; raises NotFoundError when nothing matched."""
        values = data.model_dump(exclude_unset=True, exclude_none=True)
        if not values:
            raise ValidationError("no fields to update")
        if "status" in values:
            values["status"] = int(values["status"])
        values["updated_at"] = datetime.now(timezone.utc)

        filters = _scope(item_id, owner_id)
        if self.repository.update(filters, values) == 0:
            raise NotFoundError()
        return self.repository.get(filters)

    def delete_item(self, item_id: UUID, owner_id: UUID | None) -> None:
        if self.repository.delete(_scope(item_id, owner_id)) == 0:
            raise NotFoundError()
        logger.info("Item deleted", extra={"item_id": str(item_id)})
