"""Item CRUD endpoints. Standard users reach only their own items; admins reach all."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_item_service, get_paging
from app.api.v1.auth import CurrentUserDep
from app.api.v1.rate_limit import rate_limit
from app.core.errors import PermissionDeniedError
from app.models.enums import ItemStatus
from app.schemas.auth import CurrentUser
from app.schemas.common import DataResponse, ListResponse, Paging
from app.schemas.item import ItemCreate, ItemOut, ItemUpdate
from app.services.item_service import ItemService

router = APIRouter()

ItemServiceDep = Annotated[ItemService, Depends(get_item_service)]


def _owner_scope(requester: CurrentUser) -> UUID | None:
    """Ownership filter for the requester; None lets admins reach every item."""
    return None if requester.is_admin else requester.id


@router.post("/", response_model=DataResponse[UUID], status_code=status.HTTP_201_CREATED)
def create_item(
    body: ItemCreate, requester: CurrentUserDep, service: ItemServiceDep
) -> DataResponse[UUID]:
    return DataResponse(data=service.create_item(requester.id, body))


@router.get("/", response_model=ListResponse[ItemOut], dependencies=[Depends(rate_limit)])
def list_items(
    requester: CurrentUserDep,
    service: ItemServiceDep,
    paging: Annotated[Paging, Depends(get_paging)],
    status_filter: Annotated[ItemStatus | None, Query(alias="status")] = None,
    user_id: Annotated[UUID | None, Query(description="Owner filter (admins only)")] = None,
) -> ListResponse[ItemOut]:
    owner_id = _owner_scope(requester)
    if user_id is not None:
        if owner_id is not None and user_id != owner_id:
            raise PermissionDeniedError()
        owner_id = user_id
    items = service.list_items(owner_id, paging, status=status_filter)
    return ListResponse(data=[ItemOut.model_validate(i) for i in items], paging=paging)


@router.get("/{item_id}", response_model=DataResponse[ItemOut])
def get_item(
    item_id: UUID, requester: CurrentUserDep, service: ItemServiceDep
) -> DataResponse[ItemOut]:
    item = service.get_item(item_id, _owner_scope(requester))
    return DataResponse(data=ItemOut.model_validate(item))


@router.patch("/{item_id}", response_model=DataResponse[ItemOut])
def update_item(
    item_id: UUID,
    body: ItemUpdate,
    requester: CurrentUserDep,
    service: ItemServiceDep,
) -> DataResponse[ItemOut]:
    item = service.update_item(item_id, _owner_scope(requester), body)
    return DataResponse(data=ItemOut.model_validate(item))


@router.delete("/{item_id}", response_model=DataResponse[bool])
def delete_item(
    item_id: UUID, requester: CurrentUserDep, service: ItemServiceDep
) -> DataResponse[bool]:
    service.delete_item(item_id, _owner_scope(requester))
    return DataResponse(data=True)
