"""User registration, login, and account management endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.api.deps import get_paging, get_user_service
from app.api.v1.auth import CurrentUserDep
from app.schemas.auth import TokenResponse, UserLogin, UserRegister
from app.schemas.common import DataResponse, ListResponse, Paging
from app.schemas.user import UserOut, UserUpdate
from app.services.user_service import UserService

router = APIRouter()

UserServiceDep = Annotated[UserService, Depends(get_user_service)]


@router.post("/register", response_model=DataResponse[UUID], status_code=status.HTTP_201_CREATED)
def register(body: UserRegister, service: UserServiceDep) -> DataResponse[UUID]:
    """Create an account with the standard role; returns the new user id."""
    return DataResponse(data=service.register(body))


@router.post("/login", response_model=DataResponse[TokenResponse])
def login(body: UserLogin, service: UserServiceDep) -> DataResponse[TokenResponse]:
    """
    Authenticate with email and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <access_token>
    """
    return DataResponse(data=service.login(body))


@router.get("/", response_model=ListResponse[UserOut])
def list_users(
    requester: CurrentUserDep,
    service: UserServiceDep,
    paging: Annotated[Paging, Depends(get_paging)],
) -> ListResponse[UserOut]:
    """Admins see every account; standard users see only their own."""
    users = service.list_users(requester, paging)
    return ListResponse(data=[UserOut.model_validate(u) for u in users], paging=paging)


@router.get("/me", response_model=DataResponse[UserOut])
def read_me(requester: CurrentUserDep, service: UserServiceDep) -> DataResponse[UserOut]:
    user = service.get_user(requester, requester.id)
    return DataResponse(data=UserOut.model_validate(user))


@router.get("/{user_id}", response_model=DataResponse[UserOut])
def get_user(
    user_id: UUID, requester: CurrentUserDep, service: UserServiceDep
) -> DataResponse[UserOut]:
    user = service.get_user(requester, user_id)
    return DataResponse(data=UserOut.model_validate(user))


@router.patch("/{user_id}", response_model=DataResponse[UserOut])
def update_user(
    user_id: UUID,
    body: UserUpdate,
    requester: CurrentUserDep,
    service: UserServiceDep,
) -> DataResponse[UserOut]:
    """Partial update. Only admins may change role or status."""
    user = service.update_user(requester, user_id, body)
    return DataResponse(data=UserOut.model_validate(user))


@router.delete("/{user_id}", response_model=DataResponse[bool])
def delete_user(
    user_id: UUID, requester: CurrentUserDep, service: UserServiceDep
) -> DataResponse[bool]:
    """Soft delete; the account can no longer log in or authenticate."""
    service.delete_user(requester, user_id)
    return DataResponse(data=True)
