from typing import List, Optional

from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.ext.asyncio import AsyncSession

from smartauto.api.v1.schemas import DataResponse, PaginatedResponse
from smartauto.api.v1.users.schemas import UserCreate, UserResponse, UserSelfUpdate, UserUpdate
from smartauto.api.v1.users.service import UserService
from smartauto.core.deps import get_db, get_current_user, require_admin, require_owner_or_admin
from smartauto.core.exceptions import AppException
from smartauto.core.utils import build_pagination, clamp_limit, clamp_offset
from smartauto.models.enums import Role
from smartauto.models.user import User


router = APIRouter()


@router.post(
    "/",
    response_model=DataResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create a new user",
    description="Create a user with any role. Admin only.",
    dependencies=[Depends(require_admin)],
)
async def create_user(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db),
):
    user_service = UserService(db)
    new_user = await user_service.create_user(user_data)
    return DataResponse(data=UserResponse.model_validate(new_user))


@router.get(
    "/",
    response_model=PaginatedResponse[UserResponse],
    summary="List users",
    dependencies=[Depends(require_owner_or_admin)],
)
async def get_users(
    offset: int = Query(0, ge=0, description="Number of records to skip"),
    limit: Optional[int] = Query(None, description="Page size (default 10, max 100)"),
    db: AsyncSession = Depends(get_db),
):
    offset = clamp_offset(offset)
    limit = clamp_limit(limit)
    user_service = UserService(db)
    users, total = await user_service.get_users(offset=offset, limit=limit)
    return PaginatedResponse(
        data=[UserResponse.model_validate(user) for user in users],
        pagination=build_pagination(total, offset, limit),
    )


@router.get(
    "/me",
    response_model=DataResponse[UserResponse],
    summary="Get the authenticated user",
)
async def get_me(current_user: User = Depends(get_current_user)):
    return DataResponse(data=UserResponse.model_validate(current_user))


@router.put(
    "/me",
    response_model=DataResponse[UserResponse],
    summary="Update the authenticated user",
    description="Update your own account. The role cannot be changed here.",
)
async def update_me(
    user_data: UserSelfUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    user_service = UserService(db)
    updated_user = await user_service.update_user(current_user, user_data)
    return DataResponse(data=UserResponse.model_validate(updated_user))


@router.get(
    "/nome/{name}",
    response_model=DataResponse[List[UserResponse]],
    summary="Search users by name",
    dependencies=[Depends(require_owner_or_admin)],
)
async def search_users_by_name(
    name: str,
    db: AsyncSession = Depends(get_db),
):
    user_service = UserService(db)
    users = await user_service.search_users_by_name(name)
    if not users:
        AppException().raise_404("User not found")
    return DataResponse(data=[UserResponse.model_validate(user) for user in users])


@router.get(
    "/role/{role}",
    response_model=DataResponse[List[UserResponse]],
    summary="List users by role",
    dependencies=[Depends(require_owner_or_admin)],
)
async def get_users_by_role(
    role: Role,
    db: AsyncSession = Depends(get_db),
):
    user_service = UserService(db)
    users = await user_service.get_users_by_role(role)
    if not users:
        AppException().raise_404("Users not found")
    return DataResponse(data=[UserResponse.model_validate(user) for user in users])


@router.get(
    "/{user_id}",
    response_model=DataResponse[UserResponse],
    summary="Get a user by ID",
    dependencies=[Depends(require_owner_or_admin)],
)
async def get_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
):
    user_service = UserService(db)
    user = await user_service.get_user_by_id(user_id)
    if not user:
        AppException().raise_404("User not found")
    return DataResponse(data=UserResponse.model_validate(user))


@router.put(
    "/{user_id}",
    response_model=DataResponse[UserResponse],
    summary="Update a user by ID",
    description="Update any field of a user, role included. Admin only.",
    dependencies=[Depends(require_admin)],
)
async def update_user(
    user_id: int,
    user_data: UserUpdate,
    db: AsyncSession = Depends(get_db),
):
    user_service = UserService(db)
    user = await user_service.get_user_by_id(user_id)
    if not user:
        AppException().raise_404("User not found")
    updated_user = await user_service.update_user(user, user_data)
    return DataResponse(data=UserResponse.model_validate(updated_user))


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a user by ID",
    dependencies=[Depends(require_admin)],
)
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
):
    user_service = UserService(db)
    await user_service.delete_user(user_id)
    return None
