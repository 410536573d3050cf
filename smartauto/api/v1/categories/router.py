from typing import Optional

from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.ext.asyncio import AsyncSession

from smartauto.api.v1.categories.schemas import (
    CategoryResponse,
    CreateCategoryRequest,
    UpdateCategoryRequest,
)
from smartauto.api.v1.categories.service import CategoryService
from smartauto.api.v1.schemas import DataResponse, PaginatedResponse
from smartauto.core.deps import get_db, require_owner_or_admin
from smartauto.core.utils import build_pagination, clamp_limit, clamp_offset

router = APIRouter()


@router.post(
    "/",
    response_model=DataResponse[CategoryResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create a category",
    dependencies=[Depends(require_owner_or_admin)],
)
async def create_category(
    data: CreateCategoryRequest,
    db: AsyncSession = Depends(get_db),
):
    category = await CategoryService(db).create_category(data)
    return DataResponse(data=CategoryResponse.model_validate(category))


@router.get(
    "/",
    response_model=PaginatedResponse[CategoryResponse],
    summary="List categories",
)
async def get_categories(
    offset: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, description="Page size (default 10, max 100)"),
    db: AsyncSession = Depends(get_db),
):
    offset = clamp_offset(offset)
    limit = clamp_limit(limit)
    categories, total = await CategoryService(db).get_all_categories(offset=offset, limit=limit)
    return PaginatedResponse(
        data=[CategoryResponse.model_validate(c) for c in categories],
        pagination=build_pagination(total, offset, limit),
    )


@router.get(
    "/{category_id}",
    response_model=DataResponse[CategoryResponse],
    summary="Get a category by ID",
)
async def get_category(
    category_id: int,
    db: AsyncSession = Depends(get_db),
):
    category = await CategoryService(db).get_category_by_id(category_id)
    return DataResponse(data=CategoryResponse.model_validate(category))


@router.put(
    "/{category_id}",
    response_model=DataResponse[CategoryResponse],
    summary="Update a category",
    dependencies=[Depends(require_owner_or_admin)],
)
async def update_category(
    category_id: int,
    data: UpdateCategoryRequest,
    db: AsyncSession = Depends(get_db),
):
    category = await CategoryService(db).update_category(category_id, data)
    return DataResponse(data=CategoryResponse.model_validate(category))


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a category",
    dependencies=[Depends(require_owner_or_admin)],
)
async def delete_category(
    category_id: int,
    db: AsyncSession = Depends(get_db),
):
    await CategoryService(db).delete_category(category_id)
    return None
