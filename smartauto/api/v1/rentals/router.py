from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.ext.asyncio import AsyncSession

from smartauto.api.v1.rentals.schemas import (
    CreateRentalRequest,
    RentalFilters,
    RentalResponse,
    RentalSort,
    UpdateRentalRequest,
)
from smartauto.api.v1.rentals.service import RentalService
from smartauto.api.v1.schemas import DataResponse, PaginatedResponse
from smartauto.core.deps import get_db, get_current_user, require_owner_or_admin
from smartauto.core.utils import build_pagination, clamp_limit, clamp_offset
from smartauto.models.enums import RentalStatus
from smartauto.models.user import User

router = APIRouter()


@router.get(
    "/",
    response_model=PaginatedResponse[RentalResponse],
    summary="List rentals",
    description=(
        "Admins see every rental, owners the rentals they own, customers their own bookings. "
        "Filters combine with AND on top of that scope."
    ),
)
async def list_rentals(
    offset: int = Query(0, ge=0, description="Number of records to skip"),
    limit: Optional[int] = Query(None, description="Page size (default 10, max 100)"),
    status: Optional[RentalStatus] = Query(None, description="Filter by status"),
    vehicle_id: Optional[int] = Query(None),
    customer_id: Optional[int] = Query(None),
    owner_id: Optional[int] = Query(None),
    start_date: Optional[date] = Query(None, description="Rentals starting on or after this date"),
    end_date: Optional[date] = Query(None, description="Rentals ending on this date"),
    order_by: str = Query("start_date", description="id, start_date, end_date or status"),
    order: str = Query("asc", description="asc or desc"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    offset = clamp_offset(offset)
    limit = clamp_limit(limit)
    filters = RentalFilters(
        status=status,
        vehicle_id=vehicle_id,
        customer_id=customer_id,
        owner_id=owner_id,
        start_date=start_date,
        end_date=end_date,
    )
    rentals, total = await RentalService(db).list_rentals(
        current_user,
        filters,
        RentalSort(order_by=order_by, order=order),
        offset=offset,
        limit=limit,
    )
    return PaginatedResponse(
        data=[RentalResponse.from_rental(r) for r in rentals],
        pagination=build_pagination(total, offset, limit),
    )


@router.post(
    "/",
    response_model=DataResponse[RentalResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create a rental",
    description=(
        "Customers create a pending request for an available vehicle. Owners and admins "
        "book directly: the rental is approved and the vehicle becomes unavailable."
    ),
)
async def create_rental(
    data: CreateRentalRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    rental = await RentalService(db).create_rental(data, current_user)
    return DataResponse(data=RentalResponse.from_rental(rental))


@router.get(
    "/{rental_id}",
    response_model=DataResponse[RentalResponse],
    summary="Get a rental",
)
async def get_rental(
    rental_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    rental = await RentalService(db).get_rental(rental_id, current_user)
    return DataResponse(data=RentalResponse.from_rental(rental))


@router.put(
    "/{rental_id}",
    response_model=DataResponse[RentalResponse],
    summary="Update a rental",
    description="Change dates or references. Status changes go through /aprovar and /recusar. Owner or admin.",
)
async def update_rental(
    rental_id: int,
    data: UpdateRentalRequest,
    current_user: User = Depends(require_owner_or_admin),
    db: AsyncSession = Depends(get_db),
):
    rental = await RentalService(db).update_rental(rental_id, data, current_user)
    return DataResponse(data=RentalResponse.from_rental(rental))


@router.put(
    "/{rental_id}/aprovar",
    response_model=DataResponse[RentalResponse],
    summary="Approve a pending rental",
    description="Approve a pending rental and mark its vehicle unavailable. Owner or admin.",
)
async def approve_rental(
    rental_id: int,
    current_user: User = Depends(require_owner_or_admin),
    db: AsyncSession = Depends(get_db),
):
    rental = await RentalService(db).approve_rental(rental_id, current_user)
    return DataResponse(data=RentalResponse.from_rental(rental))


@router.put(
    "/{rental_id}/recusar",
    response_model=DataResponse[RentalResponse],
    summary="Reject a pending rental",
    description="Reject a pending rental. The vehicle is left as it is. Owner or admin.",
)
async def reject_rental(
    rental_id: int,
    current_user: User = Depends(require_owner_or_admin),
    db: AsyncSession = Depends(get_db),
):
    rental = await RentalService(db).reject_rental(rental_id, current_user)
    return DataResponse(data=RentalResponse.from_rental(rental))


@router.delete(
    "/{rental_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a rental",
    description="Delete a rental. Deleting an approved rental makes its vehicle available again. Owner or admin.",
)
async def delete_rental(
    rental_id: int,
    current_user: User = Depends(require_owner_or_admin),
    db: AsyncSession = Depends(get_db),
):
    await RentalService(db).delete_rental(rental_id, current_user)
    return None
