from typing import List, Optional

from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.ext.asyncio import AsyncSession

from smartauto.api.v1.schemas import DataResponse, PaginatedResponse
from smartauto.api.v1.vehicles.schemas import (
    AttachCategoryRequest,
    CreateVehicleRequest,
    UpdateVehicleRequest,
    VehicleResponse,
    VehicleWithCategoriesResponse,
)
from smartauto.api.v1.vehicles.service import VehicleService
from smartauto.core.deps import get_db, require_owner_or_admin
from smartauto.core.utils import build_pagination, clamp_limit, clamp_offset

router = APIRouter()


@router.post(
    "/",
    response_model=DataResponse[VehicleResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create a new vehicle",
    description="Add a vehicle to the catalog. Owner or admin.",
    dependencies=[Depends(require_owner_or_admin)],
)
async def create_vehicle(
    vehicle_data: CreateVehicleRequest,
    db: AsyncSession = Depends(get_db),
):
    vehicle = await VehicleService(db).create_vehicle(vehicle_data)
    return DataResponse(data=VehicleResponse.model_validate(vehicle))


@router.get(
    "/",
    response_model=PaginatedResponse[VehicleResponse],
    summary="List vehicles",
    description="List vehicles, only available ones unless available_only=false.",
)
async def get_all_vehicles(
    offset: int = Query(0, ge=0, description="Number of records to skip"),
    limit: Optional[int] = Query(None, description="Page size (default 10, max 100)"),
    available_only: bool = Query(True, description="Only vehicles that can be booked"),
    db: AsyncSession = Depends(get_db),
):
    offset = clamp_offset(offset)
    limit = clamp_limit(limit)
    vehicles, total = await VehicleService(db).get_all_vehicles(
        offset=offset, limit=limit, available_only=available_only
    )
    return PaginatedResponse(
        data=[VehicleResponse.model_validate(v) for v in vehicles],
        pagination=build_pagination(total, offset, limit),
    )


@router.get(
    "/com-categoria",
    response_model=PaginatedResponse[VehicleWithCategoriesResponse],
    summary="List vehicles with their categories",
)
async def get_vehicles_with_categories(
    offset: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, description="Page size (default 10, max 100)"),
    available_only: bool = Query(True),
    db: AsyncSession = Depends(get_db),
):
    offset = clamp_offset(offset)
    limit = clamp_limit(limit)
    vehicles, total = await VehicleService(db).get_all_vehicles(
        offset=offset, limit=limit, available_only=available_only, with_categories=True
    )
    return PaginatedResponse(
        data=[VehicleWithCategoriesResponse.model_validate(v) for v in vehicles],
        pagination=build_pagination(total, offset, limit),
    )


@router.get(
    "/preco",
    response_model=DataResponse[List[VehicleResponse]],
    summary="Vehicles by daily rate range",
)
async def get_vehicles_by_price(
    min_price: float = Query(0, ge=0),
    max_price: float = Query(1_000_000, ge=0),
    db: AsyncSession = Depends(get_db),
):
    vehicles = await VehicleService(db).get_vehicles_by_price(min_price, max_price)
    return DataResponse(data=[VehicleResponse.model_validate(v) for v in vehicles])


@router.get(
    "/categoria/{category_name}",
    response_model=DataResponse[List[VehicleResponse]],
    summary="Vehicles by category name",
)
async def get_vehicles_by_category(
    category_name: str,
    db: AsyncSession = Depends(get_db),
):
    vehicles = await VehicleService(db).get_vehicles_by_category(category_name)
    return DataResponse(data=[VehicleResponse.model_validate(v) for v in vehicles])


@router.get(
    "/ano/{year}",
    response_model=DataResponse[List[VehicleResponse]],
    summary="Vehicles by model year",
)
async def get_vehicles_by_year(
    year: int,
    db: AsyncSession = Depends(get_db),
):
    vehicles = await VehicleService(db).get_vehicles_by_year(year)
    return DataResponse(data=[VehicleResponse.model_validate(v) for v in vehicles])


@router.get(
    "/modelo/{model}",
    response_model=DataResponse[List[VehicleResponse]],
    summary="Vehicles by model",
)
async def get_vehicles_by_model(
    model: str,
    db: AsyncSession = Depends(get_db),
):
    vehicles = await VehicleService(db).get_vehicles_by_model(model)
    return DataResponse(data=[VehicleResponse.model_validate(v) for v in vehicles])


@router.get(
    "/{vehicle_id}",
    response_model=DataResponse[VehicleResponse],
    summary="Get vehicle by ID",
)
async def get_vehicle_by_id(
    vehicle_id: int,
    db: AsyncSession = Depends(get_db),
):
    vehicle = await VehicleService(db).get_vehicle_by_id(vehicle_id)
    return DataResponse(data=VehicleResponse.model_validate(vehicle))


@router.put(
    "/{vehicle_id}",
    response_model=DataResponse[VehicleResponse],
    summary="Update vehicle",
    description="Update catalog fields of a vehicle. Availability is managed by rentals. Owner or admin.",
    dependencies=[Depends(require_owner_or_admin)],
)
async def update_vehicle(
    vehicle_id: int,
    vehicle_data: UpdateVehicleRequest,
    db: AsyncSession = Depends(get_db),
):
    vehicle = await VehicleService(db).update_vehicle(vehicle_id, vehicle_data)
    return DataResponse(data=VehicleResponse.model_validate(vehicle))


@router.delete(
    "/{vehicle_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete vehicle",
    description="Delete a vehicle. Refused while it has pending or approved rentals. Owner or admin.",
    dependencies=[Depends(require_owner_or_admin)],
)
async def delete_vehicle(
    vehicle_id: int,
    db: AsyncSession = Depends(get_db),
):
    await VehicleService(db).delete_vehicle(vehicle_id)
    return None


@router.post(
    "/categoria/{vehicle_id}",
    response_model=DataResponse[VehicleWithCategoriesResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Attach a category to a vehicle",
    description="Tag a vehicle with a category by name, creating the category if needed. Owner or admin.",
    dependencies=[Depends(require_owner_or_admin)],
)
async def attach_category(
    vehicle_id: int,
    data: AttachCategoryRequest,
    db: AsyncSession = Depends(get_db),
):
    vehicle = await VehicleService(db).attach_category(vehicle_id, data)
    return DataResponse(data=VehicleWithCategoriesResponse.model_validate(vehicle))
