import logging
from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.orm import selectinload

from smartauto.api.v1.vehicles.schemas import (
    AttachCategoryRequest,
    CreateVehicleRequest,
    UpdateVehicleRequest,
)
from smartauto.core.exceptions import AppException
from smartauto.models.category import Category, CategoryVehicle
from smartauto.models.enums import RentalStatus
from smartauto.models.rental import Rental
from smartauto.models.vehicle import Vehicle


class VehicleService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.logger = logging.getLogger(__name__)

    async def create_vehicle(self, vehicle_data: CreateVehicleRequest) -> Vehicle:
        new_vehicle = Vehicle(**vehicle_data.model_dump())
        self.db.add(new_vehicle)
        await self.db.commit()
        await self.db.refresh(new_vehicle)
        self.logger.info("Vehicle %s created", new_vehicle.id)
        return new_vehicle

    async def get_vehicle_by_id(self, vehicle_id: int) -> Vehicle:
        vehicle = await self.db.get(Vehicle, vehicle_id)
        if not vehicle:
            AppException().raise_404("Vehicle not found")
        return vehicle

    async def get_vehicle_with_categories(self, vehicle_id: int) -> Vehicle:
        result = await self.db.execute(
            select(Vehicle)
            .where(Vehicle.id == vehicle_id)
            .options(selectinload(Vehicle.categories))
            .execution_options(populate_existing=True)
        )
        vehicle = result.scalar_one_or_none()
        if not vehicle:
            AppException().raise_404("Vehicle not found")
        return vehicle

    async def get_all_vehicles(
        self,
        offset: int = 0,
        limit: int = 10,
        available_only: bool = True,
        with_categories: bool = False,
    ) -> Tuple[List[Vehicle], int]:
        query = select(Vehicle)
        count_query = select(func.count()).select_from(Vehicle)
        if available_only:
            query = query.where(Vehicle.available.is_(True))
            count_query = count_query.where(Vehicle.available.is_(True))
        if with_categories:
            query = query.options(selectinload(Vehicle.categories))

        total = (await self.db.execute(count_query)).scalar() or 0
        result = await self.db.execute(query.order_by(Vehicle.id).offset(offset).limit(limit))
        return list(result.scalars().all()), total

    async def get_vehicles_by_category(self, category_name: str) -> List[Vehicle]:
        result = await self.db.execute(
            select(Vehicle)
            .join(CategoryVehicle, CategoryVehicle.vehicle_id == Vehicle.id)
            .join(Category, Category.id == CategoryVehicle.category_id)
            .where(Category.name == category_name)
            .order_by(Vehicle.id)
        )
        return list(result.scalars().all())

    async def get_vehicles_by_price(self, min_price: float, max_price: float) -> List[Vehicle]:
        result = await self.db.execute(
            select(Vehicle)
            .where(Vehicle.daily_rate.between(min_price, max_price))
            .order_by(Vehicle.daily_rate, Vehicle.id)
        )
        return list(result.scalars().all())

    async def get_vehicles_by_year(self, year: int) -> List[Vehicle]:
        result = await self.db.execute(select(Vehicle).where(Vehicle.year == year).order_by(Vehicle.id))
        return list(result.scalars().all())

    async def get_vehicles_by_model(self, model: str) -> List[Vehicle]:
        result = await self.db.execute(select(Vehicle).where(Vehicle.model == model).order_by(Vehicle.id))
        return list(result.scalars().all())

    async def update_vehicle(self, vehicle_id: int, vehicle_data: UpdateVehicleRequest) -> Vehicle:
        vehicle = await self.get_vehicle_by_id(vehicle_id)

        update_data = vehicle_data.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            if value is not None:
                setattr(vehicle, field, value)

        self.db.add(vehicle)
        await self.db.commit()
        await self.db.refresh(vehicle)
        return vehicle

    async def delete_vehicle(self, vehicle_id: int) -> None:
        vehicle = await self.get_vehicle_by_id(vehicle_id)

        # Pending or approved rentals still depend on this vehicle
        active_result = await self.db.execute(
            select(Rental.id)
            .where(Rental.vehicle_id == vehicle_id)
            .where(Rental.status.in_([RentalStatus.pending.value, RentalStatus.approved.value]))
            .limit(1)
        )
        if active_result.scalar_one_or_none() is not None:
            AppException().raise_400("Cannot delete vehicle that has pending or approved rentals")

        # Rejected rentals are removed with the vehicle (delete-orphan cascade)
        await self.db.delete(vehicle)
        await self.db.commit()
        self.logger.info("Vehicle %s deleted", vehicle_id)

    async def attach_category(self, vehicle_id: int, data: AttachCategoryRequest) -> Vehicle:
        await self.get_vehicle_by_id(vehicle_id)

        result = await self.db.execute(select(Category).where(Category.name == data.category_name))
        category = result.scalar_one_or_none()
        if not category:
            category = Category(name=data.category_name, description=data.description or "")
            self.db.add(category)
            await self.db.flush()

        existing = await self.db.get(CategoryVehicle, (category.id, vehicle_id))
        if existing:
            AppException().raise_400("This category is already attached to the vehicle")

        self.db.add(CategoryVehicle(category_id=category.id, vehicle_id=vehicle_id))
        await self.db.commit()
        return await self.get_vehicle_with_categories(vehicle_id)
