from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from smartauto.api.v1.users.schemas import UserSummary
from smartauto.api.v1.vehicles.schemas import VehicleResponse
from smartauto.core.pricing import calculate_total_price
from smartauto.models.enums import RentalStatus, SortOrder
from smartauto.models.rental import Rental


class CreateRentalRequest(BaseModel):
    start_date: date = Field(..., description="First day of the rental")
    end_date: date = Field(..., description="Last day of the rental; same day as start_date bills 0 days")
    customer_id: Optional[int] = Field(None, description="Defaults to the authenticated user")
    owner_id: Optional[int] = Field(
        None,
        description="Responsible owner or admin. Defaults to the authenticated user when they are an owner or admin.",
    )
    vehicle_id: int = Field(..., description="Vehicle to book; must currently be available")

    @model_validator(mode="after")
    def end_not_before_start(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self


class UpdateRentalRequest(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    customer_id: Optional[int] = None
    owner_id: Optional[int] = None
    vehicle_id: Optional[int] = None
    # Accepted only so it can be refused with a clear message
    status: Optional[str] = Field(None, description="Not updatable here; use the approve/reject endpoints")


class RentalFilters(BaseModel):
    status: Optional[RentalStatus] = None
    vehicle_id: Optional[int] = None
    customer_id: Optional[int] = None
    owner_id: Optional[int] = None
    start_date: Optional[date] = Field(None, description="Rentals starting on or after this date")
    end_date: Optional[date] = Field(None, description="Rentals ending exactly on this date")


class RentalSort(BaseModel):
    order_by: str = "start_date"
    order: str = SortOrder.asc.value

    @property
    def descending(self) -> bool:
        return (self.order or "").lower() == SortOrder.desc.value


class RentalResponse(BaseModel):
    """Rental with its relations. Embedded users never carry login names or password hashes."""
    id: int
    start_date: date
    end_date: date
    status: RentalStatus
    customer_id: int
    owner_id: Optional[int]
    vehicle_id: int
    customer: UserSummary
    owner: Optional[UserSummary]
    vehicle: VehicleResponse
    total_price: float

    @classmethod
    def from_rental(cls, rental: Rental) -> "RentalResponse":
        return cls(
            id=rental.id,
            start_date=rental.start_date,
            end_date=rental.end_date,
            status=rental.status,
            customer_id=rental.customer_id,
            owner_id=rental.owner_id,
            vehicle_id=rental.vehicle_id,
            customer=UserSummary.model_validate(rental.customer),
            owner=UserSummary.model_validate(rental.owner) if rental.owner else None,
            vehicle=VehicleResponse.model_validate(rental.vehicle),
            total_price=calculate_total_price(rental.start_date, rental.end_date, rental.vehicle.daily_rate),
        )
