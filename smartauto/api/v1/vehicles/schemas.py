from typing import List, Optional

from pydantic import BaseModel, Field

from smartauto.api.v1.categories.schemas import CategoryResponse


class CreateVehicleRequest(BaseModel):
    make: str = Field(..., min_length=1, description="Vehicle manufacturer")
    model: str = Field(..., min_length=1, description="Vehicle model")
    year: int = Field(..., ge=1900, le=2100, description="Model year")
    color: str = Field(..., min_length=1, description="Vehicle color")
    daily_rate: float = Field(..., gt=0, description="Price per rental day")
    available: bool = Field(True, description="Whether the vehicle can be booked")


class UpdateVehicleRequest(BaseModel):
    """Availability is owned by the rental workflow and cannot be set here."""
    make: Optional[str] = Field(None, min_length=1, description="Vehicle manufacturer")
    model: Optional[str] = Field(None, min_length=1, description="Vehicle model")
    year: Optional[int] = Field(None, ge=1900, le=2100, description="Model year")
    color: Optional[str] = Field(None, min_length=1, description="Vehicle color")
    daily_rate: Optional[float] = Field(None, gt=0, description="Price per rental day")


class AttachCategoryRequest(BaseModel):
    category_name: str = Field(..., min_length=1, description="Existing or new category name")
    description: str = Field("", description="Used only when the category has to be created")


class VehicleResponse(BaseModel):
    id: int
    make: str
    model: str
    year: int
    color: str
    daily_rate: float
    available: bool

    class Config:
        from_attributes = True


class VehicleWithCategoriesResponse(VehicleResponse):
    categories: List[CategoryResponse] = Field(default_factory=list)
