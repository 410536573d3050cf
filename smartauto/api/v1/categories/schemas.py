from typing import Optional

from pydantic import BaseModel, Field


class CreateCategoryRequest(BaseModel):
    name: str = Field(..., min_length=1, description="Category name")
    description: str = Field("", description="Category description")


class UpdateCategoryRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, description="Category name")
    description: Optional[str] = Field(None, description="Category description")


class CategoryResponse(BaseModel):
    id: int
    name: str
    description: str

    class Config:
        from_attributes = True
