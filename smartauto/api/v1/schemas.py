from typing import Generic, List, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PaginationMeta(BaseModel):
    """Pagination block of list envelopes. Serialized with the camelCase names clients expect."""
    total: int = Field(..., description="Total records matching the filters")
    page: int = Field(..., description="Current page, derived from offset and limit")
    limit: int
    total_pages: int = Field(..., alias="totalPages")
    has_next: bool = Field(..., alias="hasNext")
    has_prev: bool = Field(..., alias="hasPrev")

    class Config:
        populate_by_name = True


class DataResponse(BaseModel, Generic[T]):
    """Envelope for single-entity responses."""
    success: bool = True
    data: T


class PaginatedResponse(BaseModel, Generic[T]):
    """Envelope for list responses."""
    success: bool = True
    data: List[T] = Field(default_factory=list)
    pagination: PaginationMeta
