from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from smartauto.models.enums import Role


class UserBase(BaseModel):
    name: str = Field(..., min_length=2, description="Display name")
    username: str = Field(..., min_length=3, description="Login name")
    phone: str = Field(..., min_length=8)
    email: EmailStr
    state: str = Field(..., min_length=2, max_length=2, description="Two-letter state code")
    city: str = Field(..., min_length=1)
    street: str = Field(..., min_length=1)
    number: int = Field(..., ge=0, description="Street number")


class UserCreate(UserBase):
    password: str = Field(..., min_length=6)
    role: Role = Role.customer


class UserSelfUpdate(BaseModel):
    """Fields a user may change on their own account. Role is deliberately absent."""
    name: Optional[str] = Field(None, min_length=2)
    username: Optional[str] = Field(None, min_length=3)
    password: Optional[str] = Field(None, min_length=6)
    phone: Optional[str] = Field(None, min_length=8)
    email: Optional[EmailStr] = None
    state: Optional[str] = Field(None, min_length=2, max_length=2)
    city: Optional[str] = Field(None, min_length=1)
    street: Optional[str] = Field(None, min_length=1)
    number: Optional[int] = Field(None, ge=0)


class UserUpdate(UserSelfUpdate):
    role: Optional[Role] = None


class UserResponse(BaseModel):
    id: int
    name: str
    username: str
    phone: str
    email: str
    state: str
    city: str
    street: str
    number: int
    role: Role

    class Config:
        from_attributes = True


class UserSummary(BaseModel):
    """User as embedded in other resources: no login name, no credentials."""
    id: int
    name: str
    phone: str
    email: str
    state: str
    city: str
    street: str
    number: int
    role: Role

    class Config:
        from_attributes = True
