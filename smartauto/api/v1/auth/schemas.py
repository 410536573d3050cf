from typing import Optional

from pydantic import BaseModel, Field

from smartauto.api.v1.users.schemas import UserBase, UserResponse


class RegisterRequest(UserBase):
    """Self-service registration. Accounts are customers unless a valid admin api_key is sent."""
    password: str = Field(..., min_length=6)
    api_key: Optional[str] = Field(None, description="Admin registration key")


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
