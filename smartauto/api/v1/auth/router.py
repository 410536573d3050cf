import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from smartauto.api.v1.auth.schemas import LoginRequest, RegisterRequest, TokenResponse
from smartauto.api.v1.schemas import DataResponse
from smartauto.api.v1.users.schemas import UserCreate, UserResponse
from smartauto.api.v1.users.service import UserService
from smartauto.core.config import settings
from smartauto.core.deps import get_db
from smartauto.core.exceptions import AppException
from smartauto.core.security import create_user_token
from smartauto.models.enums import Role

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/register",
    response_model=DataResponse[TokenResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    description="Create a customer account and return a bearer token. A valid api_key registers an admin instead.",
)
async def register(
    data: RegisterRequest,
    db: AsyncSession = Depends(get_db),
):
    role = Role.customer
    if data.api_key:
        if not settings.ADMIN_API_KEY or data.api_key != settings.ADMIN_API_KEY:
            AppException().raise_403("Invalid API key")
        role = Role.admin

    user_service = UserService(db)
    user = await user_service.create_user(
        UserCreate(**data.model_dump(exclude={"api_key"}), role=role)
    )
    logger.info("User %s registered as %s", user.username, user.role)
    return DataResponse(
        data=TokenResponse(access_token=create_user_token(user), user=UserResponse.model_validate(user))
    )


@router.post(
    "/login",
    response_model=DataResponse[TokenResponse],
    summary="Login",
    description="Exchange username and password for a bearer token valid for 7 days.",
)
async def login(
    data: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    user_service = UserService(db)
    user = await user_service.authenticate_user(data.username, data.password)
    if not user:
        AppException().raise_401("Invalid credentials")
    return DataResponse(
        data=TokenResponse(access_token=create_user_token(user), user=UserResponse.model_validate(user))
    )
