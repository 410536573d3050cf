from fastapi import APIRouter

from smartauto.api.v1.health import router as health_router
from smartauto.api.v1.auth.router import router as auth_router
from smartauto.api.v1.users.router import router as users_router
from smartauto.api.v1.categories.router import router as categories_router
from smartauto.api.v1.vehicles.router import router as vehicles_router
from smartauto.api.v1.rentals.router import router as rentals_router

api_router = APIRouter()
api_router.include_router(health_router, prefix="/health", tags=["health"])
api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(users_router, prefix="/usuarios", tags=["users"])
api_router.include_router(categories_router, prefix="/categorias", tags=["categories"])
api_router.include_router(vehicles_router, prefix="/veiculos", tags=["vehicles"])
api_router.include_router(rentals_router, prefix="/locacoes", tags=["rentals"])
