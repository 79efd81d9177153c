"""Top-level API router: mounts all domain routers under /api/v1."""

from fastapi import APIRouter

from earncal.api.routes import earnings, favorites, system, users

api_router = APIRouter()
api_router.include_router(earnings.router, prefix="/earnings", tags=["earnings"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(favorites.router, prefix="/favorites", tags=["favorites"])
api_router.include_router(system.router, prefix="/system", tags=["system"])
