"""API v1 router configuration."""

from fastapi import APIRouter

from cafe_backend.api.v1.endpoints import auth, health, menu, staff, staff_auth

api_router = APIRouter()

# Include routers
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(staff_auth.router, prefix="/staff-auth", tags=["Staff Authentication"])
api_router.include_router(staff.router, tags=["Staff"])
api_router.include_router(menu.router, tags=["Menu"])
