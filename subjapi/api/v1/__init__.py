"""API v1 routes."""

from fastapi import APIRouter

from subjapi.api.v1 import authentication, health, users

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(authentication.router, prefix="/authentication", tags=["authentication"])
router.include_router(users.router, prefix="/users", tags=["users"])
