"""API v1 routes."""

from fastapi import APIRouter

from tuerauf.api.v1 import health, pins, users

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(pins.router, prefix="/pins", tags=["pins"])
