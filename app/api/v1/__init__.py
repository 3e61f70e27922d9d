"""API v1 routes."""

from fastapi import APIRouter

from app.api.v1 import admin, auth, health, orders, users

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(orders.router, prefix="/orders", tags=["orders"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])
