"""API routes, mounted under Settings.API_PREFIX (default /api)."""

from fastapi import APIRouter

from supportdesk.api.v1 import auth, categories, dashboard, health, users

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, tags=["users"])
router.include_router(categories.router, prefix="/categories", tags=["categories"])
router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
