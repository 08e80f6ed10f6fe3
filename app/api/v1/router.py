"""Main v1 API router that aggregates all sub-routers."""

from fastapi import APIRouter

from .auth import router as auth_router
from .generation import router as generation_router
from .subscriptions import router as subscriptions_router

# Main v1 router
router = APIRouter(prefix="/api/v1")

router.include_router(auth_router, prefix="/auth", tags=["Auth"])
router.include_router(generation_router, prefix="/generate", tags=["Generation"])
router.include_router(subscriptions_router, prefix="/subscriptions", tags=["Subscriptions"])

__all__ = ["router"]
