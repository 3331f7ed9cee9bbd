"""Router package exposing all API routers."""

from fastapi import APIRouter

from .admin.router import router as admin_router
from .tryon.router import router as tryon_router

router = APIRouter()
router.include_router(tryon_router)
router.include_router(admin_router)

__all__ = ["router", "admin_router", "tryon_router"]
