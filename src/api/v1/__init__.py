"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.admin import router as admin_router
from api.v1.routes.profiles import router as profiles_router
from api.v1.routes.registry import router as registry_router

router = APIRouter()
router.include_router(profiles_router)
router.include_router(registry_router)
router.include_router(admin_router)
