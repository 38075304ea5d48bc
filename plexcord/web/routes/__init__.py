"""Route aggregators for the web application."""

from fastapi.routing import APIRouter

from plexcord.web.routes.images import router as images_router
from plexcord.web.routes.system import router as system_router
from plexcord.web.routes.webhook import router as webhook_router

__all__ = ["router"]

router = APIRouter()

router.include_router(webhook_router, tags=["webhook"])
router.include_router(images_router, prefix="/images", tags=["images"])
router.include_router(system_router, tags=["system"])
