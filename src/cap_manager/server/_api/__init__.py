from fastapi import APIRouter

from ._health import router as health_router
from ._ping import router as ping_router
from ._requirements import router as requirements_router

api_router = APIRouter(prefix="/api")

api_router.include_router(health_router)
api_router.include_router(ping_router)
api_router.include_router(requirements_router)

__all__ = ["api_router"]
