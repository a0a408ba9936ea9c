"""API routers."""

from app.routers.auth import router as auth_router
from app.routers.complaints import router as complaints_router
from app.routers.intake import router as intake_router
from app.routers.manage import router as manage_router

__all__ = [
    "auth_router",
    "complaints_router",
    "intake_router",
    "manage_router",
]
