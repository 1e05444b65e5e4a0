"""Router registrations for the TeamFlow API."""

from __future__ import annotations

from fastapi import APIRouter

from .admin import router as admin_router
from .dashboard import router as dashboard_router
from .health import router as health_router
from .kanban import router as kanban_router
from .portal import router as portal_router
from .tasks import router as tasks_router
from .teams import router as teams_router

api_router = APIRouter()
api_router.include_router(portal_router)
api_router.include_router(tasks_router)
api_router.include_router(kanban_router)
api_router.include_router(teams_router)
api_router.include_router(dashboard_router)
api_router.include_router(admin_router)

__all__ = [
    "admin_router",
    "api_router",
    "dashboard_router",
    "health_router",
    "kanban_router",
    "portal_router",
    "tasks_router",
    "teams_router",
]
