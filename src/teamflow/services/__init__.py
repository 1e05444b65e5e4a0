"""Service layer exports."""

from __future__ import annotations

from .admin import AdminService
from .auth import AuthService
from .dashboard import DashboardService
from .tasks import TaskService
from .teams import TeamService
from .users import UserService

__all__ = [
    "AdminService",
    "AuthService",
    "DashboardService",
    "TaskService",
    "TeamService",
    "UserService",
]
