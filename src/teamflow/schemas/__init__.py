"""Pydantic schemas exposed by the TeamFlow API."""

from __future__ import annotations

from .admin import AdminUserUpdate, PasswordResetRequest, UserStats
from .auth import AuthenticatedUser, AuthResponse, LoginRequest, RegisterRequest, TokenClaims
from .dashboard import ActivityView, DashboardStats
from .system import ErrorResponse, HealthCheckResponse, MessageResponse, RootResponse
from .task import (
    QuickTaskCreate,
    TaskCreate,
    TaskCreatedResponse,
    TaskRead,
    TaskStatusUpdate,
    TaskUpdate,
)
from .team import TeamCreate, TeamCreatedResponse, TeamMemberAdd, TeamMemberRead, TeamRead
from .user import UserPublic

__all__ = [
    "ActivityView",
    "AdminUserUpdate",
    "AuthResponse",
    "AuthenticatedUser",
    "DashboardStats",
    "ErrorResponse",
    "HealthCheckResponse",
    "LoginRequest",
    "MessageResponse",
    "PasswordResetRequest",
    "QuickTaskCreate",
    "RegisterRequest",
    "RootResponse",
    "TaskCreate",
    "TaskCreatedResponse",
    "TaskRead",
    "TaskStatusUpdate",
    "TaskUpdate",
    "TeamCreate",
    "TeamCreatedResponse",
    "TeamMemberAdd",
    "TeamMemberRead",
    "TeamRead",
    "TokenClaims",
    "UserPublic",
    "UserStats",
]
