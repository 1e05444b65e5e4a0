"""Domain models exposed for the TeamFlow service."""

from __future__ import annotations

from .activity import Activity
from .common import TimestampMixin
from .task import Task, TaskBase, TaskPriority, TaskStatus, decode_tags, encode_tags
from .team import MANAGER_ROLES, Team, TeamMember, TeamRole
from .user import User, UserBase, UserRole

__all__ = [
    "Activity",
    "MANAGER_ROLES",
    "Task",
    "TaskBase",
    "TaskPriority",
    "TaskStatus",
    "Team",
    "TeamMember",
    "TeamRole",
    "TimestampMixin",
    "User",
    "UserBase",
    "UserRole",
    "decode_tags",
    "encode_tags",
]
