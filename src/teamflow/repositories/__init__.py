"""Database repositories for encapsulating persistence logic."""

from __future__ import annotations

from .activities import ActivityEntry, ActivityRepository
from .tasks import TaskRepository, TaskRow
from .teams import MemberRow, TeamRepository
from .users import UserRepository

__all__ = [
    "ActivityEntry",
    "ActivityRepository",
    "MemberRow",
    "TaskRepository",
    "TaskRow",
    "TeamRepository",
    "UserRepository",
]
