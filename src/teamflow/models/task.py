"""Task domain models built with SQLModel."""

from __future__ import annotations

from enum import Enum

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .common import TimestampMixin, enum_column_type


class TaskStatus(str, Enum):
    """Kanban columns a task can sit in."""

    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


class TaskPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


def decode_tags(raw: str | None) -> list[str]:
    """Split the stored comma-joined tag string into a clean list."""
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def encode_tags(tags: list[str] | None) -> str:
    """Join ``tags`` into the stored comma-joined representation."""
    if not tags:
        return ""
    return ",".join(item.strip() for item in tags if item and item.strip())


class TaskBase(SQLModel, table=False):
    """Shared attributes for task models."""

    title: str = Field(
        max_length=255,
        sa_column=sa.Column(sa.String(length=255), nullable=False),
    )
    description: str | None = Field(
        default=None,
        sa_column=sa.Column(sa.Text(), nullable=True),
    )
    status: TaskStatus = Field(
        default=TaskStatus.TODO,
        sa_column=sa.Column(
            enum_column_type(TaskStatus, "task_status"),
            nullable=False,
            server_default=TaskStatus.TODO.value,
        ),
    )
    priority: TaskPriority = Field(
        default=TaskPriority.MEDIUM,
        sa_column=sa.Column(
            enum_column_type(TaskPriority, "task_priority"),
            nullable=False,
            server_default=TaskPriority.MEDIUM.value,
        ),
    )
    team_id: int | None = Field(
        default=None,
        sa_column=sa.Column(
            sa.Integer(),
            sa.ForeignKey("teams.team_id", ondelete="SET NULL"),
            nullable=True,
        ),
    )
    assignee_id: int | None = Field(
        default=None,
        sa_column=sa.Column(
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
    )
    # Comma-joined; see ``encode_tags`` and ``decode_tags``.
    tags: str = Field(
        default="",
        sa_column=sa.Column(sa.String(length=1000), nullable=False, server_default=""),
    )
    is_completed: bool = Field(
        default=False,
        sa_column=sa.Column(sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    due_date: str | None = Field(
        default=None,
        max_length=64,
        sa_column=sa.Column(sa.String(length=64), nullable=True),
    )


class Task(TaskBase, TimestampMixin, table=True):
    """Persistent task model."""

    __tablename__ = "tasks"
    __table_args__ = (
        sa.Index("ix_tasks_team_id", "team_id"),
        sa.Index("ix_tasks_assignee_id", "assignee_id"),
        sa.Index("ix_tasks_status", "status"),
    )

    id: int | None = Field(default=None, primary_key=True)


__all__ = ["Task", "TaskBase", "TaskPriority", "TaskStatus", "decode_tags", "encode_tags"]
