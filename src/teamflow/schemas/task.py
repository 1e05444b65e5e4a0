"""Task-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..models import TaskPriority, TaskStatus, decode_tags

TASK_READ_EXAMPLE = {
    "id": 1,
    "title": "Draft release notes",
    "description": "Summarise the changes shipped this sprint.",
    "status": TaskStatus.IN_PROGRESS.value,
    "priority": TaskPriority.HIGH.value,
    "team_id": 3,
    "team_name": "Platform",
    "assignee_id": 42,
    "assignee_name": "Ann Lee",
    "tags": ["docs", "release"],
    "is_completed": False,
    "due_date": "2024-06-30",
    "created_at": "2024-06-01T12:00:00Z",
}

# Columns that exist as NOT NULL; an explicit ``null`` in an update is rejected.
_NON_NULLABLE_UPDATE_FIELDS = ("title", "status", "priority", "tags", "is_completed")


def _coerce_tags(value: Any) -> Any:
    if value is None:
        return value
    if isinstance(value, str):
        return decode_tags(value)
    if isinstance(value, (list, tuple)):
        tags = [str(item).strip() for item in value if item is not None and str(item).strip()]
        # Tags are stored comma-joined.
        if any("," in tag for tag in tags):
            raise ValueError("Tags cannot contain commas.")
        return tags
    return value


def _strip_title(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip()
    return value


class TaskCreate(BaseModel):
    """Payload for creating a new task."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Draft release notes",
                "priority": TaskPriority.HIGH.value,
                "team_id": 3,
                "tags": ["docs", "release"],
            }
        }
    )

    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    team_id: int | None = None
    assignee_id: int | None = None
    tags: list[str] = Field(default_factory=list)
    is_completed: bool = False
    due_date: str | None = Field(default=None, max_length=64)

    @field_validator("title", mode="before")
    @classmethod
    def _normalise_title(cls, value: Any) -> Any:
        return _strip_title(value)

    @field_validator("tags", mode="before")
    @classmethod
    def _normalise_tags(cls, value: Any) -> Any:
        return _coerce_tags(value)


class TaskUpdate(BaseModel):
    """Payload for partially updating an existing task."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": TaskStatus.DONE.value,
                "is_completed": True,
            }
        }
    )

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    team_id: int | None = None
    assignee_id: int | None = None
    tags: list[str] | None = None
    is_completed: bool | None = None
    due_date: str | None = Field(default=None, max_length=64)

    @field_validator("title", mode="before")
    @classmethod
    def _normalise_title(cls, value: Any) -> Any:
        return _strip_title(value)

    @field_validator("tags", mode="before")
    @classmethod
    def _normalise_tags(cls, value: Any) -> Any:
        return _coerce_tags(value)

    @model_validator(mode="after")
    def _ensure_payload_valid(self) -> "TaskUpdate":
        if not self.model_fields_set:
            raise ValueError("No fields provided for update.")
        for field_name in _NON_NULLABLE_UPDATE_FIELDS:
            if field_name in self.model_fields_set and getattr(self, field_name) is None:
                raise ValueError(f"{field_name} cannot be null.")
        return self

    def changes(self) -> dict[str, Any]:
        """Return only the fields the client actually sent."""
        return self.model_dump(exclude_unset=True)


class TaskStatusUpdate(BaseModel):
    """Kanban move: only the status column changes."""

    status: TaskStatus


class QuickTaskCreate(BaseModel):
    """Dashboard shortcut carrying just a title."""

    title: str = Field(min_length=1, max_length=255)

    @field_validator("title", mode="before")
    @classmethod
    def _normalise_title(cls, value: Any) -> Any:
        return _strip_title(value)


class TaskRead(BaseModel):
    """Public representation of a task, joined with its team and assignee names."""

    model_config = ConfigDict(json_schema_extra={"example": TASK_READ_EXAMPLE})

    id: int
    title: str
    description: str | None = None
    status: TaskStatus
    priority: TaskPriority
    team_id: int | None = None
    team_name: str | None = None
    assignee_id: int | None = None
    assignee_name: str | None = None
    tags: list[str] = Field(default_factory=list)
    is_completed: bool = False
    due_date: str | None = None
    created_at: datetime | None = None


class TaskCreatedResponse(BaseModel):
    id: int
    message: str = "Task created successfully."


__all__ = [
    "QuickTaskCreate",
    "TaskCreate",
    "TaskCreatedResponse",
    "TaskRead",
    "TaskStatusUpdate",
    "TaskUpdate",
]
