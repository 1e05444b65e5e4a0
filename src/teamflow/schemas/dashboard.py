"""Dashboard aggregate schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class DashboardStats(BaseModel):
    """Process-wide task counts, serialised in camelCase for the dashboard UI."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_tasks: int
    todo: int
    in_progress: int
    completed: int


class ActivityView(BaseModel):
    id: int
    action: str
    user_id: int | None = None
    user_name: str
    created_at: datetime


__all__ = ["ActivityView", "DashboardStats"]
