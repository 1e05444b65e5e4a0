"""Aggregations backing the dashboard screen."""

from __future__ import annotations

from sqlmodel.ext.asyncio.session import AsyncSession

from ..models import TaskStatus
from ..repositories import ActivityRepository, TaskRepository
from ..schemas.dashboard import ActivityView, DashboardStats

MAX_FEED_LIMIT = 50


class DashboardService:
    """Process-wide counters and the recent activity feed.

    Counts cover every task in the system regardless of the caller's teams.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._task_repository = TaskRepository(session)
        self._activity_repository = ActivityRepository(session)

    async def stats(self) -> DashboardStats:
        return DashboardStats(
            total_tasks=await self._task_repository.count_by_status(),
            todo=await self._task_repository.count_by_status(TaskStatus.TODO),
            in_progress=await self._task_repository.count_by_status(TaskStatus.IN_PROGRESS),
            completed=await self._task_repository.count_by_status(TaskStatus.DONE),
        )

    async def recent_activity(self, limit: int = 5) -> list[ActivityView]:
        bounded = min(max(limit, 1), MAX_FEED_LIMIT)
        entries = await self._activity_repository.recent(bounded)
        return [
            ActivityView(
                id=entry.id,
                action=entry.action,
                user_id=entry.user_id,
                user_name=entry.user_name,
                created_at=entry.created_at,
            )
            for entry in entries
        ]


__all__ = ["DashboardService", "MAX_FEED_LIMIT"]
