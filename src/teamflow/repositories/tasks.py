"""Repository for interacting with task persistence models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy import and_, or_
from sqlalchemy.orm import aliased
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..models import Task, TaskStatus, Team, TeamMember, User
from .base import BaseRepository


@dataclass(slots=True)
class TaskRow:
    """A task together with the display names resolved by the list query."""

    task: Task
    assignee_name: str | None
    team_name: str | None


class TaskRepository(BaseRepository[Task]):
    """Concrete repository encapsulating ``Task`` persistence operations.

    Every read accepts an optional ``viewer_id``. When given, results are
    limited to tasks that viewer may see: tasks of a team they belong to,
    tasks assigned to them, and tasks that belong to no team.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Task)

    @staticmethod
    def _restrict_to_viewer(query: Any, viewer_id: int) -> Any:
        membership = aliased(TeamMember)
        return query.outerjoin(
            membership,
            and_(membership.team_id == Task.team_id, membership.user_id == viewer_id),
        ).where(
            or_(
                membership.user_id.is_not(None),
                Task.assignee_id == viewer_id,
                Task.team_id.is_(None),
            )
        )

    async def list_with_names(
        self,
        *,
        team_id: int | None = None,
        assignee_id: int | None = None,
        status: TaskStatus | None = None,
        viewer_id: int | None = None,
    ) -> list[TaskRow]:
        """Return tasks matching the filters, newest first, joined with names."""
        query = (
            select(Task, User.name.label("assignee_name"), Team.team_name.label("team_name"))
            .outerjoin(User, User.id == Task.assignee_id)
            .outerjoin(Team, Team.team_id == Task.team_id)
        )
        if team_id is not None:
            query = query.where(Task.team_id == team_id)
        if assignee_id is not None:
            query = query.where(Task.assignee_id == assignee_id)
        if status is not None:
            query = query.where(Task.status == status)
        if viewer_id is not None:
            query = self._restrict_to_viewer(query, viewer_id)
        query = query.order_by(Task.created_at.desc(), Task.id.desc())
        result = await self.session.execute(query)
        return [TaskRow(task=task, assignee_name=assignee, team_name=team) for task, assignee, team in result.all()]

    async def get_visible(self, task_id: int, viewer_id: int | None = None) -> Task | None:
        """Return the task if it exists and ``viewer_id`` (when given) may see it."""
        if viewer_id is None:
            return await self.get(task_id)
        query = self._restrict_to_viewer(select(Task).where(Task.id == task_id), viewer_id)
        result = await self.session.execute(query)
        return result.scalars().first()

    async def count_by_status(self, status: TaskStatus | None = None) -> int:
        if status is None:
            return await self.count()
        return await self.count(Task.status == status)


__all__ = ["TaskRepository", "TaskRow"]
