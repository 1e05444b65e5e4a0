"""Service layer encapsulating task-related operations."""

from __future__ import annotations

from typing import Any

from sqlmodel.ext.asyncio.session import AsyncSession

from ..activity import ActivityLogService
from ..errors import NotFoundError, ValidationError
from ..models import Task, TaskStatus, decode_tags, encode_tags
from ..repositories import TaskRepository, TaskRow
from ..schemas.auth import AuthenticatedUser
from ..schemas.task import TaskCreate, TaskRead

TASK_NOT_FOUND = "Task not found."


def _viewer_id(caller: AuthenticatedUser) -> int | None:
    """Admins see every task; everyone else is scoped by membership."""
    return None if caller.is_admin else caller.id


def to_task_read(row: TaskRow) -> TaskRead:
    task = row.task
    return TaskRead(
        id=task.id,
        title=task.title,
        description=task.description,
        status=task.status,
        priority=task.priority,
        team_id=task.team_id,
        team_name=row.team_name,
        assignee_id=task.assignee_id,
        assignee_name=row.assignee_name,
        tags=decode_tags(task.tags),
        is_completed=task.is_completed,
        due_date=task.due_date,
        created_at=task.created_at,
    )


class TaskService:
    """High-level business orchestration for ``Task`` entities."""

    def __init__(self, session: AsyncSession, activity: ActivityLogService) -> None:
        self._session = session
        self._activity = activity
        self._repository = TaskRepository(session)

    @property
    def repository(self) -> TaskRepository:
        """Expose the underlying repository for advanced scenarios."""
        return self._repository

    async def list_tasks(
        self,
        caller: AuthenticatedUser,
        *,
        team_id: int | None = None,
        assignee_id: int | None = None,
        status: TaskStatus | None = None,
    ) -> list[TaskRead]:
        """Return the tasks ``caller`` may see, newest first."""
        rows = await self._repository.list_with_names(
            team_id=team_id,
            assignee_id=assignee_id,
            status=status,
            viewer_id=_viewer_id(caller),
        )
        return [to_task_read(row) for row in rows]

    async def create_task(self, caller: AuthenticatedUser, payload: TaskCreate) -> Task:
        task = Task(
            title=payload.title,
            description=payload.description,
            status=payload.status,
            priority=payload.priority,
            team_id=payload.team_id,
            assignee_id=payload.assignee_id,
            tags=encode_tags(payload.tags),
            is_completed=payload.is_completed,
            due_date=payload.due_date,
        )
        await self._repository.add(task)
        await self._session.commit()
        await self._activity.record(f"Task created: {task.title} (#{task.id})", user_id=caller.id)
        return task

    async def _get_for_caller(self, caller: AuthenticatedUser, task_id: int) -> Task:
        # Tasks hidden from the caller are reported exactly like missing ones.
        task = await self._repository.get_visible(task_id, _viewer_id(caller))
        if task is None:
            raise NotFoundError(TASK_NOT_FOUND)
        return task

    async def update_task(self, caller: AuthenticatedUser, task_id: int, changes: dict[str, Any]) -> Task:
        """Apply only the supplied fields to the task."""
        if not changes:
            raise ValidationError("No fields provided for update.")
        task = await self._get_for_caller(caller, task_id)
        for field_name, value in changes.items():
            if field_name == "tags":
                value = encode_tags(value)
            setattr(task, field_name, value)
        await self._session.commit()
        await self._activity.record(
            f"Task updated: #{task_id} ({', '.join(sorted(changes))})",
            user_id=caller.id,
        )
        return task

    async def move_task(self, caller: AuthenticatedUser, task_id: int, status: TaskStatus) -> Task:
        task = await self._get_for_caller(caller, task_id)
        previous = task.status
        task.status = status
        await self._session.commit()
        if previous != status:
            await self._activity.record(
                f"Task moved: #{task_id} {previous.value} → {status.value}",
                user_id=caller.id,
            )
        return task

    async def delete_task(self, caller: AuthenticatedUser, task_id: int) -> None:
        task = await self._get_for_caller(caller, task_id)
        title = task.title
        await self._repository.delete(task)
        await self._session.commit()
        await self._activity.record(f"Task deleted: {title} (#{task_id})", user_id=caller.id)


__all__ = ["TASK_NOT_FOUND", "TaskService", "to_task_read"]
