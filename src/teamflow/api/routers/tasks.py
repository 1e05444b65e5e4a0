"""Routes handling task CRUD operations."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query, status

from ...deps import ActivityServiceDependency, CurrentUserDependency, DatabaseSessionDependency
from ...models import TaskStatus
from ...schemas import MessageResponse, TaskCreate, TaskCreatedResponse, TaskRead, TaskUpdate
from ...services import TaskService

router = APIRouter(prefix="/tasks", tags=["tasks"])

TeamQuery = Annotated[
    int | None,
    Query(description="Restrict results to tasks of the given team."),
]
AssigneeQuery = Annotated[
    int | None,
    Query(description="Restrict results to tasks assigned to the given user id."),
]
StatusQuery = Annotated[
    TaskStatus | None,
    Query(description="Filter results to tasks matching the supplied status."),
]


@router.get(
    "",
    response_model=list[TaskRead],
    summary="List the tasks visible to the caller",
)
async def list_tasks(
    session: DatabaseSessionDependency,
    current_user: CurrentUserDependency,
    activity: ActivityServiceDependency,
    team_id: TeamQuery = None,
    assignee_id: AssigneeQuery = None,
    status: StatusQuery = None,
) -> list[TaskRead]:
    service = TaskService(session, activity)
    return await service.list_tasks(current_user, team_id=team_id, assignee_id=assignee_id, status=status)


@router.post(
    "",
    response_model=TaskCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new task",
)
async def create_task(
    payload: TaskCreate,
    session: DatabaseSessionDependency,
    current_user: CurrentUserDependency,
    activity: ActivityServiceDependency,
) -> TaskCreatedResponse:
    service = TaskService(session, activity)
    task = await service.create_task(current_user, payload)
    return TaskCreatedResponse(id=task.id)


@router.put(
    "/{task_id}",
    response_model=MessageResponse,
    summary="Update the supplied fields of a task",
)
async def update_task(
    task_id: int,
    payload: TaskUpdate,
    session: DatabaseSessionDependency,
    current_user: CurrentUserDependency,
    activity: ActivityServiceDependency,
) -> MessageResponse:
    service = TaskService(session, activity)
    await service.update_task(current_user, task_id, payload.changes())
    return MessageResponse(message="Task updated successfully.", id=task_id)


@router.delete(
    "/{task_id}",
    response_model=MessageResponse,
    summary="Delete a task",
)
async def delete_task(
    task_id: int,
    session: DatabaseSessionDependency,
    current_user: CurrentUserDependency,
    activity: ActivityServiceDependency,
) -> MessageResponse:
    service = TaskService(session, activity)
    await service.delete_task(current_user, task_id)
    return MessageResponse(message="Task deleted successfully.", id=task_id)
