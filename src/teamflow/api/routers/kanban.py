"""Kanban board routes: the same tasks, moved between status columns."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...deps import ActivityServiceDependency, CurrentUserDependency, DatabaseSessionDependency
from ...schemas import MessageResponse, TaskCreate, TaskCreatedResponse, TaskRead, TaskStatusUpdate
from ...services import TaskService

router = APIRouter(prefix="/kanban", tags=["kanban"])


@router.get("/tasks", response_model=list[TaskRead], summary="List the board's tasks")
async def list_board(
    session: DatabaseSessionDependency,
    current_user: CurrentUserDependency,
    activity: ActivityServiceDependency,
) -> list[TaskRead]:
    return await TaskService(session, activity).list_tasks(current_user)


@router.post(
    "/tasks",
    response_model=TaskCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a card to the board",
)
async def create_card(
    payload: TaskCreate,
    session: DatabaseSessionDependency,
    current_user: CurrentUserDependency,
    activity: ActivityServiceDependency,
) -> TaskCreatedResponse:
    task = await TaskService(session, activity).create_task(current_user, payload)
    return TaskCreatedResponse(id=task.id, message="Task created.")


@router.put("/tasks/{task_id}", response_model=MessageResponse, summary="Move a card to another column")
async def move_card(
    task_id: int,
    payload: TaskStatusUpdate,
    session: DatabaseSessionDependency,
    current_user: CurrentUserDependency,
    activity: ActivityServiceDependency,
) -> MessageResponse:
    await TaskService(session, activity).move_task(current_user, task_id, payload.status)
    return MessageResponse(message="Status updated.", id=task_id)


@router.delete("/tasks/{task_id}", response_model=MessageResponse, summary="Remove a card")
async def delete_card(
    task_id: int,
    session: DatabaseSessionDependency,
    current_user: CurrentUserDependency,
    activity: ActivityServiceDependency,
) -> MessageResponse:
    await TaskService(session, activity).delete_task(current_user, task_id)
    return MessageResponse(message="Task deleted.", id=task_id)
