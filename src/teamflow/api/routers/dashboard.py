"""Dashboard aggregates and quick-create shortcuts."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query, status

from ...deps import (
    ActivityServiceDependency,
    CurrentUserDependency,
    DatabaseSessionDependency,
    SettingsDependency,
)
from ...schemas import (
    ActivityView,
    DashboardStats,
    QuickTaskCreate,
    TaskCreate,
    TaskCreatedResponse,
    TeamCreate,
    TeamCreatedResponse,
)
from ...services import DashboardService, TaskService, TeamService
from ...services.dashboard import MAX_FEED_LIMIT

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

LimitQuery = Annotated[
    int | None,
    Query(ge=1, le=MAX_FEED_LIMIT, description="Number of feed entries to return."),
]


@router.get(
    "/stats",
    response_model=DashboardStats,
    summary="Task counts by status",
)
async def read_stats(
    session: DatabaseSessionDependency,
    current_user: CurrentUserDependency,
) -> DashboardStats:
    return await DashboardService(session).stats()


@router.get("/activity", response_model=list[ActivityView], summary="Recent activity feed")
async def read_activity(
    session: DatabaseSessionDependency,
    current_user: CurrentUserDependency,
    settings: SettingsDependency,
    limit: LimitQuery = None,
) -> list[ActivityView]:
    return await DashboardService(session).recent_activity(limit or settings.activity_feed_limit)


@router.post(
    "/task",
    response_model=TaskCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a task from just a title",
)
async def create_quick_task(
    payload: QuickTaskCreate,
    session: DatabaseSessionDependency,
    current_user: CurrentUserDependency,
    activity: ActivityServiceDependency,
) -> TaskCreatedResponse:
    task = await TaskService(session, activity).create_task(current_user, TaskCreate(title=payload.title))
    return TaskCreatedResponse(id=task.id, message="Task saved.")


@router.post(
    "/team",
    response_model=TeamCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a team from the dashboard",
)
async def create_quick_team(
    payload: TeamCreate,
    session: DatabaseSessionDependency,
    current_user: CurrentUserDependency,
    activity: ActivityServiceDependency,
) -> TeamCreatedResponse:
    team = await TeamService(session, activity).create_team(current_user, payload)
    return TeamCreatedResponse(id=team.team_id)
