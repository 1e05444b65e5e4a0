"""Routes for teams and their members."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...deps import ActivityServiceDependency, CurrentUserDependency, DatabaseSessionDependency
from ...schemas import MessageResponse, TeamCreate, TeamCreatedResponse, TeamMemberAdd, TeamRead
from ...services import TeamService

router = APIRouter(prefix="/teams", tags=["teams"])


@router.get("", response_model=list[TeamRead], summary="List the caller's teams")
async def list_teams(
    session: DatabaseSessionDependency,
    current_user: CurrentUserDependency,
    activity: ActivityServiceDependency,
) -> list[TeamRead]:
    return await TeamService(session, activity).list_teams(current_user)


@router.post(
    "",
    response_model=TeamCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a team owned by the caller",
)
async def create_team(
    payload: TeamCreate,
    session: DatabaseSessionDependency,
    current_user: CurrentUserDependency,
    activity: ActivityServiceDependency,
) -> TeamCreatedResponse:
    team = await TeamService(session, activity).create_team(current_user, payload)
    return TeamCreatedResponse(id=team.team_id)


@router.delete("/{team_id}", response_model=MessageResponse, summary="Delete a team")
async def delete_team(
    team_id: int,
    session: DatabaseSessionDependency,
    current_user: CurrentUserDependency,
    activity: ActivityServiceDependency,
) -> MessageResponse:
    await TeamService(session, activity).delete_team(current_user, team_id)
    return MessageResponse(message="Team deleted.", id=team_id)


@router.post(
    "/{team_id}/members",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a user to the team by email",
)
async def add_member(
    team_id: int,
    payload: TeamMemberAdd,
    session: DatabaseSessionDependency,
    current_user: CurrentUserDependency,
    activity: ActivityServiceDependency,
) -> MessageResponse:
    membership = await TeamService(session, activity).add_member(
        current_user,
        team_id,
        email=payload.email,
        role=payload.role,
    )
    return MessageResponse(message="Member added.", id=membership.user_id)


@router.delete(
    "/{team_id}/members/{user_id}",
    response_model=MessageResponse,
    summary="Remove a member from the team",
)
async def remove_member(
    team_id: int,
    user_id: int,
    session: DatabaseSessionDependency,
    current_user: CurrentUserDependency,
    activity: ActivityServiceDependency,
) -> MessageResponse:
    removed = await TeamService(session, activity).remove_member(current_user, team_id, user_id)
    message = "Member removed." if removed else "User is not a member of this team."
    return MessageResponse(message=message, id=user_id)
