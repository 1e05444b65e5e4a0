"""Service layer for teams and team membership."""

from __future__ import annotations

import logging

from sqlmodel.ext.asyncio.session import AsyncSession

from ..activity import ActivityLogService
from ..errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..models import MANAGER_ROLES, Team, TeamMember, TeamRole
from ..repositories import TeamRepository, UserRepository
from ..schemas.auth import AuthenticatedUser
from ..schemas.team import TeamCreate, TeamMemberRead, TeamRead

logger = logging.getLogger(__name__)

TEAM_NOT_FOUND = "Team not found."


class TeamService:
    """Team lifecycle and membership rules.

    Within a team, owners and admins manage membership; only owners (or a
    global admin) may hand out the owner role or delete the team. A team always
    keeps at least one owner.
    """

    def __init__(self, session: AsyncSession, activity: ActivityLogService) -> None:
        self._session = session
        self._activity = activity
        self._repository = TeamRepository(session)
        self._user_repository = UserRepository(session)

    @property
    def repository(self) -> TeamRepository:
        return self._repository

    async def list_teams(self, caller: AuthenticatedUser) -> list[TeamRead]:
        """Return the caller's teams, each with its full member list."""
        memberships = await self._repository.list_for_user(caller.id)
        members = await self._repository.members_by_team([team.team_id for team, _ in memberships])
        return [
            TeamRead(
                team_id=team.team_id,
                team_name=team.team_name,
                description=team.description,
                accent_color=team.accent_color,
                created_at=team.created_at,
                user_team_role=role,
                members=[
                    TeamMemberRead(id=row.id, name=row.name, email=row.email, role=row.role)
                    for row in members.get(team.team_id, [])
                ],
            )
            for team, role in memberships
        ]

    async def create_team(self, caller: AuthenticatedUser, payload: TeamCreate) -> Team:
        """Insert the team and the creator's owner membership in one transaction."""
        team = Team(team_name=payload.title, description=payload.description, accent_color=payload.color)
        await self._repository.add(team)
        await self._repository.add_member(team.team_id, caller.id, TeamRole.OWNER)
        await self._session.commit()
        await self._activity.record(f"Team created: {team.team_name} (#{team.team_id})", user_id=caller.id)
        return team

    async def _require_team(self, team_id: int) -> Team:
        team = await self._repository.get(team_id)
        if team is None:
            raise NotFoundError(TEAM_NOT_FOUND)
        return team

    async def _caller_role(self, caller: AuthenticatedUser, team_id: int) -> TeamRole | None:
        membership = await self._repository.get_membership(team_id, caller.id)
        return membership.role if membership is not None else None

    async def add_member(
        self,
        caller: AuthenticatedUser,
        team_id: int,
        *,
        email: str,
        role: TeamRole = TeamRole.MEMBER,
    ) -> TeamMember:
        await self._require_team(team_id)
        caller_role = await self._caller_role(caller, team_id)
        if not caller.is_admin:
            if caller_role not in MANAGER_ROLES:
                raise AuthorizationError("Only team owners or admins can add members.")
            if role == TeamRole.OWNER and caller_role != TeamRole.OWNER:
                raise AuthorizationError("Only team owners can grant the owner role.")

        user = await self._user_repository.get_by_email(email)
        if user is None:
            raise NotFoundError("User not found.")
        if await self._repository.get_membership(team_id, user.id) is not None:
            raise ConflictError("User is already a member of this team.")

        membership = await self._repository.add_member(team_id, user.id, role)
        await self._session.commit()
        await self._activity.record(
            f"Member added to team #{team_id}: {user.email} ({role.value})",
            user_id=caller.id,
        )
        return membership

    async def remove_member(self, caller: AuthenticatedUser, team_id: int, user_id: int) -> bool:
        """Remove ``user_id`` from the team; returns ``False`` when there was nothing to remove."""
        await self._require_team(team_id)
        if not caller.is_admin and caller.id != user_id:
            if await self._caller_role(caller, team_id) not in MANAGER_ROLES:
                raise AuthorizationError("Only team owners or admins can remove members.")

        membership = await self._repository.get_membership(team_id, user_id)
        if membership is None:
            return False
        if membership.role == TeamRole.OWNER and await self._repository.count_owners(team_id) <= 1:
            raise ValidationError("Cannot remove the last owner of a team.")

        await self._repository.remove_member(membership)
        await self._session.commit()
        await self._activity.record(f"Member #{user_id} removed from team #{team_id}", user_id=caller.id)
        return True

    async def delete_team(self, caller: AuthenticatedUser, team_id: int) -> None:
        team = await self._require_team(team_id)
        if not caller.is_admin and await self._caller_role(caller, team_id) != TeamRole.OWNER:
            raise AuthorizationError("Only team owners can delete a team.")
        name = team.team_name
        await self._repository.delete(team)
        await self._session.commit()
        logger.info("Team deleted", extra={"team_id": team_id})
        await self._activity.record(f"Team deleted: {name} (#{team_id})", user_id=caller.id)


__all__ = ["TEAM_NOT_FOUND", "TeamService"]
