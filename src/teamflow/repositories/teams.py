"""Repository for teams and their membership rows."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..models import Team, TeamMember, TeamRole, User
from .base import BaseRepository


@dataclass(slots=True)
class MemberRow:
    id: int
    name: str
    email: str
    role: TeamRole


class TeamRepository(BaseRepository[Team]):
    """Persistence helpers for ``Team`` and ``TeamMember`` entities."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Team)

    async def list_for_user(self, user_id: int) -> list[tuple[Team, TeamRole]]:
        """Return the teams ``user_id`` belongs to along with their role in each."""
        query = (
            select(Team, TeamMember.role)
            .join(TeamMember, TeamMember.team_id == Team.team_id)
            .where(TeamMember.user_id == user_id)
            .order_by(Team.created_at.desc(), Team.team_id.desc())
        )
        result = await self.session.execute(query)
        return [(team, role) for team, role in result.all()]

    async def members_by_team(self, team_ids: Sequence[int]) -> dict[int, list[MemberRow]]:
        """Fetch the members of every team in ``team_ids`` with a single query."""
        if not team_ids:
            return {}
        query = (
            select(TeamMember.team_id, User.id, User.name, User.email, TeamMember.role)
            .join(User, User.id == TeamMember.user_id)
            .where(TeamMember.team_id.in_(team_ids))
            .order_by(TeamMember.team_id, TeamMember.joined_at, User.id)
        )
        result = await self.session.execute(query)
        grouped: dict[int, list[MemberRow]] = defaultdict(list)
        for team_id, user_id, name, email, role in result.all():
            grouped[team_id].append(MemberRow(id=user_id, name=name, email=email, role=role))
        return dict(grouped)

    async def get_membership(self, team_id: int, user_id: int) -> TeamMember | None:
        return await self.session.get(TeamMember, {"team_id": team_id, "user_id": user_id})

    async def add_member(self, team_id: int, user_id: int, role: TeamRole) -> TeamMember:
        membership = TeamMember(team_id=team_id, user_id=user_id, role=role)
        self.session.add(membership)
        await self.session.flush()
        return membership

    async def remove_member(self, membership: TeamMember) -> None:
        await self.session.delete(membership)
        await self.session.flush()

    async def count_owners(self, team_id: int) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(TeamMember)
            .where(TeamMember.team_id == team_id, TeamMember.role == TeamRole.OWNER)
        )
        return int(result.scalar_one())


__all__ = ["MemberRow", "TeamRepository"]
