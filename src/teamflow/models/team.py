"""Team and membership models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .common import TimestampMixin, enum_column_type, utcnow


class TeamRole(str, Enum):
    """Roles a user can hold inside a single team."""

    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"


MANAGER_ROLES = frozenset({TeamRole.OWNER, TeamRole.ADMIN})


class Team(TimestampMixin, table=True):
    """A named group of users sharing task visibility."""

    __tablename__ = "teams"

    team_id: int | None = Field(default=None, primary_key=True)
    team_name: str = Field(
        max_length=100,
        sa_column=sa.Column(sa.String(length=100), nullable=False),
    )
    description: str | None = Field(
        default=None,
        sa_column=sa.Column(sa.Text(), nullable=True),
    )
    accent_color: str | None = Field(
        default=None,
        max_length=32,
        sa_column=sa.Column(sa.String(length=32), nullable=True),
    )


class TeamMember(SQLModel, table=True):
    """Membership of a user in a team; one role per (team, user)."""

    __tablename__ = "team_members"
    __table_args__ = (sa.Index("ix_team_members_user_id", "user_id"),)

    team_id: int = Field(
        sa_column=sa.Column(
            sa.Integer(),
            sa.ForeignKey("teams.team_id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )
    user_id: int = Field(
        sa_column=sa.Column(
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )
    role: TeamRole = Field(
        default=TeamRole.MEMBER,
        sa_column=sa.Column(
            enum_column_type(TeamRole, "team_role"),
            nullable=False,
            server_default=TeamRole.MEMBER.value,
        ),
    )
    joined_at: datetime = Field(
        default_factory=utcnow,
        sa_column=sa.Column(sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )


__all__ = ["MANAGER_ROLES", "Team", "TeamMember", "TeamRole"]
