"""Team and membership schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from ..models import TeamRole
from .auth import normalise_email


class TeamCreate(BaseModel):
    """Payload for creating a team.

    Clients send ``title``/``color``; the column names ``team_name`` and
    ``accent_color`` are accepted as well.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {"title": "Platform", "description": "Core services", "color": "#4f46e5"}
        },
    )

    title: str = Field(
        min_length=1,
        max_length=100,
        validation_alias=AliasChoices("title", "team_name", "name"),
    )
    description: str | None = None
    color: str | None = Field(
        default=None,
        max_length=32,
        validation_alias=AliasChoices("color", "accent_color"),
    )

    @field_validator("title", mode="before")
    @classmethod
    def _strip_title(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value


class TeamMemberAdd(BaseModel):
    email: str = Field(min_length=1, max_length=320)
    role: TeamRole = TeamRole.MEMBER

    @field_validator("email", mode="before")
    @classmethod
    def _normalise_email(cls, value: Any) -> Any:
        return normalise_email(value)


class TeamMemberRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: TeamRole


class TeamRead(BaseModel):
    """A team as seen by one of its members."""

    team_id: int
    team_name: str
    description: str | None = None
    accent_color: str | None = None
    created_at: datetime | None = None
    user_team_role: TeamRole
    members: list[TeamMemberRead] = Field(default_factory=list)


class TeamCreatedResponse(BaseModel):
    id: int
    message: str = "Team created."


__all__ = [
    "TeamCreate",
    "TeamCreatedResponse",
    "TeamMemberAdd",
    "TeamMemberRead",
    "TeamRead",
]
