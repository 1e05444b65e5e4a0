"""Repository for the append-only activity log."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..models import Activity, User
from .base import BaseRepository

UNKNOWN_USER = "Unknown User"


@dataclass(slots=True)
class ActivityEntry:
    id: int
    action: str
    user_id: int | None
    user_name: str
    created_at: datetime


class ActivityRepository(BaseRepository[Activity]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Activity)

    async def recent(self, limit: int) -> list[ActivityEntry]:
        """Return the newest ``limit`` entries, resolving the actor's current name."""
        query = (
            select(Activity, User.name)
            .outerjoin(User, User.id == Activity.user_id)
            .order_by(Activity.created_at.desc(), Activity.id.desc())
            .limit(limit)
        )
        result = await self.session.execute(query)
        entries: list[ActivityEntry] = []
        for activity, current_name in result.all():
            entries.append(
                ActivityEntry(
                    id=activity.id,
                    action=activity.action,
                    user_id=activity.user_id,
                    user_name=current_name or activity.user_name or UNKNOWN_USER,
                    created_at=activity.created_at,
                )
            )
        return entries


__all__ = ["ActivityEntry", "ActivityRepository", "UNKNOWN_USER"]
