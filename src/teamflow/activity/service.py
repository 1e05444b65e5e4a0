"""Best-effort audit trail writer."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy.exc import SQLAlchemyError

from ..db.session import Database
from ..models import Activity, User

logger = logging.getLogger(__name__)


def describe_changes(changes: Iterable[tuple[str, object, object]]) -> str:
    """Render ``(field, old, new)`` triples as ``field: old → new`` for changed fields."""
    parts = [f"{field}: {old} → {new}" for field, old, new in changes if old != new]
    return ", ".join(parts)


class ActivityLogService:
    """Append rows to ``activities`` outside the caller's transaction.

    Each entry is written in a fresh session after the primary operation has
    committed. A failed write is logged and dropped; it never surfaces to the
    client or undoes the operation it describes.
    """

    def __init__(self, database: Database) -> None:
        self._database = database

    async def record(
        self,
        action: str,
        *,
        user_id: int | None = None,
        user_name: str | None = None,
    ) -> Activity | None:
        entry = Activity(action=action[:500], user_id=user_id, user_name=user_name)
        try:
            async with self._database.session() as session:
                if user_id is not None and user_name is None:
                    actor = await session.get(User, user_id)
                    if actor is None:
                        entry.user_id = None
                    else:
                        entry.user_name = actor.name
                session.add(entry)
                await session.commit()
        except SQLAlchemyError:
            logger.warning(
                "Failed to record activity",
                extra={"action": action, "actor_id": user_id},
                exc_info=True,
            )
            return None
        return entry

    async def record_for(self, action: str, actor: User | None) -> Activity | None:
        if actor is None:
            return await self.record(action)
        return await self.record(action, user_id=actor.id, user_name=actor.name)

    async def record_login(self, user: User) -> Activity | None:
        return await self.record_for(f"User logged in: {user.email}", user)

    async def record_registration(self, user: User) -> Activity | None:
        return await self.record_for(f"New user registered: {user.email}", user)

    async def record_logout(self, *, user_id: int, email: str | None) -> Activity | None:
        if email:
            return await self.record(f"User logged out: {email}", user_id=user_id)
        return await self.record("User logged out (no email provided)", user_id=user_id)


__all__ = ["ActivityLogService", "describe_changes"]
