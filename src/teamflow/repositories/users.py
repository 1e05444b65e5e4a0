"""Repository for interacting with user persistence models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..models import User, UserRole
from .base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Concrete repository for CRUD operations on ``User`` entities."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> User | None:
        """Return the user whose email matches ``email`` ignoring case and padding."""
        normalised = email.strip().lower()
        result = await self.session.execute(select(User).where(func.lower(User.email) == normalised))
        return result.scalars().first()

    async def email_taken(self, email: str, *, exclude_id: int | None = None) -> bool:
        query = select(User.id).where(func.lower(User.email) == email.strip().lower())
        if exclude_id is not None:
            query = query.where(User.id != exclude_id)
        result = await self.session.execute(query.limit(1))
        return result.first() is not None

    async def list_recent_first(self) -> list[User]:
        """Return every user, newest registrations first."""
        result = await self.session.execute(select(User).order_by(User.created_at.desc(), User.id.desc()))
        return list(result.scalars().all())

    async def count_by_role(self, role: UserRole) -> int:
        return await self.count(User.role == role)

    async def count_created_since(self, since: datetime) -> int:
        return await self.count(User.created_at >= since)


__all__ = ["UserRepository"]
