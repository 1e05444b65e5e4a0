"""Privileged user management."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from sqlmodel.ext.asyncio.session import AsyncSession

from ..activity import ActivityLogService, describe_changes
from ..errors import ConflictError, ValidationError
from ..models import User, UserRole
from ..schemas.admin import AdminUserUpdate, UserStats
from ..schemas.auth import AuthenticatedUser
from .users import UserService

logger = logging.getLogger(__name__)

RECENT_SIGNUP_WINDOW = timedelta(days=7)


class AdminService:
    """User administration with guards against an admin locking themselves out."""

    def __init__(self, session: AsyncSession, activity: ActivityLogService) -> None:
        self._session = session
        self._activity = activity
        self._user_service = UserService(session)
        self._repository = self._user_service.repository

    async def _actor_name(self, admin: AuthenticatedUser) -> str:
        actor = await self._user_service.get_user(admin.id)
        return actor.name if actor is not None else admin.email

    async def list_users(self) -> list[User]:
        return await self._repository.list_recent_first()

    async def get_user(self, user_id: int) -> User:
        return await self._user_service.require_user(user_id)

    async def update_user(self, admin: AuthenticatedUser, user_id: int, payload: AdminUserUpdate) -> User:
        user = await self._user_service.require_user(user_id)
        actor_name = await self._actor_name(admin)
        original_name = user.name

        new_role = UserRole(payload.role) if payload.role is not None else None
        if admin.id == user_id and user.role == UserRole.ADMIN and new_role == UserRole.USER:
            raise ValidationError("You cannot remove your own admin role.")
        if payload.email is not None and await self._repository.email_taken(payload.email, exclude_id=user_id):
            raise ConflictError("Email already in use by another user.")

        changes: list[tuple[str, object, object]] = []
        if payload.name is not None:
            changes.append(("name", user.name, payload.name))
            user.name = payload.name
        if payload.email is not None:
            changes.append(("email", user.email, payload.email))
            user.email = payload.email
        if new_role is not None:
            changes.append(("role", user.role.value, new_role.value))
            user.role = new_role
        await self._session.commit()

        summary = describe_changes(changes)
        if summary:
            await self._activity.record(
                f"Admin {actor_name} updated user {original_name}: {summary}",
                user_id=admin.id,
                user_name=actor_name,
            )
        return user

    async def reset_password(self, admin: AuthenticatedUser, user_id: int, new_password: str) -> None:
        user = await self._user_service.require_user(user_id)
        actor_name = await self._actor_name(admin)
        await self._user_service.set_password(user, new_password.strip())
        logger.info("Password reset by admin", extra={"target_user_id": user_id})
        await self._activity.record(
            f"Admin {actor_name} reset password for user {user.name} ({user.email})",
            user_id=admin.id,
            user_name=actor_name,
        )

    async def delete_user(self, admin: AuthenticatedUser, user_id: int) -> None:
        if admin.id == user_id:
            raise ValidationError("You cannot delete your own account.")
        user = await self._user_service.require_user(user_id)
        actor_name = await self._actor_name(admin)
        name, email = user.name, user.email
        await self._repository.delete(user)
        await self._session.commit()
        await self._activity.record(
            f"Admin {actor_name} deleted user {name} ({email})",
            user_id=admin.id,
            user_name=actor_name,
        )

    async def stats(self, *, now: datetime | None = None) -> UserStats:
        now = now or datetime.now(timezone.utc)
        return UserStats(
            total=await self._repository.count(),
            admins=await self._repository.count_by_role(UserRole.ADMIN),
            users=await self._repository.count_by_role(UserRole.USER),
            recent=await self._repository.count_created_since(now - RECENT_SIGNUP_WINDOW),
        )


__all__ = ["AdminService", "RECENT_SIGNUP_WINDOW"]
