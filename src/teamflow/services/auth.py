"""Authentication service encapsulating registration, login and token flows."""

from __future__ import annotations

import logging

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel.ext.asyncio.session import AsyncSession

from ..activity import ActivityLogService
from ..core.config import Settings
from ..core.passwords import PasswordCheck, check_password
from ..core.security import GeneratedToken, create_access_token
from ..db.session import Database
from ..errors import AuthenticationError, ConflictError, ServerError
from ..models import User, UserRole
from ..schemas.auth import AuthenticatedUser
from .users import UserService

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password."


class AuthService:
    """High-level authentication workflows for the portal endpoints."""

    def __init__(
        self,
        session: AsyncSession,
        settings: Settings,
        *,
        database: Database,
        activity: ActivityLogService,
    ) -> None:
        self._session = session
        self._settings = settings
        self._database = database
        self._activity = activity
        self._user_service = UserService(session)

    async def register_user(self, *, name: str, email: str, password: str) -> User:
        if await self._user_service.repository.email_taken(email):
            raise ConflictError("User with this email already exists.")
        user = await self._user_service.create_user(
            name=name,
            email=email,
            password=password,
            role=UserRole.USER,
        )
        logger.info("User registered", extra={"user_id": user.id})
        await self._activity.record_registration(user)
        return user

    async def authenticate_user(self, email: str, password: str) -> User:
        """Return the user owning these credentials or raise ``AuthenticationError``.

        A stored value in a legacy format is upgraded once the password
        matches; failing to persist the upgrade does not fail the login.
        """
        user = await self._user_service.get_user_by_email(email)
        # The hash upgrade and the audit entry each check out their own
        # connection; this session must not hold one meanwhile.
        await self._session.commit()
        if user is None:
            logger.warning("Login failed: unknown email")
            raise AuthenticationError(INVALID_CREDENTIALS)

        outcome = check_password(password, user.password)
        if not outcome.matched:
            logger.warning("Login failed: password mismatch", extra={"user_id": user.id})
            raise AuthenticationError(INVALID_CREDENTIALS)
        if outcome.rehash_needed:
            await self._migrate_password_hash(user, outcome)

        await self._activity.record_login(user)
        return user

    async def _migrate_password_hash(self, user: User, outcome: PasswordCheck) -> None:
        # Written through a separate session so a failure leaves the login session untouched.
        try:
            statement = update(User).where(User.id == user.id).values(password=outcome.replacement_hash)
            async with self._database.session() as session:
                await session.execute(statement)
                await session.commit()
        except SQLAlchemyError:
            logger.warning(
                "Password hash migration failed",
                extra={"user_id": user.id, "hash_format": outcome.hash_format.value},
                exc_info=True,
            )
            return
        logger.info(
            "Password hash migrated",
            extra={"user_id": user.id, "hash_format": outcome.hash_format.value},
        )

    def issue_token(self, user: User) -> GeneratedToken:
        if user.id is None:
            raise ServerError("User must be persisted before issuing tokens.")
        return create_access_token(
            user_id=user.id,
            email=user.email,
            role=user.role.value,
            settings=self._settings,
        )

    async def current_user(self, caller: AuthenticatedUser) -> User:
        """Re-read the caller's row so role changes since issue are visible."""
        return await self._user_service.require_user(caller.id)

    async def logout(self, caller: AuthenticatedUser) -> None:
        await self._activity.record_logout(user_id=caller.id, email=caller.email)


__all__ = ["AuthService", "INVALID_CREDENTIALS"]
