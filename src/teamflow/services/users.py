"""Account creation and lookup shared by the portal, admin and seed commands."""

from __future__ import annotations

from sqlmodel.ext.asyncio.session import AsyncSession

from ..core.security import get_password_hash
from ..errors import NotFoundError
from ..models import User, UserRole
from ..repositories import UserRepository

USER_NOT_FOUND = "User not found."


class UserService:
    """Owns account rows and the hashing of any password set on them.

    Passwords set here are always hashed first. Login only rewrites
    ``users.password`` with a hash produced by the password verifier.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._repository = UserRepository(session)

    @property
    def repository(self) -> UserRepository:
        return self._repository

    async def create_user(
        self,
        *,
        name: str,
        email: str,
        password: str,
        role: UserRole = UserRole.USER,
    ) -> User:
        """Insert and commit a new account; the email is stored lower-cased."""
        user = User(name=name, email=email.strip().lower(), role=role, password=get_password_hash(password))
        await self._repository.add(user)
        await self._session.commit()
        return user

    async def get_user(self, user_id: int) -> User | None:
        return await self._repository.get(user_id)

    async def require_user(self, user_id: int) -> User:
        user = await self._repository.get(user_id)
        if user is None:
            raise NotFoundError(USER_NOT_FOUND)
        return user

    async def get_user_by_email(self, email: str) -> User | None:
        return await self._repository.get_by_email(email)

    async def set_password(self, user: User, password: str) -> User:
        user.password = get_password_hash(password)
        await self._session.commit()
        return user


__all__ = ["USER_NOT_FOUND", "UserService"]
