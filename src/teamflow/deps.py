"""Reusable FastAPI dependencies."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError
from sqlmodel.ext.asyncio.session import AsyncSession

from .activity import ActivityLogService
from .core.config import Settings
from .core.context import bind_user_id
from .core.security import JWTError, decode_token
from .db.session import Database
from .errors import AuthenticationError, AuthorizationError
from .schemas.auth import AuthenticatedUser, TokenClaims

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)

MISSING_TOKEN = "No token, authorization denied."
INVALID_TOKEN = "Token is not valid."
ADMIN_ONLY = "Access denied: admin only."


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_database(request: Request) -> Database:
    return request.app.state.database


async def get_db_session(database: Database = Depends(get_database)) -> AsyncIterator[AsyncSession]:
    """FastAPI dependency that yields a database session."""

    async with database.session() as session:
        yield session


def get_activity_service(database: Database = Depends(get_database)) -> ActivityLogService:
    return ActivityLogService(database)


SettingsDependency = Annotated[Settings, Depends(get_app_settings)]
DatabaseDependency = Annotated[Database, Depends(get_database)]
DatabaseSessionDependency = Annotated[AsyncSession, Depends(get_db_session)]
ActivityServiceDependency = Annotated[ActivityLogService, Depends(get_activity_service)]


def decode_access_token(token: str, settings: Settings) -> TokenClaims:
    """Verify ``token`` and return its claims, raising ``AuthenticationError`` on any failure."""

    try:
        payload = decode_token(
            token=token,
            secret=settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
        )
    except JWTError as exc:
        logger.info("Rejected bearer token", extra={"reason": type(exc).__name__})
        raise AuthenticationError(INVALID_TOKEN) from exc

    try:
        return TokenClaims.model_validate(payload)
    except ValidationError as exc:
        logger.info("Rejected bearer token", extra={"reason": "malformed_claims"})
        raise AuthenticationError(INVALID_TOKEN) from exc


async def get_current_user(
    settings: SettingsDependency,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
) -> AuthenticatedUser:
    """Resolve the caller from the bearer token alone; the database is not consulted."""

    if credentials is None or not credentials.credentials:
        raise AuthenticationError(MISSING_TOKEN)
    claims = decode_access_token(credentials.credentials, settings)
    bind_user_id(claims.id)
    return AuthenticatedUser(id=claims.id, email=claims.email, role=claims.role)


async def require_admin(user: AuthenticatedUser = Depends(get_current_user)) -> AuthenticatedUser:
    if not user.is_admin:
        logger.warning("Admin route refused", extra={"role": user.role.value})
        raise AuthorizationError(ADMIN_ONLY)
    return user


CurrentUserDependency = Annotated[AuthenticatedUser, Depends(get_current_user)]
AdminUserDependency = Annotated[AuthenticatedUser, Depends(require_admin)]


__all__ = [
    "ADMIN_ONLY",
    "ActivityServiceDependency",
    "AdminUserDependency",
    "CurrentUserDependency",
    "DatabaseDependency",
    "DatabaseSessionDependency",
    "INVALID_TOKEN",
    "MISSING_TOKEN",
    "SettingsDependency",
    "decode_access_token",
    "get_current_user",
    "get_db_session",
    "require_admin",
]
