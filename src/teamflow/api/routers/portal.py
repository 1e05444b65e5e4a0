"""Routes handling registration, login and session tokens."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...deps import (
    ActivityServiceDependency,
    CurrentUserDependency,
    DatabaseDependency,
    DatabaseSessionDependency,
    SettingsDependency,
)
from ...models import User
from ...schemas import AuthResponse, LoginRequest, MessageResponse, RegisterRequest, UserPublic
from ...services import AuthService

router = APIRouter(prefix="/portal", tags=["portal"])


def _auth_response(service: AuthService, user: User) -> AuthResponse:
    token = service.issue_token(user)
    return AuthResponse(
        token=token.token,
        user=UserPublic.model_validate(user),
        expires_in=token.expires_in,
    )


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user account",
)
async def register(
    payload: RegisterRequest,
    session: DatabaseSessionDependency,
    settings: SettingsDependency,
    database: DatabaseDependency,
    activity: ActivityServiceDependency,
) -> AuthResponse:
    service = AuthService(session, settings, database=database, activity=activity)
    user = await service.register_user(name=payload.name, email=payload.email, password=payload.password)
    return _auth_response(service, user)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Authenticate using email and password",
)
async def login(
    payload: LoginRequest,
    session: DatabaseSessionDependency,
    settings: SettingsDependency,
    database: DatabaseDependency,
    activity: ActivityServiceDependency,
) -> AuthResponse:
    service = AuthService(session, settings, database=database, activity=activity)
    user = await service.authenticate_user(payload.email, payload.password)
    return _auth_response(service, user)


@router.get("/user", response_model=UserPublic, summary="Return the authenticated user")
async def read_current_user(
    current_user: CurrentUserDependency,
    session: DatabaseSessionDependency,
    settings: SettingsDependency,
    database: DatabaseDependency,
    activity: ActivityServiceDependency,
) -> UserPublic:
    service = AuthService(session, settings, database=database, activity=activity)
    return UserPublic.model_validate(await service.current_user(current_user))


@router.get(
    "/refresh",
    response_model=AuthResponse,
    summary="Issue a fresh token reflecting the caller's current role",
)
async def refresh_token(
    current_user: CurrentUserDependency,
    session: DatabaseSessionDependency,
    settings: SettingsDependency,
    database: DatabaseDependency,
    activity: ActivityServiceDependency,
) -> AuthResponse:
    service = AuthService(session, settings, database=database, activity=activity)
    user = await service.current_user(current_user)
    return _auth_response(service, user)


@router.post("/logout", response_model=MessageResponse, summary="Record a logout")
async def logout(
    current_user: CurrentUserDependency,
    session: DatabaseSessionDependency,
    settings: SettingsDependency,
    database: DatabaseDependency,
    activity: ActivityServiceDependency,
) -> MessageResponse:
    # Tokens are stateless; logging out only leaves an audit entry.
    service = AuthService(session, settings, database=database, activity=activity)
    await service.logout(current_user)
    return MessageResponse(message="Logged out successfully.")
