"""Admin-only user management routes."""

from __future__ import annotations

from fastapi import APIRouter

from ...deps import ActivityServiceDependency, AdminUserDependency, DatabaseSessionDependency
from ...schemas import AdminUserUpdate, MessageResponse, PasswordResetRequest, UserPublic, UserStats
from ...services import AdminService

router = APIRouter(prefix="/admin/users", tags=["admin"])


@router.get("", response_model=list[UserPublic], summary="List all users")
async def list_users(
    session: DatabaseSessionDependency,
    admin: AdminUserDependency,
    activity: ActivityServiceDependency,
) -> list[UserPublic]:
    users = await AdminService(session, activity).list_users()
    return [UserPublic.model_validate(user) for user in users]


@router.get("/stats", response_model=UserStats, summary="User counts by role")
async def read_user_stats(
    session: DatabaseSessionDependency,
    admin: AdminUserDependency,
    activity: ActivityServiceDependency,
) -> UserStats:
    return await AdminService(session, activity).stats()


@router.get("/{user_id}", response_model=UserPublic, summary="Retrieve a user")
async def read_user(
    user_id: int,
    session: DatabaseSessionDependency,
    admin: AdminUserDependency,
    activity: ActivityServiceDependency,
) -> UserPublic:
    return UserPublic.model_validate(await AdminService(session, activity).get_user(user_id))


@router.put("/{user_id}", response_model=UserPublic, summary="Update a user's name, email or role")
async def update_user(
    user_id: int,
    payload: AdminUserUpdate,
    session: DatabaseSessionDependency,
    admin: AdminUserDependency,
    activity: ActivityServiceDependency,
) -> UserPublic:
    user = await AdminService(session, activity).update_user(admin, user_id, payload)
    return UserPublic.model_validate(user)


@router.put("/{user_id}/reset-password", response_model=MessageResponse, summary="Set a new password")
async def reset_password(
    user_id: int,
    payload: PasswordResetRequest,
    session: DatabaseSessionDependency,
    admin: AdminUserDependency,
    activity: ActivityServiceDependency,
) -> MessageResponse:
    await AdminService(session, activity).reset_password(admin, user_id, payload.new_password)
    return MessageResponse(message="Password reset successfully.", id=user_id)


@router.delete("/{user_id}", response_model=MessageResponse, summary="Delete a user")
async def delete_user(
    user_id: int,
    session: DatabaseSessionDependency,
    admin: AdminUserDependency,
    activity: ActivityServiceDependency,
) -> MessageResponse:
    await AdminService(session, activity).delete_user(admin, user_id)
    return MessageResponse(message="User deleted successfully.", id=user_id)
