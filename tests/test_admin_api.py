from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlmodel import select

from teamflow.activity import ActivityLogService
from teamflow.core.security import pwd_context
from teamflow.db import Database
from teamflow.models import Activity, User, UserRole
from teamflow.schemas.auth import AuthenticatedUser
from teamflow.services import AdminService, UserService

from .conftest import DEFAULT_PASSWORD


async def _actions(database: Database) -> list[str]:
    async with database.session() as session:
        result = await session.execute(select(Activity).order_by(Activity.id))
        return [row.action for row in result.scalars().all()]


@pytest_asyncio.fixture
async def admin(create_user) -> User:
    return await create_user("Root Admin", "root@example.com", role=UserRole.ADMIN)


@pytest.mark.asyncio
async def test_non_admin_is_refused(client: AsyncClient, create_user, auth_headers) -> None:
    ann = await create_user("Ann Lee", "ann@example.com")

    response = await client.get("/api/admin/users", headers=auth_headers(ann))

    assert response.status_code == 403
    assert response.json()["message"] == "Access denied: admin only."


@pytest.mark.asyncio
async def test_list_and_read_users_hide_passwords(client: AsyncClient, admin: User, create_user, auth_headers) -> None:
    ann = await create_user("Ann Lee", "ann@example.com")
    headers = auth_headers(admin)

    listing = await client.get("/api/admin/users", headers=headers)
    single = await client.get(f"/api/admin/users/{ann.id}", headers=headers)
    missing = await client.get("/api/admin/users/9999", headers=headers)

    assert [user["email"] for user in listing.json()] == ["ann@example.com", "root@example.com"]
    assert all("password" not in user for user in listing.json())
    assert single.json()["name"] == "Ann Lee"
    assert missing.status_code == 404
    assert missing.json()["message"] == "User not found."


@pytest.mark.asyncio
async def test_update_user_records_field_diff(
    client: AsyncClient,
    database: Database,
    admin: User,
    create_user,
    auth_headers,
) -> None:
    ann = await create_user("Ann Lee", "ann@example.com")

    response = await client.put(
        f"/api/admin/users/{ann.id}",
        json={"name": "Ann Smith", "email": "ann@example.com", "role": "admin"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    assert response.json()["name"] == "Ann Smith"
    assert response.json()["role"] == "admin"
    assert (
        "Admin Root Admin updated user Ann Lee: name: Ann Lee → Ann Smith, role: user → admin"
        in await _actions(database)
    )


@pytest.mark.asyncio
async def test_update_without_changes_is_not_logged(
    client: AsyncClient,
    database: Database,
    admin: User,
    create_user,
    auth_headers,
) -> None:
    ann = await create_user("Ann Lee", "ann@example.com")

    response = await client.put(f"/api/admin/users/{ann.id}", json={"name": "Ann Lee"}, headers=auth_headers(admin))

    assert response.status_code == 200
    assert await _actions(database) == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ({"role": "superuser"}, 'Invalid role. Must be "admin" or "user".'),
        ({}, "No fields to update."),
        ({"email": "not-an-email"}, None),
    ],
)
async def test_update_rejects_bad_payload(
    client: AsyncClient,
    admin: User,
    create_user,
    auth_headers,
    payload: dict[str, str],
    message: str | None,
) -> None:
    ann = await create_user("Ann Lee", "ann@example.com")

    response = await client.put(f"/api/admin/users/{ann.id}", json=payload, headers=auth_headers(admin))

    assert response.status_code == 400
    if message is not None:
        assert response.json()["message"] == message


@pytest.mark.asyncio
async def test_update_email_taken_by_other_user(client: AsyncClient, admin: User, create_user, auth_headers) -> None:
    ann = await create_user("Ann Lee", "ann@example.com")
    await create_user("Bob Stone", "bob@example.com")

    response = await client.put(
        f"/api/admin/users/{ann.id}",
        json={"email": "BOB@example.com"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 409
    assert response.json()["message"] == "Email already in use by another user."


@pytest.mark.asyncio
async def test_admin_cannot_demote_or_delete_self(client: AsyncClient, admin: User, auth_headers) -> None:
    headers = auth_headers(admin)

    demote = await client.put(f"/api/admin/users/{admin.id}", json={"role": "user"}, headers=headers)
    delete = await client.delete(f"/api/admin/users/{admin.id}", headers=headers)

    assert demote.status_code == 400
    assert demote.json()["message"] == "You cannot remove your own admin role."
    assert delete.status_code == 400
    assert delete.json()["message"] == "You cannot delete your own account."


@pytest.mark.asyncio
async def test_reset_password_accepts_camel_case_key(
    client: AsyncClient,
    database: Database,
    admin: User,
    create_user,
    auth_headers,
) -> None:
    ann = await create_user("Ann Lee", "ann@example.com")

    response = await client.put(
        f"/api/admin/users/{ann.id}/reset-password",
        json={"newPassword": "  brand-new-pass  "},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    assert response.json()["message"] == "Password reset successfully."
    old = await client.post("/api/portal/login", json={"email": "ann@example.com", "password": DEFAULT_PASSWORD})
    new = await client.post("/api/portal/login", json={"email": "ann@example.com", "password": "brand-new-pass"})
    assert old.status_code == 401
    assert new.status_code == 200
    assert "Admin Root Admin reset password for user Ann Lee (ann@example.com)" in await _actions(database)


@pytest.mark.asyncio
async def test_reset_password_stores_only_a_hash(
    database: Database,
    admin: User,
    create_user,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    ann = await create_user("Ann Lee", "ann@example.com")
    calls: list[str] = []
    original = UserService.set_password

    async def _spy(self: UserService, user: User, password: str) -> User:
        calls.append(password)
        return await original(self, user, password)

    monkeypatch.setattr(UserService, "set_password", _spy)

    async with database.session() as session:
        service = AdminService(session, ActivityLogService(database))
        await service.reset_password(
            AuthenticatedUser(id=admin.id, email=admin.email, role=admin.role),
            ann.id,
            " brand-new-pass ",
        )

    assert calls == ["brand-new-pass"]
    async with database.session() as session:
        stored = (await session.get(User, ann.id)).password
    assert stored.startswith("$2b$")
    assert pwd_context.verify("brand-new-pass", stored)


@pytest.mark.asyncio
async def test_reset_password_requires_length(client: AsyncClient, admin: User, create_user, auth_headers) -> None:
    ann = await create_user("Ann Lee", "ann@example.com")

    response = await client.put(
        f"/api/admin/users/{ann.id}/reset-password",
        json={"new_password": "short"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_delete_user(client: AsyncClient, database: Database, admin: User, create_user, auth_headers) -> None:
    ann = await create_user("Ann Lee", "ann@example.com")
    headers = auth_headers(admin)

    deleted = await client.delete(f"/api/admin/users/{ann.id}", headers=headers)
    again = await client.delete(f"/api/admin/users/{ann.id}", headers=headers)

    assert deleted.status_code == 200
    assert deleted.json()["message"] == "User deleted successfully."
    assert again.status_code == 404
    assert "Admin Root Admin deleted user Ann Lee (ann@example.com)" in await _actions(database)


@pytest.mark.asyncio
async def test_user_stats(client: AsyncClient, admin: User, create_user, auth_headers) -> None:
    await create_user("Ann Lee", "ann@example.com")
    await create_user("Bob Stone", "bob@example.com")

    response = await client.get("/api/admin/users/stats", headers=auth_headers(admin))

    assert response.status_code == 200
    assert response.json() == {"total": 3, "admins": 1, "users": 2, "recent": 3}


@pytest.mark.asyncio
async def test_user_stats_recent_window(database: Database, admin: User, create_user) -> None:
    ann = await create_user("Ann Lee", "ann@example.com")
    async with database.session() as session:
        stored = await session.get(User, ann.id)
        stored.created_at = datetime.now(timezone.utc) - timedelta(days=30)
        await session.commit()

        service = AdminService(session, ActivityLogService(database))
        stats = await service.stats()

    assert stats.total == 2
    assert stats.recent == 1
