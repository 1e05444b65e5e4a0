"""Portal flows on a pool that only ever holds one connection.

A request that keeps its own connection while the audit writer or the hash
upgrade asks for another would wait out the pool timeout and lose the write.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient, Response
from sqlmodel import select

from teamflow.core.config import Settings
from teamflow.core.security import get_password_hash
from teamflow.db import Database
from teamflow.main import create_app
from teamflow.models import Activity, User

from .conftest import DEFAULT_PASSWORD

# Matches ``pool_timeout`` of the single-connection fixture.
POOL_TIMEOUT_SECONDS = 1.0


@pytest_asyncio.fixture
async def pooled_client(settings: Settings, single_connection_database: Database) -> AsyncIterator[AsyncClient]:
    app = create_app(settings=settings, database=single_connection_database)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client


async def _timed_post(client: AsyncClient, url: str, payload: dict[str, str]) -> tuple[Response, float]:
    started = time.perf_counter()
    response = await client.post(url, json=payload)
    return response, time.perf_counter() - started


async def _insert_user(database: Database, email: str, stored_password: str) -> None:
    async with database.session() as session:
        session.add(User(name="Pool User", email=email, password=stored_password))
        await session.commit()


async def _actions(database: Database) -> list[str]:
    async with database.session() as session:
        result = await session.execute(select(Activity).order_by(Activity.id))
        return [row.action for row in result.scalars().all()]


async def _stored_password(database: Database, email: str) -> str:
    async with database.session() as session:
        result = await session.execute(select(User).where(User.email == email))
        return result.scalar_one().password


@pytest.mark.asyncio
async def test_register_and_login_write_activity_without_waiting(
    pooled_client: AsyncClient,
    single_connection_database: Database,
) -> None:
    register, register_elapsed = await _timed_post(
        pooled_client,
        "/api/portal/register",
        {"name": "Ann Lee", "email": "ann@example.com", "password": DEFAULT_PASSWORD},
    )
    login, login_elapsed = await _timed_post(
        pooled_client,
        "/api/portal/login",
        {"email": "ann@example.com", "password": DEFAULT_PASSWORD},
    )

    assert register.status_code == 201
    assert login.status_code == 200
    assert register_elapsed < POOL_TIMEOUT_SECONDS
    assert login_elapsed < POOL_TIMEOUT_SECONDS
    assert await _actions(single_connection_database) == [
        "New user registered: ann@example.com",
        "User logged in: ann@example.com",
    ]


@pytest.mark.asyncio
async def test_legacy_hash_upgrade_is_saved_on_a_single_connection(
    pooled_client: AsyncClient,
    single_connection_database: Database,
) -> None:
    await _insert_user(single_connection_database, "legacy@example.com", "Plain#123")

    response, elapsed = await _timed_post(
        pooled_client,
        "/api/portal/login",
        {"email": "legacy@example.com", "password": "Plain#123"},
    )

    assert response.status_code == 200
    assert elapsed < POOL_TIMEOUT_SECONDS
    assert (await _stored_password(single_connection_database, "legacy@example.com")).startswith("$2b$")
    assert await _actions(single_connection_database) == ["User logged in: legacy@example.com"]


@pytest.mark.asyncio
async def test_concurrent_logins_queue_for_the_connection(
    pooled_client: AsyncClient,
    single_connection_database: Database,
) -> None:
    emails = [f"user{index}@example.com" for index in range(3)]
    for email in emails:
        await _insert_user(single_connection_database, email, get_password_hash(DEFAULT_PASSWORD))

    responses = await asyncio.gather(
        *(pooled_client.post("/api/portal/login", json={"email": email, "password": DEFAULT_PASSWORD}) for email in emails)
    )

    assert [response.status_code for response in responses] == [200, 200, 200]
    assert sorted(await _actions(single_connection_database)) == sorted(
        f"User logged in: {email}" for email in emails
    )
