from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import AsyncAdaptedQueuePool, StaticPool

from teamflow.core.config import Settings
from teamflow.core.security import create_access_token
from teamflow.db import Database
from teamflow.main import create_app
from teamflow.models import User, UserRole
from teamflow.services import UserService

DEFAULT_PASSWORD = "Str0ng!Pass"

CreateUser = Callable[..., Awaitable[User]]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        environment="test",
        database_url="sqlite+aiosqlite:///:memory:",
        jwt_secret_key="test-secret-key",
    )


@pytest_asyncio.fixture
async def database() -> AsyncIterator[Database]:
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    database = Database(engine)
    await database.create_all()
    try:
        yield database
    finally:
        await database.dispose()


@pytest_asyncio.fixture
async def single_connection_database(tmp_path: Path) -> AsyncIterator[Database]:
    """File-backed database whose pool hands out at most one connection."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'teamflow.db'}",
        poolclass=AsyncAdaptedQueuePool,
        pool_size=1,
        max_overflow=0,
        pool_timeout=1,
    )
    database = Database(engine)
    await database.create_all()
    try:
        yield database
    finally:
        await database.dispose()


@pytest.fixture
def app(settings: Settings, database: Database) -> FastAPI:
    return create_app(settings=settings, database=database)


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client


@pytest.fixture
def create_user(database: Database) -> CreateUser:
    async def _create(
        name: str,
        email: str,
        *,
        password: str = DEFAULT_PASSWORD,
        role: UserRole = UserRole.USER,
    ) -> User:
        async with database.session() as session:
            return await UserService(session).create_user(name=name, email=email, password=password, role=role)

    return _create


@pytest.fixture
def auth_headers(settings: Settings) -> Callable[[User], dict[str, str]]:
    def _headers(user: User) -> dict[str, str]:
        token = create_access_token(
            user_id=user.id,
            email=user.email,
            role=user.role.value,
            settings=settings,
        )
        return {"Authorization": f"Bearer {token.token}"}

    return _headers
