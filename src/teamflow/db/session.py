"""Database engine lifecycle and session management."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from .. import models  # noqa: F401  registers tables on SQLModel.metadata
from ..core.config import Settings

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Own the async engine and hand out sessions bound to it.

    One instance is created at process start, shared by every request and
    disposed on shutdown. Callers beyond ``pool_size + max_overflow`` wait up
    to ``pool_timeout`` seconds for a connection before SQLAlchemy raises
    ``TimeoutError``.
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine
        if engine.dialect.name == "sqlite":
            event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        options: dict[str, Any] = {"echo": settings.db_echo, "pool_pre_ping": True}
        if not settings.is_sqlite:
            options.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_timeout=settings.db_pool_timeout,
            )
        return cls(create_async_engine(settings.database_url, **options))

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        return self._session_factory

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a session, rolling back anything left uncommitted."""
        async with self._session_factory() as session:
            try:
                yield session
            except BaseException:
                await session.rollback()
                raise

    async def verify_connection(self) -> None:
        """Check out one connection and run a trivial query."""
        async with self._engine.connect() as connection:
            await connection.execute(text("SELECT 1"))
        logger.info("Database connection verified", extra={"dialect": self._engine.dialect.name})

    async def create_all(self) -> None:
        """Create all tables (tests and local development only)."""
        async with self._engine.begin() as connection:
            await connection.run_sync(SQLModel.metadata.create_all)

    async def dispose(self) -> None:
        await self._engine.dispose()


__all__ = ["Database"]
