from __future__ import annotations

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

import teamflow
from teamflow.core.config import Settings
from teamflow.db import Database

pytestmark = pytest.mark.asyncio


async def test_health_reports_database_ok(client: AsyncClient) -> None:
    response = await client.get("/healthz")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": "ok"}


async def test_health_degrades_when_database_unreachable(
    client: AsyncClient,
    database: Database,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    async def _unreachable() -> None:
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    monkeypatch.setattr(database, "verify_connection", _unreachable)

    response = await client.get("/healthz")

    assert response.status_code == 503
    assert response.json() == {"status": "degraded", "database": "unavailable"}


async def test_metadata_endpoint(client: AsyncClient, settings: Settings) -> None:
    response = await client.get("/api/metadata")

    assert response.status_code == 200
    assert response.json() == {
        "name": settings.project_name,
        "environment": "test",
        "version": teamflow.__version__,
        "api_prefix": "/api",
    }


async def test_cors_preflight_allows_configured_origin(client: AsyncClient) -> None:
    response = await client.options(
        "/api/tasks",
        headers={"Origin": "http://localhost:5173", "Access-Control-Request-Method": "GET"},
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "http://localhost:5173"
