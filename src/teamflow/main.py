"""Entry point for the TeamFlow FastAPI application."""

from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from .api.routers import api_router, health_router
from .core.config import Settings, get_settings
from .core.logging import configure_logging
from .core.middleware import CorrelationIdMiddleware
from .db.session import Database
from .deps import SettingsDependency
from .errors import register_exception_handlers
from .schemas.system import RootResponse

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    """Instantiate and configure the FastAPI application.

    ``settings`` and ``database`` default to values derived from the
    environment; tests pass their own to run against an in-memory engine.
    """

    settings = settings or get_settings()
    configure_logging(settings)
    database = database or Database.from_settings(settings)

    router_prefix = settings.router_prefix
    openapi_url = "/openapi.json" if not router_prefix else f"{router_prefix}/openapi.json"

    application = FastAPI(
        title=settings.project_name,
        version=settings.version,
        summary="Team task management API.",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url=openapi_url,
    )

    application.state.settings = settings
    application.state.database = database

    application.add_middleware(CorrelationIdMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    if router_prefix:
        application.include_router(api_router, prefix=router_prefix)
    else:
        application.include_router(api_router)

    application.include_router(health_router)

    @application.get(f"{router_prefix}/metadata", response_model=RootResponse, summary="Service metadata")
    async def read_api_metadata(app_settings: SettingsDependency) -> RootResponse:
        """Expose minimal service metadata for API clients."""
        return RootResponse(
            name=app_settings.project_name,
            environment=app_settings.environment,
            version=app_settings.version,
            api_prefix=app_settings.api_prefix,
        )

    register_exception_handlers(application)

    @application.on_event("startup")
    async def _verify_database() -> None:
        if settings.jwt_secret_generated:
            logger.warning(
                "JWT_SECRET_KEY is not set; using a random per-process secret. "
                "Issued tokens will stop working after a restart."
            )
        try:
            await database.verify_connection()
        except SQLAlchemyError:
            logger.critical("Database is unreachable; refusing to start", exc_info=True)
            raise

    @application.on_event("shutdown")
    async def _dispose_database() -> None:
        await database.dispose()

    return application


app = create_app()


def run() -> None:
    """Convenience entry point for ``teamflow-api``."""

    settings: Settings = get_settings()
    uvicorn.run(
        "teamflow.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.reload,
        log_config=None,
    )
