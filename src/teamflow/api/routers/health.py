"""Health and readiness endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from ...deps import DatabaseDependency
from ...schemas.system import HealthCheckResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["system"])


@router.get(
    "/healthz",
    response_model=HealthCheckResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
    responses={status.HTTP_503_SERVICE_UNAVAILABLE: {"model": HealthCheckResponse}},
)
async def read_health(database: DatabaseDependency) -> HealthCheckResponse | JSONResponse:
    """Report liveness along with database reachability."""
    try:
        await database.verify_connection()
    except SQLAlchemyError:
        logger.warning("Health check could not reach the database", exc_info=True)
        payload = HealthCheckResponse(status="degraded", database="unavailable")
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=payload.model_dump())
    return HealthCheckResponse(status="ok")
