"""
Health check endpoints.

Liveness reports the running service; readiness also checks that the
database accepts queries.
"""

import logging
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from manavault.config import settings
from manavault.db.database import get_session

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


def _service_version() -> str:
    try:
        return pkg_version("manavault")
    except PackageNotFoundError:
        return "unknown"


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str
    version: str
    database: str | None = None


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Liveness probe. Does not touch the database."""
    return HealthResponse(status="healthy", service=settings.app_name, version=_service_version())


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def ready(
    response: Response,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> HealthResponse:
    """
    Readiness probe.

    Returns 503 when the database cannot be queried.
    """
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning("Readiness check failed: %s", e)
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(
            status="not ready",
            service=settings.app_name,
            version=_service_version(),
            database="disconnected",
        )
    return HealthResponse(
        status="ready",
        service=settings.app_name,
        version=_service_version(),
        database="connected",
    )
