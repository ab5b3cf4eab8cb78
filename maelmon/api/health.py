"""
Health check endpoints.

Provides liveness and readiness probes with database connectivity checks.
Readiness also reports whether any card can still be claimed.
"""

import logging
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from maelmon.db.database import get_session
from maelmon.db.operations import list_eligible_definitions

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    database: str | None = None
    catalog: Literal["claimable", "sold_out"] | None = None


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """
    Liveness probe.

    Returns healthy if the service is running.
    Does not check dependencies.
    """
    return HealthResponse(status="healthy")


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

    Returns ready if the database answers. A sold-out catalog is still
    ready (claims fail cleanly) but is reported so operators can restock.
    Returns 503 if the database is unavailable.
    """
    try:
        await session.execute(text("SELECT 1"))
        eligible = await list_eligible_definitions(session)
    except (SQLAlchemyError, OSError):
        logger.warning("READINESS_DATABASE_UNAVAILABLE", exc_info=True)
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="not ready", database="disconnected")

    return HealthResponse(
        status="ready",
        database="connected",
        catalog="claimable" if eligible else "sold_out",
    )
