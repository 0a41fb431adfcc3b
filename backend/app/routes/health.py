"""
Bookstore Backend — Health Check Route
========================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Runs `SELECT 1` through a request session and reports the result.
Who:   Called by Docker health checks, load balancers, and monitoring systems.

Status levels:
    - healthy:   Database reachable (HTTP 200)
    - unhealthy: Database unreachable (HTTP 503, stop routing traffic)
"""

import logging
import time

from fastapi import APIRouter, Depends, Response
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app import __version__
from app.database import get_db_session
from app.schemas.user import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Returns the health status of the backend and its database.",
)
async def health_check(
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    try:
        await db.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))
        await db.rollback()
        response.status_code = 503

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
