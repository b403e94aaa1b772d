"""
Health check endpoint with database and refresh status
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, text
from api.dependencies import get_db, get_refresh_scheduler
from ingestion.scheduler import RefreshScheduler
from schemas.api import HealthCheckResponse
from models.base import RefreshStatus
from models.refresh_run import RefreshRun
from datetime import datetime
import logging

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(
    db: AsyncSession = Depends(get_db),
    scheduler: RefreshScheduler = Depends(get_refresh_scheduler)
):
    """
    Health check endpoint.

    Returns:
    - Database connectivity status
    - Whether a refresh is running and how the last one ended
    """

    # Check database connectivity
    db_connected = False

    try:
        await db.execute(text("SELECT 1"))
        db_connected = True
    except Exception as e:
        logger.error(f"Database connection failed: {str(e)}")

    last_status = None
    if db_connected:
        result = await db.execute(
            select(RefreshRun.status).order_by(RefreshRun.started_at.desc(), RefreshRun.id.desc()).limit(1)
        )
        last_status = result.scalar_one_or_none()

    if not db_connected:
        overall = "unhealthy"
    elif last_status == RefreshStatus.FAILED:
        overall = "degraded"
    else:
        overall = "healthy"

    return HealthCheckResponse(
        status=overall,
        timestamp=datetime.utcnow(),
        database_connected=db_connected,
        refresh_running=scheduler.is_running,
        last_refresh_status=last_status
    )
