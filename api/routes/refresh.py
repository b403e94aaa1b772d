"""
Refresh trigger and status endpoints
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from api.dependencies import get_db, get_refresh_scheduler
from ingestion.scheduler import RefreshScheduler
from models.refresh_run import RefreshRun
from schemas.api import RefreshAcceptedResponse, RefreshRunInfo, RefreshStatusResponse
from core.exceptions import RefreshInProgressError
import logging

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Refresh"])


@router.post(
    "/refresh",
    response_model=RefreshAcceptedResponse,
    status_code=status.HTTP_202_ACCEPTED
)
async def trigger_refresh(
    request: Request,
    scheduler: RefreshScheduler = Depends(get_refresh_scheduler)
):
    """
    Start a full data refresh in the background.

    Returns immediately; the outcome is only visible in logs and
    GET /refresh/status.
    """
    request_id = getattr(request.state, "request_id", "-")

    try:
        scheduler.trigger("manual")
    except RefreshInProgressError as e:
        logger.warning(f"[{request_id}] POST /refresh rejected: {e.message}")
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)

    logger.info(f"[{request_id}] POST /refresh accepted")
    return RefreshAcceptedResponse()


@router.get("/refresh/status", response_model=RefreshStatusResponse)
async def refresh_status(
    scheduler: RefreshScheduler = Depends(get_refresh_scheduler),
    db: AsyncSession = Depends(get_db)
):
    """Report whether a refresh is running and the most recent run"""
    result = await db.execute(
        select(RefreshRun).order_by(RefreshRun.started_at.desc(), RefreshRun.id.desc()).limit(1)
    )
    last_run = result.scalar_one_or_none()

    return RefreshStatusResponse(
        running=scheduler.is_running,
        state=scheduler.orchestrator.state.value,
        last_run=RefreshRunInfo.from_orm(last_run) if last_run else None
    )
