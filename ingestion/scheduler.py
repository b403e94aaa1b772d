"""
Refresh trigger: background refresh tasks and the periodic refresh job.

Only one refresh runs at a time. A manual trigger during a running refresh
raises RefreshInProgressError; a scheduled one is skipped with a warning.
The interval job uses APScheduler and is off unless REFRESH_INTERVAL_MINUTES > 0.
"""

import logging
import asyncio
from typing import Optional
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from core.config import settings
from core.exceptions import ETLException, RefreshInProgressError
from ingestion.refresh import RefreshOrchestrator

logger = logging.getLogger(__name__)

class RefreshScheduler:
    """
    Runs refreshes as detached background tasks.

    Single-flight: while one refresh task is running, trigger() raises
    RefreshInProgressError instead of starting a second one. Completion is
    reported through logs and the refresh_runs table only.
    """

    def __init__(
        self,
        orchestrator: RefreshOrchestrator,
        interval_minutes: Optional[int] = None,
        refresh_timeout: Optional[float] = None
    ):
        self.orchestrator = orchestrator
        self.interval_minutes = (
            settings.REFRESH_INTERVAL_MINUTES if interval_minutes is None else interval_minutes
        )
        self.refresh_timeout = (
            settings.REFRESH_TIMEOUT_SECONDS if refresh_timeout is None else refresh_timeout
        )
        self.scheduler = AsyncIOScheduler()
        self.current_task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self.current_task is not None and not self.current_task.done()

    def trigger(self, trigger: str = "manual") -> asyncio.Task:
        """Start a refresh in the background and return its task"""
        if self.is_running:
            raise RefreshInProgressError(
                "A data refresh is already running",
                context={"state": self.orchestrator.state.value}
            )

        self.current_task = asyncio.create_task(self._run_refresh(trigger))
        return self.current_task

    async def _run_refresh(self, trigger: str):
        """Job body: every failure ends here and is logged"""
        try:
            result = await self.orchestrator.refresh(trigger=trigger, timeout=self.refresh_timeout)
            logger.info(
                f"Data refresh succeeded ({trigger}): "
                f"{result.summary.loaded} loaded, {result.summary.skipped} skipped"
            )
        except ETLException as e:
            logger.error(f"Data refresh failed ({trigger}): {e}")
        except Exception:
            logger.exception(f"Data refresh crashed ({trigger})")

    async def run_scheduled_refresh(self):
        """Job to run a refresh on the interval trigger"""
        logger.info("Scheduler: Starting refresh job")
        try:
            task = self.trigger("scheduled")
        except RefreshInProgressError:
            logger.warning("Scheduler: Refresh already running, skipping this interval")
            return
        await task

    def start(self):
        """Start the scheduler"""
        if self.interval_minutes <= 0:
            logger.info("Periodic refresh disabled")
            return

        self.scheduler.add_job(
            self.run_scheduled_refresh,
            trigger=IntervalTrigger(minutes=self.interval_minutes),
            id="refresh_job",
            replace_existing=True
        )
        self.scheduler.start()
        logger.info(f"Refresh scheduler started (every {self.interval_minutes} minutes)")

    async def stop(self):
        """Stop the scheduler and wait for an in-flight refresh"""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Refresh scheduler stopped")

        if self.is_running:
            logger.info("Waiting for in-flight refresh to finish")
            await asyncio.gather(self.current_task, return_exceptions=True)
