"""
Refresh orchestrator: truncate the sales tables, then reload them from the source.

State machine:

    IDLE -> TRUNCATING -> LOADING -> DONE
                 |            |
                 +-> FAILED <-+

Truncation is one transaction over all four tables, children first. If it
fails nothing was emptied. Once it commits the batch loader runs; skipped
rows do not fail the refresh, a source read error does.

Known gap: a source read error after truncation leaves the sales tables
empty until the next successful refresh. Readers may also observe a
partially reloaded store while a refresh runs; callers that need stronger
guarantees must serialize refreshes and reads themselves.
"""

import asyncio
from datetime import datetime
from typing import Optional
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker
import logging

from ingestion.runner import BatchLoader
from ingestion.extractors.csv_extractor import CSVRowSource
from ingestion.loaders.sales_loader import SalesUpsertLoader
from models.base import RefreshState, RefreshStatus
from models.refresh_run import RefreshRun
from schemas.refresh import LoadSummary, RefreshResult
from core.exceptions import (
    ETLException,
    RefreshError,
    SourceReadError,
    TruncationError
)

logger = logging.getLogger(__name__)


class RefreshOrchestrator:
    """
    Empties and repopulates the sales dataset as one logical operation.

    The orchestrator does not guard against concurrent refreshes; see
    RefreshScheduler for the single-flight policy.
    """

    # Children before parents so foreign keys never dangle mid-truncate
    truncate_order = ("order_items", "orders", "products", "customers")

    def __init__(self, session_maker: async_sessionmaker, batch_loader: BatchLoader):
        self.session_maker = session_maker
        self.batch_loader = batch_loader
        self.state = RefreshState.IDLE

    async def refresh(self, trigger: str = "manual", timeout: Optional[float] = None) -> RefreshResult:
        """
        Run one full refresh cycle.

        Args:
            trigger: What started the refresh (manual, scheduled, startup)
            timeout: Seconds allowed for truncate + load, None for no limit

        Returns:
            RefreshResult in DONE state with loaded/skipped counts

        Raises:
            TruncationError: Store left in its pre-refresh state
            SourceReadError: Store left empty
            RefreshError: Refresh timed out
        """
        run = await self._start_run(trigger)

        try:
            if timeout is None:
                summary = await self._truncate_and_load()
            else:
                summary = await asyncio.wait_for(self._truncate_and_load(), timeout=timeout)

        except asyncio.TimeoutError as e:
            error = RefreshError(
                f"Refresh timed out after {timeout}s",
                context={"state_at_timeout": self.state.value},
                original_exception=e
            )
            await self._fail(run, error)
            raise error

        except ETLException as e:
            await self._fail(run, e)
            raise

        except Exception as e:
            logger.exception("Unexpected error during refresh")
            await self._fail(run, e)
            raise

        self.state = RefreshState.DONE
        status = RefreshStatus.SUCCESS if summary.skipped == 0 else RefreshStatus.PARTIAL
        await self._complete_run(run, status, summary)

        logger.info(
            f"Data refresh completed successfully: "
            f"Loaded: {summary.loaded}, Skipped: {summary.skipped}"
        )
        return RefreshResult(state=self.state, summary=summary)

    async def truncate(self) -> None:
        """
        Empty all sales tables in one transaction.

        Raises:
            TruncationError: Naming the table that failed; nothing was emptied
        """
        table = None

        async with self.session_maker() as session:
            try:
                async with session.begin():
                    dialect = session.get_bind().dialect.name
                    for table in self.truncate_order:
                        await session.execute(text(self._truncate_sql(dialect, table)))
                        logger.debug(f"Truncated {table}")
            except (SQLAlchemyError, OSError) as e:
                raise TruncationError(table or "<begin>", str(e), original_exception=e)

        logger.info(f"Truncated tables: {', '.join(self.truncate_order)}")

    async def _truncate_and_load(self) -> LoadSummary:
        self.state = RefreshState.TRUNCATING
        await self.truncate()

        self.state = RefreshState.LOADING
        return await self.batch_loader.load()

    @staticmethod
    def _truncate_sql(dialect: str, table: str) -> str:
        if dialect == "postgresql":
            return f"TRUNCATE TABLE {table} CASCADE"
        # SQLite has no TRUNCATE; an unqualified DELETE is its equivalent
        return f"DELETE FROM {table}"

    # ------------------------------------------------------------------
    # Refresh run ledger
    # ------------------------------------------------------------------

    async def _fail(self, run: RefreshRun, error: Exception) -> None:
        failed_during = self.state
        self.state = RefreshState.FAILED

        if isinstance(error, SourceReadError) and failed_during == RefreshState.LOADING:
            logger.error(
                f"Data refresh failed after truncation, sales tables are empty "
                f"until the next successful refresh: {error}"
            )
        elif isinstance(error, TruncationError):
            logger.error(f"Data refresh failed, truncation rolled back: {error}")
        else:
            logger.error(f"Data refresh failed during {failed_during.value}: {error}")

        message = error.message if isinstance(error, ETLException) else str(error)
        await self._complete_run(run, RefreshStatus.FAILED, error_message=message)

    async def _start_run(self, trigger: str) -> RefreshRun:
        """Create refresh run record"""
        self.state = RefreshState.IDLE

        run = RefreshRun(
            status=RefreshStatus.RUNNING,
            trigger=trigger,
            source_path=self.batch_loader.source.source_name,
            started_at=datetime.utcnow()
        )
        async with self.session_maker() as session:
            session.add(run)
            await session.commit()

        logger.info(f"Starting data refresh {run.run_id} (trigger: {trigger})")
        return run

    async def _complete_run(
        self,
        run: RefreshRun,
        status: RefreshStatus,
        summary: Optional[LoadSummary] = None,
        error_message: Optional[str] = None
    ) -> None:
        """Complete refresh run with statistics"""
        summary = summary or LoadSummary()
        completed_at = datetime.utcnow()

        async with self.session_maker() as session:
            stored = await session.get(RefreshRun, run.id)
            stored.status = status
            stored.completed_at = completed_at
            stored.duration_seconds = (completed_at - stored.started_at).total_seconds()
            stored.rows_total = summary.total
            stored.rows_loaded = summary.loaded
            stored.rows_skipped = summary.skipped
            stored.error_message = error_message
            await session.commit()


def build_refresh_orchestrator(
    session_maker: async_sessionmaker,
    csv_path: str,
    row_timeout: Optional[float] = None
) -> RefreshOrchestrator:
    """Wire a CSV source, the upsert loader and the batch loader together"""
    batch_loader = BatchLoader(
        source=CSVRowSource(csv_path, source_name=csv_path),
        loader=SalesUpsertLoader(session_maker),
        row_timeout=row_timeout
    )
    return RefreshOrchestrator(session_maker, batch_loader)
