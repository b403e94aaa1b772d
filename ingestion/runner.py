# ============================================================================
# File: ingestion/runner.py
# Description: Batch loader driving parse and upsert for every source row
# ============================================================================
"""
Batch Loader - Drives the row parser and upsert loader over a whole source.

This module provides row-by-row loading with:
- Partial failure support (continue processing past any bad row)
- One independent unit of work per row
- Lazy, restartable outcome stream
- Detailed per-row logging with row number and failing field/stage
"""

import asyncio
from typing import AsyncIterator, List, Optional
import logging

from ingestion.base import RowSource
from ingestion.transformers.row_parser import RowParser
from ingestion.loaders.sales_loader import SalesUpsertLoader
from schemas.refresh import RowOutcome, LoadSummary
from core.exceptions import ValidationError, PersistenceError

logger = logging.getLogger(__name__)


class BatchLoader:
    """
    Source-to-store batch loader

    Responsibilities:
    - Read the full source before processing begins
    - Parse, validate and upsert rows in file order
    - Turn row-level failures into skipped outcomes
    - Let source read failures abort the batch
    """

    def __init__(
        self,
        source: RowSource,
        loader: SalesUpsertLoader,
        parser: Optional[RowParser] = None,
        row_timeout: Optional[float] = None
    ):
        self.source = source
        self.loader = loader
        self.parser = parser or RowParser()
        self.row_timeout = row_timeout

    async def outcomes(self) -> AsyncIterator[RowOutcome]:
        """
        Yield one outcome per data row.

        Each call starts over from the first row and re-reads the source.

        Raises:
            SourceReadError: Before any outcome, if the source cannot be read
        """
        rows: List[List[str]] = await self.source.fetch_rows()

        for row_number, fields in enumerate(rows, start=1):
            yield await self._process_row(row_number, fields)

    async def load(self) -> LoadSummary:
        """Drain the outcome stream and count loaded vs skipped rows"""
        summary = LoadSummary()

        async for outcome in self.outcomes():
            summary.record(outcome)

        logger.info(
            f"CSV data loading completed for {self.source.source_name}: "
            f"Total: {summary.total}, Loaded: {summary.loaded}, Skipped: {summary.skipped}"
        )
        return summary

    async def _process_row(self, row_number: int, fields: List[str]) -> RowOutcome:
        try:
            bundle = self.parser.parse(row_number, fields)
        except ValidationError as e:
            logger.warning(
                f"Row {e.row}: invalid {e.field}: {e.cause}",
                extra={"error_context": e.to_dict()}
            )
            return RowOutcome.skipped(row_number, f"invalid {e.field}: {e.cause}")

        try:
            await self._upsert(bundle)
        except PersistenceError as e:
            logger.warning(
                f"Row {e.row}: insert {e.stage} failed: {e.cause}",
                extra={"error_context": e.to_dict()}
            )
            return RowOutcome.skipped(row_number, f"{e.stage} failed: {e.cause}")

        return RowOutcome.loaded(row_number)

    async def _upsert(self, bundle) -> None:
        if self.row_timeout is None:
            await self.loader.upsert(bundle)
            return

        try:
            await asyncio.wait_for(self.loader.upsert(bundle), timeout=self.row_timeout)
        except asyncio.TimeoutError as e:
            raise PersistenceError(
                bundle.row,
                "timeout",
                f"row not stored within {self.row_timeout}s",
                original_exception=e
            )
