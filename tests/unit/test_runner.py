"""
Unit tests for the batch loader
"""

import asyncio
import pytest
from ingestion.base import RowSource
from ingestion.extractors.csv_extractor import CSVRowSource
from ingestion.loaders.sales_loader import SalesUpsertLoader
from ingestion.runner import BatchLoader
from models.base import RowStatus
from core.exceptions import SourceReadError
from conftest import WIDGET_ROW, make_row, table_counts


class StaticRowSource(RowSource):
    """In-memory source that counts how often it is read"""

    def __init__(self, rows):
        super().__init__("static")
        self.rows = rows
        self.reads = 0

    async def fetch_rows(self):
        self.reads += 1
        return list(self.rows)


class BrokenRowSource(RowSource):
    def __init__(self):
        super().__init__("broken")

    async def fetch_rows(self):
        raise SourceReadError("broken", "disk on fire")


class SlowUpsertLoader:
    async def upsert(self, bundle):
        await asyncio.sleep(5)


class TestBatchLoader:
    """Test batch loading with partial failures"""

    @pytest.mark.asyncio
    async def test_load_counts_loaded_and_skipped(self, session_maker, write_csv):
        """Test a malformed row is skipped while its neighbours load"""
        path = write_csv([
            WIDGET_ROW,
            make_row("O2", quantity_sold="abc"),
            make_row("O3", "P3", "C3"),
        ])
        batch = BatchLoader(CSVRowSource(path), SalesUpsertLoader(session_maker))

        summary = await batch.load()

        assert summary.total == 3
        assert summary.loaded == 2
        assert summary.skipped == 1

        counts = await table_counts(session_maker)
        assert counts["orders"] == 2
        assert counts["order_items"] == 2

    @pytest.mark.asyncio
    async def test_huge_quantity_skips_only_its_row(self, session_maker, write_csv):
        """Test a quantity too large for the store does not abort the batch"""
        path = write_csv([
            make_row("O0", quantity_sold="99999999999999999999"),
            make_row("O2", "P2", "C2"),
        ])
        batch = BatchLoader(CSVRowSource(path), SalesUpsertLoader(session_maker))

        summary = await batch.load()

        assert (summary.total, summary.loaded, summary.skipped) == (2, 1, 1)
        assert (await table_counts(session_maker))["orders"] == 1

    @pytest.mark.asyncio
    async def test_short_csv_line_is_skipped(self, session_maker, write_csv):
        """Test a line missing its last column is rejected, not loaded with a blank"""
        path = write_csv([WIDGET_ROW[:14], make_row("O2", "P2", "C2")])
        batch = BatchLoader(CSVRowSource(path), SalesUpsertLoader(session_maker))

        outcomes = [outcome async for outcome in batch.outcomes()]

        assert [o.status for o in outcomes] == [RowStatus.SKIPPED, RowStatus.LOADED]
        assert outcomes[0].reason == "invalid row: expected 15 fields, got 14"
        assert await table_counts(session_maker) == {
            "customers": 1, "products": 1, "orders": 1, "order_items": 1
        }

    @pytest.mark.asyncio
    async def test_outcomes_follow_file_order(self, session_maker):
        """Test outcomes are numbered from 1 in source order"""
        source = StaticRowSource([
            WIDGET_ROW,
            make_row("O2", date_of_sale="yesterday"),
            WIDGET_ROW[:3],
        ])
        batch = BatchLoader(source, SalesUpsertLoader(session_maker))

        outcomes = [outcome async for outcome in batch.outcomes()]

        assert [o.row for o in outcomes] == [1, 2, 3]
        assert [o.status for o in outcomes] == [
            RowStatus.LOADED, RowStatus.SKIPPED, RowStatus.SKIPPED
        ]
        assert outcomes[0].reason is None
        assert outcomes[1].reason.startswith("invalid date_of_sale")
        assert outcomes[2].reason.startswith("invalid row")

    @pytest.mark.asyncio
    async def test_outcomes_restart_from_first_row(self, session_maker):
        """Test each traversal re-reads the source and starts at row 1"""
        source = StaticRowSource([WIDGET_ROW, make_row("O2")])
        batch = BatchLoader(source, SalesUpsertLoader(session_maker))

        first = [outcome.row async for outcome in batch.outcomes()]
        second = [outcome.row async for outcome in batch.outcomes()]

        assert first == second == [1, 2]
        assert source.reads == 2
        assert (await table_counts(session_maker))["orders"] == 2

    @pytest.mark.asyncio
    async def test_source_error_raised_before_any_outcome(self, session_maker):
        """Test a read failure aborts the batch without yielding outcomes"""
        batch = BatchLoader(BrokenRowSource(), SalesUpsertLoader(session_maker))
        seen = []

        with pytest.raises(SourceReadError):
            async for outcome in batch.outcomes():
                seen.append(outcome)

        assert seen == []

    @pytest.mark.asyncio
    async def test_load_propagates_source_error(self, session_maker, tmp_path):
        """Test load() surfaces a missing source file"""
        batch = BatchLoader(
            CSVRowSource(str(tmp_path / "missing.csv")),
            SalesUpsertLoader(session_maker)
        )

        with pytest.raises(SourceReadError):
            await batch.load()

    @pytest.mark.asyncio
    async def test_empty_source_loads_nothing(self, session_maker, write_csv):
        """Test a header-only file gives an all-zero summary"""
        batch = BatchLoader(CSVRowSource(write_csv([])), SalesUpsertLoader(session_maker))

        summary = await batch.load()

        assert (summary.total, summary.loaded, summary.skipped) == (0, 0, 0)

    @pytest.mark.asyncio
    async def test_row_timeout_skips_row(self):
        """Test a row that exceeds its timeout is skipped as a persistence failure"""
        source = StaticRowSource([WIDGET_ROW])
        batch = BatchLoader(source, SlowUpsertLoader(), row_timeout=0.01)

        summary = await batch.load()

        assert summary.skipped == 1
        outcomes = [outcome async for outcome in batch.outcomes()]
        assert outcomes[0].reason.startswith("timeout failed")
