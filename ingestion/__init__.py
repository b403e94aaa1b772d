"""
Load-and-refresh pipeline for the sales dataset.

This package contains all components that move sales rows from the CSV
source into the relational store:

Modules:
    base: Abstract base class for row sources
    runner: Batch loader that drives parse and upsert for every row
    refresh: Refresh orchestrator (truncate, then reload)
    scheduler: Background refresh trigger with APScheduler interval jobs

Subpackages:
    extractors: Row sources (CSV)
    transformers: Row parsing and validation
    loaders: Per-row insert-if-absent unit of work

Architecture:
    source file -> RowParser -> SalesUpsertLoader -> store

    1. Read - The whole file is read before any row is processed
    2. Parse - Each row becomes a typed EntityBundle or a ValidationError
    3. Load - Each bundle is inserted in its own transaction

    Row-level failures are logged and skipped; the batch keeps going.

Usage:
    from ingestion.refresh import build_refresh_orchestrator

Example:
    orchestrator = build_refresh_orchestrator(session_maker, "data/sales_data.csv")
    result = await orchestrator.refresh()

    print(f"Loaded {result.summary.loaded} rows")

Error Handling:
    All components use custom exceptions from core.exceptions. Source read
    and truncation errors terminate the refresh; validation and persistence
    errors only skip their row.
"""

__all__ = [
    "RowSource",
    "CSVRowSource",
    "RowParser",
    "SalesUpsertLoader",
    "BatchLoader",
    "RefreshOrchestrator",
    "RefreshScheduler",
    "build_refresh_orchestrator",
]
