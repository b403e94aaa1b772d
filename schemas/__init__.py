"""
Pydantic schemas for data validation and serialization.

This package defines Pydantic models used throughout the pipeline:

Schemas:
    sales: The typed source row and the four entities derived from it
    refresh: Row outcomes, load summaries and refresh results
    api: API endpoint request/response schemas

Features:
    - Field-level validation of untyped CSV text
    - Type coercion to dates, integers and decimals
    - JSON serialization for FastAPI responses

Usage:
    from schemas.sales import SalesRow, EntityBundle
    from schemas.refresh import RowOutcome, LoadSummary

Example:
    row = SalesRow(**dict(zip(SOURCE_COLUMNS, fields)))
    bundle = row.to_bundle(row=1)

    assert bundle.order_item.quantity_sold == 3
"""

__all__ = [
    "SalesRow",
    "EntityBundle",
    "CustomerCreate",
    "ProductCreate",
    "OrderCreate",
    "OrderItemCreate",
    "RowOutcome",
    "LoadSummary",
    "RefreshResult",
]
