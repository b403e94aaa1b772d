"""
Read-side services over the loaded sales dataset.

Modules:
    analysis: Revenue by product, category, region and in total for a date range
"""

__all__ = [
    "revenue_by_product",
    "revenue_by_category",
    "revenue_by_region",
    "total_revenue",
]
