"""
Revenue aggregation endpoints over a date range
"""

from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession
from api.dependencies import get_db
from schemas.api import RevenueByProductResponse, RevenueBreakdownResponse, TotalRevenueResponse
from services import analysis
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/revenue", tags=["Revenue"])


def date_range(
    start_date: date = Query(..., description="First day, YYYY-MM-DD (inclusive)"),
    end_date: date = Query(..., description="Last day, YYYY-MM-DD (inclusive)")
):
    if start_date > end_date:
        raise HTTPException(status_code=400, detail="start_date must not be after end_date")
    return start_date, end_date


@router.get("/product", response_model=RevenueByProductResponse)
async def get_revenue_by_product(
    request: Request,
    dates: tuple = Depends(date_range),
    db: AsyncSession = Depends(get_db)
):
    start_date, end_date = dates
    products = await analysis.revenue_by_product(db, start_date, end_date)

    logger.info(
        f"[{getattr(request.state, 'request_id', '-')}] GET /revenue/product "
        f"{start_date}..{end_date}: {len(products)} products"
    )
    return RevenueByProductResponse(start_date=start_date, end_date=end_date, products=products)


@router.get("/category", response_model=RevenueBreakdownResponse)
async def get_revenue_by_category(
    dates: tuple = Depends(date_range),
    db: AsyncSession = Depends(get_db)
):
    start_date, end_date = dates
    revenue = await analysis.revenue_by_category(db, start_date, end_date)
    return RevenueBreakdownResponse(start_date=start_date, end_date=end_date, revenue=revenue)


@router.get("/region", response_model=RevenueBreakdownResponse)
async def get_revenue_by_region(
    dates: tuple = Depends(date_range),
    db: AsyncSession = Depends(get_db)
):
    start_date, end_date = dates
    revenue = await analysis.revenue_by_region(db, start_date, end_date)
    return RevenueBreakdownResponse(start_date=start_date, end_date=end_date, revenue=revenue)


@router.get("/total", response_model=TotalRevenueResponse)
async def get_total_revenue(
    dates: tuple = Depends(date_range),
    db: AsyncSession = Depends(get_db)
):
    start_date, end_date = dates
    total = await analysis.total_revenue(db, start_date, end_date)
    return TotalRevenueResponse(start_date=start_date, end_date=end_date, total_revenue=total)
