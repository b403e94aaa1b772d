"""
Revenue aggregation queries over the loaded sales tables
"""

from datetime import date
from typing import Dict, List
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from models.sales import Customer, Product, Order, OrderItem
from schemas.api import ProductRevenue

# Line revenue excludes shipping; order-level views add it per item row
LINE_REVENUE = OrderItem.quantity_sold * OrderItem.unit_price_at_sale - OrderItem.discount_applied
LINE_REVENUE_WITH_SHIPPING = LINE_REVENUE + Order.shipping_cost


async def revenue_by_product(db: AsyncSession, start_date: date, end_date: date) -> List[ProductRevenue]:
    """Revenue per product, highest first"""
    total_revenue = func.sum(LINE_REVENUE).label("total_revenue")
    query = (
        select(Product.product_id, Product.product_name, total_revenue)
        .select_from(OrderItem)
        .join(Product, OrderItem.product_id == Product.product_id)
        .join(Order, OrderItem.order_id == Order.order_id)
        .where(Order.order_date.between(start_date, end_date))
        .group_by(Product.product_id, Product.product_name)
        .order_by(total_revenue.desc())
    )

    result = await db.execute(query)
    return [
        ProductRevenue(
            product_id=row.product_id,
            product_name=row.product_name,
            total_revenue=float(row.total_revenue or 0)
        )
        for row in result
    ]


async def revenue_by_category(db: AsyncSession, start_date: date, end_date: date) -> Dict[str, float]:
    """Revenue per product category, shipping included"""
    total_revenue = func.sum(LINE_REVENUE_WITH_SHIPPING).label("total_revenue")
    query = (
        select(Product.category, total_revenue)
        .select_from(Order)
        .join(OrderItem, Order.order_id == OrderItem.order_id)
        .join(Product, OrderItem.product_id == Product.product_id)
        .where(Order.order_date.between(start_date, end_date))
        .group_by(Product.category)
        .order_by(total_revenue.desc())
    )

    result = await db.execute(query)
    return {row.category: float(row.total_revenue or 0) for row in result}


async def revenue_by_region(db: AsyncSession, start_date: date, end_date: date) -> Dict[str, float]:
    """Revenue per customer region, shipping included"""
    total_revenue = func.sum(LINE_REVENUE_WITH_SHIPPING).label("total_revenue")
    query = (
        select(Customer.region, total_revenue)
        .select_from(Order)
        .join(Customer, Order.customer_id == Customer.customer_id)
        .join(OrderItem, Order.order_id == OrderItem.order_id)
        .where(Order.order_date.between(start_date, end_date))
        .group_by(Customer.region)
        .order_by(total_revenue.desc())
    )

    result = await db.execute(query)
    return {row.region: float(row.total_revenue or 0) for row in result}


async def total_revenue(db: AsyncSession, start_date: date, end_date: date) -> float:
    """Overall revenue for the date range, 0 when nothing matches"""
    query = (
        select(func.sum(LINE_REVENUE_WITH_SHIPPING))
        .select_from(Order)
        .join(OrderItem, Order.order_id == OrderItem.order_id)
        .where(Order.order_date.between(start_date, end_date))
    )

    result = await db.execute(query)
    total = result.scalar()
    return float(total) if total is not None else 0.0
