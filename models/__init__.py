"""
SQLAlchemy ORM models for database tables.

This package defines the database schema using SQLAlchemy ORM models:

Models:
    base: Base declarative class and shared enums (RefreshStatus, RefreshState, RowStatus)
    sales: Customer, Product, Order and OrderItem, the normalized sales dataset
    refresh_run: Refresh execution tracking and counts

Database Schema:
    customers(customer_id PK)
    products(product_id PK)
    orders(order_id PK, customer_id FK -> customers)
    order_items(order_id FK -> orders, product_id FK -> products,
                unique (order_id, product_id))

    Foreign keys cascade on delete. A refresh empties the four sales tables
    children first; refresh_runs is never emptied.

Usage:
    from models.sales import Customer, Product, Order, OrderItem
    from models.refresh_run import RefreshRun
    from models.base import Base, RefreshStatus
"""

__all__ = [
    "Base",
    "RefreshStatus",
    "RefreshState",
    "RowStatus",
    "Customer",
    "Product",
    "Order",
    "OrderItem",
    "RefreshRun",
]
