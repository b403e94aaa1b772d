"""
Pytest configuration and fixtures
"""

import csv
import pytest
import pytest_asyncio
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.pool import StaticPool
from core.database import create_engine, create_session_maker
from models.base import Base
from models.sales import Customer, Product, Order, OrderItem
from models.refresh_run import RefreshRun
from typing import AsyncGenerator

# In-memory SQLite shared by every session of a test through one connection
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

CSV_HEADER = [
    "Order ID", "Product ID", "Customer ID", "Product Name", "Category",
    "Region", "Date of Sale", "Quantity Sold", "Unit Price", "Discount",
    "Shipping Cost", "Payment Method", "Customer Name", "Customer Email",
    "Customer Address",
]

WIDGET_ROW = [
    "O1", "P1", "C1", "Widget", "Tools", "West", "2024-01-05", "3", "9.99",
    "1.00", "2.50", "card", "Alice", "a@x.com", "1 Main St",
]


def make_row(order_id="O1", product_id="P1", customer_id="C1", **overrides):
    """Build a 15-field source row based on WIDGET_ROW"""
    columns = [
        "order_id", "product_id", "customer_id", "product_name", "category",
        "region", "date_of_sale", "quantity_sold", "unit_price", "discount",
        "shipping_cost", "payment_method", "customer_name", "customer_email",
        "customer_address",
    ]
    values = dict(zip(columns, WIDGET_ROW))
    values.update(order_id=order_id, product_id=product_id, customer_id=customer_id)
    values.update(overrides)
    return [values[c] for c in columns]


async def count_rows(session_maker, model) -> int:
    async with session_maker() as session:
        result = await session.execute(select(func.count()).select_from(model))
        return result.scalar()


async def table_counts(session_maker) -> dict:
    return {
        model.__tablename__: await count_rows(session_maker, model)
        for model in (Customer, Product, Order, OrderItem)
    }


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create test database engine"""
    engine = create_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Drop all tables after test
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_maker(test_engine):
    """Shared session factory, as injected into the pipeline"""
    return create_session_maker(test_engine)


@pytest_asyncio.fixture(scope="function")
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for tests"""
    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def write_csv(tmp_path):
    """Write rows (header first) to a CSV file and return its path"""

    def _write(rows, name="sales_data.csv", header=CSV_HEADER):
        path = tmp_path / name
        with open(path, "w", newline="") as f:
            writer = csv.writer(f)
            if header is not None:
                writer.writerow(header)
            writer.writerows(rows)
        return str(path)

    return _write


@pytest.fixture
def sample_rows():
    """Three valid rows: two customers, two products, two orders"""
    return [
        make_row("O1", "P1", "C1"),
        make_row("O1", "P2", "C1", product_name="Gadget", category="Electronics",
                 quantity_sold="1", unit_price="20.00", discount="0"),
        make_row("O2", "P2", "C2", product_name="Gadget", category="Electronics",
                 region="East", date_of_sale="2024-02-10", quantity_sold="2",
                 unit_price="20.00", discount="5.00", shipping_cost="0",
                 customer_name="Bob", customer_email="b@x.com",
                 customer_address="2 Side St, Apt 4"),
    ]
