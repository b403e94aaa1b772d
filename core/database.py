"""
Database engine and session factory management with SQLAlchemy async
"""

from typing import Optional
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool
from core.config import settings
import logging

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores REFERENCES clauses unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine(database_url: Optional[str] = None, **kwargs) -> AsyncEngine:
    """
    Create the async engine shared by every unit of work.

    The engine owns the connection pool; components never open
    connections themselves, they receive a session factory built on it.
    """
    url = database_url or settings.DATABASE_URL
    options = {
        "echo": settings.ENVIRONMENT == "development" and settings.LOG_LEVEL.upper() == "DEBUG",
        "future": True,
    }
    if url.startswith("postgresql"):
        options["pool_pre_ping"] = True
    else:
        options["poolclass"] = NullPool
    options.update(kwargs)

    engine = create_async_engine(url, **options)

    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    logger.debug(f"Created {engine.dialect.name} engine")
    return engine


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker:
    """Create session factory bound to an engine"""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False
    )
