"""
Core utilities and configuration for the sales data loader.

This package provides foundational components used throughout the pipeline:

Modules:
    config: Application configuration and environment variable management
    database: Engine and session factory creation
    exceptions: Custom exception hierarchy for error handling
    logging: Logging configuration and utilities

Usage:
    from core.config import settings
    from core.database import create_engine, create_session_maker
    from core.exceptions import ValidationError, PersistenceError
    from core.logging import setup_logging

Example:
    # Initialize logging
    setup_logging()

    # Build the shared session factory
    engine = create_engine()
    session_maker = create_session_maker(engine)
    async with session_maker() as session:
        # Perform database operations
        pass
"""

__all__ = [
    "settings",
    "create_engine",
    "create_session_maker",
    "setup_logging",
    # Exceptions
    "ETLException",
    "ExtractionError",
    "SourceReadError",
    "TransformationError",
    "ValidationError",
    "LoadError",
    "PersistenceError",
    "TruncationError",
    "RefreshError",
    "RefreshInProgressError",
]
