"""
Custom exceptions for the sales load-and-refresh pipeline with structured error context.

This module provides the exception hierarchy used throughout the loader.
Each exception carries context information for debugging and log output.

Exception Hierarchy:
    ETLException (base)
    ├── ExtractionError
    │   └── SourceReadError
    ├── TransformationError
    │   └── ValidationError
    ├── LoadError
    │   ├── PersistenceError
    │   └── TruncationError
    └── RefreshError
        └── RefreshInProgressError

Propagation:
    ValidationError and PersistenceError are row-level: the batch loader
    turns them into skipped outcomes and keeps going. SourceReadError and
    TruncationError are batch-level and terminate the refresh.
"""

from typing import Optional, Dict, Any
from datetime import datetime


class ETLException(Exception):
    """
    Base exception for all pipeline errors.

    Attributes:
        message: Human-readable error message
        context: Additional context information (row, field, stage, etc.)
        original_exception: The original exception that was caught (if any)
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception
        self.timestamp = datetime.utcnow()

        # Add timestamp to context
        self.context["error_timestamp"] = self.timestamp.isoformat()

        # Chain original exception if provided
        super().__init__(message)
        if original_exception:
            self.__cause__ = original_exception

    def __str__(self) -> str:
        """Format error message with context."""
        base_msg = f"{self.__class__.__name__}: {self.message}"

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" | Context: {context_str}"

        if self.original_exception:
            base_msg += f" | Caused by: {type(self.original_exception).__name__}: {str(self.original_exception)}"

        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/storage."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "original_error": str(self.original_exception) if self.original_exception else None
        }


# ============================================================================
# Extraction Errors
# ============================================================================

class ExtractionError(ETLException):
    """Base exception for source read failures."""
    pass


class SourceReadError(ExtractionError):
    """
    Raised when the source file cannot be opened or fully read.

    Fatal to the whole batch: no row outcome is produced.
    """

    def __init__(self, source: str, cause: str, original_exception: Optional[Exception] = None):
        super().__init__(
            f"Cannot read source {source}: {cause}",
            context={"source": source},
            original_exception=original_exception
        )
        self.source = source
        self.cause = cause


# ============================================================================
# Transformation Errors
# ============================================================================

class TransformationError(ETLException):
    """Base exception for row transformation failures."""
    pass


class ValidationError(TransformationError):
    """
    Raised when one field of a row fails its type or format constraint.

    The whole row is rejected; no entity of the row is built.
    """

    def __init__(self, row: int, field: str, cause: str):
        super().__init__(
            f"Row {row}: invalid {field}: {cause}",
            context={"row": row, "field": field}
        )
        self.row = row
        self.field = field
        self.cause = cause


# ============================================================================
# Load Errors
# ============================================================================

class LoadError(ETLException):
    """Base exception for store mutation failures."""
    pass


class PersistenceError(LoadError):
    """
    Raised when a stage of a row's unit of work fails.

    Stage is one of: begin, customer, product, order, order_item, commit, timeout.
    The row's transaction has been rolled back when this is raised.
    """

    def __init__(self, row: int, stage: str, cause: str, original_exception: Optional[Exception] = None):
        super().__init__(
            f"Row {row}: {stage} stage failed: {cause}",
            context={"row": row, "stage": stage},
            original_exception=original_exception
        )
        self.row = row
        self.stage = stage
        self.cause = cause


class TruncationError(LoadError):
    """
    Raised when emptying a table fails.

    The truncate unit of work has been rolled back: no table was emptied.
    """

    def __init__(self, table: str, cause: str, original_exception: Optional[Exception] = None):
        super().__init__(
            f"Failed to truncate table {table}: {cause}",
            context={"table": table, "operation": "TRUNCATE"},
            original_exception=original_exception
        )
        self.table = table
        self.cause = cause


# ============================================================================
# Refresh Errors
# ============================================================================

class RefreshError(ETLException):
    """Base exception for refresh lifecycle failures."""
    pass


class RefreshInProgressError(RefreshError):
    """Raised when a refresh is triggered while another one is running."""
    pass
