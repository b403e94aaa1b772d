"""
Pydantic schemas for load outcomes and refresh results
"""

from pydantic import BaseModel, Field
from typing import Optional
from models.base import RowStatus, RefreshState


class RowOutcome(BaseModel):
    """Result of processing one source row"""
    row: int
    status: RowStatus
    reason: Optional[str] = None

    @classmethod
    def loaded(cls, row: int) -> "RowOutcome":
        return cls(row=row, status=RowStatus.LOADED)

    @classmethod
    def skipped(cls, row: int, reason: str) -> "RowOutcome":
        return cls(row=row, status=RowStatus.SKIPPED, reason=reason)

    @property
    def is_loaded(self) -> bool:
        return self.status == RowStatus.LOADED


class LoadSummary(BaseModel):
    """Counts for one pass of the batch loader"""
    total: int = 0
    loaded: int = 0
    skipped: int = 0

    def record(self, outcome: RowOutcome) -> None:
        self.total += 1
        if outcome.is_loaded:
            self.loaded += 1
        else:
            self.skipped += 1


class RefreshResult(BaseModel):
    """Final state of a refresh cycle"""
    state: RefreshState
    summary: LoadSummary = Field(default_factory=LoadSummary)
