from sqlalchemy import Column, BigInteger, Integer, String, Enum, DateTime, Float, Text, Index, Uuid
from datetime import datetime
import uuid
from models.base import Base, RefreshStatus

class RefreshRun(Base):
    """
    Tracks metadata for each refresh cycle.

    Purpose:
    - Audit trail of all refreshes (manual, scheduled, startup)
    - Observable completion for detached background refreshes
    - Row-level outcome counts per run

    Not part of the truncated dataset: a refresh never empties this table.
    """
    __tablename__ = "refresh_runs"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    run_id = Column(Uuid, default=uuid.uuid4, unique=True, nullable=False, index=True)

    # Run metadata
    status = Column(Enum(RefreshStatus), default=RefreshStatus.RUNNING, nullable=False, index=True)
    trigger = Column(String(50), nullable=False, default="manual")
    source_path = Column(String(500), nullable=True)

    # Timestamps
    started_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    completed_at = Column(DateTime, nullable=True)
    duration_seconds = Column(Float, nullable=True)

    # Statistics
    rows_total = Column(Integer, default=0)
    rows_loaded = Column(Integer, default=0)
    rows_skipped = Column(Integer, default=0)

    # Error tracking
    error_message = Column(Text, nullable=True)

    __table_args__ = (
        Index("idx_refresh_run_status", "status", "started_at"),
    )
