from sqlalchemy.orm import declarative_base
import enum

Base = declarative_base()


# ============================================================================
# ENUMS
# ============================================================================

class RefreshStatus(str, enum.Enum):
    """Refresh run outcome as recorded in refresh_runs"""
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"
    PARTIAL = "partial"


class RefreshState(str, enum.Enum):
    """Refresh orchestrator lifecycle"""
    IDLE = "idle"
    TRUNCATING = "truncating"
    LOADING = "loading"
    DONE = "done"
    FAILED = "failed"


class RowStatus(str, enum.Enum):
    """Outcome of a single source row"""
    LOADED = "loaded"
    SKIPPED = "skipped"
