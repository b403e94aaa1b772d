"""
Pydantic schemas for API request/response models
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict
from datetime import date, datetime
from uuid import UUID
from models.base import RefreshStatus


# ============================================================================
# Refresh Schemas
# ============================================================================

class RefreshAcceptedResponse(BaseModel):
    """Acknowledgement for a background refresh"""
    status: str = "accepted"
    message: str = "Data refresh started"


class RefreshRunInfo(BaseModel):
    """One refresh run as recorded in refresh_runs"""
    run_id: UUID
    status: RefreshStatus
    trigger: str
    source_path: Optional[str] = None
    started_at: datetime
    completed_at: Optional[datetime] = None
    duration_seconds: Optional[float] = None
    rows_total: int = 0
    rows_loaded: int = 0
    rows_skipped: int = 0
    error_message: Optional[str] = None

    class Config:
        from_attributes = True
        use_enum_values = True


class RefreshStatusResponse(BaseModel):
    """Current refresh activity and the most recent run"""
    running: bool
    state: str
    last_run: Optional[RefreshRunInfo] = None


# ============================================================================
# Health Check Schemas
# ============================================================================

class HealthCheckResponse(BaseModel):
    """Health check response model"""
    status: str = Field(..., description="Overall system status: healthy, degraded, unhealthy")
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    database_connected: bool
    refresh_running: bool = False
    last_refresh_status: Optional[RefreshStatus] = None

    class Config:
        use_enum_values = True
        json_schema_extra = {
            "example": {
                "status": "healthy",
                "timestamp": "2024-01-15T10:30:00Z",
                "database_connected": True,
                "refresh_running": False,
                "last_refresh_status": "success"
            }
        }


# ============================================================================
# Revenue Schemas
# ============================================================================

class ProductRevenue(BaseModel):
    """Revenue of a single product"""
    product_id: str
    product_name: str
    total_revenue: float


class RevenueByProductResponse(BaseModel):
    start_date: date
    end_date: date
    products: List[ProductRevenue]


class RevenueBreakdownResponse(BaseModel):
    """Revenue grouped by a single dimension (category or region)"""
    start_date: date
    end_date: date
    revenue: Dict[str, float]

    class Config:
        json_schema_extra = {
            "example": {
                "start_date": "2024-01-01",
                "end_date": "2024-12-31",
                "revenue": {
                    "Electronics": 1200.5,
                    "Books": 800.0
                }
            }
        }


class TotalRevenueResponse(BaseModel):
    start_date: date
    end_date: date
    total_revenue: float


# ============================================================================
# Error Response Schema
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response"""
    error: str
    detail: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)
