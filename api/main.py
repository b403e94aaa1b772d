
"""
FastAPI application initialization
"""

from typing import Optional
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import async_sessionmaker
from api.routes import health, refresh, revenue
from api.middleware import RequestContextMiddleware
from core.config import settings
from core.database import create_engine, create_session_maker
from core.logging import setup_logging
from ingestion.refresh import build_refresh_orchestrator
from ingestion.scheduler import RefreshScheduler
import logging

setup_logging()
logger = logging.getLogger(__name__)


def create_app(
    session_maker: Optional[async_sessionmaker] = None,
    csv_path: Optional[str] = None,
    refresh_on_startup: Optional[bool] = None
) -> FastAPI:
    """
    Build the application around one shared session factory.

    The session factory is the only shared mutable resource; it is handed
    to the refresh pipeline and to request handlers through app.state.
    """
    app = FastAPI(
        title="Sales Data API",
        description="Loads sales records from CSV and serves revenue aggregations",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc"
    )

    app.add_middleware(RequestContextMiddleware)

    app.state.engine = None
    if session_maker is None:
        app.state.engine = create_engine()
        session_maker = create_session_maker(app.state.engine)

    orchestrator = build_refresh_orchestrator(
        session_maker,
        csv_path or settings.SALES_CSV_PATH,
        row_timeout=settings.ROW_TIMEOUT_SECONDS
    )
    app.state.session_maker = session_maker
    app.state.refresh_scheduler = RefreshScheduler(orchestrator)

    if refresh_on_startup is None:
        refresh_on_startup = settings.REFRESH_ON_STARTUP

    # Include routers
    app.include_router(health.router)
    app.include_router(refresh.router)
    app.include_router(revenue.router)

    @app.on_event("startup")
    async def startup_event():
        """Application startup event"""
        logger.info("Starting Sales Data API")
        logger.info(f"Environment: {settings.ENVIRONMENT}")
        logger.info(f"Database: {settings.DATABASE_URL.split('@')[1] if '@' in settings.DATABASE_URL else 'configured'}")

        if refresh_on_startup:
            app.state.refresh_scheduler.trigger("startup")
        app.state.refresh_scheduler.start()

    @app.on_event("shutdown")
    async def shutdown_event():
        """Application shutdown event"""
        logger.info("Shutting down Sales Data API")
        await app.state.refresh_scheduler.stop()
        if app.state.engine is not None:
            await app.state.engine.dispose()

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "message": "Sales Data API",
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/health",
            "endpoints": {
                "refresh": "/refresh",
                "refresh_status": "/refresh/status",
                "revenue_by_product": "/revenue/product",
                "revenue_by_category": "/revenue/category",
                "revenue_by_region": "/revenue/region",
                "total_revenue": "/revenue/total"
            }
        }

    return app


app = create_app()
