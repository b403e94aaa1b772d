"""
FastAPI dependencies backed by the application state
"""

from typing import AsyncGenerator
from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession
from ingestion.scheduler import RefreshScheduler


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Get database session from the shared session factory"""
    async with request.app.state.session_maker() as session:
        yield session


def get_refresh_scheduler(request: Request) -> RefreshScheduler:
    return request.app.state.refresh_scheduler
