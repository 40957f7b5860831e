"""
API dependencies for FastAPI endpoints.
"""

from typing import AsyncGenerator, Optional
from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

import structlog

from token_tracker.core.database import get_async_session
from token_tracker.services.pagination import PageWindow, normalize
from token_tracker.services.token_service import TokenService


logger = structlog.get_logger(__name__)


async def get_database() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    async with get_async_session() as session:
        yield session


async def get_token_service(db: AsyncSession = Depends(get_database)) -> TokenService:
    return TokenService(db)


async def get_page_window(
    offset: Optional[int] = Query(None, ge=0, description="Number of items to skip"),
    limit: Optional[int] = Query(None, ge=0, description="Number of items per page, clamped to the server maximum"),
) -> PageWindow:
    """Normalized paging parameters, for the pagination metadata of a response."""
    return normalize(offset, limit)
