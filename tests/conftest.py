"""
Shared fixtures: an in-memory SQLite store with the tracker schema.
"""

import pytest
import pytest_asyncio

from token_tracker.core.database import (
    DatabaseManager,
    close_database,
    get_async_session,
    init_database,
)
from token_tracker.utils.address import Bech32AddressCodec


@pytest.fixture
def codec():
    return Bech32AddressCodec("bc")


@pytest_asyncio.fixture
async def session():
    await init_database("sqlite+aiosqlite://")
    await DatabaseManager.create_tables()
    async with get_async_session() as db:
        yield db
    await DatabaseManager.drop_tables()
    await close_database()
