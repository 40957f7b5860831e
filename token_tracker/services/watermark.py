"""
Processed-height watermark and the request-scoped query context.

The indexer advances the watermark while requests are in flight. A request
reads it once, freezes it into a ``QueryContext``, and hands that context
to every height-bounded sub-query so one response never mixes two
indexing moments.
"""

from dataclasses import dataclass
from typing import Optional

import structlog
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from token_tracker.models.chain import Block


logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class QueryContext:
    """Watermark snapshot for one logical request. ``None`` means unbootstrapped."""

    tracker_block_height: Optional[int]

    @property
    def is_bootstrapped(self) -> bool:
        return self.tracker_block_height is not None

    @property
    def height(self) -> int:
        if self.tracker_block_height is None:
            raise ValueError("Indexer has not processed any block yet")
        return self.tracker_block_height


UNBOOTSTRAPPED = QueryContext(tracker_block_height=None)


class HeightWatermark:
    """Reads the highest block height the indexer has fully processed."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.logger = logger.bind(service="height_watermark")

    async def current_processed_height(self) -> Optional[int]:
        result = await self.session.execute(select(func.max(Block.height)))
        return result.scalar()

    async def snapshot(self) -> QueryContext:
        """Read the watermark once and freeze it for the rest of the request."""
        height = await self.current_processed_height()
        if height is None:
            self.logger.debug("Indexer not bootstrapped")
            return UNBOOTSTRAPPED
        return QueryContext(tracker_block_height=height)
