"""
Ranked token listing backed by the token_statistics rollup.
"""

from dataclasses import dataclass
from typing import List, Optional

import structlog
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from token_tracker.models.token_info import TokenInfo
from token_tracker.models.token_statistics import TokenStatistics
from token_tracker.services.pagination import normalize
from token_tracker.services.token_catalog import TokenCatalog


logger = structlog.get_logger(__name__)


@dataclass
class RankedToken:
    token: TokenInfo
    supply: int
    holders: int


class TokenStatisticsService:
    """
    Tokens ranked by holder count.

    Figures come from the rollup as-is and may lag the ledger.
    """

    def __init__(self, session: AsyncSession, catalog: TokenCatalog):
        self.session = session
        self.catalog = catalog
        self.logger = logger.bind(service="token_statistics")

    async def ranked_tokens(
        self,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[RankedToken]:
        page = normalize(offset, limit)
        result = await self.session.execute(
            page.apply(
                select(TokenStatistics).order_by(
                    TokenStatistics.holders.desc(),
                    TokenStatistics.token_id.asc(),
                )
            )
        )
        stats = list(result.scalars())

        # One fetch for the whole page, joined in memory
        infos = await self.catalog.resolve_many_by_id(s.token_id for s in stats)

        ranked = []
        for stat in stats:
            info = infos.get(stat.token_id)
            if info is None:
                self.logger.warning("Statistics row without token info", token_id=stat.token_id)
                continue
            ranked.append(RankedToken(token=info, supply=int(stat.minted or 0), holders=stat.holders))
        return ranked

    async def count_ranked_tokens(self) -> int:
        result = await self.session.execute(select(func.count(TokenStatistics.token_id)))
        return result.scalar() or 0
