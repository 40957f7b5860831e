"""
Transaction history of an owner/token pair.

A transaction touches the pair if it produced a matching output or spent
one. Heights come from ``tx`` so spending transactions are placed at the
height they were mined, not the height of the output they consumed.
"""

from typing import List, Optional

import structlog
from sqlalchemy import select, func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from token_tracker.models.chain import Tx
from token_tracker.models.tx_out import TxOut
from token_tracker.services.pagination import normalize
from token_tracker.services.watermark import QueryContext


logger = structlog.get_logger(__name__)


class HistoryResolver:

    def __init__(self, session: AsyncSession):
        self.session = session
        self.logger = logger.bind(service="history_resolver")

    def _touched(self, ctx: QueryContext, owner_pkh: str, token_pubkey: str):
        return (
            select(Tx.txid, Tx.block_height)
            .select_from(TxOut)
            .join(Tx, or_(TxOut.txid == Tx.txid, TxOut.spend_txid == Tx.txid))
            .where(
                TxOut.owner_pkh == owner_pkh,
                TxOut.xonly_pubkey == token_pubkey,
                Tx.block_height <= ctx.height,
            )
            .distinct()
        )

    async def history_of(
        self,
        ctx: QueryContext,
        owner_pkh: Optional[str],
        token_pubkey: Optional[str],
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[str]:
        """Txids touching the pair, newest block first."""
        if not ctx.is_bootstrapped or not owner_pkh or not token_pubkey:
            return []

        page = normalize(offset, limit)
        query = self._touched(ctx, owner_pkh, token_pubkey).order_by(
            Tx.block_height.desc(), Tx.txid.asc()
        )
        try:
            result = await self.session.execute(page.apply(query))
        except SQLAlchemyError as e:
            self.logger.error(
                "Failed to query tx history",
                owner=owner_pkh,
                token=token_pubkey,
                error=str(e)
            )
            raise
        return [row.txid for row in result.all()]

    async def count_history(
        self,
        ctx: QueryContext,
        owner_pkh: Optional[str],
        token_pubkey: Optional[str],
    ) -> int:
        if not ctx.is_bootstrapped or not owner_pkh or not token_pubkey:
            return 0
        subquery = self._touched(ctx, owner_pkh, token_pubkey).subquery()
        result = await self.session.execute(select(func.count()).select_from(subquery))
        return result.scalar() or 0
