"""
Ledger store - height-bounded queries over unspent outputs and tokens.
"""

from dataclasses import dataclass
from typing import List, Optional

import structlog
from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from token_tracker.models.token_info import TokenInfo
from token_tracker.models.tx_out import TxOut
from token_tracker.services.aggregators import SupplyAggregator, holders_expression
from token_tracker.services.pagination import normalize
from token_tracker.services.watermark import QueryContext


logger = structlog.get_logger(__name__)


@dataclass
class TokenWithStats:
    """A token row enriched with live supply and holder figures."""
    token: TokenInfo
    supply: int
    holders: int


class LedgerStore:
    """Read access to tx_out and token_info bounded by a watermark snapshot."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.supply = SupplyAggregator(session)
        self.logger = logger.bind(service="ledger_store")

    def _unspent_by_owner(self, ctx: QueryContext, owner_pkh: str, token_pubkey: Optional[str]):
        query = select(TxOut).where(
            TxOut.owner_pkh == owner_pkh,
            TxOut.spend_txid.is_(None),
            TxOut.block_height <= ctx.height,
        )
        if token_pubkey is not None:
            query = query.where(TxOut.xonly_pubkey == token_pubkey)
        return query

    async def utxos_by_owner(
        self,
        ctx: QueryContext,
        owner_pkh: Optional[str],
        token_pubkey: Optional[str] = None,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[TxOut]:
        """
        Unspent outputs of an owner, largest amount first.

        Returns an empty list without querying when the indexer is not
        bootstrapped or the owner is unknown.
        """
        if not ctx.is_bootstrapped or not owner_pkh:
            return []

        page = normalize(offset, limit)
        query = self._unspent_by_owner(ctx, owner_pkh, token_pubkey).order_by(
            TxOut.token_amount.desc(),
            TxOut.txid.asc(),
            TxOut.output_index.asc(),
        )
        try:
            result = await self.session.execute(page.apply(query))
        except SQLAlchemyError as e:
            self.logger.error("Failed to query owner utxos", owner=owner_pkh, error=str(e))
            raise
        return list(result.scalars())

    async def count_utxos_by_owner(
        self,
        ctx: QueryContext,
        owner_pkh: Optional[str],
        token_pubkey: Optional[str] = None,
    ) -> int:
        if not ctx.is_bootstrapped or not owner_pkh:
            return 0
        subquery = self._unspent_by_owner(ctx, owner_pkh, token_pubkey).subquery()
        result = await self.session.execute(select(func.count()).select_from(subquery))
        return result.scalar() or 0

    async def all_utxos_by_owner(
        self,
        ctx: QueryContext,
        owner_pkh: Optional[str],
        token_pubkey: Optional[str] = None,
    ) -> List[TxOut]:
        """Unpaged variant used for balance summation."""
        if not ctx.is_bootstrapped or not owner_pkh:
            return []
        result = await self.session.execute(
            self._unspent_by_owner(ctx, owner_pkh, token_pubkey)
        )
        return list(result.scalars())

    async def all_tokens(
        self,
        ctx: QueryContext,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[TokenWithStats]:
        """
        Tokens in creation order with supply and holders computed per page.

        Figures are live aggregates, not the statistics rollup. Supply is
        the same cumulative mint total ``SupplyAggregator.total_supply``
        reports; holders count unspent outputs at or below the watermark.
        """
        if not ctx.is_bootstrapped:
            return []

        page = normalize(offset, limit)
        holders = holders_expression(TokenInfo.token_pubkey, ctx)
        query = (
            select(TokenInfo, holders.label("holders"))
            .order_by(TokenInfo.created_at.asc(), TokenInfo.token_id.asc())
        )
        try:
            result = await self.session.execute(page.apply(query))
            rows = result.all()
            supplies = await self.supply.supplies(row[0].token_pubkey for row in rows)
        except SQLAlchemyError as e:
            self.logger.error("Failed to list tokens", error=str(e))
            raise
        return [
            TokenWithStats(
                token=row[0],
                supply=supplies.get(row[0].token_pubkey, 0),
                holders=int(row.holders or 0),
            )
            for row in rows
        ]

    async def count_all_tokens(self, ctx: QueryContext) -> int:
        if not ctx.is_bootstrapped:
            return 0
        result = await self.session.execute(select(func.count(TokenInfo.token_id)))
        return result.scalar() or 0
