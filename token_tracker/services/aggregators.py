"""
Balance, supply and holder aggregation.

All sums are exact Python ints; amounts become strings only when a view
is built.
"""

from typing import Dict, Iterable

import structlog
from sqlalchemy import select, func, ColumnElement
from sqlalchemy.ext.asyncio import AsyncSession

from token_tracker.models.token_mint import TokenMint
from token_tracker.models.tx_out import TxOut
from token_tracker.services.watermark import QueryContext


logger = structlog.get_logger(__name__)


def group_balances(utxos: Iterable[TxOut]) -> Dict[str, int]:
    """
    Sum token amounts per token pubkey.

    ``utxos`` are expected to share one owner. Tokens without outputs are
    absent from the result rather than mapped to zero.
    """
    balances: Dict[str, int] = {}
    for utxo in utxos:
        if not utxo.carries_token_state or utxo.xonly_pubkey is None:
            continue
        balances[utxo.xonly_pubkey] = balances.get(utxo.xonly_pubkey, 0) + int(utxo.token_amount)
    return balances


def balance_of(utxos: Iterable[TxOut], token_pubkey: str) -> str:
    return str(group_balances(utxos).get(token_pubkey, 0))


def holders_expression(token_pubkey, ctx: QueryContext) -> ColumnElement:
    """Distinct owners among unspent outputs of ``token_pubkey`` at or below the watermark."""
    return (
        select(func.count(func.distinct(TxOut.owner_pkh)))
        .where(
            TxOut.xonly_pubkey == token_pubkey,
            TxOut.spend_txid.is_(None),
            TxOut.block_height <= ctx.height,
        )
        .scalar_subquery()
    )


class SupplyAggregator:
    """Cumulative minted supply and live holder counts."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.logger = logger.bind(service="supply_aggregator")

    def _sums_in_python(self) -> bool:
        # amounts are text on SQLite; SUM there would go through REAL
        return self.session.get_bind().dialect.name == "sqlite"

    async def supplies(self, token_pubkeys: Iterable[str]) -> Dict[str, int]:
        """
        Total ever minted per token pubkey, in one query.

        Burns and unspendable outputs do not reduce it. Tokens without mint
        events are absent from the result.
        """
        keys = set(token_pubkeys)
        if not keys:
            return {}

        if self._sums_in_python():
            result = await self.session.execute(
                select(TokenMint.token_pubkey, TokenMint.token_amount)
                .where(TokenMint.token_pubkey.in_(keys))
            )
            totals: Dict[str, int] = {}
            for token_pubkey, amount in result.all():
                totals[token_pubkey] = totals.get(token_pubkey, 0) + amount
            return totals

        result = await self.session.execute(
            select(TokenMint.token_pubkey, func.sum(TokenMint.token_amount))
            .where(TokenMint.token_pubkey.in_(keys))
            .group_by(TokenMint.token_pubkey)
        )
        return {token_pubkey: int(total) for token_pubkey, total in result.all()}

    async def total_supply(self, token_pubkey: str) -> int:
        """Sum of every mint event for ``token_pubkey``; 0 without mints."""
        totals = await self.supplies([token_pubkey])
        return totals.get(token_pubkey, 0)

    async def count_holders(self, token_pubkey: str, ctx: QueryContext) -> int:
        if not ctx.is_bootstrapped:
            return 0
        result = await self.session.execute(select(holders_expression(token_pubkey, ctx)))
        return int(result.scalar() or 0)

    async def circulating_supply(self, token_pubkey: str, ctx: QueryContext) -> int:
        """Sum over currently unspent outputs; diverges from total supply after burns."""
        if not ctx.is_bootstrapped:
            return 0
        criteria = (
            TxOut.xonly_pubkey == token_pubkey,
            TxOut.spend_txid.is_(None),
            TxOut.block_height <= ctx.height,
        )
        if self._sums_in_python():
            result = await self.session.execute(
                select(TxOut.token_amount).where(TxOut.token_amount.is_not(None), *criteria)
            )
            return sum(result.scalars(), 0)

        result = await self.session.execute(
            select(func.coalesce(func.sum(TxOut.token_amount), 0)).where(*criteria)
        )
        return int(result.scalar() or 0)
