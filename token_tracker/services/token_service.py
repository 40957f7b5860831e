"""
Token service - request-level token queries.

Every public method is one logical request: it reads the watermark once
through ``HeightWatermark.snapshot()`` and passes the resulting context to
every height-bounded sub-query. Unresolvable tokens, undecodable
addresses and an unbootstrapped indexer all produce the empty shape of the
response; only store failures propagate.
"""

from typing import Any, Dict, List, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from token_tracker.models.tx_out import TxOut
from token_tracker.schemas.tokens import (
    TokenBalanceView,
    TokenInfoView,
    TokenListEntry,
    UtxoRef,
    UtxoState,
    UtxoView,
)
from token_tracker.services.aggregators import SupplyAggregator, balance_of, group_balances
from token_tracker.services.history import HistoryResolver
from token_tracker.services.ledger_store import LedgerStore
from token_tracker.services.state_hash import StateHashResolver, output_state_hashes
from token_tracker.services.token_catalog import TokenCatalog
from token_tracker.services.token_statistics import TokenStatisticsService
from token_tracker.services.watermark import HeightWatermark
from token_tracker.utils.address import AddressCodec, default_codec


logger = structlog.get_logger(__name__)


class TokenService:
    """Facade composing the catalog, ledger store, aggregators and resolvers."""

    def __init__(self, session: AsyncSession, codec: Optional[AddressCodec] = None):
        self.codec = codec or default_codec
        self.watermark = HeightWatermark(session)
        self.catalog = TokenCatalog(session, self.codec)
        self.ledger = LedgerStore(session)
        self.supply = SupplyAggregator(session)
        self.state_hashes = StateHashResolver(session)
        self.history = HistoryResolver(session)
        self.statistics = TokenStatisticsService(session, self.catalog)
        self.logger = logger.bind(service="token_service")

    async def get_token_info(self, token_id_or_addr: str) -> Optional[TokenInfoView]:
        token_info = await self.catalog.resolve(token_id_or_addr)
        return self.catalog.render(token_info)

    async def get_token_supply(self, token_id_or_addr: str) -> Optional[str]:
        """Total minted supply as a string, ``None`` if the token does not resolve."""
        token_info = await self.catalog.resolve(token_id_or_addr)
        if token_info is None:
            return None
        return str(await self.supply.total_supply(token_info.token_pubkey))

    async def list_all_tokens(
        self,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Dict[str, Any]:
        ctx = await self.watermark.snapshot()
        rows = await self.ledger.all_tokens(ctx, offset, limit)
        tokens = [
            TokenListEntry(
                **self.catalog.render(row.token).model_dump(),
                supply=str(row.supply),
                holders=row.holders,
            )
            for row in rows
        ]
        return {
            "tokens": tokens,
            "total": await self.ledger.count_all_tokens(ctx),
            "tracker_block_height": ctx.tracker_block_height,
        }

    async def get_token_list(
        self,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Tokens ranked by holders, figures taken from the statistics rollup."""
        ranked = await self.statistics.ranked_tokens(offset, limit)
        tokens = [
            TokenListEntry(
                **self.catalog.render(entry.token).model_dump(),
                supply=str(entry.supply),
                holders=entry.holders,
            )
            for entry in ranked
        ]
        return {
            "tokens": tokens,
            "total": await self.statistics.count_ranked_tokens(),
        }

    async def get_token_utxos_by_owner_address(
        self,
        token_id_or_addr: str,
        owner_addr: str,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Dict[str, Any]:
        ctx = await self.watermark.snapshot()
        token_info = await self.catalog.resolve(token_id_or_addr)
        owner_pkh = self.codec.owner_address_to_hash(owner_addr)

        utxos: List[TxOut] = []
        total = 0
        if token_info is not None:
            utxos = await self.ledger.utxos_by_owner(
                ctx, owner_pkh, token_info.token_pubkey, offset, limit
            )
            total = await self.ledger.count_utxos_by_owner(ctx, owner_pkh, token_info.token_pubkey)

        return {
            "utxos": await self.render_utxos(utxos),
            "total": total,
            "tracker_block_height": ctx.tracker_block_height,
        }

    async def get_token_balance_by_owner_address(
        self,
        token_id_or_addr: str,
        owner_addr: str,
    ) -> Dict[str, Any]:
        ctx = await self.watermark.snapshot()
        token_info = await self.catalog.resolve(token_id_or_addr)
        owner_pkh = self.codec.owner_address_to_hash(owner_addr)

        confirmed = "0"
        if token_info is not None:
            utxos = await self.ledger.all_utxos_by_owner(ctx, owner_pkh, token_info.token_pubkey)
            confirmed = balance_of(utxos, token_info.token_pubkey)

        return {
            "balance": TokenBalanceView(
                token_id=token_info.token_id if token_info else None,
                confirmed=confirmed,
            ),
            "tracker_block_height": ctx.tracker_block_height,
        }

    async def get_token_balances_by_owner_address(self, owner_addr: str) -> Dict[str, Any]:
        """Balances of every token the owner holds, largest first."""
        ctx = await self.watermark.snapshot()
        owner_pkh = self.codec.owner_address_to_hash(owner_addr)
        utxos = await self.ledger.all_utxos_by_owner(ctx, owner_pkh)
        balances = group_balances(utxos)
        infos = await self.catalog.resolve_many_by_pubkey(balances.keys())

        views = []
        for token_pubkey, amount in sorted(balances.items(), key=lambda kv: (-kv[1], kv[0])):
            info = infos.get(token_pubkey)
            if info is None:
                self.logger.warning("Balance for unknown token", token_pubkey=token_pubkey)
                continue
            views.append(TokenBalanceView(token_id=info.token_id, confirmed=str(amount)))

        return {
            "balances": views,
            "tracker_block_height": ctx.tracker_block_height,
        }

    async def get_token_tx_history_by_owner_address(
        self,
        token_id_or_addr: str,
        owner_addr: str,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Dict[str, Any]:
        ctx = await self.watermark.snapshot()
        token_info = await self.catalog.resolve(token_id_or_addr)
        owner_pkh = self.codec.owner_address_to_hash(owner_addr)
        token_pubkey = token_info.token_pubkey if token_info else None

        return {
            "history": await self.history.history_of(ctx, owner_pkh, token_pubkey, offset, limit),
            "total": await self.history.count_history(ctx, owner_pkh, token_pubkey),
            "tracker_block_height": ctx.tracker_block_height,
        }

    async def render_utxos(self, utxos: List[TxOut]) -> List[UtxoView]:
        vectors = await self.state_hashes.state_hash_vectors(u.txid for u in utxos)
        rendered = []
        for utxo in utxos:
            state = None
            if utxo.carries_token_state:
                state = UtxoState(address=utxo.owner_pkh, amount=str(utxo.token_amount))
            rendered.append(UtxoView(
                utxo=UtxoRef(
                    txid=utxo.txid,
                    output_index=utxo.output_index,
                    script=utxo.locking_script,
                    satoshis=str(utxo.satoshis),
                ),
                txo_state_hashes=output_state_hashes(vectors[utxo.txid]),
                state=state,
            ))
        return rendered
