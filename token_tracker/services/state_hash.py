"""
State hash reconstruction.

Downstream state verification expects a fixed-width vector per
transaction: element 0 is the prior-state root, elements 1..K belong to
output indexes 1..K, and missing entries are empty strings.
"""

from collections import defaultdict
from typing import Dict, Iterable, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from token_tracker.core.config import settings
from token_tracker.models.tx_out import TxOut


EMPTY_STATE_HASH = ""


def vector_width() -> int:
    return settings.contract_output_max_count + 1


def pad_state_hashes(state_hashes: List[str]) -> List[str]:
    """Right-pad to exactly ``K + 1`` entries."""
    width = vector_width()
    padded = [h if h is not None else EMPTY_STATE_HASH for h in state_hashes[:width]]
    padded.extend([EMPTY_STATE_HASH] * (width - len(padded)))
    return padded


def output_state_hashes(vector: List[str]) -> List[str]:
    """Per-output hashes only, without the prior-state root."""
    return vector[1:]


class StateHashResolver:

    def __init__(self, session: AsyncSession):
        self.session = session

    async def state_hash_vector(self, txid: str) -> List[str]:
        result = await self.session.execute(
            select(TxOut.state_hash)
            .where(TxOut.txid == txid)
            .order_by(TxOut.output_index.asc())
        )
        return pad_state_hashes(list(result.scalars()))

    async def state_hash_vectors(self, txids: Iterable[str]) -> Dict[str, List[str]]:
        """Vectors for several transactions in one round trip."""
        wanted = set(txids)
        if not wanted:
            return {}
        result = await self.session.execute(
            select(TxOut.txid, TxOut.state_hash)
            .where(TxOut.txid.in_(wanted))
            .order_by(TxOut.txid.asc(), TxOut.output_index.asc())
        )
        grouped: Dict[str, List[str]] = defaultdict(list)
        for txid, state_hash in result.all():
            grouped[txid].append(state_hash)
        return {txid: pad_state_hashes(grouped.get(txid, [])) for txid in wanted}
