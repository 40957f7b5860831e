"""
TxOut model - every transaction output the indexer has observed.
"""

from typing import Optional

from sqlalchemy import String, Integer, BigInteger, Text, Index, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel, TimestampMixin, TokenAmount


class TxOut(BaseModel, TimestampMixin):
    """
    A transaction output.

    ``spend_txid`` is NULL while the output is unspent and is set once,
    permanently, when a later transaction consumes it. ``owner_pkh`` and
    ``token_amount`` are either both present (the output carries token
    state) or both absent.
    """

    __tablename__ = "tx_out"

    txid: Mapped[str] = mapped_column(String(64), primary_key=True)
    output_index: Mapped[int] = mapped_column(Integer, primary_key=True)

    locking_script: Mapped[str] = mapped_column(Text)
    satoshis: Mapped[int] = mapped_column(BigInteger)
    block_height: Mapped[int] = mapped_column(Integer)
    state_hash: Mapped[Optional[str]] = mapped_column(String(64))

    # Token state
    xonly_pubkey: Mapped[Optional[str]] = mapped_column(
        String(64),
        comment="Pubkey of the token this output carries"
    )
    owner_pkh: Mapped[Optional[str]] = mapped_column(
        String(64),
        comment="Owner public key hash"
    )
    token_amount: Mapped[Optional[int]] = mapped_column(TokenAmount)

    # Spend link
    spend_txid: Mapped[Optional[str]] = mapped_column(String(64))
    spend_input_index: Mapped[Optional[int]] = mapped_column(Integer)

    __table_args__ = (
        CheckConstraint(
            "(owner_pkh IS NULL AND token_amount IS NULL) OR "
            "(owner_pkh IS NOT NULL AND token_amount IS NOT NULL)",
            name="ck_tx_out_token_state"
        ),
        Index("idx_tx_out_owner_spend_height", "owner_pkh", "spend_txid", "block_height"),
        Index("idx_tx_out_xonly_spend", "xonly_pubkey", "spend_txid"),
        Index("idx_tx_out_spend_txid", "spend_txid"),
    )

    @property
    def carries_token_state(self) -> bool:
        return self.owner_pkh is not None and self.token_amount is not None
