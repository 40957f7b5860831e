"""
TokenMint model - append-only record of every mint operation.
"""

from typing import Optional

from sqlalchemy import String, Integer, Index
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel, TimestampMixin, TokenAmount


class TokenMint(BaseModel, TimestampMixin):
    """A mint event. Summed per token it gives total ever minted."""

    __tablename__ = "token_mint"

    txid: Mapped[str] = mapped_column(String(64), primary_key=True)

    token_pubkey: Mapped[str] = mapped_column(String(64))
    owner_pkh: Mapped[Optional[str]] = mapped_column(String(64))
    token_amount: Mapped[int] = mapped_column(TokenAmount)
    block_height: Mapped[int] = mapped_column(Integer)

    __table_args__ = (
        Index("idx_token_mint_pubkey_height", "token_pubkey", "block_height"),
    )
