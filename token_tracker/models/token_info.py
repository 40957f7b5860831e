"""
TokenInfo model - one row per token, written once at token genesis.
"""

from typing import Optional, Dict, Any

from sqlalchemy import String, Integer, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel, TimestampMixin


class TokenInfo(BaseModel, TimestampMixin):
    """Token metadata. Addresses are derived from the pubkeys on render."""

    __tablename__ = "token_info"

    token_id: Mapped[str] = mapped_column(
        String(100),
        primary_key=True,
        comment="Human identifier, <genesis txid>_<output index>"
    )

    token_pubkey: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        comment="X-only public key identifying the token on chain"
    )

    minter_pubkey: Mapped[str] = mapped_column(
        String(64),
        comment="X-only public key of the minter contract"
    )

    genesis_txid: Mapped[str] = mapped_column(String(64))
    reveal_txid: Mapped[str] = mapped_column(String(64))
    reveal_height: Mapped[int] = mapped_column(Integer)

    name: Mapped[str] = mapped_column(String(255))
    symbol: Mapped[str] = mapped_column(String(255))
    decimals: Mapped[int] = mapped_column(Integer)

    raw_info: Mapped[Optional[Dict[str, Any]]] = mapped_column(
        JSON,
        comment="Opaque token metadata as revealed on chain"
    )

    __table_args__ = (
        Index("idx_token_info_reveal_height", "reveal_height"),
    )
