"""
TokenStatistics model - per-token rollup recomputed out of band.

Not transactionally tied to tx_out or token_mint; treat as eventually
consistent.
"""

from datetime import datetime

from sqlalchemy import String, Integer, DateTime, Index, func
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel, TokenAmount


class TokenStatistics(BaseModel):
    """Cached holder count and minted amount for a token."""

    __tablename__ = "token_statistics"

    token_id: Mapped[str] = mapped_column(String(100), primary_key=True)
    holders: Mapped[int] = mapped_column(Integer, default=0)
    minted: Mapped[int] = mapped_column(TokenAmount, default=0)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now()
    )

    __table_args__ = (
        Index("idx_token_statistics_holders", "holders"),
    )
