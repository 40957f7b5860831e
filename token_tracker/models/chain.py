"""
Chain models - processed blocks and transactions.

The highest row in ``block`` is the indexer's processed-height watermark.
``tx`` places spending transactions on the height axis for history queries.
"""

from typing import Optional

from sqlalchemy import String, Integer
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel, TimestampMixin


class Block(BaseModel, TimestampMixin):
    """A block fully processed by the indexer."""

    __tablename__ = "block"

    hash: Mapped[str] = mapped_column(String(64), primary_key=True)
    height: Mapped[int] = mapped_column(Integer, unique=True)
    prev_hash: Mapped[Optional[str]] = mapped_column(String(64))


class Tx(BaseModel, TimestampMixin):
    """A transaction touching token state."""

    __tablename__ = "tx"

    txid: Mapped[str] = mapped_column(String(64), primary_key=True)
    block_height: Mapped[int] = mapped_column(Integer, index=True)
