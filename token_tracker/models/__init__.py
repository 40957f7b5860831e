"""
Database models for the token tracker.

SQLAlchemy mappings of the relations populated by the indexer. The
tracker reads them and never writes.
"""

from .base import Base, BaseModel, TimestampMixin, TokenAmount
from .chain import Block, Tx
from .token_info import TokenInfo
from .token_mint import TokenMint
from .token_statistics import TokenStatistics
from .tx_out import TxOut

__all__ = [
    "Base",
    "BaseModel",
    "TimestampMixin",
    "TokenAmount",
    "Block",
    "Tx",
    "TokenInfo",
    "TokenMint",
    "TokenStatistics",
    "TxOut",
]
