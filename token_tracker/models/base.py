"""
Declarative base, shared mixins and column types for tracker models.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import DateTime, Numeric, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


AMOUNT_DIGITS = 78


class TokenAmount(TypeDecorator):
    """
    Token amount column.

    Stored as an exact NUMERIC(78, 0) so values beyond 64 bits survive,
    surfaced to Python as ``int``. Amounts never pass through float here.

    SQLite has no exact wide numeric storage, so there the amount is kept
    as zero-padded decimal text. Padding keeps text ordering equal to
    numeric ordering; sums must be taken in Python on that backend.
    """

    impl = Numeric(AMOUNT_DIGITS, 0)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "sqlite":
            return dialect.type_descriptor(String(AMOUNT_DIGITS))
        return dialect.type_descriptor(Numeric(AMOUNT_DIGITS, 0))

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if dialect.name == "sqlite":
            return f"{int(value):0{AMOUNT_DIGITS}d}"
        return Decimal(int(value))

    def process_result_value(self, value, dialect) -> Optional[int]:
        if value is None:
            return None
        return int(value)


class Base(DeclarativeBase):
    """Root of the declarative class hierarchy."""


class BaseModel(Base):
    """Abstract base for all tracker tables."""

    __abstract__ = True

    def __repr__(self) -> str:
        pk = ", ".join(
            f"{col.key}={getattr(self, col.key)!r}"
            for col in self.__mapper__.primary_key
        )
        return f"<{self.__class__.__name__}({pk})>"


class TimestampMixin:
    """Bookkeeping timestamps maintained by the writer. Never rendered."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        comment="Row creation time"
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        comment="Row last update time"
    )
