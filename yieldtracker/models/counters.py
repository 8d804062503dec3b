"""Ledger counter model: id sequences and the logical clock."""

from __future__ import annotations

from sqlalchemy import BigInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from yieldtracker.models.base import Base, TimestampMixin


class LedgerCounter(Base, TimestampMixin):
    """Named monotonic counter; ``value`` is the next number to hand out.

    One row per ``CounterKindEnum`` member plus the ``ledger_clock`` row.
    Rows are created lazily starting at 1 and only ever incremented.
    """

    __tablename__ = "ledger_counters"

    name: Mapped[str] = mapped_column(String(32), primary_key=True)
    value: Mapped[int] = mapped_column(BigInteger, nullable=False, default=1)

    def __repr__(self) -> str:
        return f"<LedgerCounter name={self.name!r} value={self.value}>"
