"""AccessGrant ORM model: the access-delegation ledger.

The composite primary key (data_kind, data_id, accessor_identity) makes a
grant an upsert: granting the same key again overwrites the previous row.
"""

from __future__ import annotations

from sqlalchemy import BigInteger, Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from yieldtracker.models.base import Base, TimestampMixin
from yieldtracker.models.enums import AccessLevelEnum, DataKindEnum
from yieldtracker.models.registry import IDENTITY_LENGTH


class AccessGrant(Base, TimestampMixin):
    """Permission for ``accessor_identity`` to view one registry record."""

    __tablename__ = "access_grants"

    data_kind: Mapped[DataKindEnum] = mapped_column(
        Enum(
            DataKindEnum,
            name="data_kind",
            create_constraint=False,
            native_enum=True,
            values_callable=lambda members: [m.value for m in members],
        ),
        primary_key=True,
    )
    data_id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    accessor_identity: Mapped[str] = mapped_column(String(IDENTITY_LENGTH), primary_key=True)
    granted_by: Mapped[str] = mapped_column(String(IDENTITY_LENGTH), nullable=False)
    granted_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    access_level: Mapped[AccessLevelEnum] = mapped_column(
        Enum(
            AccessLevelEnum,
            name="access_level",
            create_constraint=False,
            native_enum=True,
            values_callable=lambda members: [m.value for m in members],
        ),
        nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"<AccessGrant {self.data_kind}:{self.data_id} "
            f"accessor={self.accessor_identity!r} level={self.access_level}>"
        )
