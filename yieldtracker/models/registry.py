"""Farmer, Field, Planting, Harvest ORM models: the entity registry.

Farmers are keyed by the caller identity that registered them.  Fields,
plantings and harvests carry integer ids handed out by the ledger counters
(``yieldtracker.services.id_allocator``), so their primary keys never autoincrement.
"""

from __future__ import annotations

from sqlalchemy import BigInteger, ForeignKey, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column

from yieldtracker.models.base import Base, TimestampMixin

IDENTITY_LENGTH = 128
# Upper bound of the signed BIGINT id columns; no allocated id can exceed it.
MAX_RECORD_ID = 2**63 - 1

# ═══════════════════════════════════════════════════════════════════════════
# Farmer
# ═══════════════════════════════════════════════════════════════════════════


class Farmer(Base, TimestampMixin):
    """A registered grower.  "Registered" means ``active``, not mere existence."""

    __tablename__ = "farmers"

    identity: Mapped[str] = mapped_column(String(IDENTITY_LENGTH), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    location: Mapped[str] = mapped_column(String(100), nullable=False)
    registered_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    active: Mapped[bool] = mapped_column(
        default=True,
        server_default=text("true"),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Farmer identity={self.identity!r} name={self.name!r} active={self.active}>"


# ═══════════════════════════════════════════════════════════════════════════
# Field
# ═══════════════════════════════════════════════════════════════════════════


class Field(Base, TimestampMixin):
    """A plot of land owned by one farmer identity.

    Attributes are mutable through ``update_field``; ``owner_identity`` is
    rewritten on every update but always to the already-verified owner.
    """

    __tablename__ = "fields"
    __table_args__ = (Index("ix_fields_owner_identity", "owner_identity"),)

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    owner_identity: Mapped[str] = mapped_column(
        String(IDENTITY_LENGTH),
        ForeignKey("farmers.identity"),
        nullable=False,
    )
    location: Mapped[str] = mapped_column(String(100), nullable=False)
    size_hectares: Mapped[int] = mapped_column(BigInteger, nullable=False)
    soil_type: Mapped[str] = mapped_column(String(50), nullable=False)
    registered_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    active: Mapped[bool] = mapped_column(
        default=True,
        server_default=text("true"),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Field id={self.id} owner={self.owner_identity!r} active={self.active}>"


# ═══════════════════════════════════════════════════════════════════════════
# Planting
# ═══════════════════════════════════════════════════════════════════════════


class Planting(Base, TimestampMixin):
    """Append-only planting event; ``field_id`` is fixed at creation."""

    __tablename__ = "plantings"
    __table_args__ = (Index("ix_plantings_field_id", "field_id"),)

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    field_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("fields.id"),
        nullable=False,
    )
    owner_identity: Mapped[str] = mapped_column(String(IDENTITY_LENGTH), nullable=False)
    crop_type: Mapped[str] = mapped_column(String(50), nullable=False)
    planting_date: Mapped[str] = mapped_column(String(32), nullable=False)
    inputs_used: Mapped[str] = mapped_column(String(500), nullable=False)
    notes: Mapped[str] = mapped_column(String(500), nullable=False)

    def __repr__(self) -> str:
        return f"<Planting id={self.id} field={self.field_id} crop={self.crop_type!r}>"


# ═══════════════════════════════════════════════════════════════════════════
# Harvest
# ═══════════════════════════════════════════════════════════════════════════


class Harvest(Base, TimestampMixin):
    """Append-only harvest event.

    ``field_id`` is never supplied by the caller: it is copied from the
    referenced planting when the harvest is recorded.
    """

    __tablename__ = "harvests"
    __table_args__ = (Index("ix_harvests_planting_id", "planting_id"),)

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    planting_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("plantings.id"),
        nullable=False,
    )
    field_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("fields.id"),
        nullable=False,
    )
    owner_identity: Mapped[str] = mapped_column(String(IDENTITY_LENGTH), nullable=False)
    yield_amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    quality_metrics: Mapped[str] = mapped_column(String(200), nullable=False)
    harvest_date: Mapped[str] = mapped_column(String(32), nullable=False)
    notes: Mapped[str] = mapped_column(String(500), nullable=False)

    def __repr__(self) -> str:
        return (
            f"<Harvest id={self.id} planting={self.planting_id} "
            f"field={self.field_id}>"
        )
