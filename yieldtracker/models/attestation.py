"""Verifier and Verification ORM models: third-party attestations.

A verification names its target by (``target_kind``, ``target_id``) only;
there is no foreign key, so attestations may reference records that do not
exist.
"""

from __future__ import annotations

from sqlalchemy import BigInteger, Enum, ForeignKey, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column

from yieldtracker.models.base import Base, TimestampMixin
from yieldtracker.models.enums import DataKindEnum, VerificationStatusEnum
from yieldtracker.models.registry import IDENTITY_LENGTH


class Verifier(Base, TimestampMixin):
    """A registered attesting party (auditor, certifier, lab)."""

    __tablename__ = "verifiers"

    identity: Mapped[str] = mapped_column(String(IDENTITY_LENGTH), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    verification_type: Mapped[str] = mapped_column(String(50), nullable=False)
    registered_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    active: Mapped[bool] = mapped_column(
        default=True,
        server_default=text("true"),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Verifier identity={self.identity!r} type={self.verification_type!r}>"


class Verification(Base, TimestampMixin):
    """Append-only attestation about a field, planting or harvest."""

    __tablename__ = "verifications"
    __table_args__ = (
        Index("ix_verifications_target", "target_kind", "target_id"),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    verifier_identity: Mapped[str] = mapped_column(
        String(IDENTITY_LENGTH),
        ForeignKey("verifiers.identity"),
        nullable=False,
    )
    target_kind: Mapped[DataKindEnum] = mapped_column(
        Enum(
            DataKindEnum,
            name="data_kind",
            create_constraint=False,
            native_enum=True,
            values_callable=lambda members: [m.value for m in members],
        ),
        nullable=False,
    )
    target_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    verified_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    status: Mapped[VerificationStatusEnum] = mapped_column(
        Enum(
            VerificationStatusEnum,
            name="verification_status",
            create_constraint=False,
            native_enum=True,
            values_callable=lambda members: [m.value for m in members],
        ),
        nullable=False,
    )
    comments: Mapped[str] = mapped_column(String(500), nullable=False)

    def __repr__(self) -> str:
        return (
            f"<Verification id={self.id} target={self.target_kind}:{self.target_id} "
            f"status={self.status}>"
        )
