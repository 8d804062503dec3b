"""Enum types for ORM columns and request validation.

Each StrEnum maps 1:1 to a PostgreSQL CREATE TYPE ... AS ENUM.
"""

from enum import StrEnum

# ── Record kinds ────────────────────────────────────────────────────────────


class DataKindEnum(StrEnum):
    """Record kinds that attestations and access grants may target."""

    field = "field"
    planting = "planting"
    harvest = "harvest"


class CounterKindEnum(StrEnum):
    """Independent id sequences, one per numbered record kind."""

    field = "field"
    planting = "planting"
    harvest = "harvest"
    verification = "verification"


# ── Attestation enums ───────────────────────────────────────────────────────


class VerificationStatusEnum(StrEnum):
    """Outcome asserted by a verifier about a target record."""

    verified = "verified"
    rejected = "rejected"
    pending = "pending"


# ── Access control enums ────────────────────────────────────────────────────


class AccessLevelEnum(StrEnum):
    """Label stored with a grant; not enforced by the registry."""

    full = "full"
    limited = "limited"
    metadata_only = "metadata-only"
