"""ORM model registry: importing this module registers every table on Base.metadata.

Alembic ``env.py`` imports ``Base`` from here (not from ``base.py``) so that
autogenerate sees all tables.  Application code can also do::

    from yieldtracker.models import Farmer, Field, AccessGrant, ...
"""

# ── Access control ──────────────────────────────────────────────────────────
from yieldtracker.models.access import AccessGrant

# ── Attestations ────────────────────────────────────────────────────────────
from yieldtracker.models.attestation import Verification, Verifier

# ── Base & Mixins ───────────────────────────────────────────────────────────
from yieldtracker.models.base import Base, TimestampMixin

# ── Counters ────────────────────────────────────────────────────────────────
from yieldtracker.models.counters import LedgerCounter

# ── Enums ───────────────────────────────────────────────────────────────────
from yieldtracker.models.enums import (
    AccessLevelEnum,
    CounterKindEnum,
    DataKindEnum,
    VerificationStatusEnum,
)

# ── Entity registry ─────────────────────────────────────────────────────────
from yieldtracker.models.registry import Farmer, Field, Harvest, Planting

__all__ = [
    # Access control
    "AccessGrant",
    "AccessLevelEnum",
    # Base & mixins
    "Base",
    "CounterKindEnum",
    "DataKindEnum",
    # Entity registry
    "Farmer",
    "Field",
    "Harvest",
    # Counters
    "LedgerCounter",
    "Planting",
    "TimestampMixin",
    # Attestations
    "Verification",
    "VerificationStatusEnum",
    "Verifier",
]
