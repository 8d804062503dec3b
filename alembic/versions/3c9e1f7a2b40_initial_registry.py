"""initial_registry

Revision ID: 3c9e1f7a2b40
Revises:
Create Date: 2026-10-18 00:00:00.000000

Creates the eight registry tables and three PostgreSQL enum types, and seeds
the ledger counters at 1.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "3c9e1f7a2b40"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

# ── Enum type names (PostgreSQL CREATE TYPE) ────────────────────────────────
ENUM_DATA_KIND = postgresql.ENUM(
    "field", "planting", "harvest", name="data_kind", create_type=False
)
ENUM_VERIFICATION_STATUS = postgresql.ENUM(
    "verified", "rejected", "pending", name="verification_status", create_type=False
)
ENUM_ACCESS_LEVEL = postgresql.ENUM(
    "full", "limited", "metadata-only", name="access_level", create_type=False
)

COUNTER_NAMES = ("field", "planting", "harvest", "verification", "ledger_clock")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    # ── 1. Create enum types ────────────────────────────────────────────
    ENUM_DATA_KIND.create(op.get_bind(), checkfirst=True)
    ENUM_VERIFICATION_STATUS.create(op.get_bind(), checkfirst=True)
    ENUM_ACCESS_LEVEL.create(op.get_bind(), checkfirst=True)

    # ── 2. Entity registry ──────────────────────────────────────────────
    op.create_table(
        "farmers",
        sa.Column("identity", sa.String(128), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("location", sa.String(100), nullable=False),
        sa.Column("registered_at", sa.BigInteger(), nullable=False),
        sa.Column("active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("identity"),
    )

    op.create_table(
        "fields",
        sa.Column("id", sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column("owner_identity", sa.String(128), nullable=False),
        sa.Column("location", sa.String(100), nullable=False),
        sa.Column("size_hectares", sa.BigInteger(), nullable=False),
        sa.Column("soil_type", sa.String(50), nullable=False),
        sa.Column("registered_at", sa.BigInteger(), nullable=False),
        sa.Column("active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["owner_identity"], ["farmers.identity"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_fields_owner_identity", "fields", ["owner_identity"])

    op.create_table(
        "plantings",
        sa.Column("id", sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column("field_id", sa.BigInteger(), nullable=False),
        sa.Column("owner_identity", sa.String(128), nullable=False),
        sa.Column("crop_type", sa.String(50), nullable=False),
        sa.Column("planting_date", sa.String(32), nullable=False),
        sa.Column("inputs_used", sa.String(500), nullable=False),
        sa.Column("notes", sa.String(500), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["field_id"], ["fields.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_plantings_field_id", "plantings", ["field_id"])

    op.create_table(
        "harvests",
        sa.Column("id", sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column("planting_id", sa.BigInteger(), nullable=False),
        sa.Column("field_id", sa.BigInteger(), nullable=False),
        sa.Column("owner_identity", sa.String(128), nullable=False),
        sa.Column("yield_amount", sa.BigInteger(), nullable=False),
        sa.Column("quality_metrics", sa.String(200), nullable=False),
        sa.Column("harvest_date", sa.String(32), nullable=False),
        sa.Column("notes", sa.String(500), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["planting_id"], ["plantings.id"]),
        sa.ForeignKeyConstraint(["field_id"], ["fields.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_harvests_planting_id", "harvests", ["planting_id"])

    # ── 3. Attestations ─────────────────────────────────────────────────
    op.create_table(
        "verifiers",
        sa.Column("identity", sa.String(128), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("verification_type", sa.String(50), nullable=False),
        sa.Column("registered_at", sa.BigInteger(), nullable=False),
        sa.Column("active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("identity"),
    )

    op.create_table(
        "verifications",
        sa.Column("id", sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column("verifier_identity", sa.String(128), nullable=False),
        sa.Column("target_kind", ENUM_DATA_KIND, nullable=False),
        sa.Column("target_id", sa.BigInteger(), nullable=False),
        sa.Column("verified_at", sa.BigInteger(), nullable=False),
        sa.Column("status", ENUM_VERIFICATION_STATUS, nullable=False),
        sa.Column("comments", sa.String(500), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["verifier_identity"], ["verifiers.identity"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_verifications_target", "verifications", ["target_kind", "target_id"]
    )

    # ── 4. Access ledger ────────────────────────────────────────────────
    op.create_table(
        "access_grants",
        sa.Column("data_kind", ENUM_DATA_KIND, nullable=False),
        sa.Column("data_id", sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column("accessor_identity", sa.String(128), nullable=False),
        sa.Column("granted_by", sa.String(128), nullable=False),
        sa.Column("granted_at", sa.BigInteger(), nullable=False),
        sa.Column("access_level", ENUM_ACCESS_LEVEL, nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("data_kind", "data_id", "accessor_identity"),
    )

    # ── 5. Counters ─────────────────────────────────────────────────────
    counters = op.create_table(
        "ledger_counters",
        sa.Column("name", sa.String(32), nullable=False),
        sa.Column("value", sa.BigInteger(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("name"),
    )
    op.bulk_insert(counters, [{"name": name, "value": 1} for name in COUNTER_NAMES])


def downgrade() -> None:
    # ── Drop tables in reverse dependency order ─────────────────────────
    op.drop_table("ledger_counters")
    op.drop_table("access_grants")
    op.drop_index("ix_verifications_target", table_name="verifications")
    op.drop_table("verifications")
    op.drop_table("verifiers")
    op.drop_index("ix_harvests_planting_id", table_name="harvests")
    op.drop_table("harvests")
    op.drop_index("ix_plantings_field_id", table_name="plantings")
    op.drop_table("plantings")
    op.drop_index("ix_fields_owner_identity", table_name="fields")
    op.drop_table("fields")
    op.drop_table("farmers")

    # ── Drop enum types ─────────────────────────────────────────────────
    ENUM_ACCESS_LEVEL.drop(op.get_bind(), checkfirst=True)
    ENUM_VERIFICATION_STATUS.drop(op.get_bind(), checkfirst=True)
    ENUM_DATA_KIND.drop(op.get_bind(), checkfirst=True)
