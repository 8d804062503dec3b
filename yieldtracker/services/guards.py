"""Authorization predicates consulted by the mutating registry operations.

Pure reads: none of these functions write, so a failed check never leaves
partial state behind.
"""

from __future__ import annotations

from typing import TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from yieldtracker.models.access import AccessGrant
from yieldtracker.models.attestation import Verifier
from yieldtracker.models.base import Base
from yieldtracker.models.registry import MAX_RECORD_ID, Farmer, Field

RecordT = TypeVar("RecordT", bound=Base)


def fits_record_id(record_id: int) -> bool:
	return 0 <= record_id <= MAX_RECORD_ID


async def load_record(db: AsyncSession, model: type[RecordT], record_id: int) -> RecordT | None:
	"""Primary-key lookup that treats ids outside the column range as missing."""
	if not fits_record_id(record_id):
		return None
	return await db.get(model, record_id)


async def is_registered_farmer(db: AsyncSession, identity: str) -> bool:
	farmer = await db.get(Farmer, identity)
	return farmer is not None and farmer.active


async def is_registered_verifier(db: AsyncSession, identity: str) -> bool:
	verifier = await db.get(Verifier, identity)
	return verifier is not None and verifier.active


async def owns_field(db: AsyncSession, field_id: int, identity: str) -> bool:
	"""True only if the field exists and ``identity`` is its owner.

	Does not consult the owner's farmer record, so an owner stays an owner
	regardless of their registration status.
	"""
	field = await load_record(db, Field, field_id)
	return field is not None and field.owner_identity == identity


def is_original_granter(grant: AccessGrant, identity: str) -> bool:
	return grant.granted_by == identity
