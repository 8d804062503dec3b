"""Verifier registry and attestation log."""

from __future__ import annotations

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from yieldtracker.models.attestation import Verification, Verifier
from yieldtracker.models.enums import CounterKindEnum, DataKindEnum
from yieldtracker.schemas.attestation import VerificationCreate, VerifierCreate
from yieldtracker.services import guards
from yieldtracker.services.errors import ErrorCode, RegistryError
from yieldtracker.services.id_allocator import IdAllocator, LedgerClock, acquire_write_lock

logger = structlog.get_logger("yieldtracker.attestation")


class VerificationService:
	def __init__(self, db: AsyncSession):
		self.db = db
		self.ids = IdAllocator(db)
		self.clock = LedgerClock(db)

	async def register_verifier(self, caller: str, payload: VerifierCreate) -> Verifier:
		await acquire_write_lock(self.db)
		verifier = await self.db.get(Verifier, caller)
		if verifier is not None and verifier.active:
			raise RegistryError(ErrorCode.already_exists, f"Verifier {caller} is already registered")

		now = await self.clock.tick()
		if verifier is None:
			verifier = Verifier(identity=caller)
			self.db.add(verifier)
		verifier.name = payload.name
		verifier.verification_type = payload.verification_type
		verifier.registered_at = now
		verifier.active = True
		await self.db.flush()
		await self.db.refresh(verifier)
		logger.info("verifier_registered", identity=caller, verification_type=payload.verification_type)
		return verifier

	async def get_verifier(self, identity: str) -> Verifier | None:
		return await self.db.get(Verifier, identity)

	async def submit_verification(self, caller: str, payload: VerificationCreate) -> Verification:
		"""Append an attestation.  The target record is deliberately not looked up."""
		await acquire_write_lock(self.db)
		if not await guards.is_registered_verifier(self.db, caller):
			raise RegistryError(ErrorCode.not_verifier, "Only registered verifiers can submit verifications")

		now = await self.clock.tick()
		verification_id = await self.ids.allocate(CounterKindEnum.verification)
		verification = Verification(
			id=verification_id,
			verifier_identity=caller,
			target_kind=payload.target_kind,
			target_id=payload.target_id,
			verified_at=now,
			status=payload.status,
			comments=payload.comments,
		)
		self.db.add(verification)
		await self.db.flush()
		await self.db.refresh(verification)
		logger.info(
			"verification_submitted",
			verification_id=verification_id,
			verifier=caller,
			target_kind=payload.target_kind.value,
			target_id=payload.target_id,
			status=payload.status.value,
		)
		return verification

	async def get_verification(self, verification_id: int) -> Verification | None:
		return await guards.load_record(self.db, Verification, verification_id)

	async def list_verifications_for_target(
		self,
		target_kind: DataKindEnum,
		target_id: int,
	) -> list[Verification]:
		if not guards.fits_record_id(target_id):
			return []
		stmt = (
			select(Verification)
			.where(Verification.target_kind == target_kind, Verification.target_id == target_id)
			.order_by(Verification.id.asc())
		)
		rows = await self.db.execute(stmt)
		return list(rows.scalars().all())
