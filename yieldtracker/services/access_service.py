"""Access-control ledger: grant, revoke and check per-record view permissions."""

from __future__ import annotations

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from yieldtracker.models.access import AccessGrant
from yieldtracker.models.enums import AccessLevelEnum, DataKindEnum
from yieldtracker.models.registry import Harvest, Planting
from yieldtracker.services import guards
from yieldtracker.services.errors import ErrorCode, RegistryError
from yieldtracker.services.id_allocator import LedgerClock, acquire_write_lock

logger = structlog.get_logger("yieldtracker.access")


def parse_data_kind(raw: DataKindEnum | str) -> DataKindEnum:
	"""Exact match against the closed set of kinds; no case folding or trimming."""
	try:
		return DataKindEnum(raw)
	except ValueError as exc:
		raise RegistryError(ErrorCode.invalid_input, f"unsupported data kind: {raw}") from exc


class AccessService:
	def __init__(self, db: AsyncSession):
		self.db = db
		self.clock = LedgerClock(db)

	async def grant_access(
		self,
		caller: str,
		data_kind: DataKindEnum | str,
		data_id: int,
		accessor: str,
		access_level: AccessLevelEnum,
	) -> AccessGrant:
		await acquire_write_lock(self.db)
		kind = parse_data_kind(data_kind)
		await self._require_record_owner(kind, data_id, caller)

		now = await self.clock.tick()
		grant = await self.db.get(AccessGrant, (kind, data_id, accessor))
		if grant is None:
			grant = AccessGrant(data_kind=kind, data_id=data_id, accessor_identity=accessor)
			self.db.add(grant)
		grant.granted_by = caller
		grant.granted_at = now
		grant.access_level = access_level
		await self.db.flush()
		await self.db.refresh(grant)
		logger.info(
			"access_granted",
			data_kind=kind.value,
			data_id=data_id,
			accessor=accessor,
			granted_by=caller,
			access_level=access_level.value,
		)
		return grant

	async def revoke_access(
		self,
		caller: str,
		data_kind: DataKindEnum | str,
		data_id: int,
		accessor: str,
	) -> None:
		await acquire_write_lock(self.db)
		grant = await self.check_access(data_kind, data_id, accessor)
		if grant is None:
			raise RegistryError(ErrorCode.not_found, "No access grant exists for this record and accessor")
		if not guards.is_original_granter(grant, caller):
			raise RegistryError(ErrorCode.not_authorized, "Only the original granter can revoke access")

		kind = grant.data_kind
		await self.db.delete(grant)
		await self.db.flush()
		logger.info(
			"access_revoked",
			data_kind=kind.value,
			data_id=data_id,
			accessor=accessor,
			revoked_by=caller,
		)

	async def check_access(
		self,
		data_kind: DataKindEnum | str,
		data_id: int,
		accessor: str,
	) -> AccessGrant | None:
		try:
			kind = parse_data_kind(data_kind)
		except RegistryError:
			return None
		if not guards.fits_record_id(data_id):
			return None
		return await self.db.get(AccessGrant, (kind, data_id, accessor))

	async def list_grants_for_record(
		self,
		data_kind: DataKindEnum | str,
		data_id: int,
	) -> list[AccessGrant]:
		kind = parse_data_kind(data_kind)
		if not guards.fits_record_id(data_id):
			return []
		stmt = (
			select(AccessGrant)
			.where(AccessGrant.data_kind == kind, AccessGrant.data_id == data_id)
			.order_by(AccessGrant.accessor_identity.asc())
		)
		rows = await self.db.execute(stmt)
		return list(rows.scalars().all())

	async def _require_record_owner(self, kind: DataKindEnum, data_id: int, caller: str) -> None:
		if kind == DataKindEnum.field:
			# A missing field simply fails ownership.
			if not await guards.owns_field(self.db, data_id, caller):
				raise RegistryError(ErrorCode.not_authorized, f"Caller does not own field {data_id}")
			return

		if kind == DataKindEnum.planting:
			record: Planting | Harvest | None = await guards.load_record(self.db, Planting, data_id)
		elif kind == DataKindEnum.harvest:
			record = await guards.load_record(self.db, Harvest, data_id)
		else:
			raise RegistryError(ErrorCode.invalid_input, f"unsupported data kind: {kind}")

		if record is None:
			raise RegistryError(ErrorCode.not_found, f"{kind.value.capitalize()} {data_id} not found")
		if record.owner_identity != caller:
			raise RegistryError(ErrorCode.not_authorized, f"Caller does not own {kind.value} {data_id}")
