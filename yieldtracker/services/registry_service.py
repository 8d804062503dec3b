"""Entity registry: farmers, fields, plantings and harvests."""

from __future__ import annotations

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from yieldtracker.models.enums import CounterKindEnum
from yieldtracker.models.registry import Farmer, Field, Harvest, Planting
from yieldtracker.schemas.registry import (
	FarmerCreate,
	FieldCreate,
	FieldUpdate,
	HarvestCreate,
	PlantingCreate,
)
from yieldtracker.services import guards
from yieldtracker.services.errors import ErrorCode, RegistryError
from yieldtracker.services.id_allocator import IdAllocator, LedgerClock, acquire_write_lock

logger = structlog.get_logger("yieldtracker.registry")


class RegistryService:
	"""Identity-gated creation and update of registry records.

	Every mutating method takes the write lock first, runs all of its checks,
	and only then ticks the clock, allocates an id and writes.
	"""

	def __init__(self, db: AsyncSession):
		self.db = db
		self.ids = IdAllocator(db)
		self.clock = LedgerClock(db)

	# ── Farmers ──────────────────────────────────────────────────────────

	async def register_farmer(self, caller: str, payload: FarmerCreate) -> Farmer:
		await acquire_write_lock(self.db)
		farmer = await self.db.get(Farmer, caller)
		if farmer is not None and farmer.active:
			raise RegistryError(ErrorCode.already_exists, f"Farmer {caller} is already registered")

		now = await self.clock.tick()
		if farmer is None:
			farmer = Farmer(identity=caller)
			self.db.add(farmer)
		farmer.name = payload.name
		farmer.location = payload.location
		farmer.registered_at = now
		farmer.active = True
		await self.db.flush()
		await self.db.refresh(farmer)
		logger.info("farmer_registered", identity=caller, registered_at=now)
		return farmer

	async def get_farmer(self, identity: str) -> Farmer | None:
		return await self.db.get(Farmer, identity)

	# ── Fields ───────────────────────────────────────────────────────────

	async def register_field(self, caller: str, payload: FieldCreate) -> Field:
		await acquire_write_lock(self.db)
		if not await guards.is_registered_farmer(self.db, caller):
			raise RegistryError(ErrorCode.not_authorized, "Only registered farmers can register fields")

		now = await self.clock.tick()
		field_id = await self.ids.allocate(CounterKindEnum.field)
		field = Field(
			id=field_id,
			owner_identity=caller,
			location=payload.location,
			size_hectares=payload.size_hectares,
			soil_type=payload.soil_type,
			registered_at=now,
			active=True,
		)
		self.db.add(field)
		await self.db.flush()
		await self.db.refresh(field)
		logger.info("field_registered", field_id=field_id, owner=caller)
		return field

	async def update_field(self, caller: str, field_id: int, payload: FieldUpdate) -> Field:
		await acquire_write_lock(self.db)
		if not await guards.owns_field(self.db, field_id, caller):
			raise RegistryError(ErrorCode.not_authorized, f"Caller does not own field {field_id}")
		field = await guards.load_record(self.db, Field, field_id)
		if field is None:
			raise RegistryError(ErrorCode.not_found, f"Field {field_id} not found")

		field.owner_identity = caller
		field.location = payload.location
		field.size_hectares = payload.size_hectares
		field.soil_type = payload.soil_type
		field.active = payload.active
		await self.db.flush()
		await self.db.refresh(field)
		logger.info("field_updated", field_id=field_id, active=payload.active)
		return field

	async def get_field(self, field_id: int) -> Field | None:
		return await guards.load_record(self.db, Field, field_id)

	async def list_fields_for_owner(self, identity: str) -> list[Field]:
		stmt = select(Field).where(Field.owner_identity == identity).order_by(Field.id.asc())
		rows = await self.db.execute(stmt)
		return list(rows.scalars().all())

	# ── Plantings ────────────────────────────────────────────────────────

	async def record_planting(self, caller: str, payload: PlantingCreate) -> Planting:
		await acquire_write_lock(self.db)
		# A missing field fails the ownership check too, so it surfaces as
		# not_authorized rather than a separate error.
		if not await guards.owns_field(self.db, payload.field_id, caller):
			raise RegistryError(
				ErrorCode.not_authorized,
				f"Caller does not own field {payload.field_id}",
			)

		planting_id = await self.ids.allocate(CounterKindEnum.planting)
		planting = Planting(
			id=planting_id,
			field_id=payload.field_id,
			owner_identity=caller,
			crop_type=payload.crop_type,
			planting_date=payload.planting_date,
			inputs_used=payload.inputs_used,
			notes=payload.notes,
		)
		self.db.add(planting)
		await self.db.flush()
		await self.db.refresh(planting)
		logger.info("planting_recorded", planting_id=planting_id, field_id=payload.field_id)
		return planting

	async def get_planting(self, planting_id: int) -> Planting | None:
		return await guards.load_record(self.db, Planting, planting_id)

	async def list_plantings_for_field(self, field_id: int) -> list[Planting]:
		if not guards.fits_record_id(field_id):
			return []
		stmt = select(Planting).where(Planting.field_id == field_id).order_by(Planting.id.asc())
		rows = await self.db.execute(stmt)
		return list(rows.scalars().all())

	# ── Harvests ─────────────────────────────────────────────────────────

	async def record_harvest(self, caller: str, payload: HarvestCreate) -> Harvest:
		await acquire_write_lock(self.db)
		planting = await guards.load_record(self.db, Planting, payload.planting_id)
		if planting is None:
			raise RegistryError(
				ErrorCode.invalid_planting,
				f"Planting {payload.planting_id} does not exist",
			)
		if planting.owner_identity != caller:
			raise RegistryError(
				ErrorCode.not_authorized,
				f"Caller does not own planting {payload.planting_id}",
			)

		harvest_id = await self.ids.allocate(CounterKindEnum.harvest)
		harvest = Harvest(
			id=harvest_id,
			planting_id=planting.id,
			field_id=planting.field_id,
			owner_identity=caller,
			yield_amount=payload.yield_amount,
			quality_metrics=payload.quality_metrics,
			harvest_date=payload.harvest_date,
			notes=payload.notes,
		)
		self.db.add(harvest)
		await self.db.flush()
		await self.db.refresh(harvest)
		logger.info(
			"harvest_recorded",
			harvest_id=harvest_id,
			planting_id=planting.id,
			field_id=planting.field_id,
		)
		return harvest

	async def get_harvest(self, harvest_id: int) -> Harvest | None:
		return await guards.load_record(self.db, Harvest, harvest_id)

	async def list_harvests_for_planting(self, planting_id: int) -> list[Harvest]:
		if not guards.fits_record_id(planting_id):
			return []
		stmt = select(Harvest).where(Harvest.planting_id == planting_id).order_by(Harvest.id.asc())
		rows = await self.db.execute(stmt)
		return list(rows.scalars().all())
