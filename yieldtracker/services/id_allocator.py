"""Monotonic id sequences, the logical clock, and the global write lock."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from yieldtracker.config import get_settings
from yieldtracker.models.counters import LedgerCounter
from yieldtracker.models.enums import CounterKindEnum

CLOCK_COUNTER_NAME = "ledger_clock"


async def acquire_write_lock(db: AsyncSession) -> None:
	"""Serialize every mutating operation behind one transaction-scoped lock.

	PostgreSQL releases the advisory lock at commit/rollback.  Other dialects
	(SQLite in tests) already serialize writers at the database level.
	"""
	if db.get_bind().dialect.name != "postgresql":
		return
	await db.execute(select(func.pg_advisory_xact_lock(get_settings().write_lock_key)))


async def _advance(db: AsyncSession, name: str) -> int:
	row = await db.execute(
		select(LedgerCounter).where(LedgerCounter.name == name).with_for_update()
	)
	counter = row.scalar_one_or_none()
	if counter is None:
		counter = LedgerCounter(name=name, value=1)
		db.add(counter)
	current = counter.value
	counter.value = current + 1
	await db.flush()
	return current


async def _peek(db: AsyncSession, name: str) -> int:
	row = await db.execute(select(LedgerCounter.value).where(LedgerCounter.name == name))
	value = row.scalar_one_or_none()
	return 1 if value is None else int(value)


class IdAllocator:
	"""Four independent sequences (field, planting, harvest, verification).

	``allocate`` must only be called once every authorization check of the
	calling operation has passed, inside the same transaction as the write
	that uses the id.
	"""

	def __init__(self, db: AsyncSession):
		self.db = db

	async def allocate(self, kind: CounterKindEnum) -> int:
		return await _advance(self.db, kind.value)

	async def peek(self, kind: CounterKindEnum) -> int:
		return await _peek(self.db, kind.value)


class LedgerClock:
	"""Persisted logical clock stamped onto registered_at / verified_at / granted_at."""

	def __init__(self, db: AsyncSession):
		self.db = db

	async def tick(self) -> int:
		return await _advance(self.db, CLOCK_COUNTER_NAME)

	async def current(self) -> int:
		return await _peek(self.db, CLOCK_COUNTER_NAME)
