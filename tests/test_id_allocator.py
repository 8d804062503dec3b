from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from yieldtracker.models.counters import LedgerCounter
from yieldtracker.models.enums import CounterKindEnum
from yieldtracker.services.id_allocator import (
	CLOCK_COUNTER_NAME,
	IdAllocator,
	LedgerClock,
	acquire_write_lock,
)


@pytest.mark.asyncio
async def test_allocate_starts_at_one_and_increments(db_session: AsyncSession) -> None:
	allocator = IdAllocator(db_session)

	ids = [await allocator.allocate(CounterKindEnum.field) for _ in range(5)]

	assert ids == [1, 2, 3, 4, 5]
	assert await allocator.peek(CounterKindEnum.field) == 6


@pytest.mark.asyncio
async def test_sequences_are_independent_per_kind(db_session: AsyncSession) -> None:
	allocator = IdAllocator(db_session)

	assert await allocator.allocate(CounterKindEnum.field) == 1
	assert await allocator.allocate(CounterKindEnum.field) == 2
	assert await allocator.allocate(CounterKindEnum.planting) == 1
	assert await allocator.allocate(CounterKindEnum.harvest) == 1
	assert await allocator.allocate(CounterKindEnum.verification) == 1
	assert await allocator.allocate(CounterKindEnum.planting) == 2


@pytest.mark.asyncio
async def test_peek_does_not_allocate(db_session: AsyncSession) -> None:
	allocator = IdAllocator(db_session)

	assert await allocator.peek(CounterKindEnum.harvest) == 1
	assert await allocator.peek(CounterKindEnum.harvest) == 1
	assert await allocator.allocate(CounterKindEnum.harvest) == 1


@pytest.mark.asyncio
async def test_clock_is_separate_from_id_sequences(db_session: AsyncSession) -> None:
	clock = LedgerClock(db_session)
	allocator = IdAllocator(db_session)

	assert await clock.tick() == 1
	assert await clock.tick() == 2
	assert await allocator.allocate(CounterKindEnum.field) == 1
	assert await clock.current() == 3

	rows = await db_session.execute(select(LedgerCounter).order_by(LedgerCounter.name))
	names = {counter.name for counter in rows.scalars().all()}
	assert names == {CLOCK_COUNTER_NAME, "field"}


@pytest.mark.asyncio
async def test_counters_survive_commit(db_session: AsyncSession) -> None:
	allocator = IdAllocator(db_session)
	await allocator.allocate(CounterKindEnum.verification)
	await db_session.commit()

	assert await allocator.allocate(CounterKindEnum.verification) == 2


@pytest.mark.asyncio
async def test_write_lock_is_noop_outside_postgres(db_session: AsyncSession) -> None:
	await acquire_write_lock(db_session)
	assert await IdAllocator(db_session).allocate(CounterKindEnum.field) == 1


@pytest.mark.asyncio
async def test_write_lock_takes_advisory_lock_on_postgres() -> None:
	fake_db = SimpleNamespace(
		get_bind=lambda: SimpleNamespace(dialect=SimpleNamespace(name="postgresql")),
		execute=AsyncMock(),
	)

	await acquire_write_lock(fake_db)  # type: ignore[arg-type]

	assert fake_db.execute.await_count == 1
	statement = fake_db.execute.await_args.args[0]
	assert "pg_advisory_xact_lock" in str(statement)
