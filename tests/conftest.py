"""Shared pytest fixtures: async test clients, SQLite-backed sessions, fake Redis."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable
from contextlib import asynccontextmanager
from datetime import UTC, datetime, timedelta
from typing import Any
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from yieldtracker.auth.dependencies import CallerIdentity, get_caller
from yieldtracker.config import get_settings
from yieldtracker.database import get_db
from yieldtracker.main import app
from yieldtracker.models import Base

FARMER_A = "ST1PQHQKV0RJXZFY1DGX8MNSNYVE3VGZJSRTPGZGM"
IDENTITY_B = "ST1SJ3DTE5DN7X54YDH5D64R3BCB6A2AG2ZQ8YPD5"
IDENTITY_C = "ST2CY5V39NHDPWSXMW9QDT3HC3GD6Q6XX4CFRK9AG"
IDENTITY_D = "ST2JHG361ZXG51QTKY2NQCVBPPRRE2KZB1HR05NNC"


def mint_token(
	subject: str,
	*,
	minutes: int = 30,
	token_type: str = "access",
) -> str:
	"""Sign a token the way the upstream identity provider would."""
	settings = get_settings()
	now = datetime.now(UTC)
	claims = {
		"sub": subject,
		"typ": token_type,
		"iat": int(now.timestamp()),
		"exp": int((now + timedelta(minutes=minutes)).timestamp()),
	}
	return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


class FakeAsyncSession:
	def __init__(self) -> None:
		self.commit = AsyncMock()
		self.rollback = AsyncMock()
		self.close = AsyncMock()
		self.execute = AsyncMock()


class FakeRedis:
	def __init__(self) -> None:
		self._counter: dict[str, int] = {}
		self.incr = AsyncMock(side_effect=self._incr)
		self.expire = AsyncMock(return_value=True)
		self.ping = AsyncMock(return_value=True)

	async def _incr(self, key: str) -> int:
		value = self._counter.get(key, 0) + 1
		self._counter[key] = value
		return value

	def reset_counters(self) -> None:
		self._counter.clear()


@asynccontextmanager
async def _noop_lifespan(_: Any) -> AsyncGenerator[None, None]:
	yield


@asynccontextmanager
async def _asgi_client() -> AsyncGenerator[AsyncClient, None]:
	original_lifespan = app.router.lifespan_context
	app.router.lifespan_context = _noop_lifespan
	transport = ASGITransport(app=app)
	try:
		async with AsyncClient(transport=transport, base_url="http://test") as test_client:
			yield test_client
	finally:
		app.router.lifespan_context = original_lifespan
		app.dependency_overrides.clear()


@pytest.fixture
def fake_db_session() -> FakeAsyncSession:
	"""A lightweight async-session stub for dependency overrides in API tests."""
	return FakeAsyncSession()


@pytest.fixture
def fake_redis() -> FakeRedis:
	return FakeRedis()


@pytest.fixture
def caller_identity() -> str:
	return FARMER_A


@pytest.fixture
async def client(
	fake_db_session: FakeAsyncSession,
	caller_identity: str,
) -> AsyncGenerator[AsyncClient, None]:
	"""HTTPX async client with lifespan disabled, DB and caller mocked."""

	async def override_get_db() -> AsyncGenerator[Any, None]:
		yield fake_db_session

	async def override_get_caller() -> CallerIdentity:
		return CallerIdentity(identity=caller_identity)

	app.dependency_overrides[get_db] = override_get_db
	app.dependency_overrides[get_caller] = override_get_caller
	async with _asgi_client() as test_client:
		yield test_client


@pytest.fixture
async def auth_client(fake_db_session: FakeAsyncSession) -> AsyncGenerator[AsyncClient, None]:
	"""HTTPX async client with DB override only (real auth dependency active)."""

	async def override_get_db() -> AsyncGenerator[Any, None]:
		yield fake_db_session

	app.dependency_overrides[get_db] = override_get_db
	async with _asgi_client() as test_client:
		yield test_client


# ── SQLite-backed fixtures ──────────────────────────────────────────────────


@pytest.fixture
async def sqlite_engine() -> AsyncGenerator[AsyncEngine, None]:
	"""In-memory database shared by every session of one test."""
	engine = create_async_engine(
		"sqlite+aiosqlite://",
		poolclass=StaticPool,
		connect_args={"check_same_thread": False},
	)
	async with engine.begin() as connection:
		await connection.run_sync(Base.metadata.create_all)
	yield engine
	await engine.dispose()


@pytest.fixture
def session_factory(sqlite_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
	return async_sessionmaker(sqlite_engine, expire_on_commit=False)


@pytest.fixture
async def db_session(
	session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
	async with session_factory() as session:
		yield session


@pytest.fixture
async def ledger_client(
	session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
	"""Full stack: real JWT auth, real services, one SQLite transaction per request."""

	async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
		async with session_factory() as session:
			try:
				yield session
				await session.commit()
			except Exception:
				await session.rollback()
				raise

	app.dependency_overrides[get_db] = override_get_db
	async with _asgi_client() as test_client:
		yield test_client


@pytest.fixture
def bearer() -> Callable[[str], dict[str, str]]:
	"""Authorization header for an identity."""

	def _headers(identity: str) -> dict[str, str]:
		return {"Authorization": f"Bearer {mint_token(identity)}"}

	return _headers
