"""FastAPI application entrypoint: lifespan, routers, middleware."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from redis.asyncio import Redis
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from yieldtracker.config import get_settings
from yieldtracker.database import async_session_factory, engine
from yieldtracker.middleware.logging import RequestLoggingMiddleware, configure_structured_logging
from yieldtracker.middleware.rate_limit import RateLimitMiddleware
from yieldtracker.models.enums import CounterKindEnum
from yieldtracker.routes import access, farmers, fields, plantings, verifications
from yieldtracker.services.id_allocator import IdAllocator, LedgerClock

logger = logging.getLogger("yieldtracker")

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application startup / shutdown lifecycle.

    Startup:
      1. Initialize structured logging
      2. Verify database connectivity
      3. Connect to Redis (rate limiting)

    Shutdown:
      1. Close Redis connection pool
      2. Dispose SQLAlchemy engine
    """
    configure_structured_logging()
    settings = get_settings()
    logger.info(
        "yieldtracker starting",
        extra={"log_level": settings.log_level, "log_format": settings.log_format.value},
    )

    redis: Redis | None = None
    try:
        async with engine.connect() as connection:
            await connection.execute(text("SELECT 1"))

        redis = Redis.from_url(settings.redis_url, decode_responses=True)
        await redis.ping()
        app.state.redis = redis
    except Exception as exc:
        logger.exception("startup failure", extra={"error": str(exc)})
        raise

    yield

    logger.info("yieldtracker shutting down")
    if redis is not None:
        await redis.aclose()
    await engine.dispose()


async def _ledger_check(session: AsyncSession) -> dict[str, Any]:
    """Counter state: the next id per sequence and the current clock value."""
    ids = IdAllocator(session)
    next_ids = {kind.value: await ids.peek(kind) for kind in CounterKindEnum}
    return {
        "ok": True,
        "message": "ok",
        "clock": await LedgerClock(session).current(),
        "next_ids": next_ids,
    }


async def _run_readiness_checks(app: FastAPI) -> dict[str, dict[str, Any]]:
    checks: dict[str, dict[str, Any]] = {}

    try:
        async with engine.connect() as connection:
            await connection.execute(text("SELECT 1"))
        checks["database"] = {"ok": True, "message": "ok"}
    except Exception as exc:
        checks["database"] = {"ok": False, "message": str(exc)}

    # Counters live in a migrated table; a missing table means an unmigrated database.
    try:
        async with async_session_factory() as session:
            checks["ledger"] = await _ledger_check(session)
    except Exception as exc:
        checks["ledger"] = {"ok": False, "message": str(exc)}

    redis_client = getattr(app.state, "redis", None)
    if redis_client is None:
        checks["redis"] = {"ok": False, "message": "not connected"}
    else:
        try:
            await redis_client.ping()
            checks["redis"] = {"ok": True, "message": "ok"}
        except Exception as exc:
            checks["redis"] = {"ok": False, "message": str(exc)}

    return checks


app = FastAPI(
    title="YieldTracker API",
    description=(
        "Agricultural provenance registry with farmers, fields, planting and "
        "harvest events, third-party attestations, and per-record access "
        "delegation."
    ),
    version=VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── Middleware ──────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RateLimitMiddleware)
app.add_middleware(RequestLoggingMiddleware)


# ── Health checks ───────────────────────────────────────────────────────────
@app.get("/health", tags=["system"])
async def health_check() -> dict[str, str]:
    """Basic health check: verifies the API process is alive."""
    return {
        "status": "ok",
        "service": "yieldtracker",
        "version": VERSION,
    }


@app.get("/health/ready", tags=["system"])
async def readiness_check() -> JSONResponse:
    """Dependency readiness: database, ledger counters and Redis."""
    checks = await _run_readiness_checks(app)
    healthy = all(check["ok"] for check in checks.values())
    return JSONResponse(
        status_code=200 if healthy else 503,
        content={"status": "ok" if healthy else "degraded", "checks": checks},
    )


# ── Router registration ────────────────────────────────────────────────────
app.include_router(farmers.router, prefix="/api/v1")
app.include_router(fields.router, prefix="/api/v1")
app.include_router(plantings.router, prefix="/api/v1")
app.include_router(verifications.router, prefix="/api/v1")
app.include_router(access.router, prefix="/api/v1")
