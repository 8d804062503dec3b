"""Redis-backed rate limiting middleware."""

from __future__ import annotations

from datetime import UTC, datetime

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from yieldtracker.auth.dependencies import extract_caller_hint
from yieldtracker.config import get_settings
from yieldtracker.middleware.logging import is_registry_write


class RateLimitMiddleware(BaseHTTPMiddleware):
	"""Per-caller write quota backed by Redis atomic counters."""

	async def dispatch(self, request: Request, call_next):  # type: ignore[override]
		if not is_registry_write(request):
			return await call_next(request)

		caller = extract_caller_hint(request)
		if caller is None:
			return await call_next(request)

		redis_client = getattr(request.app.state, "redis", None)
		if redis_client is None:
			return await call_next(request)

		quota = get_settings().rate_limit_caller_per_minute
		minute_bucket = datetime.now(UTC).strftime("%Y%m%d%H%M")
		key = f"ratelimit:caller:{caller}:{minute_bucket}"
		current = await redis_client.incr(key)
		if current == 1:
			await redis_client.expire(key, 65)

		if current > quota:
			return JSONResponse(
				status_code=429,
				content={
					"detail": {
						"error": "rate_limited",
						"message": "Caller write quota exceeded",
						"quota": quota,
					}
				},
			)

		return await call_next(request)
