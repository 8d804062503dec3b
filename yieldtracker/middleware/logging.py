"""Structured logging: request ids, caller binding and the registry write audit line."""

from __future__ import annotations

import logging
import time
import uuid
from typing import Any

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from yieldtracker.auth.dependencies import extract_caller_hint
from yieldtracker.config import LogFormat, get_settings

_configured = False


def configure_structured_logging() -> None:
	"""Configure stdlib + structlog once for the API process."""
	global _configured
	if _configured:
		return

	settings = get_settings()
	log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

	shared_processors: list[Any] = [
		structlog.contextvars.merge_contextvars,
		structlog.processors.add_log_level,
		structlog.processors.TimeStamper(fmt="iso", utc=True),
	]

	if settings.log_format == LogFormat.json:
		renderer: Any = structlog.processors.JSONRenderer()
		logging.basicConfig(level=log_level, format="%(message)s")
	else:
		renderer = structlog.dev.ConsoleRenderer()
		logging.basicConfig(level=log_level)

	structlog.configure(
		processors=[
			*shared_processors,
			structlog.processors.format_exc_info,
			renderer,
		],
		wrapper_class=structlog.make_filtering_bound_logger(log_level),
		logger_factory=structlog.PrintLoggerFactory(),
		cache_logger_on_first_use=True,
	)
	_configured = True


_WRITE_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


def is_registry_write(request: Request) -> bool:
	return request.method in _WRITE_METHODS and request.url.path.startswith("/api/")


def write_outcome(status_code: int) -> str:
	"""Every registry write is all-or-nothing: below 400 it committed, otherwise it rolled back."""
	return "committed" if status_code < 400 else "rejected"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
	"""Bind the request id and caller to every log line; audit registry writes."""

	async def dispatch(self, request: Request, call_next):  # type: ignore[override]
		request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
		request.state.request_id = request_id
		caller = extract_caller_hint(request)

		structlog.contextvars.clear_contextvars()
		structlog.contextvars.bind_contextvars(request_id=request_id, caller=caller)
		logger = structlog.get_logger("yieldtracker.request")
		write = is_registry_write(request)
		started = time.perf_counter()

		try:
			response = await call_next(request)
		except Exception:
			logger.exception(
				"registry_write_failed" if write else "http_request_failed",
				method=request.method,
				path=request.url.path,
				duration_ms=_elapsed_ms(started),
			)
			raise

		response.headers["x-request-id"] = request_id
		if write:
			outcome = write_outcome(response.status_code)
			log = logger.info if outcome == "committed" else logger.warning
			log(
				"registry_write",
				method=request.method,
				path=request.url.path,
				status_code=response.status_code,
				outcome=outcome,
				duration_ms=_elapsed_ms(started),
			)
		else:
			logger.debug(
				"http_request",
				method=request.method,
				path=request.url.path,
				status_code=response.status_code,
				duration_ms=_elapsed_ms(started),
			)
		return response


def _elapsed_ms(started: float) -> float:
	return round((time.perf_counter() - started) * 1000.0, 2)
