"""Caller identity resolution: every mutating route depends on get_caller."""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from yieldtracker.auth.jwt import AuthError, decode_token

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(slots=True, frozen=True)
class CallerIdentity:
	"""Authenticated principal on whose behalf an operation runs."""

	identity: str


def _raise_auth(exc: AuthError) -> HTTPException:
	return HTTPException(
		status_code=exc.status_code,
		detail={"error": exc.code, "message": exc.detail},
	)


def identity_from_credentials(credentials: HTTPAuthorizationCredentials | None) -> str:
	if credentials is None or credentials.scheme.lower() != "bearer":
		raise AuthError(code="auth_required", detail="Bearer token is required")
	payload = decode_token(credentials.credentials, expected_type="access")
	return str(payload["sub"])


def extract_caller_hint(request: Request) -> str | None:
	"""Best-effort identity for rate limiting; None when the token is unusable."""
	auth_header = request.headers.get("authorization", "")
	scheme, _, token = auth_header.partition(" ")
	if scheme.lower() != "bearer" or not token.strip():
		return None
	try:
		payload = decode_token(token.strip(), expected_type="access")
	except AuthError:
		return None
	return str(payload["sub"])


async def get_caller(request: Request) -> CallerIdentity:
	credentials = await bearer_scheme(request)
	try:
		identity = identity_from_credentials(credentials)
	except AuthError as exc:
		raise _raise_auth(exc) from exc
	return CallerIdentity(identity=identity)
