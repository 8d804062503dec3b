"""JWT validation.

The registry does not issue identities or tokens: the ``sub`` claim of a
token minted by the upstream identity provider *is* the caller identity.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Literal

from jose import JWTError, jwt

from yieldtracker.config import get_settings
from yieldtracker.models.registry import IDENTITY_LENGTH

TokenType = Literal["access"]


@dataclass(slots=True)
class AuthError(Exception):
	"""Structured authentication error for consistent mapping at the edge."""

	code: str
	detail: str
	status_code: int = 401


def decode_token(token: str, expected_type: TokenType | None = None) -> dict[str, Any]:
	settings = get_settings()
	try:
		payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
	except JWTError as exc:
		raise AuthError(code="token_invalid", detail="Invalid authentication token") from exc

	subject = payload.get("sub")
	if not isinstance(subject, str) or not subject:
		raise AuthError(code="token_invalid", detail="Token subject is missing")
	if len(subject) > IDENTITY_LENGTH:
		raise AuthError(code="token_invalid", detail="Token subject is too long")

	token_type = payload.get("typ")
	if expected_type is not None and token_type != expected_type:
		raise AuthError(code="token_type_invalid", detail=f"Expected {expected_type} token")

	exp_raw = payload.get("exp")
	if not isinstance(exp_raw, int):
		raise AuthError(code="token_invalid", detail="Token expiration is missing")
	if datetime.now(UTC).timestamp() >= exp_raw:
		raise AuthError(code="token_expired", detail="Authentication token has expired")

	return payload
