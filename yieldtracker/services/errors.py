"""Registry error taxonomy shared by every service."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class ErrorCode(StrEnum):
	not_authorized = "not_authorized"
	not_found = "not_found"
	already_exists = "already_exists"
	invalid_input = "invalid_input"
	invalid_field = "invalid_field"
	invalid_planting = "invalid_planting"
	# Reserved: no operation raises it yet.
	field_not_planted = "field_not_planted"
	not_verifier = "not_verifier"


@dataclass(slots=True)
class RegistryError(Exception):
	"""Tagged rejection of a registry operation.

	Raised before any write, so a rejected call leaves no trace once the
	surrounding transaction rolls back.  Callers branch on ``code``.
	"""

	code: ErrorCode
	detail: str

	def __str__(self) -> str:
		return f"{self.code.value}: {self.detail}"
