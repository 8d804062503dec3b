"""Edge mapping from service failures to HTTP errors."""

from __future__ import annotations

from fastapi import HTTPException, status

from yieldtracker.services.errors import ErrorCode, RegistryError

_STATUS_BY_CODE: dict[ErrorCode, int] = {
	ErrorCode.not_authorized: status.HTTP_403_FORBIDDEN,
	ErrorCode.not_verifier: status.HTTP_403_FORBIDDEN,
	ErrorCode.not_found: status.HTTP_404_NOT_FOUND,
	ErrorCode.already_exists: status.HTTP_409_CONFLICT,
	ErrorCode.field_not_planted: status.HTTP_409_CONFLICT,
	ErrorCode.invalid_input: status.HTTP_400_BAD_REQUEST,
	ErrorCode.invalid_field: status.HTTP_400_BAD_REQUEST,
	ErrorCode.invalid_planting: status.HTTP_400_BAD_REQUEST,
}


def map_error(exc: Exception) -> HTTPException:
	if isinstance(exc, RegistryError):
		return HTTPException(
			status_code=_STATUS_BY_CODE[exc.code],
			detail={"error": exc.code.value, "message": exc.detail},
		)
	if isinstance(exc, LookupError):
		return HTTPException(
			status_code=status.HTTP_404_NOT_FOUND,
			detail={"error": ErrorCode.not_found.value, "message": str(exc)},
		)
	return HTTPException(
		status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
		detail={"error": "internal", "message": "Unexpected registry failure"},
	)


def not_found(message: str) -> HTTPException:
	return HTTPException(
		status_code=status.HTTP_404_NOT_FOUND,
		detail={"error": ErrorCode.not_found.value, "message": message},
	)
