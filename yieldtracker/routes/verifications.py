"""Verifier registration and attestation routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from yieldtracker.auth.dependencies import CallerIdentity, get_caller
from yieldtracker.database import get_db
from yieldtracker.models.enums import DataKindEnum
from yieldtracker.routes.errors import map_error, not_found
from yieldtracker.schemas.attestation import (
	VerificationCreate,
	VerificationListRead,
	VerificationRead,
	VerifierCreate,
	VerifierRead,
)
from yieldtracker.services.verification_service import VerificationService

router = APIRouter(tags=["verifications"])


@router.post("/verifiers", response_model=VerifierRead, status_code=status.HTTP_201_CREATED)
async def register_verifier(
	payload: VerifierCreate,
	db: AsyncSession = Depends(get_db),
	caller: CallerIdentity = Depends(get_caller),
) -> VerifierRead:
	service = VerificationService(db)
	try:
		verifier = await service.register_verifier(caller.identity, payload)
	except Exception as exc:
		raise map_error(exc) from exc
	return VerifierRead.model_validate(verifier)


@router.get("/verifiers/{identity}", response_model=VerifierRead)
async def get_verifier(identity: str, db: AsyncSession = Depends(get_db)) -> VerifierRead:
	verifier = await VerificationService(db).get_verifier(identity)
	if verifier is None:
		raise not_found(f"Verifier {identity} not found")
	return VerifierRead.model_validate(verifier)


@router.post("/verifications", response_model=VerificationRead, status_code=status.HTTP_201_CREATED)
async def submit_verification(
	payload: VerificationCreate,
	db: AsyncSession = Depends(get_db),
	caller: CallerIdentity = Depends(get_caller),
) -> VerificationRead:
	service = VerificationService(db)
	try:
		verification = await service.submit_verification(caller.identity, payload)
	except Exception as exc:
		raise map_error(exc) from exc
	return VerificationRead.model_validate(verification)


@router.get("/verifications", response_model=VerificationListRead)
async def list_verifications_for_target(
	target_kind: DataKindEnum = Query(...),
	target_id: int = Query(..., ge=0),
	db: AsyncSession = Depends(get_db),
) -> VerificationListRead:
	verifications = await VerificationService(db).list_verifications_for_target(target_kind, target_id)
	return VerificationListRead(items=[VerificationRead.model_validate(v) for v in verifications])


@router.get("/verifications/{verification_id}", response_model=VerificationRead)
async def get_verification(verification_id: int, db: AsyncSession = Depends(get_db)) -> VerificationRead:
	verification = await VerificationService(db).get_verification(verification_id)
	if verification is None:
		raise not_found(f"Verification {verification_id} not found")
	return VerificationRead.model_validate(verification)
