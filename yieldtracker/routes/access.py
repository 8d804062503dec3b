"""Access-grant ledger routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from yieldtracker.auth.dependencies import CallerIdentity, get_caller
from yieldtracker.database import get_db
from yieldtracker.routes.errors import map_error, not_found
from yieldtracker.schemas.access import AccessGrantCreate, AccessGrantListRead, AccessGrantRead
from yieldtracker.services.access_service import AccessService

router = APIRouter(prefix="/access", tags=["access"])


@router.post("", response_model=AccessGrantRead, status_code=status.HTTP_201_CREATED)
async def grant_access(
	payload: AccessGrantCreate,
	db: AsyncSession = Depends(get_db),
	caller: CallerIdentity = Depends(get_caller),
) -> AccessGrantRead:
	service = AccessService(db)
	try:
		grant = await service.grant_access(
			caller.identity,
			payload.data_kind,
			payload.data_id,
			payload.accessor,
			payload.access_level,
		)
	except Exception as exc:
		raise map_error(exc) from exc
	return AccessGrantRead.model_validate(grant)


@router.delete(
	"/{data_kind}/{data_id}/{accessor}",
	status_code=status.HTTP_204_NO_CONTENT,
	response_class=Response,
)
async def revoke_access(
	data_kind: str,
	data_id: int,
	accessor: str,
	db: AsyncSession = Depends(get_db),
	caller: CallerIdentity = Depends(get_caller),
) -> Response:
	service = AccessService(db)
	try:
		await service.revoke_access(caller.identity, data_kind, data_id, accessor)
	except Exception as exc:
		raise map_error(exc) from exc
	return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{data_kind}/{data_id}/{accessor}", response_model=AccessGrantRead)
async def check_access(
	data_kind: str,
	data_id: int,
	accessor: str,
	db: AsyncSession = Depends(get_db),
) -> AccessGrantRead:
	grant = await AccessService(db).check_access(data_kind, data_id, accessor)
	if grant is None:
		raise not_found(f"No grant for {accessor} on {data_kind} {data_id}")
	return AccessGrantRead.model_validate(grant)


@router.get("/{data_kind}/{data_id}", response_model=AccessGrantListRead)
async def list_grants_for_record(
	data_kind: str,
	data_id: int,
	db: AsyncSession = Depends(get_db),
) -> AccessGrantListRead:
	service = AccessService(db)
	try:
		grants = await service.list_grants_for_record(data_kind, data_id)
	except Exception as exc:
		raise map_error(exc) from exc
	return AccessGrantListRead(items=[AccessGrantRead.model_validate(grant) for grant in grants])
