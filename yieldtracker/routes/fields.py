"""Field registration, update and lookup routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from yieldtracker.auth.dependencies import CallerIdentity, get_caller
from yieldtracker.database import get_db
from yieldtracker.routes.errors import map_error, not_found
from yieldtracker.schemas.registry import (
	FieldCreate,
	FieldRead,
	FieldUpdate,
	PlantingListRead,
	PlantingRead,
)
from yieldtracker.services.registry_service import RegistryService

router = APIRouter(prefix="/fields", tags=["fields"])


@router.post("", response_model=FieldRead, status_code=status.HTTP_201_CREATED)
async def register_field(
	payload: FieldCreate,
	db: AsyncSession = Depends(get_db),
	caller: CallerIdentity = Depends(get_caller),
) -> FieldRead:
	service = RegistryService(db)
	try:
		field = await service.register_field(caller.identity, payload)
	except Exception as exc:
		raise map_error(exc) from exc
	return FieldRead.model_validate(field)


@router.put("/{field_id}", response_model=FieldRead)
async def update_field(
	field_id: int,
	payload: FieldUpdate,
	db: AsyncSession = Depends(get_db),
	caller: CallerIdentity = Depends(get_caller),
) -> FieldRead:
	service = RegistryService(db)
	try:
		field = await service.update_field(caller.identity, field_id, payload)
	except Exception as exc:
		raise map_error(exc) from exc
	return FieldRead.model_validate(field)


@router.get("/{field_id}", response_model=FieldRead)
async def get_field(field_id: int, db: AsyncSession = Depends(get_db)) -> FieldRead:
	field = await RegistryService(db).get_field(field_id)
	if field is None:
		raise not_found(f"Field {field_id} not found")
	return FieldRead.model_validate(field)


@router.get("/{field_id}/plantings", response_model=PlantingListRead)
async def list_plantings_for_field(field_id: int, db: AsyncSession = Depends(get_db)) -> PlantingListRead:
	plantings = await RegistryService(db).list_plantings_for_field(field_id)
	return PlantingListRead(items=[PlantingRead.model_validate(planting) for planting in plantings])
