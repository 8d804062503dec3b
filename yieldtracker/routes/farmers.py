"""Farmer registration and lookup routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from yieldtracker.auth.dependencies import CallerIdentity, get_caller
from yieldtracker.database import get_db
from yieldtracker.routes.errors import map_error, not_found
from yieldtracker.schemas.registry import FarmerCreate, FarmerRead, FieldListRead, FieldRead
from yieldtracker.services.registry_service import RegistryService

router = APIRouter(prefix="/farmers", tags=["farmers"])


@router.post("", response_model=FarmerRead, status_code=status.HTTP_201_CREATED)
async def register_farmer(
	payload: FarmerCreate,
	db: AsyncSession = Depends(get_db),
	caller: CallerIdentity = Depends(get_caller),
) -> FarmerRead:
	service = RegistryService(db)
	try:
		farmer = await service.register_farmer(caller.identity, payload)
	except Exception as exc:
		raise map_error(exc) from exc
	return FarmerRead.model_validate(farmer)


@router.get("/{identity}", response_model=FarmerRead)
async def get_farmer(identity: str, db: AsyncSession = Depends(get_db)) -> FarmerRead:
	farmer = await RegistryService(db).get_farmer(identity)
	if farmer is None:
		raise not_found(f"Farmer {identity} not found")
	return FarmerRead.model_validate(farmer)


@router.get("/{identity}/fields", response_model=FieldListRead)
async def list_fields_for_owner(identity: str, db: AsyncSession = Depends(get_db)) -> FieldListRead:
	fields = await RegistryService(db).list_fields_for_owner(identity)
	return FieldListRead(items=[FieldRead.model_validate(field) for field in fields])
