"""Planting and harvest event routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from yieldtracker.auth.dependencies import CallerIdentity, get_caller
from yieldtracker.database import get_db
from yieldtracker.routes.errors import map_error, not_found
from yieldtracker.schemas.registry import (
	HarvestCreate,
	HarvestListRead,
	HarvestRead,
	PlantingCreate,
	PlantingRead,
)
from yieldtracker.services.registry_service import RegistryService

router = APIRouter(tags=["plantings"])


@router.post("/plantings", response_model=PlantingRead, status_code=status.HTTP_201_CREATED)
async def record_planting(
	payload: PlantingCreate,
	db: AsyncSession = Depends(get_db),
	caller: CallerIdentity = Depends(get_caller),
) -> PlantingRead:
	service = RegistryService(db)
	try:
		planting = await service.record_planting(caller.identity, payload)
	except Exception as exc:
		raise map_error(exc) from exc
	return PlantingRead.model_validate(planting)


@router.get("/plantings/{planting_id}", response_model=PlantingRead)
async def get_planting(planting_id: int, db: AsyncSession = Depends(get_db)) -> PlantingRead:
	planting = await RegistryService(db).get_planting(planting_id)
	if planting is None:
		raise not_found(f"Planting {planting_id} not found")
	return PlantingRead.model_validate(planting)


@router.get("/plantings/{planting_id}/harvests", response_model=HarvestListRead)
async def list_harvests_for_planting(
	planting_id: int,
	db: AsyncSession = Depends(get_db),
) -> HarvestListRead:
	harvests = await RegistryService(db).list_harvests_for_planting(planting_id)
	return HarvestListRead(items=[HarvestRead.model_validate(harvest) for harvest in harvests])


@router.post("/harvests", response_model=HarvestRead, status_code=status.HTTP_201_CREATED)
async def record_harvest(
	payload: HarvestCreate,
	db: AsyncSession = Depends(get_db),
	caller: CallerIdentity = Depends(get_caller),
) -> HarvestRead:
	service = RegistryService(db)
	try:
		harvest = await service.record_harvest(caller.identity, payload)
	except Exception as exc:
		raise map_error(exc) from exc
	return HarvestRead.model_validate(harvest)


@router.get("/harvests/{harvest_id}", response_model=HarvestRead)
async def get_harvest(harvest_id: int, db: AsyncSession = Depends(get_db)) -> HarvestRead:
	harvest = await RegistryService(db).get_harvest(harvest_id)
	if harvest is None:
		raise not_found(f"Harvest {harvest_id} not found")
	return HarvestRead.model_validate(harvest)
