from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from tests.conftest import FARMER_A, IDENTITY_B, IDENTITY_C, IDENTITY_D
from yieldtracker.models.enums import AccessLevelEnum, DataKindEnum
from yieldtracker.schemas.registry import FarmerCreate, FieldCreate, HarvestCreate, PlantingCreate
from yieldtracker.services.access_service import AccessService, parse_data_kind
from yieldtracker.services.errors import ErrorCode, RegistryError
from yieldtracker.services.registry_service import RegistryService


@pytest.fixture
async def seeded(db_session: AsyncSession) -> AsyncSession:
	"""Farmer A owns field 1, planting 1 and harvest 1; B is a farmer with field 2."""
	registry = RegistryService(db_session)
	await registry.register_farmer(FARMER_A, FarmerCreate(name="Emma Green", location="California, USA"))
	await registry.register_farmer(IDENTITY_B, FarmerCreate(name="Bo", location="Iowa"))
	field = await registry.register_field(
		FARMER_A,
		FieldCreate(location="Sunflower Valley", size_hectares=50, soil_type="Rich Loam"),
	)
	await registry.register_field(
		IDENTITY_B,
		FieldCreate(location="Corn Flats", size_hectares=20, soil_type="Silt"),
	)
	planting = await registry.record_planting(
		FARMER_A,
		PlantingCreate(
			field_id=field.id,
			crop_type="Sunflower",
			planting_date="2024-03-01",
			inputs_used="seeds",
			notes="-",
		),
	)
	await registry.record_harvest(
		FARMER_A,
		HarvestCreate(
			planting_id=planting.id,
			yield_amount=1000,
			quality_metrics="grade-A",
			harvest_date="2024-09-01",
			notes="-",
		),
	)
	return db_session


@pytest.fixture
def service(seeded: AsyncSession) -> AccessService:
	return AccessService(seeded)


def test_parse_data_kind_exact_match() -> None:
	assert parse_data_kind("field") == DataKindEnum.field
	assert parse_data_kind("harvest") == DataKindEnum.harvest
	assert parse_data_kind(DataKindEnum.planting) == DataKindEnum.planting


@pytest.mark.parametrize("raw", ["orchard", "FIELD", "Planting", " harvest", "harvest ", ""])
def test_parse_data_kind_rejects_everything_else(raw: str) -> None:
	with pytest.raises(RegistryError) as excinfo:
		parse_data_kind(raw)
	assert excinfo.value.code == ErrorCode.invalid_input


@pytest.mark.asyncio
async def test_grant_unknown_kind_is_invalid_input(service: AccessService) -> None:
	with pytest.raises(RegistryError) as excinfo:
		await service.grant_access(FARMER_A, "orchard", 1, IDENTITY_C, AccessLevelEnum.full)

	assert excinfo.value.code == ErrorCode.invalid_input


@pytest.mark.asyncio
async def test_grant_then_check_field(service: AccessService) -> None:
	grant = await service.grant_access(FARMER_A, "field", 1, IDENTITY_C, AccessLevelEnum.full)

	checked = await service.check_access(DataKindEnum.field, 1, IDENTITY_C)

	assert checked is not None
	assert checked.granted_by == FARMER_A
	assert checked.access_level == AccessLevelEnum.full
	assert checked.granted_at == grant.granted_at


@pytest.mark.asyncio
async def test_grant_on_foreign_field_not_authorized(service: AccessService) -> None:
	with pytest.raises(RegistryError) as excinfo:
		await service.grant_access(FARMER_A, DataKindEnum.field, 2, IDENTITY_C, AccessLevelEnum.full)

	assert excinfo.value.code == ErrorCode.not_authorized


@pytest.mark.asyncio
async def test_grant_on_missing_field_not_authorized(service: AccessService) -> None:
	with pytest.raises(RegistryError) as excinfo:
		await service.grant_access(FARMER_A, DataKindEnum.field, 50, IDENTITY_C, AccessLevelEnum.full)

	assert excinfo.value.code == ErrorCode.not_authorized


@pytest.mark.asyncio
@pytest.mark.parametrize("kind", [DataKindEnum.planting, DataKindEnum.harvest])
async def test_grant_on_missing_event_not_found(service: AccessService, kind: DataKindEnum) -> None:
	with pytest.raises(RegistryError) as excinfo:
		await service.grant_access(FARMER_A, kind, 50, IDENTITY_C, AccessLevelEnum.limited)

	assert excinfo.value.code == ErrorCode.not_found


@pytest.mark.asyncio
@pytest.mark.parametrize("kind", [DataKindEnum.planting, DataKindEnum.harvest])
async def test_grant_on_foreign_event_not_authorized(service: AccessService, kind: DataKindEnum) -> None:
	with pytest.raises(RegistryError) as excinfo:
		await service.grant_access(IDENTITY_B, kind, 1, IDENTITY_C, AccessLevelEnum.limited)

	assert excinfo.value.code == ErrorCode.not_authorized
	assert await service.check_access(kind, 1, IDENTITY_C) is None


@pytest.mark.asyncio
async def test_grant_on_harvest_by_owner(service: AccessService) -> None:
	grant = await service.grant_access(
		FARMER_A,
		DataKindEnum.harvest,
		1,
		IDENTITY_D,
		AccessLevelEnum.metadata_only,
	)

	assert grant.data_kind == DataKindEnum.harvest
	assert grant.accessor_identity == IDENTITY_D
	assert grant.access_level == AccessLevelEnum.metadata_only


@pytest.mark.asyncio
async def test_regrant_overwrites_previous_grant(service: AccessService) -> None:
	first = await service.grant_access(FARMER_A, "planting", 1, IDENTITY_C, AccessLevelEnum.full)
	first_granted_at = first.granted_at

	await service.grant_access(FARMER_A, "planting", 1, IDENTITY_C, AccessLevelEnum.limited)

	grants = await service.list_grants_for_record(DataKindEnum.planting, 1)
	assert len(grants) == 1
	assert grants[0].access_level == AccessLevelEnum.limited
	assert grants[0].granted_at > first_granted_at


@pytest.mark.asyncio
async def test_revoke_by_other_identity_not_authorized(service: AccessService) -> None:
	await service.grant_access(FARMER_A, "field", 1, IDENTITY_C, AccessLevelEnum.full)

	with pytest.raises(RegistryError) as excinfo:
		await service.revoke_access(IDENTITY_D, "field", 1, IDENTITY_C)

	assert excinfo.value.code == ErrorCode.not_authorized
	assert await service.check_access("field", 1, IDENTITY_C) is not None


@pytest.mark.asyncio
async def test_revoke_by_granter_removes_grant(service: AccessService) -> None:
	await service.grant_access(FARMER_A, "field", 1, IDENTITY_C, AccessLevelEnum.full)

	await service.revoke_access(FARMER_A, "field", 1, IDENTITY_C)

	assert await service.check_access("field", 1, IDENTITY_C) is None
	with pytest.raises(RegistryError) as excinfo:
		await service.revoke_access(FARMER_A, "field", 1, IDENTITY_C)
	assert excinfo.value.code == ErrorCode.not_found


@pytest.mark.asyncio
async def test_grant_after_revoke_recreates(service: AccessService) -> None:
	await service.grant_access(FARMER_A, "field", 1, IDENTITY_C, AccessLevelEnum.full)
	await service.revoke_access(FARMER_A, "field", 1, IDENTITY_C)

	await service.grant_access(FARMER_A, "field", 1, IDENTITY_C, AccessLevelEnum.limited)

	checked = await service.check_access("field", 1, IDENTITY_C)
	assert checked is not None
	assert checked.access_level == AccessLevelEnum.limited


@pytest.mark.asyncio
async def test_grants_are_keyed_per_accessor(service: AccessService) -> None:
	await service.grant_access(FARMER_A, "field", 1, IDENTITY_D, AccessLevelEnum.full)
	await service.grant_access(FARMER_A, "field", 1, IDENTITY_C, AccessLevelEnum.limited)
	await service.revoke_access(FARMER_A, "field", 1, IDENTITY_D)

	assert await service.check_access("field", 1, IDENTITY_D) is None
	remaining = await service.list_grants_for_record("field", 1)
	assert [grant.accessor_identity for grant in remaining] == [IDENTITY_C]


@pytest.mark.asyncio
async def test_check_and_revoke_with_unknown_kind(service: AccessService) -> None:
	assert await service.check_access("orchard", 1, IDENTITY_C) is None
	with pytest.raises(RegistryError) as excinfo:
		await service.revoke_access(FARMER_A, "orchard", 1, IDENTITY_C)
	assert excinfo.value.code == ErrorCode.not_found


@pytest.mark.asyncio
@pytest.mark.parametrize("raw", ["FIELD", "Field", " field"])
async def test_case_variant_kind_is_not_an_alias(service: AccessService, raw: str) -> None:
	with pytest.raises(RegistryError) as excinfo:
		await service.grant_access(FARMER_A, raw, 1, IDENTITY_C, AccessLevelEnum.full)
	assert excinfo.value.code == ErrorCode.invalid_input

	await service.grant_access(FARMER_A, "field", 1, IDENTITY_C, AccessLevelEnum.full)

	assert await service.check_access(raw, 1, IDENTITY_C) is None
	assert await service.check_access("field", 1, IDENTITY_C) is not None
	assert await service.list_grants_for_record("field", 1) != []


@pytest.mark.asyncio
async def test_ids_beyond_bigint_range_are_missing_records(service: AccessService) -> None:
	too_large = 2**63

	with pytest.raises(RegistryError) as field_exc:
		await service.grant_access(FARMER_A, "field", too_large, IDENTITY_C, AccessLevelEnum.full)
	with pytest.raises(RegistryError) as harvest_exc:
		await service.grant_access(FARMER_A, "harvest", too_large, IDENTITY_C, AccessLevelEnum.full)
	with pytest.raises(RegistryError) as revoke_exc:
		await service.revoke_access(FARMER_A, "planting", 2**64 - 1, IDENTITY_C)

	assert field_exc.value.code == ErrorCode.not_authorized
	assert harvest_exc.value.code == ErrorCode.not_found
	assert revoke_exc.value.code == ErrorCode.not_found
	assert await service.check_access("field", too_large, IDENTITY_C) is None
	assert await service.list_grants_for_record("field", too_large) == []
