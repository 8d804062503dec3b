"""Pydantic request/response schemas for farmers, fields, plantings and harvests."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from yieldtracker.models.registry import MAX_RECORD_ID


class FarmerCreate(BaseModel):
	name: str = Field(min_length=1, max_length=100)
	location: str = Field(min_length=1, max_length=100)


class FarmerRead(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	identity: str
	name: str
	location: str
	registered_at: int
	active: bool


class FieldCreate(BaseModel):
	location: str = Field(min_length=1, max_length=100)
	size_hectares: int = Field(ge=0, le=MAX_RECORD_ID)
	soil_type: str = Field(min_length=1, max_length=50)


class FieldUpdate(FieldCreate):
	active: bool


class FieldRead(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: int
	owner_identity: str
	location: str
	size_hectares: int
	soil_type: str
	registered_at: int
	active: bool


class FieldListRead(BaseModel):
	items: list[FieldRead]


class PlantingCreate(BaseModel):
	field_id: int = Field(ge=0)
	crop_type: str = Field(min_length=1, max_length=50)
	planting_date: str = Field(min_length=1, max_length=32)
	inputs_used: str = Field(max_length=500)
	notes: str = Field(max_length=500)


class PlantingRead(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: int
	field_id: int
	owner_identity: str
	crop_type: str
	planting_date: str
	inputs_used: str
	notes: str


class PlantingListRead(BaseModel):
	items: list[PlantingRead]


class HarvestCreate(BaseModel):
	planting_id: int = Field(ge=0)
	yield_amount: int = Field(ge=0, le=MAX_RECORD_ID)
	quality_metrics: str = Field(max_length=200)
	harvest_date: str = Field(min_length=1, max_length=32)
	notes: str = Field(max_length=500)


class HarvestRead(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: int
	planting_id: int
	field_id: int
	owner_identity: str
	yield_amount: int
	quality_metrics: str
	harvest_date: str
	notes: str


class HarvestListRead(BaseModel):
	items: list[HarvestRead]
