"""Pydantic schemas for the access-delegation ledger."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from yieldtracker.models.enums import AccessLevelEnum, DataKindEnum
from yieldtracker.models.registry import IDENTITY_LENGTH


class AccessGrantCreate(BaseModel):
	# Any string: kinds outside the closed set are rejected by the ledger as invalid_input.
	data_kind: str
	data_id: int = Field(ge=0)
	accessor: str = Field(min_length=1, max_length=IDENTITY_LENGTH)
	access_level: AccessLevelEnum


class AccessGrantRead(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	data_kind: DataKindEnum
	data_id: int
	accessor_identity: str
	granted_by: str
	granted_at: int
	access_level: AccessLevelEnum


class AccessGrantListRead(BaseModel):
	items: list[AccessGrantRead]
