"""Pydantic schemas for verifiers and verification attestations."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from yieldtracker.models.enums import DataKindEnum, VerificationStatusEnum
from yieldtracker.models.registry import MAX_RECORD_ID


class VerifierCreate(BaseModel):
	name: str = Field(min_length=1, max_length=100)
	verification_type: str = Field(min_length=1, max_length=50)


class VerifierRead(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	identity: str
	name: str
	verification_type: str
	registered_at: int
	active: bool


class VerificationCreate(BaseModel):
	target_kind: DataKindEnum
	target_id: int = Field(ge=0, le=MAX_RECORD_ID)
	status: VerificationStatusEnum
	comments: str = Field(default="", max_length=500)


class VerificationRead(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: int
	verifier_identity: str
	target_kind: DataKindEnum
	target_id: int
	verified_at: int
	status: VerificationStatusEnum
	comments: str


class VerificationListRead(BaseModel):
	items: list[VerificationRead]
