"""Pydantic schemas for horses and their dated records."""

from __future__ import annotations

import re
import uuid
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from app.models.horse import (
    HorseGender,
    ServiceType,
    VaccinationSequence,
    VaccinationStatus,
    VaccineCategory,
)

MIN_BIRTH_YEAR = 1980

# UELN: ISO 3166 country code followed by the registry id.
_IDENTIFIER_PATTERNS = {
    "iso_nr": re.compile(r"^[A-Z]{2}\s?[\dA-Z]{8,15}$"),
    "fei_nr": re.compile(r"^(\d{8}|\d{2}[A-Z]{2}\d{2,5})$"),
    "chip_id": re.compile(r"^\d{15}$"),
}


class HorseCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    breed: str | None = Field(default=None, max_length=120)
    birth_year: int | None = None
    iso_nr: str | None = None
    fei_nr: str | None = None
    chip_id: str | None = None
    gender: HorseGender | None = None
    color: str | None = Field(default=None, max_length=64)
    breeding_association: str | None = Field(default=None, max_length=120)
    weight_kg: int | None = Field(default=None, ge=50, le=1500)

    @field_validator("iso_nr", "fei_nr", "chip_id", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip().upper()
            return value or None
        return value

    @field_validator("iso_nr", "fei_nr", "chip_id")
    @classmethod
    def _check_identifier(cls, value: str | None, info: ValidationInfo) -> str | None:
        if value is not None and not _IDENTIFIER_PATTERNS[info.field_name].match(value):
            raise ValueError(f"invalid {info.field_name} format")
        return value

    @field_validator("birth_year")
    @classmethod
    def _check_birth_year(cls, value: int | None) -> int | None:
        if value is not None and not MIN_BIRTH_YEAR <= value <= date.today().year:
            raise ValueError(
                f"birth year must be between {MIN_BIRTH_YEAR} and the current year"
            )
        return value


class VaccinationCreate(BaseModel):
    vaccine_type: VaccineCategory
    administered_on: date
    sequence: VaccinationSequence | None = None
    is_booster: bool = False
    administered_by: str | None = Field(default=None, max_length=255)
    status: VaccinationStatus = VaccinationStatus.VERIFIED

    @model_validator(mode="after")
    def _reject_future_doses(self) -> "VaccinationCreate":
        # planned entries are appointments and may lie ahead
        if (
            self.status is not VaccinationStatus.PLANNED
            and self.administered_on > date.today()
        ):
            raise ValueError("administered_on must not be in the future")
        return self


class ServiceRecordCreate(BaseModel):
    service_type: ServiceType
    performed_on: date
    provider: str | None = Field(default=None, max_length=255)
    notes: str | None = Field(default=None, max_length=1024)

    @field_validator("performed_on")
    @classmethod
    def _not_in_future(cls, value: date) -> date:
        if value > date.today():
            raise ValueError("performed_on must not be in the future")
        return value


class VaccinationRead(BaseModel):
    id: uuid.UUID
    horse_id: uuid.UUID
    vaccine_type: VaccineCategory
    administered_on: date
    sequence: VaccinationSequence | None
    is_booster: bool
    administered_by: str | None
    status: VaccinationStatus
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ServiceRecordRead(BaseModel):
    id: uuid.UUID
    horse_id: uuid.UUID
    service_type: ServiceType
    performed_on: date
    provider: str | None
    notes: str | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class HorseRead(BaseModel):
    id: uuid.UUID
    owner_id: uuid.UUID
    name: str
    breed: str | None
    birth_year: int | None
    iso_nr: str | None
    fei_nr: str | None
    chip_id: str | None
    gender: HorseGender | None
    color: str | None
    breeding_association: str | None
    weight_kg: int | None
    vaccinations: list[VaccinationRead] = Field(default_factory=list)
    service_history: list[ServiceRecordRead] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)
