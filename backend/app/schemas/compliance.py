"""Response schemas for compliance results and dashboard views."""

from __future__ import annotations

import uuid
from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from app.models.horse import ComplianceStatus, VaccinationSequence, VaccineCategory
from app.schemas.horse import ServiceRecordRead, VaccinationRead


class CategoryComplianceRead(BaseModel):
    category: VaccineCategory
    phase: VaccinationSequence
    status: ComplianceStatus
    label: str
    message: str
    last_dose_on: date
    days_since: int
    due_date: date
    grace_end_date: date

    model_config = ConfigDict(from_attributes=True)


class DueItemRead(BaseModel):
    horse_id: uuid.UUID | None
    horse_name: str
    category: VaccineCategory
    phase: VaccinationSequence
    status: ComplianceStatus
    message: str

    model_config = ConfigDict(from_attributes=True)


class NextDueRead(BaseModel):
    category: VaccineCategory
    phase: VaccinationSequence
    status: ComplianceStatus
    due_date: date
    grace_end_date: date
    message: str

    model_config = ConfigDict(from_attributes=True)


class VaccinationComplianceRead(BaseModel):
    status: ComplianceStatus
    message: str
    next_due: NextDueRead | None
    due_items: list[DueItemRead]
    all_next_due: list[NextDueRead]
    categories: list[CategoryComplianceRead]

    model_config = ConfigDict(from_attributes=True)


class HoofCareStatusRead(BaseModel):
    status: ComplianceStatus
    days_since: int
    last_service_on: date | None = None

    model_config = ConfigDict(from_attributes=True)


class StatusBadge(BaseModel):
    """Display tokens for a status."""

    status: ComplianceStatus
    color: str
    label: str


class HorseComplianceRead(BaseModel):
    horse_id: uuid.UUID
    horse_name: str
    vaccination: VaccinationComplianceRead
    hoof: HoofCareStatusRead
    badge: StatusBadge


class HorseSummaryRead(BaseModel):
    """Card view: a horse with its headline statuses."""

    id: uuid.UUID
    name: str
    breed: str | None
    birth_year: int | None
    vaccination_status: ComplianceStatus
    vaccination_message: str
    hoof_status: ComplianceStatus
    hoof_days_since: int
    badge: StatusBadge


class VaccinationDateGroup(BaseModel):
    day: date
    records: list[VaccinationRead]


class VaccinationYearGroup(BaseModel):
    year: int
    dates: list[VaccinationDateGroup]


class ServiceDateGroup(BaseModel):
    day: date
    records: list[ServiceRecordRead]


class ServiceYearGroup(BaseModel):
    year: int
    dates: list[ServiceDateGroup]


class HorseHistoryRead(BaseModel):
    horse_id: uuid.UUID
    vaccinations: list[VaccinationYearGroup] = Field(default_factory=list)
    services: list[ServiceYearGroup] = Field(default_factory=list)


class ActionTaskRead(BaseModel):
    kind: str
    priority: ComplianceStatus
    message: str

    model_config = ConfigDict(from_attributes=True)


class ActionItemRead(BaseModel):
    horse_id: uuid.UUID | None
    horse_name: str
    tasks: list[ActionTaskRead]
    highest_priority: ComplianceStatus

    model_config = ConfigDict(from_attributes=True)


class DashboardSummaryRead(BaseModel):
    total: int
    green: int
    yellow: int
    red: int
    due_for_appointment: list[uuid.UUID]
