"""Horse list, detail compliance and history endpoints."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.models import ComplianceStatus, Horse, Profile
from app.schemas import (
    HoofCareStatusRead,
    HorseComplianceRead,
    HorseCreate,
    HorseHistoryRead,
    HorseRead,
    HorseSummaryRead,
    ServiceDateGroup,
    ServiceRecordCreate,
    ServiceRecordRead,
    ServiceYearGroup,
    StatusBadge,
    VaccinationComplianceRead,
    VaccinationCreate,
    VaccinationDateGroup,
    VaccinationRead,
    VaccinationYearGroup,
)
from app.services import compliance_service, horse_service, presentation_service

router = APIRouter()


def _badge(status_value: ComplianceStatus) -> StatusBadge:
    return StatusBadge(
        status=status_value,
        color=presentation_service.get_status_color(status_value),
        label=presentation_service.get_status_label(status_value),
    )


async def _load_horse(
    session: AsyncSession, *, owner: Profile, horse_id: uuid.UUID
) -> Horse:
    try:
        return await horse_service.get_horse_for_owner(
            session, owner_id=owner.id, horse_id=horse_id
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc


def _summary(horse: Horse) -> HorseSummaryRead:
    vaccination = compliance_service.check_vaccination_compliance(horse)
    hoof = compliance_service.check_hoof_care_status(horse)
    return HorseSummaryRead(
        id=horse.id,
        name=horse.name,
        breed=horse.breed,
        birth_year=horse.birth_year,
        vaccination_status=vaccination.status,
        vaccination_message=vaccination.message,
        hoof_status=hoof.status,
        hoof_days_since=hoof.days_since,
        badge=_badge(vaccination.status),
    )


@router.get("", response_model=list[HorseSummaryRead], summary="List my horses")
async def list_horses(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    owner: Annotated[Profile, Depends(deps.get_current_owner)],
) -> list[HorseSummaryRead]:
    horses = await horse_service.list_horses_for_owner(session, owner_id=owner.id)
    return [_summary(horse) for horse in horses]


@router.post(
    "",
    response_model=HorseRead,
    status_code=status.HTTP_201_CREATED,
    summary="Register a horse",
)
async def create_horse(
    payload: HorseCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    owner: Annotated[Profile, Depends(deps.get_current_owner)],
) -> HorseRead:
    horse = await horse_service.create_horse(session, owner_id=owner.id, payload=payload)
    return HorseRead.model_validate(horse)


@router.get(
    "/{horse_id}/compliance",
    response_model=HorseComplianceRead,
    summary="Vaccination and farrier compliance for a horse",
)
async def horse_compliance(
    horse_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    owner: Annotated[Profile, Depends(deps.get_current_owner)],
) -> HorseComplianceRead:
    horse = await _load_horse(session, owner=owner, horse_id=horse_id)
    vaccination = compliance_service.check_vaccination_compliance(horse)
    hoof = compliance_service.check_hoof_care_status(horse)
    return HorseComplianceRead(
        horse_id=horse.id,
        horse_name=horse.name,
        vaccination=VaccinationComplianceRead.model_validate(vaccination),
        hoof=HoofCareStatusRead.model_validate(hoof),
        badge=_badge(vaccination.status),
    )


@router.get(
    "/{horse_id}/history",
    response_model=HorseHistoryRead,
    summary="Vaccination and service history grouped by year and day",
)
async def horse_history(
    horse_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    owner: Annotated[Profile, Depends(deps.get_current_owner)],
) -> HorseHistoryRead:
    horse = await _load_horse(session, owner=owner, horse_id=horse_id)
    vaccination_years = presentation_service.group_by_year(
        horse.vaccinations, lambda record: record.administered_on
    )
    service_years = presentation_service.group_by_year(
        horse.service_history, lambda record: record.performed_on
    )
    return HorseHistoryRead(
        horse_id=horse.id,
        vaccinations=[
            VaccinationYearGroup(
                year=group.year,
                dates=[
                    VaccinationDateGroup(
                        day=day.day,
                        records=[VaccinationRead.model_validate(r) for r in day.records],
                    )
                    for day in group.dates
                ],
            )
            for group in vaccination_years
        ],
        services=[
            ServiceYearGroup(
                year=group.year,
                dates=[
                    ServiceDateGroup(
                        day=day.day,
                        records=[ServiceRecordRead.model_validate(r) for r in day.records],
                    )
                    for day in group.dates
                ],
            )
            for group in service_years
        ],
    )


@router.post(
    "/{horse_id}/vaccinations",
    response_model=VaccinationRead,
    status_code=status.HTTP_201_CREATED,
    summary="Record a vaccination",
)
async def add_vaccination(
    horse_id: uuid.UUID,
    payload: VaccinationCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    owner: Annotated[Profile, Depends(deps.get_current_owner)],
) -> VaccinationRead:
    try:
        record = await horse_service.add_vaccination(
            session, owner_id=owner.id, horse_id=horse_id, payload=payload
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    return VaccinationRead.model_validate(record)


@router.post(
    "/{horse_id}/services",
    response_model=ServiceRecordRead,
    status_code=status.HTTP_201_CREATED,
    summary="Record a farrier or other care visit",
)
async def add_service_record(
    horse_id: uuid.UUID,
    payload: ServiceRecordCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    owner: Annotated[Profile, Depends(deps.get_current_owner)],
) -> ServiceRecordRead:
    try:
        record = await horse_service.add_service_record(
            session, owner_id=owner.id, horse_id=horse_id, payload=payload
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    return ServiceRecordRead.model_validate(record)
