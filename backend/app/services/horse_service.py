"""Persistence helpers for horses and their history."""

from __future__ import annotations

import uuid
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models import Horse, ServiceRecord, VaccinationRecord
from app.schemas.horse import HorseCreate, ServiceRecordCreate, VaccinationCreate


def _with_history():
    return (
        selectinload(Horse.vaccinations),
        selectinload(Horse.service_history),
    )


async def list_horses_for_owner(
    session: AsyncSession,
    *,
    owner_id: uuid.UUID,
) -> Sequence[Horse]:
    stmt = (
        select(Horse)
        .options(*_with_history())
        .where(Horse.owner_id == owner_id)
        .order_by(Horse.name)
    )
    result = await session.execute(stmt)
    return result.scalars().all()


async def get_horse_for_owner(
    session: AsyncSession,
    *,
    owner_id: uuid.UUID,
    horse_id: uuid.UUID,
) -> Horse:
    stmt = (
        select(Horse)
        .options(*_with_history())
        .where(Horse.id == horse_id, Horse.owner_id == owner_id)
    )
    result = await session.execute(stmt)
    horse = result.scalar_one_or_none()
    if horse is None:
        raise ValueError("Horse not found")
    return horse


async def create_horse(
    session: AsyncSession,
    *,
    owner_id: uuid.UUID,
    payload: HorseCreate,
) -> Horse:
    horse = Horse(owner_id=owner_id, **payload.model_dump())
    session.add(horse)
    await session.commit()
    return await get_horse_for_owner(session, owner_id=owner_id, horse_id=horse.id)


async def add_vaccination(
    session: AsyncSession,
    *,
    owner_id: uuid.UUID,
    horse_id: uuid.UUID,
    payload: VaccinationCreate,
) -> VaccinationRecord:
    horse = await get_horse_for_owner(session, owner_id=owner_id, horse_id=horse_id)
    record = VaccinationRecord(horse_id=horse.id, **payload.model_dump())
    session.add(record)
    await session.commit()
    await session.refresh(record)
    return record


async def add_service_record(
    session: AsyncSession,
    *,
    owner_id: uuid.UUID,
    horse_id: uuid.UUID,
    payload: ServiceRecordCreate,
) -> ServiceRecord:
    horse = await get_horse_for_owner(session, owner_id=owner_id, horse_id=horse_id)
    record = ServiceRecord(horse_id=horse.id, **payload.model_dump())
    session.add(record)
    await session.commit()
    await session.refresh(record)
    return record
