"""Create a demo owner with two horses for local development."""

from __future__ import annotations

import asyncio
from datetime import date, timedelta

from sqlalchemy import select

from app.core.security import get_password_hash
from app.db.session import session_scope
from app.models import (
    Horse,
    Profile,
    ProfileRole,
    ServiceRecord,
    ServiceType,
    VaccinationRecord,
    VaccinationSequence,
    VaccineCategory,
)

EMAIL = "owner@equimanage.local"
PASSWORD = "owner123"


async def main() -> None:
    async with session_scope() as session:
        existing = await session.execute(select(Profile.id).where(Profile.email == EMAIL))
        if existing.first():
            print(f"Profile {EMAIL} already exists")
            return

        today = date.today()
        owner = Profile(
            email=EMAIL,
            hashed_password=get_password_hash(PASSWORD),
            role=ProfileRole.OWNER,
            first_name="Demo",
            last_name="Owner",
            stall_name="Demo Stables",
        )
        # one horse in the V2 window, one long past its booster
        due_soon = Horse(name="Comet", breed="Hanoverian", birth_year=2016)
        due_soon.vaccinations.append(
            VaccinationRecord(
                vaccine_type=VaccineCategory.INFLUENZA,
                administered_on=today - timedelta(days=35),
                sequence=VaccinationSequence.V1,
            )
        )
        due_soon.service_history.append(
            ServiceRecord(
                service_type=ServiceType.FARRIER, performed_on=today - timedelta(days=20)
            )
        )
        overdue = Horse(name="Dancer", breed="Trakehner", birth_year=2011)
        overdue.vaccinations.append(
            VaccinationRecord(
                vaccine_type=VaccineCategory.TETANUS,
                administered_on=today - timedelta(days=240),
                sequence=VaccinationSequence.BOOSTER,
                is_booster=True,
            )
        )
        overdue.service_history.append(
            ServiceRecord(
                service_type=ServiceType.FARRIER, performed_on=today - timedelta(days=60)
            )
        )
        owner.horses.extend([due_soon, overdue])
        session.add(owner)
        await session.commit()
        print(f"Created owner {EMAIL} / {PASSWORD} with 2 horses")


if __name__ == "__main__":
    asyncio.run(main())
