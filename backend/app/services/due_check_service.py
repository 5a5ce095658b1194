"""Per-owner reminder checks and the daily job that runs them for everyone."""

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass
from datetime import date
from typing import Sequence

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.models import Horse, Profile, ProfileRole
from app.services import horse_service
from app.services.compliance_service import (
    DueItem,
    HoofDueItem,
    hoof_due_items,
    vaccination_due_items,
)
from app.services.due_notification_service import (
    NotificationDispatch,
    NotificationRecipient,
    SqlDueNotificationStore,
    notify_hoof_due,
    notify_vaccination_due,
)
from app.services.email_service import Mailer

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class OwnerDueCheck:
    vaccination: NotificationDispatch[DueItem] | None = None
    hoof: NotificationDispatch[HoofDueItem] | None = None


@dataclass(slots=True)
class DailyDueCheckSummary:
    owners_checked: int = 0
    vaccination_sent: int = 0
    hoof_sent: int = 0


def recipient_for(owner: Profile) -> NotificationRecipient:
    return NotificationRecipient(
        owner_id=owner.id, email=owner.email, name=owner.display_name
    )


def collect_vaccination_items(
    horses: Sequence[Horse], *, reference_date: date | None = None
) -> list[DueItem]:
    items: list[DueItem] = []
    for horse in horses:
        items.extend(vaccination_due_items(horse, reference_date=reference_date))
    return items


def collect_hoof_items(
    horses: Sequence[Horse], *, reference_date: date | None = None
) -> list[HoofDueItem]:
    items: list[HoofDueItem] = []
    for horse in horses:
        items.extend(hoof_due_items(horse, reference_date=reference_date))
    return items


async def check_vaccinations_for_owner(
    session: AsyncSession,
    owner: Profile,
    *,
    mailer: Mailer,
    reference_date: date | None = None,
) -> NotificationDispatch[DueItem]:
    horses = await horse_service.list_horses_for_owner(session, owner_id=owner.id)
    items = collect_vaccination_items(horses, reference_date=reference_date)
    return await notify_vaccination_due(
        recipient_for(owner),
        items,
        store=SqlDueNotificationStore(session),
        mailer=mailer,
    )


async def check_hoof_for_owner(
    session: AsyncSession,
    owner: Profile,
    *,
    mailer: Mailer,
    reference_date: date | None = None,
) -> NotificationDispatch[HoofDueItem]:
    horses = await horse_service.list_horses_for_owner(session, owner_id=owner.id)
    items = collect_hoof_items(horses, reference_date=reference_date)
    return await notify_hoof_due(
        recipient_for(owner),
        items,
        store=SqlDueNotificationStore(session),
        mailer=mailer,
    )


async def run_owner_due_checks(
    session: AsyncSession,
    owner: Profile,
    *,
    mailer: Mailer,
    reference_date: date | None = None,
) -> OwnerDueCheck:
    """Run the checks the owner opted into."""
    # read everything needed before the store starts committing
    recipient = recipient_for(owner)
    notify_vaccination = owner.notify_vaccination
    notify_hoof = owner.notify_hoof

    horses = await horse_service.list_horses_for_owner(session, owner_id=owner.id)
    vaccination_items = collect_vaccination_items(horses, reference_date=reference_date)
    hoof_items = collect_hoof_items(horses, reference_date=reference_date)

    store = SqlDueNotificationStore(session)
    outcome = OwnerDueCheck()
    if notify_vaccination:
        outcome.vaccination = await notify_vaccination_due(
            recipient, vaccination_items, store=store, mailer=mailer
        )
    if notify_hoof:
        outcome.hoof = await notify_hoof_due(
            recipient, hoof_items, store=store, mailer=mailer
        )
    return outcome


async def _owners_to_check(session: AsyncSession) -> list[uuid.UUID]:
    stmt = (
        select(Profile.id)
        .where(
            Profile.role == ProfileRole.OWNER,
            or_(Profile.notify_vaccination.is_(True), Profile.notify_hoof.is_(True)),
        )
        .order_by(Profile.created_at)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def run_daily_due_checks(
    session_factory: async_sessionmaker[AsyncSession],
    *,
    mailer: Mailer,
    reference_date: date | None = None,
    concurrency: int = 1,
) -> DailyDueCheckSummary:
    """Check every owner with reminders enabled.

    Owners are processed by a bounded pool of workers, each with its own
    session. Re-running on the same day is a no-op for reminders already sent.
    """

    async with session_factory() as session:
        owner_ids = await _owners_to_check(session)

    semaphore = asyncio.Semaphore(max(1, concurrency))

    async def _check(owner_id: uuid.UUID) -> OwnerDueCheck | None:
        async with semaphore:
            try:
                async with session_factory() as session:
                    owner = await session.get(Profile, owner_id)
                    if owner is None or not owner.email:
                        return None
                    return await run_owner_due_checks(
                        session, owner, mailer=mailer, reference_date=reference_date
                    )
            except Exception:
                logger.exception("Daily due check failed for owner %s", owner_id)
                return None

    outcomes = await asyncio.gather(*(_check(owner_id) for owner_id in owner_ids))

    summary = DailyDueCheckSummary(owners_checked=len(owner_ids))
    for outcome in outcomes:
        if outcome is None:
            continue
        if outcome.vaccination is not None:
            summary.vaccination_sent += outcome.vaccination.recorded
        if outcome.hoof is not None:
            summary.hoof_sent += outcome.hoof.recorded
    logger.info(
        "Daily due checks finished: %d owners, %d vaccination and %d hoof reminders",
        summary.owners_checked,
        summary.vaccination_sent,
        summary.hoof_sent,
    )
    return summary
