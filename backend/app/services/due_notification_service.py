"""Decide which due reminders are new and email them once.

The differ compares the freshly computed due items of one owner against the
log of reminders already sent. Items without a log entry are claimed with a
conditional insert and mailed as one batch. The caller decides where items
come from (interactive request or the daily job); the differ only needs the
recipient, the items, a store and a mailer.

Records are written before the email goes out. A failed send therefore leaves
the items marked as notified (at-least-once writes, at-most-once email), while
a failed write never marks anything.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Callable, Generic, Protocol, Sequence, TypeVar, Union

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import (
    ComplianceStatus,
    HoofDueNotification,
    VaccinationDueNotification,
    VaccinationSequence,
    VaccineCategory,
)
from app.services.compliance_service import DueItem, HoofDueItem
from app.services.email_service import (
    Mailer,
    render_hoof_due_email,
    render_vaccination_due_email,
)

logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT", DueItem, HoofDueItem)


@dataclass(slots=True, frozen=True)
class VaccinationNotificationKey:
    owner_id: uuid.UUID
    horse_id: uuid.UUID
    category: VaccineCategory
    phase: VaccinationSequence


@dataclass(slots=True, frozen=True)
class HoofNotificationKey:
    owner_id: uuid.UUID
    horse_id: uuid.UUID
    status: ComplianceStatus


NotificationKey = Union[VaccinationNotificationKey, HoofNotificationKey]


class DueNotificationStore(Protocol):
    """Persistent set of reminders that were already sent."""

    async def exists(self, key: NotificationKey) -> bool:
        ...

    async def insert_if_absent(self, key: NotificationKey) -> bool:
        """Record ``key``; return False when it was already present."""
        ...


class SqlDueNotificationStore:
    """Store backed by the unique-keyed notification tables."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @staticmethod
    def _row_for(key: NotificationKey) -> VaccinationDueNotification | HoofDueNotification:
        if isinstance(key, VaccinationNotificationKey):
            return VaccinationDueNotification(
                owner_id=key.owner_id,
                horse_id=key.horse_id,
                vaccine_type=key.category,
                sequence_phase=key.phase,
            )
        return HoofDueNotification(
            owner_id=key.owner_id,
            horse_id=key.horse_id,
            notified_for=key.status,
        )

    async def exists(self, key: NotificationKey) -> bool:
        if isinstance(key, VaccinationNotificationKey):
            stmt = select(VaccinationDueNotification.id).where(
                VaccinationDueNotification.owner_id == key.owner_id,
                VaccinationDueNotification.horse_id == key.horse_id,
                VaccinationDueNotification.vaccine_type == key.category,
                VaccinationDueNotification.sequence_phase == key.phase,
            )
        else:
            stmt = select(HoofDueNotification.id).where(
                HoofDueNotification.owner_id == key.owner_id,
                HoofDueNotification.horse_id == key.horse_id,
                HoofDueNotification.notified_for == key.status,
            )
        result = await self._session.execute(stmt.limit(1))
        return result.first() is not None

    async def insert_if_absent(self, key: NotificationKey) -> bool:
        self._session.add(self._row_for(key))
        try:
            await self._session.commit()
        except IntegrityError:
            # another run claimed the same key first
            await self._session.rollback()
            return False
        return True


@dataclass(slots=True, frozen=True)
class NotificationRecipient:
    owner_id: uuid.UUID
    email: str
    name: str


@dataclass(slots=True)
class NotificationDispatch(Generic[ItemT]):
    """Outcome of one differ run for one owner."""

    new_items: list[ItemT] = field(default_factory=list)
    email_sent: bool = False

    @property
    def recorded(self) -> int:
        return len(self.new_items)


async def _dispatch(
    recipient: NotificationRecipient,
    items: Sequence[ItemT],
    *,
    key_of: Callable[[ItemT], NotificationKey],
    render: Callable[..., tuple[str, str]],
    store: DueNotificationStore,
    mailer: Mailer,
    kind: str,
) -> NotificationDispatch[ItemT]:
    if not recipient.email or not items:
        return NotificationDispatch()

    candidates: list[tuple[NotificationKey, ItemT]] = []
    for item in items:
        if item.horse_id is None:
            logger.debug("Skipping %s item without horse id: %s", kind, item)
            continue
        key = key_of(item)
        try:
            seen = await store.exists(key)
        except Exception:
            logger.exception("Failed to look up %s notification %s", kind, key)
            continue
        if not seen:
            candidates.append((key, item))

    if not candidates:
        return NotificationDispatch()

    new_items: list[ItemT] = []
    for key, item in candidates:
        try:
            inserted = await store.insert_if_absent(key)
        except Exception:
            logger.exception("Failed to record %s notification %s", kind, key)
            continue
        if inserted:
            new_items.append(item)

    if not new_items:
        return NotificationDispatch()

    subject, html = render(
        owner_name=recipient.name, new_items=new_items, all_items=list(items)
    )
    try:
        delivered = await mailer.send(to=recipient.email, subject=subject, html=html)
    except Exception:
        logger.exception(
            "Failed to email %d new %s reminder(s) to owner %s",
            len(new_items),
            kind,
            recipient.owner_id,
        )
        return NotificationDispatch(new_items=new_items, email_sent=False)

    if delivered:
        logger.info(
            "Sent %d new %s reminder(s) to owner %s",
            len(new_items),
            kind,
            recipient.owner_id,
        )
    return NotificationDispatch(new_items=new_items, email_sent=delivered)


async def notify_vaccination_due(
    recipient: NotificationRecipient,
    items: Sequence[DueItem],
    *,
    store: DueNotificationStore,
    mailer: Mailer,
) -> NotificationDispatch[DueItem]:
    """Email vaccination due items not yet reported, keyed by category and phase."""

    def key_of(item: DueItem) -> NotificationKey:
        assert item.horse_id is not None
        return VaccinationNotificationKey(
            owner_id=recipient.owner_id,
            horse_id=item.horse_id,
            category=item.category,
            phase=item.phase,
        )

    return await _dispatch(
        recipient,
        items,
        key_of=key_of,
        render=render_vaccination_due_email,
        store=store,
        mailer=mailer,
        kind="vaccination",
    )


async def notify_hoof_due(
    recipient: NotificationRecipient,
    items: Sequence[HoofDueItem],
    *,
    store: DueNotificationStore,
    mailer: Mailer,
) -> NotificationDispatch[HoofDueItem]:
    """Email farrier reminders not yet reported, keyed by severity."""

    def key_of(item: HoofDueItem) -> NotificationKey:
        assert item.horse_id is not None
        return HoofNotificationKey(
            owner_id=recipient.owner_id,
            horse_id=item.horse_id,
            status=item.status,
        )

    return await _dispatch(
        recipient,
        items,
        key_of=key_of,
        render=render_hoof_due_email,
        store=store,
        mailer=mailer,
        kind="hoof",
    )
