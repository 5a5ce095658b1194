"""Differ tests with in-memory store and mailer doubles."""

from __future__ import annotations

import uuid

import pytest

from app.models import ComplianceStatus, VaccinationSequence, VaccineCategory
from app.services.compliance_service import DueItem, HoofDueItem
from app.services.due_notification_service import (
    HoofNotificationKey,
    NotificationRecipient,
    VaccinationNotificationKey,
    notify_hoof_due,
    notify_vaccination_due,
)

pytestmark = pytest.mark.asyncio

HORSE_ID = uuid.uuid4()


class MemoryStore:
    def __init__(self) -> None:
        self.keys: set = set()
        self.inserts = 0
        self.fail_lookup = False
        self.fail_insert = False
        self.claimed_elsewhere: set = set()

    async def exists(self, key) -> bool:
        if self.fail_lookup:
            raise RuntimeError("database unavailable")
        return key in self.keys

    async def insert_if_absent(self, key) -> bool:
        if self.fail_insert:
            raise RuntimeError("database unavailable")
        if key in self.keys or key in self.claimed_elsewhere:
            return False
        self.keys.add(key)
        self.inserts += 1
        return True


class MemoryMailer:
    def __init__(self, *, fail: bool = False, deliver: bool = True) -> None:
        self.fail = fail
        self.deliver = deliver
        self.messages: list[dict[str, str]] = []

    async def send(self, *, to: str, subject: str, html: str) -> bool:
        if self.fail:
            raise ConnectionError("SMTP relay unavailable")
        self.messages.append({"to": to, "subject": subject, "html": html})
        return self.deliver


def _recipient(email: str = "owner@example.com") -> NotificationRecipient:
    return NotificationRecipient(owner_id=uuid.uuid4(), email=email, name="Olivia Owner")


def _vaccination_item(
    category: VaccineCategory = VaccineCategory.INFLUENZA,
    phase: VaccinationSequence = VaccinationSequence.V2,
    status: ComplianceStatus = ComplianceStatus.YELLOW,
    horse_id: uuid.UUID | None = HORSE_ID,
) -> DueItem:
    return DueItem(
        horse_id=horse_id,
        horse_name="Comet",
        category=category,
        phase=phase,
        status=status,
        message=f"{phase.value} {category.value}: due now",
    )


def _hoof_item(status: ComplianceStatus) -> HoofDueItem:
    return HoofDueItem(
        horse_id=HORSE_ID,
        horse_name="Comet",
        status=status,
        days_since=50,
        message="Last farrier visit 50 days ago.",
    )


async def test_new_items_are_recorded_and_mailed_once() -> None:
    store, mailer, recipient = MemoryStore(), MemoryMailer(), _recipient()
    items = [
        _vaccination_item(),
        _vaccination_item(VaccineCategory.TETANUS, VaccinationSequence.BOOSTER, ComplianceStatus.RED),
    ]

    first = await notify_vaccination_due(recipient, items, store=store, mailer=mailer)
    assert first.recorded == 2
    assert first.email_sent is True
    assert len(mailer.messages) == 1
    message = mailer.messages[0]
    assert message["to"] == "owner@example.com"
    assert message["subject"] == "EquiManage: new vaccinations due"
    assert "Olivia Owner" in message["html"]
    assert "Tetanus (Booster)" in message["html"]
    assert VaccinationNotificationKey(
        recipient.owner_id, HORSE_ID, VaccineCategory.INFLUENZA, VaccinationSequence.V2
    ) in store.keys

    second = await notify_vaccination_due(recipient, items, store=store, mailer=mailer)
    assert second.recorded == 0
    assert second.email_sent is False
    assert store.inserts == 2
    assert len(mailer.messages) == 1


async def test_only_the_new_item_is_reported_when_one_was_known() -> None:
    store, mailer, recipient = MemoryStore(), MemoryMailer(), _recipient()
    await notify_vaccination_due(recipient, [_vaccination_item()], store=store, mailer=mailer)

    herpes = _vaccination_item(VaccineCategory.HERPES)
    result = await notify_vaccination_due(
        recipient, [_vaccination_item(), herpes], store=store, mailer=mailer
    )
    assert result.new_items == [herpes]
    assert mailer.messages[-1]["subject"] == "EquiManage: new vaccination due"


async def test_same_category_in_a_new_phase_is_new() -> None:
    store, mailer, recipient = MemoryStore(), MemoryMailer(), _recipient()
    await notify_vaccination_due(recipient, [_vaccination_item()], store=store, mailer=mailer)

    result = await notify_vaccination_due(
        recipient,
        [_vaccination_item(phase=VaccinationSequence.V3)],
        store=store,
        mailer=mailer,
    )
    assert result.recorded == 1
    assert len(mailer.messages) == 2


async def test_nothing_happens_without_items_or_address() -> None:
    store, mailer = MemoryStore(), MemoryMailer()

    empty = await notify_vaccination_due(_recipient(), [], store=store, mailer=mailer)
    no_address = await notify_vaccination_due(
        _recipient(email=""), [_vaccination_item()], store=store, mailer=mailer
    )
    assert empty.recorded == no_address.recorded == 0
    assert store.inserts == 0
    assert mailer.messages == []


async def test_items_without_horse_are_skipped() -> None:
    store, mailer = MemoryStore(), MemoryMailer()
    result = await notify_vaccination_due(
        _recipient(), [_vaccination_item(horse_id=None)], store=store, mailer=mailer
    )
    assert result.recorded == 0
    assert mailer.messages == []


async def test_key_claimed_by_a_concurrent_run_is_not_mailed() -> None:
    store, mailer, recipient = MemoryStore(), MemoryMailer(), _recipient()
    store.claimed_elsewhere.add(
        VaccinationNotificationKey(
            recipient.owner_id, HORSE_ID, VaccineCategory.INFLUENZA, VaccinationSequence.V2
        )
    )
    result = await notify_vaccination_due(
        recipient, [_vaccination_item()], store=store, mailer=mailer
    )
    assert result.recorded == 0
    assert mailer.messages == []


async def test_mail_failure_keeps_records() -> None:
    store, recipient = MemoryStore(), _recipient()
    result = await notify_vaccination_due(
        recipient, [_vaccination_item()], store=store, mailer=MemoryMailer(fail=True)
    )
    assert result.recorded == 1
    assert result.email_sent is False

    retry_mailer = MemoryMailer()
    retry = await notify_vaccination_due(
        recipient, [_vaccination_item()], store=store, mailer=retry_mailer
    )
    assert retry.recorded == 0
    assert retry_mailer.messages == []


async def test_skipped_delivery_is_reported() -> None:
    result = await notify_vaccination_due(
        _recipient(),
        [_vaccination_item()],
        store=MemoryStore(),
        mailer=MemoryMailer(deliver=False),
    )
    assert result.recorded == 1
    assert result.email_sent is False


async def test_store_failures_skip_items_and_send_nothing() -> None:
    mailer = MemoryMailer()
    broken_lookup = MemoryStore()
    broken_lookup.fail_lookup = True
    result = await notify_vaccination_due(
        _recipient(), [_vaccination_item()], store=broken_lookup, mailer=mailer
    )
    assert result.recorded == 0

    broken_insert = MemoryStore()
    broken_insert.fail_insert = True
    result = await notify_vaccination_due(
        _recipient(), [_vaccination_item()], store=broken_insert, mailer=mailer
    )
    assert result.recorded == 0
    assert mailer.messages == []


async def test_hoof_reminders_escalate_once_per_severity() -> None:
    store, mailer, recipient = MemoryStore(), MemoryMailer(), _recipient()

    yellow = await notify_hoof_due(
        recipient, [_hoof_item(ComplianceStatus.YELLOW)], store=store, mailer=mailer
    )
    again = await notify_hoof_due(
        recipient, [_hoof_item(ComplianceStatus.YELLOW)], store=store, mailer=mailer
    )
    red = await notify_hoof_due(
        recipient, [_hoof_item(ComplianceStatus.RED)], store=store, mailer=mailer
    )

    assert (yellow.recorded, again.recorded, red.recorded) == (1, 0, 1)
    assert len(mailer.messages) == 2
    assert mailer.messages[0]["subject"] == "EquiManage: farrier appointment due"
    assert HoofNotificationKey(recipient.owner_id, HORSE_ID, ComplianceStatus.RED) in store.keys
