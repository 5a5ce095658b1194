"""Integration tests for interactive reminders and the cron trigger."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any

import pytest
from httpx import AsyncClient
from sqlalchemy import update

from app.db.session import get_sessionmaker
from app.models import Profile

pytestmark = pytest.mark.asyncio

CRON_HEADERS = {"X-Cron-Secret": "test-cron-secret"}


async def _authenticate(client: AsyncClient, email: str, password: str) -> dict[str, str]:
    response = await client.post(
        "/api/v1/auth/token",
        data={"username": email, "password": password},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def _days_ago(days: int) -> str:
    return (date.today() - timedelta(days=days)).isoformat()


async def _seed_due_horse(client: AsyncClient, headers: dict[str, str]) -> str:
    response = await client.post("/api/v1/horses", json={"name": "Comet"}, headers=headers)
    horse_id = response.json()["id"]
    await client.post(
        f"/api/v1/horses/{horse_id}/vaccinations",
        json={"vaccine_type": "Influenza", "administered_on": _days_ago(40), "sequence": "V1"},
        headers=headers,
    )
    await client.post(
        f"/api/v1/horses/{horse_id}/services",
        json={"service_type": "Farrier", "performed_on": _days_ago(60)},
        headers=headers,
    )
    return horse_id


async def test_vaccination_reminders_are_sent_once(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]
    mailer = app_context["mailer"]
    headers = await _authenticate(
        client, app_context["owner_email"], app_context["owner_password"]
    )
    await _seed_due_horse(client, headers)

    first = await client.post("/api/v1/notifications/vaccination-due", headers=headers)
    assert first.status_code == 200
    assert first.json() == {"ok": True, "sent": 1, "email_sent": True, "skipped": False}
    assert mailer.sent[0]["to"] == app_context["owner_email"]
    assert "Olivia Owner" in mailer.sent[0]["html"]

    second = await client.post("/api/v1/notifications/vaccination-due", headers=headers)
    assert second.json()["sent"] == 0
    assert second.json()["email_sent"] is False
    assert len(mailer.sent) == 1


async def test_hoof_reminder_and_opt_out(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]
    mailer = app_context["mailer"]
    headers = await _authenticate(
        client, app_context["owner_email"], app_context["owner_password"]
    )
    await _seed_due_horse(client, headers)

    response = await client.post("/api/v1/notifications/hoof-due", headers=headers)
    assert response.json()["sent"] == 1
    assert mailer.sent[-1]["subject"] == "EquiManage: farrier appointment due"

    async with get_sessionmaker()() as session:
        await session.execute(
            update(Profile)
            .where(Profile.id == app_context["owner_id"])
            .values(notify_vaccination=False)
        )
        await session.commit()

    skipped = await client.post("/api/v1/notifications/vaccination-due", headers=headers)
    assert skipped.json() == {"ok": True, "sent": 0, "email_sent": False, "skipped": True}
    assert len(mailer.sent) == 1


async def test_vets_cannot_trigger_reminders(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]
    headers = await _authenticate(
        client, app_context["vet_email"], app_context["vet_password"]
    )
    response = await client.post("/api/v1/notifications/vaccination-due", headers=headers)
    assert response.status_code == 403


async def test_cron_requires_shared_secret(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]

    missing = await client.post("/api/v1/cron/daily-due-checks")
    wrong = await client.post(
        "/api/v1/cron/daily-due-checks", headers={"X-Cron-Secret": "guess"}
    )
    assert missing.status_code == 401
    assert wrong.status_code == 401


async def test_cron_run_is_idempotent(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]
    mailer = app_context["mailer"]
    headers = await _authenticate(
        client, app_context["owner_email"], app_context["owner_password"]
    )
    await _seed_due_horse(client, headers)

    first = await client.post("/api/v1/cron/daily-due-checks", headers=CRON_HEADERS)
    assert first.status_code == 200
    assert first.json() == {
        "ok": True,
        "owners_checked": 1,
        "vaccination_sent": 1,
        "hoof_sent": 1,
    }
    assert len(mailer.sent) == 2

    second = await client.post("/api/v1/cron/daily-due-checks", headers=CRON_HEADERS)
    assert second.json()["vaccination_sent"] == 0
    assert second.json()["hoof_sent"] == 0
    assert len(mailer.sent) == 2
