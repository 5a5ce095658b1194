"""Schemas for reminder runs."""

from __future__ import annotations

from pydantic import BaseModel


class NotificationRunRead(BaseModel):
    """Result of an interactive reminder check."""

    ok: bool = True
    sent: int = 0
    email_sent: bool = False
    skipped: bool = False


class DailyDueCheckRead(BaseModel):
    ok: bool = True
    owners_checked: int
    vaccination_sent: int
    hoof_sent: int
