"""Scheduler entry points, authenticated by a shared secret header."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api import deps
from app.core.config import get_settings
from app.db.session import get_sessionmaker
from app.schemas import DailyDueCheckRead
from app.services import due_check_service
from app.services.email_service import Mailer

router = APIRouter()


@router.post(
    "/daily-due-checks",
    response_model=DailyDueCheckRead,
    dependencies=[Depends(deps.require_cron_secret)],
)
async def daily_due_checks(
    mailer: Annotated[Mailer, Depends(deps.get_mailer)],
) -> DailyDueCheckRead:
    summary = await due_check_service.run_daily_due_checks(
        get_sessionmaker(),
        mailer=mailer,
        concurrency=get_settings().due_check_concurrency,
    )
    return DailyDueCheckRead(
        owners_checked=summary.owners_checked,
        vaccination_sent=summary.vaccination_sent,
        hoof_sent=summary.hoof_sent,
    )
