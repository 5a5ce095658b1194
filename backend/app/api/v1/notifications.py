"""Interactive reminder checks triggered from the owner's dashboard."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.models import Profile
from app.schemas import NotificationRunRead
from app.services import due_check_service
from app.services.email_service import Mailer

router = APIRouter()


@router.post("/vaccination-due", response_model=NotificationRunRead)
async def vaccination_due(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    owner: Annotated[Profile, Depends(deps.get_current_owner)],
    mailer: Annotated[Mailer, Depends(deps.get_mailer)],
) -> NotificationRunRead:
    """Email vaccinations that became due since the last check."""
    if not owner.notify_vaccination:
        return NotificationRunRead(skipped=True)
    dispatch = await due_check_service.check_vaccinations_for_owner(
        session, owner, mailer=mailer
    )
    return NotificationRunRead(sent=dispatch.recorded, email_sent=dispatch.email_sent)


@router.post("/hoof-due", response_model=NotificationRunRead)
async def hoof_due(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    owner: Annotated[Profile, Depends(deps.get_current_owner)],
    mailer: Annotated[Mailer, Depends(deps.get_mailer)],
) -> NotificationRunRead:
    """Email farrier reminders that reached a new severity."""
    if not owner.notify_hoof:
        return NotificationRunRead(skipped=True)
    dispatch = await due_check_service.check_hoof_for_owner(
        session, owner, mailer=mailer
    )
    return NotificationRunRead(sent=dispatch.recorded, email_sent=dispatch.email_sent)
