"""Consolidated action list and status tiles across an owner's horses."""

from __future__ import annotations

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.models import ComplianceStatus, Profile
from app.schemas import ActionItemRead, DashboardSummaryRead
from app.services import horse_service, presentation_service

router = APIRouter()


@router.get("/actions", response_model=list[ActionItemRead])
async def list_actions(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    owner: Annotated[Profile, Depends(deps.get_current_owner)],
    kind: Annotated[Literal["VACC", "HOOF"] | None, Query()] = None,
    priority: Annotated[ComplianceStatus | None, Query()] = None,
) -> list[ActionItemRead]:
    """Open tasks per horse, worst first."""
    horses = await horse_service.list_horses_for_owner(session, owner_id=owner.id)
    items = presentation_service.build_action_items(horses)
    items = presentation_service.filter_action_items(items, kind=kind, priority=priority)
    return [ActionItemRead.model_validate(item) for item in items]


@router.get("/summary", response_model=DashboardSummaryRead)
async def dashboard_summary(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    owner: Annotated[Profile, Depends(deps.get_current_owner)],
) -> DashboardSummaryRead:
    horses = await horse_service.list_horses_for_owner(session, owner_id=owner.id)
    counts = presentation_service.count_by_status(horses)
    due = presentation_service.horses_due_for_appointment(horses)
    return DashboardSummaryRead(
        **counts, due_for_appointment=[horse.id for horse in due]
    )
