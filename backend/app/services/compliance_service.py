"""Vaccination and farrier compliance rules.

Everything in this module is a pure function of the horse data handed in (an
ORM row or any object exposing the same attributes) and of the date the check
is evaluated against. Nothing is read from or written to the database here, so
the same results back the detail page, the dashboards, the reminder emails and
the daily cron run.

Vaccination protocol per category::

    V1 --[28..70 days]--> V2 --[180..201 days]--> V3 --[180..201 days]--> Booster

A lone ``Booster`` with no earlier dose in its category is a booster-only track
and only needs the 180..201 day repetition. "Six months" is always 180 days.
"""

from __future__ import annotations

import uuid
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Sequence

from app.models.horse import (
    ComplianceStatus,
    ServiceType,
    VaccinationSequence,
    VaccinationStatus,
    VaccineCategory,
)

DAYS_V2_DUE = 28
DAYS_V2_GRACE_END = 70
DAYS_SIX_MONTHS = 6 * 30
DAYS_BOOSTER_GRACE_END = DAYS_SIX_MONTHS + 21
NOTIFY_DAYS_BEFORE = 14

HOOF_DUE_AFTER_DAYS = 42
HOOF_OVERDUE_AFTER_DAYS = 56

NO_VACCINATION_DATA_MESSAGE = "No vaccination data found."


@dataclass(slots=True, frozen=True)
class DueWindow:
    """Day offsets, counted from the last dose, for the next expected dose."""

    phase: VaccinationSequence
    due_after_days: int
    grace_end_days: int
    interval_ok: bool = True

    @property
    def notify_from_days(self) -> int:
        return self.due_after_days - NOTIFY_DAYS_BEFORE


@dataclass(slots=True)
class CategoryCompliance:
    """Evaluation of one vaccination category."""

    category: VaccineCategory
    phase: VaccinationSequence
    status: ComplianceStatus
    label: str
    message: str
    last_dose_on: date
    days_since: int
    due_date: date
    grace_end_date: date


@dataclass(slots=True)
class DueItem:
    """A category that needs attention (YELLOW or RED)."""

    horse_id: uuid.UUID | None
    horse_name: str
    category: VaccineCategory
    phase: VaccinationSequence
    status: ComplianceStatus
    message: str


@dataclass(slots=True)
class NextDue:
    """Upcoming dose for a category, whatever its current status."""

    category: VaccineCategory
    phase: VaccinationSequence
    status: ComplianceStatus
    due_date: date
    grace_end_date: date
    message: str


@dataclass(slots=True)
class VaccinationCompliance:
    """Aggregate vaccination result for a horse."""

    status: ComplianceStatus
    message: str
    next_due: NextDue | None
    due_items: list[DueItem]
    all_next_due: list[NextDue]
    categories: list[CategoryCompliance]


@dataclass(slots=True)
class HoofCareStatus:
    status: ComplianceStatus
    days_since: int
    last_service_on: date | None = None


@dataclass(slots=True)
class HoofDueItem:
    """Farrier reminder for a horse at YELLOW or RED."""

    horse_id: uuid.UUID | None
    horse_name: str
    status: ComplianceStatus
    days_since: int
    message: str


def worst_status(statuses: Iterable[ComplianceStatus]) -> ComplianceStatus:
    """Return the most severe status, GREEN for an empty input."""
    return max(statuses, key=lambda status: status.severity, default=ComplianceStatus.GREEN)


def format_date(value: date) -> str:
    return value.isoformat()


def _as_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _category_of(record: Any) -> VaccineCategory | None:
    raw = getattr(record, "vaccine_type", None)
    if not raw:
        return VaccineCategory.INFLUENZA
    try:
        return VaccineCategory(raw)
    except ValueError:
        return None


def _is_planned(record: Any) -> bool:
    raw = getattr(record, "status", None)
    return raw is not None and VaccinationStatus(raw) is VaccinationStatus.PLANNED


def resolve_sequence(record: Any) -> VaccinationSequence:
    """Derive the protocol position from ``sequence`` or the legacy flag."""
    raw = getattr(record, "sequence", None)
    if raw:
        return VaccinationSequence(raw)
    if getattr(record, "is_booster", False):
        return VaccinationSequence.BOOSTER
    return VaccinationSequence.V1


def due_window(sequence: VaccinationSequence, dose_count: int) -> DueWindow:
    """Window for the dose following ``sequence`` in a category with ``dose_count`` doses."""
    if dose_count == 1 and sequence is VaccinationSequence.BOOSTER:
        return DueWindow(
            VaccinationSequence.BOOSTER, DAYS_SIX_MONTHS, DAYS_BOOSTER_GRACE_END
        )
    if sequence is VaccinationSequence.V1:
        return DueWindow(VaccinationSequence.V2, DAYS_V2_DUE, DAYS_V2_GRACE_END)
    if sequence is VaccinationSequence.V2:
        return DueWindow(
            VaccinationSequence.V3,
            DAYS_SIX_MONTHS,
            DAYS_BOOSTER_GRACE_END,
            interval_ok=dose_count >= 2,
        )
    return DueWindow(
        VaccinationSequence.BOOSTER, DAYS_SIX_MONTHS, DAYS_BOOSTER_GRACE_END
    )


def _doses_by_category(horse: Any) -> dict[VaccineCategory, list[Any]]:
    grouped: dict[VaccineCategory, list[Any]] = defaultdict(list)
    for record in getattr(horse, "vaccinations", None) or []:
        if _is_planned(record):
            continue
        category = _category_of(record)
        if category is None:
            continue
        grouped[category].append(record)
    for doses in grouped.values():
        doses.sort(key=lambda record: _as_date(record.administered_on), reverse=True)
    return grouped


def evaluate_category(
    category: VaccineCategory,
    doses: Sequence[Any],
    *,
    reference_date: date,
) -> CategoryCompliance:
    """Classify one category from its doses, newest first."""
    last = doses[0]
    last_dose_on = _as_date(last.administered_on)
    sequence = resolve_sequence(last)
    window = due_window(sequence, len(doses))
    days_since = (reference_date - last_dose_on).days
    due_date = last_dose_on + timedelta(days=window.due_after_days)
    grace_end_date = last_dose_on + timedelta(days=window.grace_end_days)

    missing_v1 = sequence is VaccinationSequence.V2 and len(doses) < 2
    label = f"V2 {category.value}" if missing_v1 else f"{window.phase.value} {category.value}"

    if not window.interval_ok:
        status = ComplianceStatus.RED
        message = f"{label}: no preceding V1, not compliant."
    elif days_since > window.grace_end_days:
        status = ComplianceStatus.RED
        overdue = days_since - window.grace_end_days
        message = (
            f"{label}: overdue since {format_date(grace_end_date)} "
            f"({overdue} days overdue)"
        )
    elif days_since >= window.notify_from_days:
        status = ComplianceStatus.YELLOW
        days_left = max(0, window.grace_end_days - days_since)
        if days_since >= window.due_after_days:
            message = (
                f"{label}: due now, at the latest by {format_date(grace_end_date)} "
                f"({days_left} days left)"
            )
        else:
            message = (
                f"{label}: due from {format_date(due_date)}, at the latest by "
                f"{format_date(grace_end_date)} ({days_left} days left)"
            )
    else:
        status = ComplianceStatus.GREEN
        message = (
            f"{label}: due from {format_date(due_date)}, at the latest by "
            f"{format_date(grace_end_date)}"
        )

    return CategoryCompliance(
        category=category,
        phase=window.phase,
        status=status,
        label=label,
        message=message,
        last_dose_on=last_dose_on,
        days_since=days_since,
        due_date=due_date,
        grace_end_date=grace_end_date,
    )


def check_vaccination_compliance(
    horse: Any,
    *,
    reference_date: date | None = None,
) -> VaccinationCompliance:
    """Evaluate all vaccination categories of a horse.

    Categories are judged independently and the overall status is the worst of
    them. Planned doses are ignored. A horse without any administered dose is
    RED with :data:`NO_VACCINATION_DATA_MESSAGE`.
    """

    today = reference_date or date.today()
    grouped = _doses_by_category(horse)
    if not grouped:
        return VaccinationCompliance(
            status=ComplianceStatus.RED,
            message=NO_VACCINATION_DATA_MESSAGE,
            next_due=None,
            due_items=[],
            all_next_due=[],
            categories=[],
        )

    horse_id = getattr(horse, "id", None)
    horse_name = getattr(horse, "name", "") or ""

    categories: list[CategoryCompliance] = []
    due_items: list[DueItem] = []
    all_next_due: list[NextDue] = []
    earliest: CategoryCompliance | None = None

    for category in VaccineCategory:
        doses = grouped.get(category)
        if not doses:
            continue
        result = evaluate_category(category, doses, reference_date=today)
        categories.append(result)
        all_next_due.append(
            NextDue(
                category=result.category,
                phase=result.phase,
                status=result.status,
                due_date=result.due_date,
                grace_end_date=result.grace_end_date,
                message=result.message,
            )
        )
        if result.status is ComplianceStatus.GREEN:
            if earliest is None or result.due_date < earliest.due_date:
                earliest = result
        else:
            due_items.append(
                DueItem(
                    horse_id=horse_id,
                    horse_name=horse_name,
                    category=result.category,
                    phase=result.phase,
                    status=result.status,
                    message=result.message,
                )
            )

    status = worst_status(result.status for result in categories)
    next_due: NextDue | None = None
    if status is ComplianceStatus.GREEN and earliest is not None:
        message = (
            f"Compliant. Next due: {earliest.label} from "
            f"{format_date(earliest.due_date)}"
        )
        next_due = next(
            entry for entry in all_next_due if entry.category is earliest.category
        )
    else:
        message = next(
            result.message for result in categories if result.status is status
        )

    return VaccinationCompliance(
        status=status,
        message=message,
        next_due=next_due,
        due_items=due_items,
        all_next_due=all_next_due,
        categories=categories,
    )


def vaccination_due_items(
    horse: Any, *, reference_date: date | None = None
) -> list[DueItem]:
    return check_vaccination_compliance(horse, reference_date=reference_date).due_items


def check_hoof_care_status(
    horse: Any,
    *,
    reference_date: date | None = None,
) -> HoofCareStatus:
    """Farrier interval check; no farrier history counts as compliant."""

    today = reference_date or date.today()
    visits = [
        _as_date(record.performed_on)
        for record in getattr(horse, "service_history", None) or []
        if ServiceType(record.service_type) is ServiceType.FARRIER
    ]
    if not visits:
        return HoofCareStatus(status=ComplianceStatus.GREEN, days_since=0)

    last_visit = max(visits)
    days_since = (today - last_visit).days
    if days_since > HOOF_OVERDUE_AFTER_DAYS:
        status = ComplianceStatus.RED
    elif days_since > HOOF_DUE_AFTER_DAYS:
        status = ComplianceStatus.YELLOW
    else:
        status = ComplianceStatus.GREEN
    return HoofCareStatus(status=status, days_since=days_since, last_service_on=last_visit)


def hoof_due_message(status: ComplianceStatus, days_since: int) -> str:
    if status is ComplianceStatus.RED:
        return f"Last farrier visit {days_since} days ago. Book an appointment urgently."
    return f"Last farrier visit {days_since} days ago. Remember to book an appointment."


def hoof_due_items(
    horse: Any, *, reference_date: date | None = None
) -> list[HoofDueItem]:
    hoof = check_hoof_care_status(horse, reference_date=reference_date)
    if hoof.status is ComplianceStatus.GREEN:
        return []
    return [
        HoofDueItem(
            horse_id=getattr(horse, "id", None),
            horse_name=getattr(horse, "name", "") or "",
            status=hoof.status,
            days_since=hoof.days_since,
            message=hoof_due_message(hoof.status, hoof.days_since),
        )
    ]
