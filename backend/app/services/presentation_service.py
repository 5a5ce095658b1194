"""Display helpers shared by the list, card, detail and dashboard views."""

from __future__ import annotations

import uuid
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Generic, Iterable, Sequence, TypeVar

from app.models.horse import ComplianceStatus, VaccineCategory
from app.services.compliance_service import (
    DueItem,
    check_hoof_care_status,
    check_vaccination_compliance,
    worst_status,
)

T = TypeVar("T")

_STATUS_COLORS = {
    ComplianceStatus.GREEN: "bg-emerald-500",
    ComplianceStatus.YELLOW: "bg-amber-500",
    ComplianceStatus.RED: "bg-rose-500",
}
_STATUS_LABELS = {
    ComplianceStatus.GREEN: "Current",
    ComplianceStatus.YELLOW: "Due soon",
    ComplianceStatus.RED: "Overdue",
}
DEFAULT_STATUS_COLOR = "bg-gray-500"
DEFAULT_STATUS_LABEL = "Unknown"

ACTION_KIND_VACCINATION = "VACC"
ACTION_KIND_HOOF = "HOOF"


def _coerce_status(status: Any) -> ComplianceStatus | None:
    try:
        return ComplianceStatus(status)
    except (TypeError, ValueError):
        return None


def get_status_color(status: Any) -> str:
    """Swatch class for a status; unknown values get a neutral grey."""
    return _STATUS_COLORS.get(_coerce_status(status), DEFAULT_STATUS_COLOR)


def get_status_label(status: Any) -> str:
    return _STATUS_LABELS.get(_coerce_status(status), DEFAULT_STATUS_LABEL)


@dataclass(slots=True)
class DateGroup(Generic[T]):
    day: date
    records: list[T] = field(default_factory=list)


@dataclass(slots=True)
class YearGroup(Generic[T]):
    year: int
    dates: list[DateGroup[T]] = field(default_factory=list)


def group_by_year(
    records: Iterable[T], date_of: Callable[[T], date]
) -> list[YearGroup[T]]:
    """Fold records into years (newest first), then days (newest first).

    Records sharing a day keep their input order.
    """

    by_year: dict[int, dict[date, DateGroup[T]]] = defaultdict(dict)
    for record in records:
        day = date_of(record)
        days = by_year[day.year]
        group = days.get(day)
        if group is None:
            group = days[day] = DateGroup(day=day)
        group.records.append(record)

    return [
        YearGroup(
            year=year,
            dates=sorted(by_year[year].values(), key=lambda group: group.day, reverse=True),
        )
        for year in sorted(by_year, reverse=True)
    ]


def sort_by_worst_status(
    items: Iterable[T], status_of: Callable[[T], ComplianceStatus]
) -> list[T]:
    """RED first, then YELLOW, then GREEN; ties keep their input order."""
    return sorted(items, key=lambda item: -status_of(item).severity)


def filter_due_items(
    items: Iterable[DueItem],
    *,
    category: VaccineCategory | None = None,
    status: ComplianceStatus | None = None,
) -> list[DueItem]:
    return [
        item
        for item in items
        if (category is None or item.category is category)
        and (status is None or item.status is status)
    ]


def group_due_items_by_category(
    items: Iterable[DueItem],
) -> dict[VaccineCategory, list[DueItem]]:
    grouped: dict[VaccineCategory, list[DueItem]] = {}
    for item in items:
        grouped.setdefault(item.category, []).append(item)
    return grouped


def group_due_items_by_status(
    items: Iterable[DueItem],
) -> dict[ComplianceStatus, list[DueItem]]:
    grouped: dict[ComplianceStatus, list[DueItem]] = {}
    for item in sort_by_worst_status(items, lambda item: item.status):
        grouped.setdefault(item.status, []).append(item)
    return grouped


@dataclass(slots=True)
class ActionTask:
    kind: str
    priority: ComplianceStatus
    message: str


@dataclass(slots=True)
class ActionItem:
    """Everything a single horse needs, consolidated for the dashboard."""

    horse_id: uuid.UUID | None
    horse_name: str
    tasks: list[ActionTask]
    highest_priority: ComplianceStatus


def build_action_items(
    horses: Iterable[Any], *, reference_date: date | None = None
) -> list[ActionItem]:
    """Consolidated to-do list across horses, worst first."""

    items: list[ActionItem] = []
    for horse in horses:
        tasks: list[ActionTask] = []
        vaccination = check_vaccination_compliance(horse, reference_date=reference_date)
        if vaccination.status is not ComplianceStatus.GREEN:
            tasks.append(
                ActionTask(
                    kind=ACTION_KIND_VACCINATION,
                    priority=vaccination.status,
                    message=vaccination.message,
                )
            )
        hoof = check_hoof_care_status(horse, reference_date=reference_date)
        if hoof.status is not ComplianceStatus.GREEN:
            message = (
                "Farrier overdue (more than 8 weeks)"
                if hoof.status is ComplianceStatus.RED
                else "Farrier due (more than 6 weeks)"
            )
            tasks.append(
                ActionTask(kind=ACTION_KIND_HOOF, priority=hoof.status, message=message)
            )
        if tasks:
            items.append(
                ActionItem(
                    horse_id=getattr(horse, "id", None),
                    horse_name=getattr(horse, "name", "") or "",
                    tasks=tasks,
                    highest_priority=worst_status(task.priority for task in tasks),
                )
            )
    return sort_by_worst_status(items, lambda item: item.highest_priority)


def filter_action_items(
    items: Sequence[ActionItem],
    *,
    kind: str | None = None,
    priority: ComplianceStatus | None = None,
) -> list[ActionItem]:
    return [
        item
        for item in items
        if (kind is None or any(task.kind == kind for task in item.tasks))
        and (priority is None or item.highest_priority is priority)
    ]


def count_by_status(
    horses: Sequence[Any], *, reference_date: date | None = None
) -> dict[str, int]:
    """Tile counts for the health dashboard, keyed by lower-case status."""

    counts = {"total": len(horses)}
    counts.update({status.value.lower(): 0 for status in ComplianceStatus})
    for horse in horses:
        status = check_vaccination_compliance(horse, reference_date=reference_date).status
        counts[status.value.lower()] += 1
    return counts


def horses_due_for_appointment(
    horses: Iterable[Any], *, reference_date: date | None = None
) -> list[Any]:
    """Horses whose vaccinations are due or overdue, for appointment requests."""
    return [
        horse
        for horse in horses
        if check_vaccination_compliance(horse, reference_date=reference_date).status
        is not ComplianceStatus.GREEN
    ]
