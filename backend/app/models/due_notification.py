"""Log of due reminders already emailed to an owner."""

from __future__ import annotations

import uuid

from sqlalchemy import Enum, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.models.horse import ComplianceStatus, VaccinationSequence, VaccineCategory
from app.models.mixins import CreatedAtMixin


class VaccinationDueNotification(CreatedAtMixin, Base):
    """One row per (owner, horse, category, phase) the owner was told about."""

    __tablename__ = "vaccination_due_notifications"
    __table_args__ = (
        UniqueConstraint(
            "owner_id",
            "horse_id",
            "vaccine_type",
            "sequence_phase",
            name="uq_vaccination_due_notification",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    owner_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    horse_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("horses.id", ondelete="CASCADE"), nullable=False
    )
    vaccine_type: Mapped[VaccineCategory] = mapped_column(
        Enum(VaccineCategory, native_enum=False), nullable=False
    )
    sequence_phase: Mapped[VaccinationSequence] = mapped_column(
        Enum(VaccinationSequence, native_enum=False), nullable=False
    )


class HoofDueNotification(CreatedAtMixin, Base):
    """One row per (owner, horse, severity) farrier reminder."""

    __tablename__ = "hoof_due_notifications"
    __table_args__ = (
        UniqueConstraint(
            "owner_id",
            "horse_id",
            "notified_for",
            name="uq_hoof_due_notification",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    owner_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    horse_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("horses.id", ondelete="CASCADE"), nullable=False
    )
    notified_for: Mapped[ComplianceStatus] = mapped_column(
        Enum(ComplianceStatus), nullable=False
    )
