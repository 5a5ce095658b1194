"""Horse records with their vaccination and service history."""

from __future__ import annotations

import enum
import uuid
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Date, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.models.mixins import TimestampMixin

if TYPE_CHECKING:
    from app.models.profile import Profile


class ComplianceStatus(str, enum.Enum):
    """Derived compliance state, ordered by severity."""

    GREEN = "GREEN"
    YELLOW = "YELLOW"
    RED = "RED"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]


_SEVERITY = {
    ComplianceStatus.GREEN: 0,
    ComplianceStatus.YELLOW: 1,
    ComplianceStatus.RED: 2,
}


class VaccineCategory(str, enum.Enum):
    """Vaccination categories tracked independently for compliance."""

    INFLUENZA = "Influenza"
    HERPES = "Herpes"
    TETANUS = "Tetanus"
    WEST_NILE_VIRUS = "West-Nile-Virus"

    @classmethod
    def _missing_(cls, value: object) -> "VaccineCategory | None":
        if isinstance(value, str):
            return _CATEGORY_ALIASES.get(value.strip().lower())
        return None


_CATEGORY_ALIASES = {
    "west-nil-virus": VaccineCategory.WEST_NILE_VIRUS,
    "west nile virus": VaccineCategory.WEST_NILE_VIRUS,
    "west-nile": VaccineCategory.WEST_NILE_VIRUS,
    "influenza": VaccineCategory.INFLUENZA,
    "herpes": VaccineCategory.HERPES,
    "tetanus": VaccineCategory.TETANUS,
}


class VaccinationSequence(str, enum.Enum):
    """Position of a dose in the basic immunization protocol."""

    V1 = "V1"
    V2 = "V2"
    V3 = "V3"
    BOOSTER = "Booster"


class VaccinationStatus(str, enum.Enum):
    """Verification state; planned doses are appointments, not history."""

    VERIFIED = "verified"
    PENDING = "pending"
    PLANNED = "planned"


class ServiceType(str, enum.Enum):
    """Kinds of care recorded in the service history."""

    FARRIER = "Farrier"
    DEWORMING = "Deworming"
    DENTIST = "Dentist"
    PHYSIO = "Physio"
    OTHER = "Other"

    @classmethod
    def _missing_(cls, value: object) -> "ServiceType | None":
        if isinstance(value, str):
            return _SERVICE_ALIASES.get(value.strip().lower())
        return None


_SERVICE_ALIASES = {
    "hufschmied": ServiceType.FARRIER,
    "farrier": ServiceType.FARRIER,
    "entwurmung": ServiceType.DEWORMING,
    "zahnarzt": ServiceType.DENTIST,
    "sonstiges": ServiceType.OTHER,
}


class HorseGender(str, enum.Enum):
    STALLION = "stallion"
    MARE = "mare"
    GELDING = "gelding"


class Horse(TimestampMixin, Base):
    """A horse owned by a profile."""

    __tablename__ = "horses"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    owner_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    breed: Mapped[str | None] = mapped_column(String(120))
    birth_year: Mapped[int | None] = mapped_column(Integer())
    iso_nr: Mapped[str | None] = mapped_column(String(32))
    fei_nr: Mapped[str | None] = mapped_column(String(16))
    chip_id: Mapped[str | None] = mapped_column(String(15))
    gender: Mapped[HorseGender | None] = mapped_column(Enum(HorseGender))
    color: Mapped[str | None] = mapped_column(String(64))
    breeding_association: Mapped[str | None] = mapped_column(String(120))
    weight_kg: Mapped[int | None] = mapped_column(Integer())

    owner: Mapped["Profile"] = relationship("Profile", back_populates="horses")
    vaccinations: Mapped[list["VaccinationRecord"]] = relationship(
        "VaccinationRecord", back_populates="horse", cascade="all, delete-orphan"
    )
    service_history: Mapped[list["ServiceRecord"]] = relationship(
        "ServiceRecord", back_populates="horse", cascade="all, delete-orphan"
    )


class VaccinationRecord(TimestampMixin, Base):
    """A single dose, administered or planned."""

    __tablename__ = "vaccination_records"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    horse_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("horses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    vaccine_type: Mapped[VaccineCategory] = mapped_column(
        Enum(VaccineCategory), nullable=False
    )
    administered_on: Mapped[date] = mapped_column(Date, nullable=False)
    sequence: Mapped[VaccinationSequence | None] = mapped_column(
        Enum(VaccinationSequence)
    )
    is_booster: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    administered_by: Mapped[str | None] = mapped_column(String(255))
    status: Mapped[VaccinationStatus] = mapped_column(
        Enum(VaccinationStatus), nullable=False, default=VaccinationStatus.VERIFIED
    )

    horse: Mapped[Horse] = relationship("Horse", back_populates="vaccinations")


class ServiceRecord(TimestampMixin, Base):
    """Farrier, dentist and other care visits."""

    __tablename__ = "service_records"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    horse_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("horses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    service_type: Mapped[ServiceType] = mapped_column(
        Enum(ServiceType), nullable=False
    )
    performed_on: Mapped[date] = mapped_column(Date, nullable=False)
    provider: Mapped[str | None] = mapped_column(String(255))
    notes: Mapped[str | None] = mapped_column(String(1024))

    horse: Mapped[Horse] = relationship("Horse", back_populates="service_history")
