"""ORM models package export."""

from app.models.due_notification import HoofDueNotification, VaccinationDueNotification
from app.models.horse import (
    ComplianceStatus,
    Horse,
    HorseGender,
    ServiceRecord,
    ServiceType,
    VaccinationRecord,
    VaccinationSequence,
    VaccinationStatus,
    VaccineCategory,
)
from app.models.profile import Profile, ProfileRole

__all__ = [
    "ComplianceStatus",
    "HoofDueNotification",
    "Horse",
    "HorseGender",
    "Profile",
    "ProfileRole",
    "ServiceRecord",
    "ServiceType",
    "VaccinationDueNotification",
    "VaccinationRecord",
    "VaccinationSequence",
    "VaccinationStatus",
    "VaccineCategory",
]
