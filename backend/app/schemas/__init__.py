"""Schema exports."""

from app.schemas.auth import Token
from app.schemas.compliance import (
    ActionItemRead,
    ActionTaskRead,
    CategoryComplianceRead,
    DashboardSummaryRead,
    DueItemRead,
    HoofCareStatusRead,
    HorseComplianceRead,
    HorseHistoryRead,
    HorseSummaryRead,
    NextDueRead,
    ServiceDateGroup,
    ServiceYearGroup,
    StatusBadge,
    VaccinationComplianceRead,
    VaccinationDateGroup,
    VaccinationYearGroup,
)
from app.schemas.horse import (
    HorseCreate,
    HorseRead,
    ServiceRecordCreate,
    ServiceRecordRead,
    VaccinationCreate,
    VaccinationRead,
)
from app.schemas.notification import DailyDueCheckRead, NotificationRunRead

__all__ = [
    "ActionItemRead",
    "ActionTaskRead",
    "CategoryComplianceRead",
    "DailyDueCheckRead",
    "DashboardSummaryRead",
    "DueItemRead",
    "HoofCareStatusRead",
    "HorseComplianceRead",
    "HorseCreate",
    "HorseHistoryRead",
    "HorseRead",
    "HorseSummaryRead",
    "NextDueRead",
    "NotificationRunRead",
    "ServiceDateGroup",
    "ServiceRecordCreate",
    "ServiceRecordRead",
    "ServiceYearGroup",
    "StatusBadge",
    "Token",
    "VaccinationComplianceRead",
    "VaccinationCreate",
    "VaccinationDateGroup",
    "VaccinationRead",
    "VaccinationYearGroup",
]
