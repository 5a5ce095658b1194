"""Service layer exports."""
from app.services import (
    auth_service,
    compliance_service,
    due_check_service,
    due_notification_service,
    email_service,
    horse_service,
    presentation_service,
)

__all__ = [
    "auth_service",
    "compliance_service",
    "due_check_service",
    "due_notification_service",
    "email_service",
    "horse_service",
    "presentation_service",
]
