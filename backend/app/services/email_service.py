"""Email rendering and SMTP delivery for due reminders."""

from __future__ import annotations

import asyncio
import logging
import smtplib
from email.message import EmailMessage
from pathlib import Path
from typing import Protocol, Sequence

from jinja2 import Environment, FileSystemLoader, select_autoescape

from app.core.config import get_settings
from app.models.horse import ComplianceStatus
from app.services.compliance_service import DueItem, HoofDueItem

logger = logging.getLogger(__name__)

__all__ = [
    "Mailer",
    "SmtpMailer",
    "render_hoof_due_email",
    "render_vaccination_due_email",
]

_TEMPLATE_DIR = Path(__file__).resolve().parents[1] / "templates"
_ENV = Environment(
    loader=FileSystemLoader(_TEMPLATE_DIR),
    autoescape=select_autoescape(["html", "xml"]),
)

_SEVERITY_WORDS = {
    ComplianceStatus.RED: "critical",
    ComplianceStatus.YELLOW: "due",
    ComplianceStatus.GREEN: "compliant",
}


def _severity_word(status: ComplianceStatus) -> str:
    return _SEVERITY_WORDS.get(status, "due")


class Mailer(Protocol):
    """Outbound email channel used by the reminder differ."""

    async def send(self, *, to: str, subject: str, html: str) -> bool:
        """Deliver a message; False means delivery was skipped, errors raise."""
        ...


def render_vaccination_due_email(
    *,
    owner_name: str,
    new_items: Sequence[DueItem],
    all_items: Sequence[DueItem],
) -> tuple[str, str]:
    plural = len(new_items) > 1
    subject = f"EquiManage: new vaccination{'s' if plural else ''} due"
    html = _ENV.get_template("vaccination_due_email.html").render(
        owner_name=owner_name or "User",
        new_items=new_items,
        all_items=all_items,
        plural=plural,
        severity_word=_severity_word,
    )
    return subject, html


def render_hoof_due_email(
    *,
    owner_name: str,
    new_items: Sequence[HoofDueItem],
    all_items: Sequence[HoofDueItem],
) -> tuple[str, str]:
    plural = len(new_items) > 1
    subject = f"EquiManage: farrier appointment{'s' if plural else ''} due"
    html = _ENV.get_template("hoof_due_email.html").render(
        owner_name=owner_name or "User",
        new_items=new_items,
        all_items=all_items,
        plural=plural,
        severity_word=_severity_word,
    )
    return subject, html


def _build_message(*, sender: str, to: str, subject: str, html: str) -> EmailMessage:
    message = EmailMessage()
    message["Subject"] = subject
    message["To"] = to
    message["From"] = sender
    message.set_content(f"{subject}\n\nOpen this email in an HTML capable client.")
    message.add_alternative(html, subtype="html")
    return message


class SmtpMailer:
    """Mailer backed by the configured SMTP relay.

    Delivery is skipped (``False``) when no relay is configured; transport
    errors propagate to the caller.
    """

    def __init__(self, *, timeout: float = 5) -> None:
        self.timeout = timeout

    def _deliver(self, to: str, subject: str, html: str) -> bool:
        settings = get_settings()
        if not settings.smtp_configured:
            logger.info("SMTP configuration missing; skipping reminder to %s", to)
            return False

        message = _build_message(
            sender=settings.smtp_from, to=to, subject=subject, html=html
        )
        with smtplib.SMTP(
            settings.smtp_host, settings.smtp_port, timeout=self.timeout
        ) as server:
            if settings.smtp_username and settings.smtp_password:
                try:
                    server.starttls()
                except smtplib.SMTPException:
                    logger.debug("SMTP server does not support STARTTLS")
                server.login(settings.smtp_username, settings.smtp_password)
            server.send_message(message)
        return True

    async def send(self, *, to: str, subject: str, html: str) -> bool:
        return await asyncio.to_thread(self._deliver, to, subject, html)
