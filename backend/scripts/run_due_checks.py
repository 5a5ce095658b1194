"""Run the daily vaccination and farrier reminder check once.

Meant for a scheduler (cron, systemd timer) that cannot call the HTTP
endpoint. Re-running on the same day sends nothing new.
"""

# ruff: noqa: E402  # allow path/bootstrap tweaks before app imports

from __future__ import annotations

import argparse
import asyncio
import datetime as dt
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.append(str(PROJECT_ROOT))

from app.core.config import get_settings
from app.db.session import dispose_engine, get_sessionmaker
from app.security.logging_filters import SensitiveFilter
from app.services.due_check_service import run_daily_due_checks
from app.services.email_service import SmtpMailer

LOGGER = logging.getLogger("run_due_checks")


def configure_logging(verbose: bool) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
    handler.addFilter(SensitiveFilter())
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.INFO)


async def run(reference_date: dt.date | None, concurrency: int) -> int:
    try:
        summary = await run_daily_due_checks(
            get_sessionmaker(),
            mailer=SmtpMailer(),
            reference_date=reference_date,
            concurrency=concurrency,
        )
    finally:
        await dispose_engine()
    LOGGER.info(
        "Checked %d owners: %d vaccination and %d farrier reminders recorded",
        summary.owners_checked,
        summary.vaccination_sent,
        summary.hoof_sent,
    )
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Send due vaccination and farrier reminders")
    parser.add_argument(
        "--date",
        type=dt.date.fromisoformat,
        default=None,
        help="Evaluate as of this ISO date instead of today",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=None,
        help="Owners processed in parallel (default: DUE_CHECK_CONCURRENCY)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    configure_logging(args.verbose)
    concurrency = args.concurrency or get_settings().due_check_concurrency
    sys.exit(asyncio.run(run(args.date, max(1, concurrency))))


if __name__ == "__main__":
    main()
