"""Logging filters that scrub credentials from log output."""

from __future__ import annotations

import logging
import re

_SENSITIVE_PATTERN = re.compile(
    r"(Authorization: Bearer\s+[\w\.-]+"
    r"|X-Cron-Secret:\s*\S+"
    r"|access_token\"\s*:\s*\"[^\"]+\""
    r"|password\"\s*:\s*\"[^\"]+\")",
    re.IGNORECASE,
)
REDACTED = "**REDACTED**"


def redact(text: str) -> str:
    return _SENSITIVE_PATTERN.sub(REDACTED, text)


class SensitiveFilter(logging.Filter):
    """Redact bearer tokens, cron secrets and passwords in log messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = redact(record.msg)
        return True


__all__ = ["REDACTED", "SensitiveFilter", "redact"]
