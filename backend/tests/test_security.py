"""Unit tests for credential helpers, rate parsing and log redaction."""

from __future__ import annotations

import logging

from app.api.v1.auth import parse_rate
from app.core.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_cron_secret,
    verify_password,
)
from app.security.logging_filters import SensitiveFilter, redact


def test_password_hash_round_trip() -> None:
    hashed = get_password_hash("Passw0rd!")
    assert verify_password("Passw0rd!", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("Passw0rd!", "not-a-bcrypt-hash")


def test_access_token_carries_subject() -> None:
    token = create_access_token("profile-1", role="owner")
    claims = decode_access_token(token)
    assert claims["sub"] == "profile-1"
    assert claims["role"] == "owner"


def test_cron_secret_comparison() -> None:
    assert verify_cron_secret("s3cret", "s3cret")
    assert not verify_cron_secret("s3cret", "other")
    assert not verify_cron_secret(None, "s3cret")
    assert not verify_cron_secret("s3cret", None)
    assert not verify_cron_secret("", "")


def test_parse_rate() -> None:
    assert parse_rate("10/minute", fallback=(1, 1)) == (10, 60)
    assert parse_rate("5 / hour", fallback=(1, 1)) == (5, 3600)
    assert parse_rate("garbage", fallback=(7, 30)) == (7, 30)
    assert parse_rate("3/fortnight", fallback=(7, 30)) == (3, 30)


def test_sensitive_values_are_redacted() -> None:
    assert "abc.def" not in redact("Authorization: Bearer abc.def")
    assert "hunter2" not in redact('{"password": "hunter2"}')
    assert "topsecret" not in redact("X-Cron-Secret: topsecret")

    record = logging.LogRecord(
        "app", logging.INFO, __file__, 1, "X-Cron-Secret: topsecret", None, None
    )
    assert SensitiveFilter().filter(record) is True
    assert record.msg == "**REDACTED**"
