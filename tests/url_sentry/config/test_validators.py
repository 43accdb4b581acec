"""
Unit tests for the configuration value validators.
"""

from datetime import timedelta

import pytest

from url_sentry.config.validators import MAX_DURATION, format_email, is_valid_url, parse_duration
from url_sentry.errors import EmailFormatError


@pytest.mark.parametrize(
    "literal, expected",
    [
        ("5m", timedelta(minutes=5)),
        ("30s", timedelta(seconds=30)),
        ("1h30m", timedelta(hours=1, minutes=30)),
        ("1h30m15s", timedelta(hours=1, minutes=30, seconds=15)),
        ("300ms", timedelta(milliseconds=300)),
        ("1.5h", timedelta(minutes=90)),
        ("250us", timedelta(microseconds=250)),
        ("0", timedelta(0)),
        ("0s", timedelta(0)),
        ("+10s", timedelta(seconds=10)),
        (" 2m ", timedelta(minutes=2)),
    ],
)
def test_parse_duration_should_accept_valid_literals(literal: str, expected: timedelta) -> None:
    assert parse_duration(literal) == expected


@pytest.mark.parametrize("literal", ["", "5", "five minutes", "5x", "m5", "1h 30m", "-5m", "5m-"])
def test_parse_duration_should_reject_invalid_literals(literal: str) -> None:
    with pytest.raises(ValueError):
        parse_duration(literal)


@pytest.mark.parametrize("literal", ["2562048h", "99999999999h", "90000000h"])
def test_parse_duration_should_reject_literals_above_the_maximum(literal: str) -> None:
    with pytest.raises(ValueError, match="overflow"):
        parse_duration(literal)


def test_parse_duration_should_accept_the_largest_whole_hour() -> None:
    assert parse_duration("2562047h") == timedelta(hours=2562047)
    assert parse_duration("2562047h") <= MAX_DURATION


def test_parse_duration_should_only_allow_a_sign_on_zero() -> None:
    assert parse_duration("-0") == timedelta(0)

    with pytest.raises(ValueError, match="negative duration"):
        parse_duration("-1s")


def test_format_email_should_trim_and_lowercase() -> None:
    assert format_email("  Ops@Example.COM ") == "ops@example.com"


@pytest.mark.parametrize("address", ["", "not-an-email", "ops@", "@example.com", "a b@example.com"])
def test_format_email_should_reject_invalid_addresses(address: str) -> None:
    with pytest.raises(EmailFormatError):
        format_email(address)


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://example.com", True),
        ("http://localhost:8080/health", True),
        ("http://127.0.0.1/", True),
        ("ftp://example.com", False),
        ("example.com", False),
        ("https://", False),
        ("", False),
    ],
)
def test_is_valid_url(url: str, expected: bool) -> None:
    assert is_valid_url(url) is expected
