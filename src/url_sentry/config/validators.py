"""
Validation helpers for target configuration values.

Durations use the Go duration literal syntax ("300ms", "1h30m", "5m").
Email addresses are normalized with the email-validator library, and URLs
must be absolute http(s) URLs.
"""

import re
from datetime import timedelta
from urllib.parse import urlparse

from email_validator import EmailNotValidError, validate_email

from url_sentry.errors import EmailFormatError

# One "<number><unit>" component of a duration literal
_DURATION_COMPONENT = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")

_UNIT_MICROSECONDS = {
    "ns": 0.001,
    "us": 1.0,
    "µs": 1.0,
    "μs": 1.0,
    "ms": 1_000.0,
    "s": 1_000_000.0,
    "m": 60 * 1_000_000.0,
    "h": 3_600 * 1_000_000.0,
}

# Largest duration representable as int64 nanoseconds (about 2562047h47m16s)
MAX_DURATION = timedelta(microseconds=9_223_372_036_854_775)


def parse_duration(literal: str) -> timedelta:
    """
    Parses a duration literal such as "5m" or "1h30m15s".

    Args:
        literal: A sequence of decimal numbers, each with a unit suffix.
            "0" is accepted without a unit.

    Returns:
        timedelta: The parsed duration.

    Raises:
        ValueError: If the literal is malformed, longer than MAX_DURATION,
            or negative. A check interval cannot run backwards, so a leading
            "-" is only accepted on a zero duration.
    """
    text = literal.strip()
    negative = False
    if text and text[0] in "+-":
        negative = text[0] == "-"
        text = text[1:]

    if text == "0":
        return timedelta(0)
    if not text:
        raise ValueError(f"invalid duration {literal!r}")

    total = 0.0
    position = 0
    while position < len(text):
        match = _DURATION_COMPONENT.match(text, position)
        if match is None:
            raise ValueError(f"invalid duration {literal!r}")
        total += float(match.group(1)) * _UNIT_MICROSECONDS[match.group(2)]
        position = match.end()

    if negative and total:
        raise ValueError(f"negative duration {literal!r} is not allowed")
    if total > MAX_DURATION / timedelta(microseconds=1):
        raise ValueError(f"invalid duration {literal!r}: overflow")
    return timedelta(microseconds=total)


def format_email(address: str) -> str:
    """
    Validates and normalizes a single email address.

    Raises:
        EmailFormatError: If the address is not a valid email address.
    """
    try:
        validated = validate_email(address.strip(), check_deliverability=False)
    except EmailNotValidError as err:
        raise EmailFormatError(f"email format not valid: {address!r}: {err}") from err
    return validated.normalized.lower()


def is_valid_url(url: str) -> bool:
    """Checks that a string is an absolute http or https URL with a host."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)
