"""
Exception hierarchy for the URL monitoring service.

Configuration errors are raised while resolving a single target and cause
that target to be skipped. Transport and dispatch errors are produced at
runtime and are only ever logged; they never stop the monitor.
"""

from typing import Optional


class SentryError(Exception):
    """Base class for every error raised by url-sentry."""


class ConfigError(SentryError):
    """A target (or the defaults layer) could not be resolved."""


class ConfigFormatError(ConfigError):
    """The raw configuration value is not a key/value mapping."""


class FieldDecodeError(ConfigError):
    """
    A field of the raw configuration has the wrong primitive type.

    Attributes:
        field: The configuration key that failed to decode.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"error decoding field '{field}': {message}")
        self.field: str = field


class IntervalParseError(ConfigError):
    """
    The check interval of a target is not a valid duration literal.

    Attributes:
        target_name: Name of the target whose interval is invalid.
        interval: The offending raw value.
    """

    def __init__(self, target_name: str, interval: str, reason: Optional[str] = None) -> None:
        message = f"error parsing interval target={target_name} interval={interval!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.target_name: str = target_name
        self.interval: str = interval


class EmailFormatError(ConfigError):
    """An email address in the configuration is not valid."""


class UrlFormatError(ConfigError):
    """A target has no URL or its URL is not an absolute http(s) URL."""


class ConfigFileError(SentryError):
    """No usable configuration source could be loaded."""


class TransportError(SentryError):
    """The HTTP request of a check failed before a status code was obtained."""


class RedirectNotAllowedError(TransportError):
    """The target answered with a redirect while redirects are disabled."""


class DispatchError(SentryError):
    """An alert could not be handed over to the mail server."""
