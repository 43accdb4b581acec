"""
Domain models for the URL monitoring service.

This module defines the core data structures used throughout the application:
the decoded configuration layer of a target, the resolved target with its
runtime check state, the outcome of a single check and the alert message.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import List, NamedTuple, Optional

# Module logger
logger = logging.getLogger(__name__)

# Layout used for timestamps in log lines and alert bodies
TIMESTAMP_FORMAT = "%b %d, %Y %H:%M:%S UTC"


def utc_now() -> datetime:
    """Returns the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class TargetLayer(NamedTuple):
    """
    One decoded configuration fragment (the defaults or a single target).

    Every field is optional: None means the key was absent from the raw
    mapping, any other value means it was explicitly set. This keeps the
    difference between "unset" and "explicitly false" visible to the merger.

    Attributes:
        name: Display name of the target.
        url: The URL to monitor.
        interval: Raw duration literal between two checks, e.g. "5m".
        follow_redirects: Whether redirects are followed during a check.
        return_codes: HTTP status codes considered healthy.
        from_email: Sender address of alerts for this target.
        alert_email: Recipient addresses of alerts for this target.
    """

    name: Optional[str] = None
    url: Optional[str] = None
    interval: Optional[str] = None
    follow_redirects: Optional[bool] = None
    return_codes: Optional[List[int]] = None
    from_email: Optional[str] = None
    alert_email: Optional[List[str]] = None


@dataclass
class Target:
    """
    A monitored URL with its resolved configuration and runtime check state.

    Targets are built once at startup by the config merger. Afterwards only
    the scheduler touches next_check_time, and only a check holding `lock`
    touches last_return_code and current_state.
    """

    name: str = ""
    url: str = ""
    check_interval: str = ""
    interval: timedelta = timedelta(0)
    follow_redirects: bool = True
    return_codes: List[int] = field(default_factory=list)
    from_email: str = ""
    alert_email_list: List[str] = field(default_factory=list)
    next_check_time: datetime = field(default_factory=utc_now)
    last_return_code: int = 0
    current_state: bool = True
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False, compare=False)

    def needs_check(self, now: Optional[datetime] = None) -> bool:
        """
        Tells whether the target is due.

        Args:
            now: The reference time, defaults to the current UTC time.

        Returns:
            bool: True if `now` is strictly after the scheduled check time.
        """
        if now is None:
            now = utc_now()
        return now > self.next_check_time

    def reset_run_time(self) -> None:
        """
        Schedules the next check one interval after the previous schedule.

        The new time is derived from the previous next_check_time rather than
        from the current time, so the cadence does not drift with check latency.
        """
        self.next_check_time = self.next_check_time + self.interval
        logger.debug(
            f"target: next check for {self.name} is {self.next_check_time.strftime(TIMESTAMP_FORMAT)}"
        )

    def is_status_valid(self, status_code: int) -> bool:
        """Checks if the given status code is one of the acceptable return codes."""
        return status_code in self.return_codes

    def record_status(self, status_code: int) -> bool:
        """
        Stores the outcome of a check and recomputes the health state.

        Args:
            status_code: The observed HTTP status, 0 if the request failed.

        Returns:
            bool: True if the health state flipped with this check.
        """
        previous_state = self.current_state
        self.last_return_code = status_code
        self.current_state = self.is_status_valid(status_code)
        return previous_state != self.current_state


class CheckResult(NamedTuple):
    """
    The outcome of a single check, passed through the processing pipeline.

    Attributes:
        target: The target that was checked.
        status_code: The HTTP status code received, 0 on transport failure.
        error: The transport error of the check, or None.
        start_time: The start time from time.time() in seconds.
        end_time: The end time from time.time() in seconds.
        previous_state: Health state of the target before this check.
        current_state: Health state of the target after this check.
    """

    target: Target
    status_code: int
    error: Optional[Exception]
    start_time: float
    end_time: float
    previous_state: bool
    current_state: bool

    @property
    def state_changed(self) -> bool:
        return self.previous_state != self.current_state


class Message(NamedTuple):
    """A fully composed alert email."""

    subject: str
    to: List[str]
    from_address: str
    body: str


class SMTPSettings(NamedTuple):
    """Connection settings of the mail server used to deliver alerts."""

    host: str
    port: int
    username: str
    password: str
