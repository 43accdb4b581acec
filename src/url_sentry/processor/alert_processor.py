"""
State-transition alerting.

Alerts are edge triggered: a message is composed only when a check flips
the health state of its target, so a target that stays down is reported
once, and once more when it comes back.
"""

import logging
from datetime import datetime
from typing import Optional

from url_sentry.contracts import AlertDispatcher, ResultProcessor
from url_sentry.domain import TIMESTAMP_FORMAT, CheckResult, Message, SMTPSettings, Target, utc_now
from url_sentry.errors import DispatchError

# Module logger
logger = logging.getLogger(__name__)

SUBJECT_PREFIX = "[url-sentry]"

BODY_TEMPLATE = """
Timestamp:  {timestamp}
Name:       {name}
URL:        {url}
StatusCode: {status_code}
-----------------------------------------------------------
{summary}"""


def compose_alert(target: Target, default_from: str = "", now: Optional[datetime] = None) -> Message:
    """
    Builds the alert message for the current state of a target.

    Args:
        target: The target whose state just flipped.
        default_from: Sender used when the target has no from_email.
        now: Timestamp written in the body, defaults to the current UTC time.

    Returns:
        Message: The composed alert.
    """
    if now is None:
        now = utc_now()

    if target.current_state:
        subject = f"{SUBJECT_PREFIX} site online: {target.name}"
        summary = f"URL is back online: {target.url}"
    else:
        subject = f"{SUBJECT_PREFIX} site offline: {target.name}"
        summary = f"Received an unexpected return code when requesting URL {target.url}"

    body = BODY_TEMPLATE.format(
        timestamp=now.strftime(TIMESTAMP_FORMAT),
        name=target.name,
        url=target.url,
        status_code=target.last_return_code,
        summary=summary,
    )
    return Message(
        subject=subject,
        to=list(target.alert_email_list),
        from_address=target.from_email or default_from,
        body=body,
    )


class AlertProcessor(ResultProcessor):
    """
    Composes an alert for every state flip and hands it to a dispatcher.

    When alerts are disabled the message is still composed and logged, but
    never sent. Delivery failures are logged and not retried.
    """

    def __init__(
        self,
        dispatcher: AlertDispatcher,
        smtp_settings: SMTPSettings,
        default_from: str = "",
        send_alerts: bool = True,
    ) -> None:
        """
        Args:
            dispatcher: The transport that delivers the messages.
            smtp_settings: Mail server settings passed to the dispatcher.
            default_from: Sender for targets without a from_email.
            send_alerts: Whether composed messages are dispatched.
        """
        self._dispatcher: AlertDispatcher = dispatcher
        self._smtp_settings: SMTPSettings = smtp_settings
        self._default_from: str = default_from
        self._send_alerts: bool = send_alerts

    @property
    def send_alerts(self) -> bool:
        return self._send_alerts

    def disable_alerts(self) -> None:
        """Disables all outgoing alerts; they are only logged from now on."""
        self._send_alerts = False

    async def process(self, result: CheckResult) -> None:
        if not result.state_changed:
            return

        target = result.target
        logger.debug(f"Sending alert for {target.name}")
        message = compose_alert(target, self._default_from)
        logger.info(f"alert: subject='{message.subject}' to={','.join(message.to)}")

        if not self._send_alerts:
            logger.debug(f"alert: not sent, alerts are disabled\n{message.body}")
            return

        try:
            await self._dispatcher.send(message, self._smtp_settings)
        except DispatchError as e:
            logger.error(f"alert: failed to send alert for {target.name}: {e}")
