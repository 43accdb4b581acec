"""
SMTP implementation of the AlertDispatcher interface.

Mail goes out through Apprise's email plugin. The SMTP server, the
credentials, the sender and the recipients are all encoded in a single
mailto:// URL.
"""

import logging
from urllib.parse import quote, urlencode

import apprise

from url_sentry.contracts import AlertDispatcher
from url_sentry.domain import Message, SMTPSettings
from url_sentry.errors import DispatchError

# Module logger
logger = logging.getLogger(__name__)


def build_mailto_url(message: Message, settings: SMTPSettings) -> str:
    """
    Builds the Apprise email URL for a message.

    With a username the connection is upgraded with STARTTLS (mailtos://)
    before logging in. Without one the mail is sent unauthenticated over
    plain mailto://.
    """
    scheme = "mailto"
    credentials = ""
    params = {
        "smtp": settings.host,
        "from": message.from_address,
        "to": ",".join(message.to),
    }
    if settings.username:
        scheme = "mailtos"
        params["mode"] = "starttls"
        credentials = f"{quote(settings.username, safe='')}:{quote(settings.password, safe='')}@"
    return f"{scheme}://{credentials}{settings.host}:{settings.port}/?{urlencode(params)}"


class SmtpDispatcher(AlertDispatcher):
    """Delivers alerts through an SMTP server, best effort."""

    async def send(self, message: Message, settings: SMTPSettings) -> None:
        if not message.to:
            logger.warning(f"alert: no recipients for '{message.subject}', not sent")
            return

        notifier = apprise.Apprise()
        if not notifier.add(build_mailto_url(message, settings)):
            raise DispatchError(
                f"invalid mail settings for {settings.host}:{settings.port}"
            )

        try:
            delivered = await notifier.async_notify(body=message.body, title=message.subject)
        except Exception as err:
            raise DispatchError(
                f"error sending mail through {settings.host}:{settings.port}: {err}"
            ) from err
        if not delivered:
            raise DispatchError(f"mail not delivered through {settings.host}:{settings.port}")

        logger.info(f"alert: sent '{message.subject}' to {len(message.to)} recipient(s)")
