"""
HTTP status checker implementation using the aiohttp library.

This module provides an implementation of the StatusChecker interface that
issues one request per check and reports the status code. Network failures
are returned as TransportError values instead of being raised.
"""

import asyncio
import logging
from typing import Optional, Tuple

import aiohttp

from url_sentry import USER_AGENT
from url_sentry.config.constants import DEFAULT_METHOD
from url_sentry.contracts import StatusChecker
from url_sentry.domain import Target
from url_sentry.errors import RedirectNotAllowedError, TransportError

# Module logger
logger = logging.getLogger(__name__)

REDIRECT_STATUS_CODES = frozenset({301, 302, 303, 307, 308})


def _is_redirect(response: aiohttp.ClientResponse) -> bool:
    return response.status in REDIRECT_STATUS_CODES and "Location" in response.headers


async def get_http_status(
    session: aiohttp.ClientSession,
    method: str,
    url: str,
    user_agent: str,
    follow_redirects: bool,
) -> Tuple[int, Optional[TransportError]]:
    """
    Requests a URL once and returns its HTTP status code.

    Args:
        session: The shared client session.
        method: The HTTP method of the request.
        url: The URL to request.
        user_agent: Value of the User-Agent header.
        follow_redirects: Whether redirects are followed. When False, a
            redirect response fails the request.

    Returns:
        Tuple[int, Optional[TransportError]]: The status code and None, or
            0 and the error when no acceptable response was obtained.
    """
    try:
        async with session.request(
            method,
            url,
            headers={"User-Agent": user_agent},
            allow_redirects=follow_redirects,
        ) as response:
            if not follow_redirects and _is_redirect(response):
                location = response.headers.get("Location")
                return 0, RedirectNotAllowedError(
                    f"Redirects not allowed: {url} answered {response.status} to {location}"
                )
            return response.status, None

    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as err:
        error = TransportError(f"{method} {url} failed: {type(err).__name__}: {err}")
        error.__cause__ = err
        return 0, error


class AiohttpStatusChecker(StatusChecker):
    """
    A concrete implementation of StatusChecker using the aiohttp library.

    It uses a shared aiohttp ClientSession, whose timeout bounds every check.
    No retries are performed: a failed request counts as one failed check.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        user_agent: str = USER_AGENT,
        method: str = DEFAULT_METHOD,
    ) -> None:
        """
        Initializes the checker with a shared aiohttp ClientSession.

        Args:
            session: An active aiohttp.ClientSession to be used for requests.
            user_agent: The User-Agent identifying the service and its version.
            method: The HTTP method used for every check.
        """
        self._session: aiohttp.ClientSession = session
        self._user_agent: str = user_agent
        self._method: str = method

    async def check(self, target: Target) -> Tuple[int, Optional[Exception]]:
        logger.debug(f"Starting check for target: {target.name} url={target.url}")
        status_code, error = await get_http_status(
            self._session,
            self._method,
            target.url,
            self._user_agent,
            target.follow_redirects,
        )
        if error is None:
            logger.debug(f"Checked {target.url} with status {status_code}")
        return status_code, error
