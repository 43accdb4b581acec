"""
HTTP client configuration module for the URL monitoring service.

This module creates the aiohttp client session shared by every check.
"""

import logging

import aiohttp

from url_sentry import USER_AGENT
from url_sentry.config import MonitoringContext

# Module logger
logger = logging.getLogger(__name__)


def get_http_session(context: MonitoringContext) -> aiohttp.ClientSession:
    """
    Create and configure an HTTP client session based on the provided configuration.

    The session identifies the service through its User-Agent header and
    bounds every request by the context's maximum timeout, so a hanging
    target cannot tie up a check forever.

    Args:
        context: Configuration context containing HTTP client settings.

    Returns:
        aiohttp.ClientSession: A configured HTTP client session.
    """
    logger.debug(f"config: http max_timeout={context.max_timeout}s user_agent={USER_AGENT}")
    return aiohttp.ClientSession(
        headers={"User-Agent": USER_AGENT},
        timeout=aiohttp.ClientTimeout(total=context.max_timeout),
    )
