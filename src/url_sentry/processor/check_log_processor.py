"""
Result processor that writes one log line per check.
"""

import logging

from url_sentry.contracts import ResultProcessor
from url_sentry.domain import CheckResult

# Module logger
logger = logging.getLogger(__name__)


class CheckLogProcessor(ResultProcessor):
    """Logs the name, health state and status code of every check."""

    async def process(self, result: CheckResult) -> None:
        state = "ok" if result.current_state else "err"
        logger.info(
            f"check: name={result.target.name} state={state} status={result.status_code}"
        )
        if result.state_changed:
            direction = "online" if result.current_state else "offline"
            logger.info(f"check: name={result.target.name} went {direction}")
