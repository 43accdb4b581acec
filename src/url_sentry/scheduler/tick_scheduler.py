"""
In-memory implementation of the WorkScheduler interface.

This module provides a scheduler that owns the resolved targets and, once
per tick, yields those whose scheduled check time has passed. Each yielded
target is rescheduled at dispatch, one interval after its previous schedule.
"""

import asyncio
import logging
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from url_sentry.config.constants import DEFAULT_TICK_INTERVAL
from url_sentry.contracts import WorkScheduler
from url_sentry.domain import Target, utc_now

# Module logger
logger = logging.getLogger(__name__)


class TickScheduler(WorkScheduler):
    """
    A fixed-resolution scheduler over an in-memory list of targets.

    Rescheduling adds the interval to the previous schedule, never to the
    current time. A target whose checks take longer than its interval stays
    due on every tick; no catch-up suppression is applied.
    """

    def __init__(
        self,
        targets: Sequence[Target],
        tick_interval: float = DEFAULT_TICK_INTERVAL,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """
        Initializes a new TickScheduler instance.

        Args:
            targets: The resolved targets to schedule.
            tick_interval: Seconds to sleep between two ticks.
            clock: Returns the current UTC time; replaced in tests.

        Raises:
            ValueError: If tick_interval is negative.
        """
        if tick_interval < 0:
            raise ValueError("tick_interval must not be negative.")

        self._targets: List[Target] = list(targets)
        self._tick_interval: float = tick_interval
        self._clock: Callable[[], datetime] = clock
        self._is_running: bool = False
        self._has_ticked: bool = False

    @property
    def targets(self) -> List[Target]:
        return self._targets

    async def start(self) -> None:
        logger.info(f"Starting scheduler ({len(self._targets)} targets)...")
        self._is_running = True
        self._has_ticked = False

    async def stop(self) -> None:
        logger.info("Closing scheduler...")
        self._is_running = False

    def collect_due(self, now: Optional[datetime] = None) -> List[Target]:
        """
        Returns the targets that are due at `now`, without rescheduling them.
        """
        if now is None:
            now = self._clock()
        return [target for target in self._targets if target.needs_check(now)]

    async def __anext__(self) -> List[Target]:
        """
        Waits for the next tick with due targets and returns them.

        The first batch is collected immediately, later ones after sleeping
        one tick. Every returned target has already been rescheduled.

        Raises:
            StopAsyncIteration: When the scheduler has been stopped.
        """
        while self._is_running:
            if self._has_ticked:
                await asyncio.sleep(self._tick_interval)
                if not self._is_running:
                    break
            self._has_ticked = True

            batch = self.collect_due()
            for target in batch:
                target.reset_run_time()

            if batch:
                return batch

        raise StopAsyncIteration
