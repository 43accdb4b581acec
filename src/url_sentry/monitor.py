"""
Core monitor implementation for the URL monitoring service.

This module provides the Monitor class, which drives the checks of the
resolved targets. It coordinates the scheduler, the status checker and the
result processors, either once (run-once mode) or forever (continuous mode).
"""

import asyncio
import logging
import time
from asyncio import Task
from typing import List, Optional, Set

from .contracts import ResultProcessor, StatusChecker, WorkScheduler
from .domain import CheckResult, Target

# Module logger
logger = logging.getLogger(__name__)


class Monitor:
    """
    Drives the checks of every target.

    In continuous mode each due target is checked in its own task, so a slow
    or hanging target never delays the others. The checks of one target are
    serialized through the target's lock: a check, its state update and its
    alert decision all happen before the next check of that target starts.
    """

    def __init__(
        self,
        scheduler: WorkScheduler,
        checker: StatusChecker,
        processor: ResultProcessor,
    ) -> None:
        """
        Initializes a new Monitor instance.

        Args:
            scheduler: Component that owns the targets and decides when they are due.
            checker: Component that performs the HTTP check of a target.
            processor: Component that processes the outcome of every check.
        """
        self._scheduler: WorkScheduler = scheduler
        self._checker: StatusChecker = checker
        self._processor: ResultProcessor = processor
        self._check_tasks: Set[Task] = set()

    async def check_target(self, target: Target) -> CheckResult:
        """
        Checks a target once and processes the outcome.

        The observed status code updates the target's last return code and
        health state; the resulting CheckResult tells the processors whether
        the state flipped.

        Args:
            target: The target to check.

        Returns:
            CheckResult: The outcome of the check.
        """
        async with target.lock:
            start_time = time.time()
            status_code, error = await self._checker.check(target)
            end_time = time.time()

            if error is not None:
                logger.error(f"Error getting http status of '{target.url}': {error}")

            previous_state = target.current_state
            target.record_status(status_code)
            result = CheckResult(
                target=target,
                status_code=status_code,
                error=error,
                start_time=start_time,
                end_time=end_time,
                previous_state=previous_state,
                current_state=target.current_state,
            )
            await self._processor.process(result)
        return result

    async def _safe_check(self, target: Target) -> Optional[CheckResult]:
        try:
            return await self.check_target(target)
        except Exception as e:
            logger.exception(f"Check pipeline failed for target {target.name} with error: {e}")
            return None

    async def run_once(self) -> List[CheckResult]:
        """
        Checks every due target exactly once, one after the other, and returns.

        Returns:
            List[CheckResult]: The outcome of every completed check.
        """
        results: List[CheckResult] = []
        for target in self._scheduler.collect_due():
            result = await self._safe_check(target)
            target.reset_run_time()
            if result is not None:
                results.append(result)
        return results

    async def start(self) -> None:
        """
        Runs the monitor until it is stopped or cancelled.

        Every batch of due targets coming from the scheduler is dispatched
        fire-and-forget; the loop never waits for a check to complete.

        Raises:
            Exception: If the scheduling loop fails for any reason.
        """
        logger.info("Starting monitor loop.")
        try:
            await self._scheduler.start()

            async for batch in self._scheduler:
                logger.debug(f"Dispatching checks for {len(batch)} targets.")
                for target in batch:
                    task = asyncio.create_task(self._safe_check(target))
                    self._check_tasks.add(task)
                    task.add_done_callback(self._check_tasks.discard)

        except Exception as e:
            logger.error(f"Monitor loop failed: {e}")
            raise

    async def stop(self) -> None:
        """
        Stops the scheduler and cancels the checks still in flight.
        """
        logger.info("Initiating shutdown...")
        await self._scheduler.stop()

        pending = list(self._check_tasks)
        logger.info(f"Cancelling {len(pending)} in-flight checks...")
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

        logger.info("Monitor shutdown complete")
