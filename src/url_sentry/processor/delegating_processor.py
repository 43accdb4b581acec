"""
Delegating result processor implementation.

This module provides a composite implementation of the ResultProcessor
interface that hands every check result to several child processors
concurrently. A failure in one processor does not affect the others.
"""

import asyncio
import logging
from typing import List

from url_sentry.contracts import ResultProcessor
from url_sentry.domain import CheckResult

# Module logger
logger = logging.getLogger(__name__)


class DelegatingResultProcessor(ResultProcessor):
    """
    A ResultProcessor that follows the Composite pattern.

    The monitor only ever talks to one processor; this class fans each
    result out to the configured pipeline (logging, alerting, ...).
    """

    def __init__(self, processors: List[ResultProcessor]) -> None:
        """
        Initializes the delegator with a list of processors to delegate to.

        Args:
            processors: Objects that adhere to the ResultProcessor interface.
                These will be called concurrently when processing a result.
        """
        self._processors: List[ResultProcessor] = processors

    async def _process_with_one(self, processor: ResultProcessor, result: CheckResult) -> None:
        """
        Runs a single processor, logging instead of propagating its failure.
        """
        try:
            await processor.process(result)
        except Exception as e:
            logger.exception(
                f"Processor '{type(processor).__name__}' failed for target {result.target.name} with error: {e}",
            )

    async def process(self, result: CheckResult) -> None:
        if not self._processors:
            return

        await asyncio.gather(
            *[self._process_with_one(processor, result) for processor in self._processors]
        )
