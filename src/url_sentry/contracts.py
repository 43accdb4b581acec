"""
Core interfaces for the URL monitoring service.

This module defines the abstract base classes that the monitor is assembled
from. Each collaborator (scheduling, checking, result processing and alert
delivery) can be swapped independently, which is what the tests rely on.
"""

import abc
from typing import AsyncIterator, List, Optional, Tuple

from .domain import CheckResult, Message, SMTPSettings, Target


class WorkScheduler(abc.ABC):
    """
    Abstract interface for a work scheduler.

    Its responsibility is to provide an asynchronous stream of batches of
    targets that are due for a check.
    """

    @abc.abstractmethod
    async def start(self) -> None:
        """
        Prepares the scheduler to start yielding work.

        This method should be called before using the scheduler in an async for loop.
        """
        pass

    @abc.abstractmethod
    async def stop(self) -> None:
        """
        Stops the scheduler; the running iteration ends at its next step.
        """
        pass

    @abc.abstractmethod
    def collect_due(self) -> List[Target]:
        """
        Returns the targets that are due right now without rescheduling them.
        """
        pass

    def __aiter__(self) -> AsyncIterator[List[Target]]:
        return self

    @abc.abstractmethod
    async def __anext__(self) -> List[Target]:
        """
        Waits for and returns the next batch of due targets.

        Returns:
            List[Target]: The targets to check; they are already rescheduled.

        Raises:
            StopAsyncIteration: When the scheduler has been stopped.
        """
        raise StopAsyncIteration


class StatusChecker(abc.ABC):
    """
    Abstract interface for a component that performs the check for a single target.
    """

    @abc.abstractmethod
    async def check(self, target: Target) -> Tuple[int, Optional[Exception]]:
        """
        Requests the target's URL once.

        Args:
            target: The target to check.

        Returns:
            Tuple[int, Optional[Exception]]: The HTTP status code and None, or
                0 and the transport error. Implementations must not raise for
                network failures.
        """
        pass


class ResultProcessor(abc.ABC):
    """
    Abstract interface for a component that acts on the outcome of a check,
    such as logging it or sending an alert.
    """

    @abc.abstractmethod
    async def process(self, result: CheckResult) -> None:
        """
        Processes a single CheckResult.

        Args:
            result: The outcome of a check, including the state transition.
        """
        pass


class AlertDispatcher(abc.ABC):
    """
    Abstract interface for the transport that delivers alert messages.
    """

    @abc.abstractmethod
    async def send(self, message: Message, settings: SMTPSettings) -> None:
        """
        Attempts delivery of a composed message.

        Args:
            message: The alert to deliver.
            settings: The mail server and credentials to deliver through.

        Raises:
            DispatchError: If the message could not be delivered.
        """
        pass
