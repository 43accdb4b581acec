"""
Unit tests for the DelegatingResultProcessor class.

This module contains tests for the DelegatingResultProcessor class, ensuring
that it hands every check result to all of its child processors and that a
failing child does not affect the others.

The tests follow the Arrange-Act-Assert (AAA) pattern.
"""

from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio

from url_sentry.contracts import ResultProcessor
from url_sentry.domain import CheckResult, Target
from url_sentry.processor.delegating_processor import DelegatingResultProcessor


@pytest_asyncio.fixture
async def sample_result() -> CheckResult:
    """
    Creates a sample CheckResult object for testing.

    Returns:
        A CheckResult for a healthy target.
    """
    target = Target(name="example", url="https://example.com", return_codes=[200])
    return CheckResult(
        target=target,
        status_code=200,
        error=None,
        start_time=1000.0,
        end_time=1001.0,
        previous_state=True,
        current_state=True,
    )


@pytest_asyncio.fixture
async def mock_processor() -> AsyncMock:
    return AsyncMock(spec=ResultProcessor)


@pytest.mark.asyncio
async def test_process_should_delegate_to_single_processor(
    mock_processor: AsyncMock, sample_result: CheckResult
) -> None:
    # Arrange
    delegating_processor = DelegatingResultProcessor(processors=[mock_processor])

    # Act
    await delegating_processor.process(sample_result)

    # Assert
    mock_processor.process.assert_awaited_once_with(sample_result)


@pytest.mark.asyncio
async def test_process_should_delegate_to_multiple_processors(sample_result: CheckResult) -> None:
    # Arrange
    processors = [AsyncMock(spec=ResultProcessor) for _ in range(3)]
    delegating_processor = DelegatingResultProcessor(processors=processors)

    # Act
    await delegating_processor.process(sample_result)

    # Assert
    for processor in processors:
        processor.process.assert_awaited_once_with(sample_result)


@pytest.mark.asyncio
async def test_process_should_handle_empty_processor_list(sample_result: CheckResult) -> None:
    """
    Tests that the process method returns without error when there is nothing to delegate to.
    """
    # Act & Assert
    await DelegatingResultProcessor(processors=[]).process(sample_result)


@pytest.mark.asyncio
async def test_process_should_handle_processor_exception(
    mock_processor: AsyncMock, sample_result: CheckResult
) -> None:
    """
    Tests that a failing processor is logged and does not stop the others.
    """
    # Arrange
    mock_processor.process.side_effect = Exception("Processor error")
    healthy_processor = AsyncMock(spec=ResultProcessor)
    delegating_processor = DelegatingResultProcessor(processors=[mock_processor, healthy_processor])

    with patch("url_sentry.processor.delegating_processor.logger") as mock_logger:
        # Act
        await delegating_processor.process(sample_result)

        # Assert
        mock_processor.process.assert_awaited_once_with(sample_result)
        healthy_processor.process.assert_awaited_once_with(sample_result)
        mock_logger.exception.assert_called_once()
        assert "example" in mock_logger.exception.call_args[0][0]
