"""
Unit tests for the AiohttpStatusChecker class.

This module contains tests for the AiohttpStatusChecker class, ensuring that
it reports status codes, honours the follow_redirects flag of a target and
turns network failures into TransportError values.

The tests follow the Arrange-Act-Assert (AAA) pattern. Most of them mock the
aiohttp session; the redirect tests run against a local aiohttp test server.
"""

import asyncio
from unittest.mock import AsyncMock

import aiohttp
import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp import test_utils

from url_sentry import USER_AGENT
from url_sentry.checker.aiohttp_checker import AiohttpStatusChecker, get_http_status
from url_sentry.domain import Target
from url_sentry.errors import RedirectNotAllowedError, TransportError


@pytest_asyncio.fixture
async def sample_target() -> Target:
    """
    Creates a sample Target object for testing.

    Returns:
        A Target object that accepts 200 and follows redirects.
    """
    return Target(name="example", url="https://example.com", return_codes=[200])


@pytest_asyncio.fixture
async def mock_session() -> AsyncMock:
    """
    Creates a mock aiohttp.ClientSession for testing.

    Returns:
        A mock ClientSession whose request answers 200 without headers.
    """
    session = AsyncMock(spec=aiohttp.ClientSession)

    response = AsyncMock()
    response.status = 200
    response.headers = {}
    session.request.return_value.__aenter__.return_value = response

    return session


@pytest_asyncio.fixture
async def checker(mock_session: AsyncMock) -> AiohttpStatusChecker:
    return AiohttpStatusChecker(session=mock_session)


@pytest.mark.asyncio
async def test_check_should_return_status_code_for_valid_request(
    checker: AiohttpStatusChecker, mock_session: AsyncMock, sample_target: Target
) -> None:
    """
    Tests that check issues a single GET request with the service user agent.
    """
    # Act
    status_code, error = await checker.check(sample_target)

    # Assert
    assert status_code == 200
    assert error is None
    assert mock_session.request.call_count == 1
    call_args = mock_session.request.call_args[0]
    call_kwargs = mock_session.request.call_args[1]
    assert call_args == ("GET", "https://example.com")
    assert call_kwargs["headers"] == {"User-Agent": USER_AGENT}
    assert call_kwargs["allow_redirects"] is True


@pytest.mark.asyncio
async def test_check_should_pass_unexpected_status_through(
    checker: AiohttpStatusChecker, mock_session: AsyncMock, sample_target: Target
) -> None:
    """
    Tests that a non-2xx answer is a status code, not an error.
    """
    # Arrange
    response = mock_session.request.return_value.__aenter__.return_value
    response.status = 503

    # Act
    status_code, error = await checker.check(sample_target)

    # Assert
    assert status_code == 503
    assert error is None


@pytest.mark.asyncio
async def test_check_should_disable_redirects_when_target_does_not_follow(
    checker: AiohttpStatusChecker, mock_session: AsyncMock, sample_target: Target
) -> None:
    # Arrange
    sample_target.follow_redirects = False

    # Act
    await checker.check(sample_target)

    # Assert
    assert mock_session.request.call_args[1]["allow_redirects"] is False


@pytest.mark.asyncio
async def test_check_should_reject_redirect_when_target_does_not_follow(
    checker: AiohttpStatusChecker, mock_session: AsyncMock, sample_target: Target
) -> None:
    # Arrange
    sample_target.follow_redirects = False
    response = mock_session.request.return_value.__aenter__.return_value
    response.status = 301
    response.headers = {"Location": "https://www.example.com/"}

    # Act
    status_code, error = await checker.check(sample_target)

    # Assert
    assert status_code == 0
    assert isinstance(error, RedirectNotAllowedError)
    assert isinstance(error, TransportError)
    assert "https://www.example.com/" in str(error)


@pytest.mark.asyncio
async def test_check_should_report_redirect_status_without_location(
    checker: AiohttpStatusChecker, mock_session: AsyncMock, sample_target: Target
) -> None:
    """
    Tests that a 3xx answer without a Location header is a plain status code.
    """
    # Arrange
    sample_target.follow_redirects = False
    response = mock_session.request.return_value.__aenter__.return_value
    response.status = 304

    # Act
    status_code, error = await checker.check(sample_target)

    # Assert
    assert status_code == 304
    assert error is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "exception",
    [
        aiohttp.ClientConnectionError("Connection refused"),
        asyncio.TimeoutError(),
        aiohttp.InvalidURL("https://"),
    ],
)
async def test_check_should_return_transport_error_on_failure(
    checker: AiohttpStatusChecker,
    mock_session: AsyncMock,
    sample_target: Target,
    exception: Exception,
) -> None:
    """
    Tests that network failures are returned with status code 0.
    """
    # Arrange
    mock_session.request.side_effect = exception

    # Act
    status_code, error = await checker.check(sample_target)

    # Assert
    assert status_code == 0
    assert isinstance(error, TransportError)
    assert error.__cause__ is exception


@pytest.mark.asyncio
async def test_check_should_use_configured_method_and_user_agent(mock_session: AsyncMock) -> None:
    # Arrange
    checker = AiohttpStatusChecker(session=mock_session, user_agent="sentry-test/1.0", method="HEAD")
    target = Target(url="https://example.com/health")

    # Act
    await checker.check(target)

    # Assert
    assert mock_session.request.call_args[0] == ("HEAD", "https://example.com/health")
    assert mock_session.request.call_args[1]["headers"] == {"User-Agent": "sentry-test/1.0"}


# --- against a local server -----------------------------------------------


async def _moved(request: web.Request) -> web.Response:
    raise web.HTTPMovedPermanently(location="/final")


async def _final(request: web.Request) -> web.Response:
    return web.Response(text=request.headers.get("User-Agent", ""))


async def _missing(request: web.Request) -> web.Response:
    return web.Response(status=404)


@pytest_asyncio.fixture
async def server():
    app = web.Application()
    app.router.add_get("/moved", _moved)
    app.router.add_get("/final", _final)
    app.router.add_get("/missing", _missing)
    async with test_utils.TestServer(app) as test_server:
        yield test_server


@pytest.mark.asyncio
async def test_get_http_status_should_follow_redirect(server: test_utils.TestServer) -> None:
    async with aiohttp.ClientSession() as session:
        status_code, error = await get_http_status(
            session, "GET", str(server.make_url("/moved")), USER_AGENT, follow_redirects=True
        )

    assert status_code == 200
    assert error is None


@pytest.mark.asyncio
async def test_get_http_status_should_fail_on_redirect_when_not_following(server: test_utils.TestServer) -> None:
    async with aiohttp.ClientSession() as session:
        status_code, error = await get_http_status(
            session, "GET", str(server.make_url("/moved")), USER_AGENT, follow_redirects=False
        )

    assert status_code == 0
    assert isinstance(error, RedirectNotAllowedError)


@pytest.mark.asyncio
async def test_get_http_status_should_return_not_found(server: test_utils.TestServer) -> None:
    async with aiohttp.ClientSession() as session:
        status_code, error = await get_http_status(
            session, "GET", str(server.make_url("/missing")), USER_AGENT, follow_redirects=False
        )

    assert status_code == 404
    assert error is None
