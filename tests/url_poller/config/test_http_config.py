"""
Unit tests for the HTTP client configuration module.

The tests follow the Arrange-Act-Assert (AAA) pattern.
"""

import ssl
from datetime import timedelta

import aiohttp
import pytest

from url_poller.config.http_config import get_http_session


@pytest.mark.asyncio
async def test_get_http_session_should_return_session_bound_to_context_and_timeout() -> None:
    # Arrange
    ssl_context = ssl.create_default_context()

    # Act
    session = get_http_session(ssl_context, timeout=timedelta(seconds=2))

    # Assert
    try:
        assert isinstance(session, aiohttp.ClientSession)
        assert session.timeout.total == 2
        connector = session.connector
        assert isinstance(connector, aiohttp.TCPConnector)
        assert connector.force_close is True
        assert connector.limit == 1
    finally:
        await session.close()


@pytest.mark.asyncio
async def test_get_http_session_should_close_its_connector() -> None:
    # Arrange
    session = get_http_session(ssl.create_default_context(), timeout=timedelta(milliseconds=500))
    connector = session.connector

    # Act
    await session.close()

    # Assert
    assert session.closed
    assert connector.closed
