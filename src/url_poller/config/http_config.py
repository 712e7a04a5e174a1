"""
HTTP client configuration module for the URL poller.

This module provides functionality to create and configure HTTP client sessions
using the aiohttp library.
"""

import logging
import ssl
from datetime import timedelta

import aiohttp

# Module logger
logger = logging.getLogger(__name__)


def get_http_session(ssl_context: ssl.SSLContext, timeout: timedelta) -> aiohttp.ClientSession:
    """
    Create an HTTP client session for a single fetch attempt.

    Connections are never kept alive, so every attempt opens a new connection
    and goes through a full TLS handshake with the given context.

    Args:
        ssl_context: SSL context used for HTTPS connections.
        timeout: Upper bound for the whole request, connection included.

    Returns:
        aiohttp.ClientSession: A configured HTTP client session. The caller owns it and must close it.
    """
    connector = aiohttp.TCPConnector(ssl=ssl_context, force_close=True, limit=1)
    return aiohttp.ClientSession(
        connector=connector,
        timeout=aiohttp.ClientTimeout(total=timeout.total_seconds()),
    )
