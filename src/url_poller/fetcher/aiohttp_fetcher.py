"""
HTTP fetcher implementation using the aiohttp library.

This module provides an implementation of the TargetFetcher interface that uses
the aiohttp library to perform HTTP requests. It handles timing, error handling
and the certificate probing of HTTPS endpoints.
"""

import asyncio
import logging
import ssl
import time
from datetime import timedelta
from typing import Callable, Optional

import aiohttp
from yarl import URL

from url_poller.config.http_config import get_http_session
from url_poller.contracts import TargetFetcher
from url_poller.domain import FetchResult
from url_poller.exceptions import FetchTimeoutError, RequestConstructionError
from url_poller.fetcher.tls_probe import TrustStore

# Module logger
logger = logging.getLogger(__name__)

SessionFactory = Callable[[ssl.SSLContext, timedelta], aiohttp.ClientSession]

_SUPPORTED_SCHEMES = ("http", "https")


def build_request_url(url: str) -> URL:
    """
    Turns the configured URL into a request target.

    Args:
        url: The configured URL.

    Returns:
        URL: The parsed, absolute URL.

    Raises:
        RequestConstructionError: If the URL is malformed, relative or not HTTP(S).
    """
    try:
        request_url = URL(url)
    except (TypeError, ValueError) as err:
        raise RequestConstructionError(f'invalid URL "{url}": {err}') from err

    if request_url.scheme not in _SUPPORTED_SCHEMES:
        raise RequestConstructionError(f'unsupported protocol scheme "{request_url.scheme}"')
    if not request_url.host:
        raise RequestConstructionError(f'no host in URL "{url}"')
    return request_url


class AiohttpFetcher(TargetFetcher):
    """
    A concrete implementation of TargetFetcher using the aiohttp library.

    Every attempt gets its own session, connection and SSL context, so the
    certificate of an HTTPS endpoint is inspected on every attempt and all
    network resources are released before the result is returned.
    """

    def __init__(
        self,
        trust_store: TrustStore,
        max_timeout: timedelta,
        session_factory: SessionFactory = get_http_session,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initializes the fetcher.

        Args:
            trust_store: Roots the server certificates are verified against.
            max_timeout: Upper bound for a single attempt.
            session_factory: Creates the session of an attempt from its SSL context and timeout.
            clock: Monotonic clock used to time the attempts.
        """
        self._trust_store: TrustStore = trust_store
        self._max_timeout: timedelta = max_timeout
        self._session_factory: SessionFactory = session_factory
        self._clock: Callable[[], float] = clock

    async def fetch(self, url: str) -> FetchResult:
        """
        Performs an HTTP GET on the URL.

        A certificate that fails verification does not fail the attempt; the
        reason is returned in `untrusted_certificate` instead.

        Args:
            url: The URL to fetch.

        Returns:
            FetchResult: An object containing the outcome of the attempt.
        """
        logger.debug(f"Starting fetch for {url}")
        error: Optional[Exception] = None
        status_code: Optional[int] = None
        ssl_context = self._trust_store.new_context()
        start_time: float = self._clock()

        try:
            request_url = build_request_url(url)
            async with self._session_factory(ssl_context, self._max_timeout) as session:
                async with session.get(request_url) as response:
                    status_code = response.status

        except RequestConstructionError as e:
            error = e
        except aiohttp.InvalidURL as e:
            error = RequestConstructionError(f'invalid URL "{url}": {e}')
            error.__cause__ = e
        except asyncio.TimeoutError as e:
            error = FetchTimeoutError(
                f"no response from {url} within {self._max_timeout.total_seconds():g}s"
            )
            error.__cause__ = e
        except Exception as e:
            error = e

        end_time: float = self._clock()
        if error is None:
            logger.debug(
                f"Fetched {url} in {(end_time - start_time):.3f}s with status {status_code}"
            )
        else:
            logger.debug(f"Error fetching {url}: {error!r}")

        return FetchResult(
            url=url,
            error=error,
            start_time=start_time,
            end_time=end_time,
            status_code=status_code,
            untrusted_certificate=ssl_context.untrusted_certificate,
        )
