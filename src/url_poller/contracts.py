"""
Core interfaces for the URL poller.

This module defines the abstract base classes that form the foundation of the
poller's architecture: something that produces ticks, something that fetches
the URL, and something that reports the outcome.
"""

import abc
from typing import AsyncIterator

from .domain import FetchResult, Tick


class WorkScheduler(abc.ABC):
    """
    Abstract interface for a work scheduler.

    Its responsibility is to provide an asynchronous stream of ticks, each one
    asking for a single fetch attempt.
    """

    @abc.abstractmethod
    async def start(self) -> None:
        """
        Prepares the scheduler to start yielding ticks.

        This method should be called before using the scheduler in an async for loop.
        """
        pass

    @abc.abstractmethod
    async def stop(self) -> None:
        """
        Stops the scheduler; pending and future iterations end the loop.
        """
        pass

    def __aiter__(self) -> AsyncIterator[Tick]:
        """
        Allows the scheduler to be used in an 'async for' loop.

        Returns:
            AsyncIterator[Tick]: The scheduler instance itself.
        """
        return self

    @abc.abstractmethod
    async def __anext__(self) -> Tick:
        """
        Waits for and returns the next tick.

        Returns:
            Tick: The tick that just fired.

        Raises:
            StopAsyncIteration: When the scheduler has been stopped.
        """
        raise StopAsyncIteration


class TargetFetcher(abc.ABC):
    """
    Abstract interface for a component that performs a single fetch attempt.

    Its responsibility is to encapsulate the network I/O for the polled URL
    and return a structured result.
    """

    @abc.abstractmethod
    async def fetch(self, url: str) -> FetchResult:
        """
        Performs one HTTP GET on the given URL.

        Args:
            url: The URL to fetch.

        Returns:
            FetchResult: An object containing the outcome of the attempt, including
                status code, timing information, certificate trust and any errors encountered.

        Raises:
            Exception: Implementations should handle network errors internally and include
                them in the FetchResult rather than raising them.
        """
        pass


class ResultProcessor(abc.ABC):
    """
    Abstract interface for a component that reports on fetch results.
    """

    @abc.abstractmethod
    async def process(self, result: FetchResult) -> None:
        """
        Reports a single FetchResult.

        Args:
            result: The result of a fetch attempt.
        """
        pass

    @abc.abstractmethod
    async def notice(self, message: str) -> None:
        """
        Reports an event that is not tied to a fetch attempt, such as a
        configuration warning.

        Args:
            message: Human readable description of the event.
        """
        pass

    @abc.abstractmethod
    async def complete(self, success_count: int) -> None:
        """
        Reports that the run is over because enough fetches succeeded.

        Args:
            success_count: The number of successful fetches that ended the run.
        """
        pass
