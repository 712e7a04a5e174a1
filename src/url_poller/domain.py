"""
Domain models for the URL poller.

This module defines the core data structures used throughout the application:
the outcome of a single fetch attempt, the ticks delivered by the scheduler
and the mutable state of a polling run.
"""

import time
from typing import Callable, NamedTuple, Optional


class Tick(NamedTuple):
    """
    A single tick delivered by the ticker.

    Attributes:
        number: Sequence number of the tick, starting at 1.
        scheduled_at: The monotonic time at which the tick was due.
        fired_at: The monotonic time at which the tick was delivered.
    """

    number: int
    scheduled_at: float
    fired_at: float


class FetchResult(NamedTuple):
    """
    A data structure holding the result of a single fetch attempt.

    Attributes:
        url: The URL that was fetched.
        error: Any exception that occurred during the attempt, or None if a response was received.
        start_time: The start time from time.monotonic() in seconds.
        end_time: The end time from time.monotonic() in seconds.
        status_code: The HTTP status code received, or None if an error occurred.
        untrusted_certificate: Why the server certificate failed verification,
            or None if it was trusted or the URL is not HTTPS.
    """

    url: str
    error: Optional[Exception]
    start_time: float
    end_time: float
    status_code: Optional[int]
    untrusted_certificate: Optional[str]


class RunState:
    """
    Mutable state of a polling run.

    The start time is captured once, when the state is created, before the
    first tick. The success count only ever grows.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock: Callable[[], float] = clock
        self.start_time: float = clock()
        self.success_count: int = 0

    def elapsed(self) -> float:
        """Seconds elapsed since the run started."""
        return self._clock() - self.start_time

    def record_success(self) -> int:
        """Counts one more successful fetch and returns the new total."""
        self.success_count += 1
        return self.success_count
