"""
Fixed-delay implementation of the WorkScheduler interface.

The ticker fires every `interval` seconds, starting one interval after
`start()`. Ticks are handed out one at a time: a consumer that is still busy
when one or more ticks fall due receives a single tick immediately once it
asks again, the others are dropped and the ticker stays on its original phase.
"""

import asyncio
import logging
import math
import time
from datetime import timedelta
from typing import Awaitable, Callable, Optional

from url_poller.contracts import WorkScheduler
from url_poller.domain import Tick

# Module logger
logger = logging.getLogger(__name__)


class Ticker(WorkScheduler):
    """
    A WorkScheduler that yields a Tick at a fixed interval.
    """

    def __init__(
        self,
        interval: timedelta,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Initializes a new Ticker instance.

        Args:
            interval: Time between two ticks.
            clock: Monotonic clock returning seconds.
            sleep: Coroutine function used to wait for the next tick.

        Raises:
            ValueError: If the interval is not positive.
        """
        seconds = interval.total_seconds()
        if seconds <= 0:
            raise ValueError("interval must be positive.")

        self._interval: float = seconds
        self._clock: Callable[[], float] = clock
        self._sleep: Callable[[float], Awaitable[None]] = sleep
        self._next_fire_at: Optional[float] = None
        self._ticks: int = 0
        self._is_running: bool = False

    async def start(self) -> None:
        """
        Arms the ticker; the first tick is due one interval from now.
        """
        logger.debug(f"Starting ticker (interval: {self._interval}s)...")
        self._next_fire_at = self._clock() + self._interval
        self._is_running = True

    async def stop(self) -> None:
        """
        Stops the ticker. The next call to __anext__ ends the iteration.
        """
        logger.debug("Stopping ticker...")
        self._is_running = False

    async def __anext__(self) -> Tick:
        """
        Waits for and returns the next tick.

        Returns:
            Tick: The tick that just fired.

        Raises:
            StopAsyncIteration: When the ticker has been stopped or was never started.
        """
        if not self._is_running or self._next_fire_at is None:
            raise StopAsyncIteration

        wait = self._next_fire_at - self._clock()
        if wait > 0:
            await self._sleep(wait)
            if not self._is_running:
                raise StopAsyncIteration

        scheduled_at = self._next_fire_at
        fired_at = self._clock()
        self._ticks += 1

        # Move to the first slot strictly after now, dropping the missed ones
        missed = max(0, math.floor((fired_at - scheduled_at) / self._interval))
        if missed:
            logger.debug(f"Dropped {missed} tick(s) while the consumer was busy.")
        self._next_fire_at = scheduled_at + (missed + 1) * self._interval

        return Tick(number=self._ticks, scheduled_at=scheduled_at, fired_at=fired_at)
