"""
Core worker implementation for the URL poller.

This module provides the PollingWorker class, which drives the polling loop by
coordinating the scheduler, fetcher, and processor components. Attempts run
one at a time: a tick is only awaited once the previous attempt has been
fetched and reported.
"""

import logging

from url_poller.config.constants import SUCCESS_STATUS
from url_poller.contracts import ResultProcessor, TargetFetcher, WorkScheduler
from url_poller.domain import FetchResult, RunState


class PollingWorker:
    """
    Polls a single URL on every tick of the scheduler.

    The run ends once `count` fetches answered HTTP 200, unless `forever`
    is set, in which case it only ends when the worker is stopped or cancelled.
    """

    def __init__(
        self,
        url: str,
        scheduler: WorkScheduler,
        fetcher: TargetFetcher,
        processor: ResultProcessor,
        state: RunState,
        count: int,
        forever: bool,
    ) -> None:
        """
        Initializes a new PollingWorker instance.

        Args:
            url: The URL to poll.
            scheduler: Component that provides the ticks.
            fetcher: Component that performs the HTTP requests.
            processor: Component that reports the results.
            state: State of the run; its start time must already be set.
            count: Number of successful fetches that ends the run.
            forever: Ignore `count` and keep polling.
        """
        self._url: str = url
        self._scheduler: WorkScheduler = scheduler
        self._fetcher: TargetFetcher = fetcher
        self._processor: ResultProcessor = processor
        self._state: RunState = state
        self._count: int = count
        self._forever: bool = forever
        self._logger: logging.Logger = logging.getLogger(__name__)

    def _is_success(self, result: FetchResult) -> bool:
        return result.error is None and result.status_code == SUCCESS_STATUS

    async def start(self) -> int:
        """
        Runs the polling loop.

        Returns:
            int: The number of successful fetches when the loop ended.
        """
        mode = "forever" if self._forever else f"until {self._count} successful fetches"
        self._logger.info(f"Polling {self._url} {mode}.")

        await self._scheduler.start()

        async for tick in self._scheduler:
            self._logger.debug(f"Tick {tick.number} fired.")
            try:
                result = await self._fetcher.fetch(self._url)
                await self._processor.process(result)
            except Exception as e:
                self._logger.exception(f"Attempt {tick.number} failed with error: {e}")
                continue

            if not self._is_success(result):
                continue

            successes = self._state.record_success()
            self._logger.debug(f"{successes} successful fetches so far.")
            if not self._forever and successes == self._count:
                await self._processor.complete(successes)
                await self._scheduler.stop()
                break

        return self._state.success_count

    async def stop(self) -> None:
        """
        Stops the scheduler so that the polling loop ends.
        """
        self._logger.info("Stopping polling worker...")
        await self._scheduler.stop()
