"""
Console report processor for the URL poller.

This module defines the processor that turns fetch results into the
human-readable progress lines written to stdout, each prefixed with the
elapsed time and the time remaining until the predicted deadline.
"""

import sys
from datetime import timedelta
from typing import Optional, TextIO

from url_poller.contracts import ResultProcessor
from url_poller.domain import FetchResult, RunState
from url_poller.exceptions import RequestConstructionError
from url_poller.formatting import format_elapsed, format_remaining


def describe_error(error: BaseException) -> str:
    """Returns the message of an error, or its type name when it has none."""
    return str(error) or type(error).__name__


class ConsoleReportProcessor(ResultProcessor):
    """
    A processor that prints one line per fetch attempt.

    Line formats:
        `<elapsed> (<remaining>) HTTP Response Code: <code>[, untrusted SSL certificate: <detail>] for <url>`
        `<elapsed> (<remaining>) Error: <detail>`
        `<elapsed> (<remaining>) Error creating request: <detail>`
    """

    def __init__(
        self, state: RunState, predicted: timedelta, stream: Optional[TextIO] = None
    ) -> None:
        """
        Args:
            state: The run whose elapsed time prefixes every line.
            predicted: Expected duration of the run, for the remaining time.
            stream: Where lines are written; stdout when omitted.
        """
        self._state: RunState = state
        self._predicted: timedelta = predicted
        self._stream: Optional[TextIO] = stream

    def _prefix(self) -> str:
        elapsed = self._state.elapsed()
        return f"{format_elapsed(elapsed)} ({format_remaining(self._predicted, elapsed)})"

    def _write(self, line: str) -> None:
        print(line, file=self._stream or sys.stdout, flush=True)

    async def process(self, result: FetchResult) -> None:
        """
        Prints the report line of a fetch attempt.

        Args:
            result: The result of the attempt.
        """
        if result.error is not None:
            if isinstance(result.error, RequestConstructionError):
                self._write(f"{self._prefix()} Error creating request: {describe_error(result.error)}")
            else:
                self._write(f"{self._prefix()} Error: {describe_error(result.error)}")
            return

        line = f"{self._prefix()} HTTP Response Code: {result.status_code}"
        if result.untrusted_certificate is not None:
            line += f", untrusted SSL certificate: {result.untrusted_certificate}"
        self._write(f"{line} for {result.url}")

    async def notice(self, message: str) -> None:
        """
        Prints a line that is not tied to an attempt, with the usual prefix.

        Args:
            message: The message to print.
        """
        self._write(f"{self._prefix()} {message}")

    async def complete(self, success_count: int) -> None:
        """
        Prints the final line of a run that reached its success count.

        Args:
            success_count: The number of successful fetches.
        """
        self._write(f"Exiting after {success_count} successful fetches.")
