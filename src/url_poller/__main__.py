"""
Main entry point for the URL poller.

This module parses the configuration, sets up logging, builds the trust
store and runs the polling worker. The process exit status tells how the
run ended: 0 once enough fetches succeeded, 1 for a configuration error.
"""

import asyncio
import logging
import sys

from url_poller.config import PollingContext, get_context
from url_poller.config.logging_config import configure_logging
from url_poller.config.tls_config import load_trust_store
from url_poller.domain import RunState
from url_poller.exceptions import CertificateBundleError
from url_poller.fetcher.aiohttp_fetcher import AiohttpFetcher
from url_poller.fetcher.tls_probe import TrustStore
from url_poller.processor.console_processor import ConsoleReportProcessor
from url_poller.scheduler.ticker import Ticker
from url_poller.worker import PollingWorker

EXIT_SUCCESS = 0
EXIT_CONFIG_ERROR = 1
EXIT_INTERRUPTED = 130


async def main(context: PollingContext) -> int:
    """
    Set up and run the poller.

    Args:
        context: Configuration context containing all application settings.

    Returns:
        int: The process exit status.
    """
    logger: logging.Logger = logging.getLogger(__name__)
    logger.info("Starting application...")

    # The start time is taken before anything else so every line is relative to it
    state = RunState()
    reporter = ConsoleReportProcessor(state=state, predicted=context.predicted)

    try:
        trust_store: TrustStore = load_trust_store(context)
    except CertificateBundleError as err:
        logger.error(f"Failed to read cert file {err.path}: {err.reason}")
        await reporter.notice(f"Failed to read cert file: {err}")
        return EXIT_CONFIG_ERROR
    logger.info(f"initialized: trust_store ({len(trust_store)} roots)")

    if context.cert_file and trust_store.bundle_size == 0:
        await reporter.notice("No certs appended, using system certs only")

    worker = PollingWorker(
        url=context.url,
        scheduler=Ticker(interval=context.delay),
        fetcher=AiohttpFetcher(trust_store=trust_store, max_timeout=context.timeout),
        processor=reporter,
        state=state,
        count=context.count,
        forever=context.forever,
    )

    try:
        logger.info("Worker initialized. Starting polling loop...")
        successes = await worker.start()
        logger.info(f"Polling finished after {successes} successful fetches.")
    finally:
        await worker.stop()

    return EXIT_SUCCESS


def run() -> None:
    """Console script entry point."""
    try:
        # Parse command-line arguments and environment variables
        polling_context: PollingContext = get_context()

        # Configure logging based on the context
        configure_logging(polling_context)

        # Run the main application
        exit_status = asyncio.run(main(polling_context))
    except KeyboardInterrupt:
        logging.info("Shutdown initiated by user (Ctrl+C).")
        exit_status = EXIT_INTERRUPTED
    sys.exit(exit_status)


if __name__ == "__main__":
    run()
