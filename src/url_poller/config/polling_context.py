"""
Configuration context for the URL poller.

This module defines a data structure that holds all configuration parameters
for the poller. It serves as a central point for passing configuration
throughout the application.
"""

from datetime import timedelta
from typing import NamedTuple


class PollingContext(NamedTuple):
    """
    A data structure containing all configuration parameters for the poller.

    This class is immutable and provides a type-safe way to pass configuration
    throughout the application. It is created by parsing command-line arguments
    and environment variables.

    Attributes:
        url: The URL to poll.
        predicted: Expected time for the monitored service to become reachable.
            Only used for the "remaining"/"ago" annotation of the report lines.
        delay: Interval between two fetch attempts.
        count: Number of HTTP 200 responses required before the poller exits.
        forever: Keep polling after reaching `count` successful fetches.
        cert_file: Path to a PEM bundle of additional trusted certificates, or "".
        timeout: Maximum duration of a single fetch attempt.
        logging_type: Type of logging configuration to use (dev, prod, or custom).
        logging_config_file: Path to custom logging configuration file (if logging_type is 'custom').
    """

    url: str
    predicted: timedelta
    delay: timedelta
    count: int
    forever: bool
    cert_file: str
    timeout: timedelta
    logging_type: str
    logging_config_file: str
