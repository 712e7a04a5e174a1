"""
Configuration module for the URL poller.

This module provides functionality to parse command-line arguments and environment
variables to create a configuration context for the poller. It defines
default values and help text for all configurable parameters.
"""

import argparse
import os
import sys
from datetime import timedelta
from typing import Any

from url_poller.config.constants import (
    DEFAULT_CERT_FILE,
    DEFAULT_COUNT,
    DEFAULT_DELAY,
    DEFAULT_FOREVER,
    DEFAULT_LOGGING_CONFIG_FILE,
    DEFAULT_LOGGING_TYPE,
    DEFAULT_PREDICTED,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_URL,
    ENV_PREFIX,
)
from url_poller.config.durations import parse_duration
from url_poller.config.polling_context import PollingContext

_TRUE_VALUES = ("1", "t", "true", "y", "yes", "on")
_FALSE_VALUES = ("0", "f", "false", "n", "no", "off")


def _env(name: str, default: Any) -> Any:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def _parse_bool(value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise argparse.ArgumentTypeError(f'invalid boolean value "{value}"')


def _duration(value: str) -> timedelta:
    try:
        return parse_duration(value)
    except ValueError as err:
        raise argparse.ArgumentTypeError(str(err)) from err


def _positive_duration(value: str) -> timedelta:
    duration = _duration(value)
    if duration <= timedelta(0):
        raise argparse.ArgumentTypeError(f'duration must be positive, got "{value}"')
    return duration


def get_context() -> PollingContext:
    """
    Parse command-line arguments and environment variables to create a configuration context.

    For each option, it first checks for a command-line argument, then falls back to an
    environment variable, and finally uses a default value. Options are accepted with one
    or two leading dashes, e.g. `-url` and `--url`.

    If no URL is configured the usage text is printed and the process exits with status 1.

    Returns:
        PollingContext: A configuration context object containing all parsed settings.
    """
    parser = argparse.ArgumentParser(
        prog="url-poller",
        description="Poll a URL on a fixed interval until it has answered HTTP 200 enough times.",
    )

    parser.add_argument(
        "-url",
        "--url",
        type=str,
        default=_env("URL", DEFAULT_URL),
        help="URL to fetch.\n"
        f"If not provided, the value is read from the {ENV_PREFIX}URL environment variable.",
    )

    parser.add_argument(
        "-predicted",
        "--predicted",
        type=_duration,
        default=_env("PREDICTED", DEFAULT_PREDICTED),
        help="Expected time for the URL to become reachable, e.g. 90s or 1h15m.\n"
        "Only used to show the remaining time next to each attempt.\n"
        f"If not provided, the value is read from the {ENV_PREFIX}PREDICTED environment variable.\n"
        f"If that is also absent, a default value of {DEFAULT_PREDICTED} is used.",
    )

    parser.add_argument(
        "-delay",
        "--delay",
        type=_positive_duration,
        default=_env("DELAY", DEFAULT_DELAY),
        help="Delay between fetch attempts.\n"
        f"If not provided, the value is read from the {ENV_PREFIX}DELAY environment variable.\n"
        f"If that is also absent, a default value of {DEFAULT_DELAY} is used.",
    )

    parser.add_argument(
        "-count",
        "--count",
        type=int,
        default=int(_env("COUNT", DEFAULT_COUNT)),
        help="Number of successful (HTTP 200) fetches before the program exits.\n"
        f"If not provided, the value is read from the {ENV_PREFIX}COUNT environment variable.\n"
        f"If that is also absent, a default value of {DEFAULT_COUNT} is used.",
    )

    parser.add_argument(
        "-forever",
        "--forever",
        type=_parse_bool,
        nargs="?",
        const=True,
        default=_parse_bool(_env("FOREVER", DEFAULT_FOREVER)),
        help="Keep running indefinitely even after meeting the success count.\n"
        f"If not provided, the value is read from the {ENV_PREFIX}FOREVER environment variable.",
    )

    parser.add_argument(
        "-cert",
        "--cert",
        type=str,
        default=_env("CERT", DEFAULT_CERT_FILE),
        help="Path to a PEM file with additional trusted certificates.\n"
        "Certificates are added to the system trust store, not replacing it.",
    )

    parser.add_argument(
        "-timeout",
        "--timeout",
        type=_positive_duration,
        default=_env("TIMEOUT", DEFAULT_REQUEST_TIMEOUT),
        help="Maximum duration of a single fetch attempt.\n"
        f"If not provided, the value is read from the {ENV_PREFIX}TIMEOUT environment variable.\n"
        f"If that is also absent, a default value of {DEFAULT_REQUEST_TIMEOUT} is used.",
    )

    parser.add_argument(
        "-lt",
        "--logging-type",
        type=str,
        default=_env("LOGGING_TYPE", DEFAULT_LOGGING_TYPE),
        help="Specifies the logging configuration type to use.\n"
        "Allowed values: dev, prod, custom (case insensitive).\n"
        "For 'dev' and 'prod', system will use built-in configurations.\n"
        "For 'custom', the --logging-config-file argument is required.",
    )

    parser.add_argument(
        "-lcf",
        "--logging-config-file",
        type=str,
        default=_env("LOGGING_CONFIG_FILE", DEFAULT_LOGGING_CONFIG_FILE),
        help="Path to custom logging configuration file.\n"
        "Required when --logging-type is set to 'custom'.",
    )

    # Parse the command-line arguments
    args: Any = parser.parse_args()

    if not args.url:
        parser.print_help(sys.stderr)
        parser.exit(1)

    return PollingContext(
        url=args.url,
        predicted=args.predicted,
        delay=args.delay,
        count=args.count,
        forever=args.forever,
        cert_file=args.cert,
        timeout=args.timeout,
        logging_type=args.logging_type,
        logging_config_file=args.logging_config_file,
    )
