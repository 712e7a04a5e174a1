"""
Logging configuration module for the URL poller.

This module provides functionality to configure logging for the application
based on the provided configuration context. It supports different logging
configurations for development, production, and custom environments.

Log records are written to stderr; stdout is reserved for the per-attempt
report lines.
"""

import json
import logging.config
import os
from typing import Any, Dict

from url_poller.config.polling_context import PollingContext


def configure_logging(context: PollingContext) -> None:
    """
    Configure logging for the application based on the provided configuration.

    This function sets up logging based on the logging type specified in the
    configuration context. It supports three types of logging configurations:
    - dev: Development logging configuration
    - prod: Production logging configuration
    - custom: Custom logging configuration from a specified file

    It also adds a target URL filter to all log records so that formatters can
    reference the polled URL as `%(target_url)s`.

    Args:
        context: Configuration context containing logging settings.

    Raises:
        ValueError: If the logging type is invalid or if a custom logging
            configuration file is not provided when using the 'custom' type.
    """
    logging_type: str = context.logging_type.lower()
    if not logging_type:
        raise ValueError("Logging type must be provided.")
    elif logging_type == "dev":
        file_path = _get_local_package_file_path("logging-config-dev.json")
        _load_logging_config(file_path)
    elif logging_type == "prod":
        file_path = _get_local_package_file_path("logging-config-prod.json")
        _load_logging_config(file_path)
    elif logging_type == "custom":
        if not context.logging_config_file:
            raise ValueError("Custom logging configuration file must be provided.")
        else:
            _load_logging_config(context.logging_config_file)
    else:
        raise ValueError(
            f"Invalid logging type: {context.logging_type}. Allowed values are: dev, prod, custom"
        )

    # Filters on a logger only see records logged through that logger,
    # so the filter is attached to the root handlers instead
    url_filter = _TargetUrlFilter(target_url=context.url)
    for handler in logging.getLogger().handlers:
        handler.addFilter(url_filter)

    logging.debug("Logging configured and TargetUrlFilter added.")


def _load_logging_config(config_file: str) -> None:
    """
    Load logging configuration from a JSON file.

    This function reads a JSON file containing logging configuration and
    applies it to the Python logging system using dictConfig.

    Args:
        config_file: Path to the JSON file containing logging configuration.

    Raises:
        RuntimeError: If the file is not found, contains invalid JSON, or
            if there is any other error loading the configuration.
    """
    try:
        with open(config_file) as f:
            config: Dict[str, Any] = json.load(f)
            logging.config.dictConfig(config)
    except FileNotFoundError as err:
        raise RuntimeError(f"Logging config file not found: {config_file}") from err
    except json.JSONDecodeError as err:
        raise RuntimeError(f"Invalid JSON format in logging config file: {config_file}") from err
    except Exception as err:
        raise RuntimeError(f"Error loading logging config: {str(err)}") from err


def _get_local_package_file_path(config_file: str) -> str:
    """
    Get the absolute path to a file in the same directory as this module.

    Args:
        config_file: Name of the file to locate.

    Returns:
        str: Absolute path to the specified file.
    """
    return os.path.join(os.path.dirname(__file__), config_file)


class _TargetUrlFilter(logging.Filter):
    """
    A logging filter that injects the polled URL into every log record.
    """

    def __init__(self, target_url: str) -> None:
        super().__init__()
        self._target_url: str = target_url

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Add the target URL to the log record.

        Args:
            record: The log record to be processed.

        Returns:
            bool: Always True to allow the record to be processed further.
        """
        record.target_url = self._target_url
        return True
