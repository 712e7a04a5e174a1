"""
Unit tests for the logging configuration module.

This module contains tests for the logging configuration module, ensuring that
it correctly configures logging based on the provided configuration context and
handles different logging types and error conditions.

The tests follow the Arrange-Act-Assert (AAA) pattern and use proper mocking
of all external dependencies to ensure true unit testing.
"""

import json
import logging
import os
from datetime import timedelta
from pathlib import Path
from typing import Iterator
from unittest.mock import mock_open, patch

import pytest

from url_poller.config.logging_config import (
    _get_local_package_file_path,
    _load_logging_config,
    _TargetUrlFilter,
    configure_logging,
)
from url_poller.config.polling_context import PollingContext


def _context(logging_type: str, logging_config_file: str = "") -> PollingContext:
    return PollingContext(
        url="https://example.com",
        predicted=timedelta(minutes=10),
        delay=timedelta(seconds=3),
        count=5,
        forever=False,
        cert_file="",
        timeout=timedelta(seconds=2),
        logging_type=logging_type,
        logging_config_file=logging_config_file,
    )


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[None]:
    """
    Restores the root logger handlers, filters and level after each test.
    """
    root = logging.getLogger()
    handlers = root.handlers[:]
    filters = root.filters[:]
    level = root.level
    yield
    root.handlers = handlers
    root.filters = filters
    root.setLevel(level)


@pytest.mark.parametrize("logging_type", ["dev", "DEV", "prod"])
def test_configure_logging_should_load_builtin_configuration(logging_type: str) -> None:
    # Arrange
    context = _context(logging_type)

    # Act
    with patch("url_poller.config.logging_config._load_logging_config") as mock_load:
        configure_logging(context)

    # Assert
    expected_file = f"logging-config-{logging_type.lower()}.json"
    mock_load.assert_called_once_with(_get_local_package_file_path(expected_file))


def test_configure_logging_should_load_custom_configuration_file() -> None:
    # Arrange
    context = _context("custom", "/path/to/custom/config.json")

    # Act
    with patch("url_poller.config.logging_config._load_logging_config") as mock_load:
        configure_logging(context)

    # Assert
    mock_load.assert_called_once_with("/path/to/custom/config.json")


def test_configure_logging_should_raise_error_for_custom_type_without_file() -> None:
    # Act & Assert
    with pytest.raises(ValueError, match="Custom logging configuration file must be provided"):
        configure_logging(_context("custom"))


def test_configure_logging_should_raise_error_for_empty_type() -> None:
    # Act & Assert
    with pytest.raises(ValueError, match="Logging type must be provided"):
        configure_logging(_context(""))


def test_configure_logging_should_raise_error_for_invalid_type() -> None:
    # Act & Assert
    with pytest.raises(ValueError, match="Invalid logging type: verbose"):
        configure_logging(_context("verbose"))


@pytest.mark.parametrize("file_name", ["logging-config-dev.json", "logging-config-prod.json"])
def test_builtin_configurations_should_be_valid_and_log_to_stderr(file_name: str) -> None:
    # Arrange
    file_path = _get_local_package_file_path(file_name)

    # Act
    with open(file_path) as f:
        config = json.load(f)

    # Assert
    assert os.path.isfile(file_path)
    assert config["version"] == 1
    for handler in config["handlers"].values():
        assert handler["stream"] == "ext://sys.stderr"


def test_configure_logging_should_add_target_url_to_records(
    capsys: pytest.CaptureFixture,
) -> None:
    # Arrange
    context = _context("dev")

    # Act
    configure_logging(context)
    logging.getLogger("url_poller.test").warning("hello")

    # Assert
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "[https://example.com] hello" in captured.err


def test_load_logging_config_should_apply_dict_config(tmp_path: Path) -> None:
    # Arrange
    config_file = tmp_path / "logging.json"
    config_file.write_text(json.dumps({"version": 1, "root": {"level": "ERROR"}}))

    # Act
    with patch("logging.config.dictConfig") as mock_dict_config:
        _load_logging_config(str(config_file))

    # Assert
    mock_dict_config.assert_called_once_with({"version": 1, "root": {"level": "ERROR"}})


def test_load_logging_config_should_raise_runtime_error_for_missing_file() -> None:
    # Act & Assert
    with pytest.raises(RuntimeError, match="Logging config file not found"):
        _load_logging_config("/nonexistent/logging.json")


def test_load_logging_config_should_raise_runtime_error_for_invalid_json() -> None:
    # Arrange
    with patch("builtins.open", mock_open(read_data="{not json")):
        # Act & Assert
        with pytest.raises(RuntimeError, match="Invalid JSON format"):
            _load_logging_config("/path/to/config.json")


def test_load_logging_config_should_wrap_dict_config_errors(tmp_path: Path) -> None:
    # Arrange
    config_file = tmp_path / "logging.json"
    config_file.write_text(json.dumps({"version": 99}))

    # Act & Assert
    with pytest.raises(RuntimeError, match="Error loading logging config"):
        _load_logging_config(str(config_file))


def test_target_url_filter_should_add_url_and_keep_record() -> None:
    # Arrange
    url_filter = _TargetUrlFilter(target_url="https://example.com")
    record = logging.LogRecord("test", logging.INFO, __file__, 1, "message", None, None)

    # Act
    result = url_filter.filter(record)

    # Assert
    assert result is True
    assert record.target_url == "https://example.com"
