"""
Constants for the URL poller.

This module defines default values for all configurable parameters
of the poller. These constants are used as fallback values
when neither command-line arguments nor environment variables are provided.
"""

# Environment variable prefix shared by every option
ENV_PREFIX = "URL_POLLER_"

# Polling defaults
DEFAULT_URL = ""
DEFAULT_PREDICTED = "10m"
DEFAULT_DELAY = "3s"
DEFAULT_COUNT = 5
DEFAULT_FOREVER = "false"

# HTTP configuration defaults
DEFAULT_REQUEST_TIMEOUT = "2s"
DEFAULT_CERT_FILE = ""

# Logging configuration defaults
DEFAULT_LOGGING_TYPE = "prod"
DEFAULT_LOGGING_CONFIG_FILE = ""

# HTTP status that counts as a successful fetch
SUCCESS_STATUS = 200
