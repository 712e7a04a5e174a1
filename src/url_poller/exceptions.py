"""
Exceptions raised by the URL poller.

Only `CertificateBundleError` is fatal; it is raised before the first fetch
and terminates the process. `RequestConstructionError` is attempt-local and
ends up in `FetchResult.error` like any transport failure.
"""


class PollerError(Exception):
    """Base class for all errors raised by the poller."""


class CertificateBundleError(PollerError):
    """The configured certificate bundle could not be read."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path: str = path
        self.reason: str = reason


class RequestConstructionError(PollerError):
    """The configured URL cannot be turned into a request."""


class FetchTimeoutError(PollerError):
    """No response arrived within the per-attempt timeout."""
