"""
Exceptions raised by the notifier pipeline.

Jobs catch everything at their run boundary and report it to Slack; these
types only need to carry enough detail for a useful report.
"""

from notifier_config.base import ConfigurationError


class NotifierError(Exception):
    """Base class for notifier failures."""


class TransportError(NotifierError):
    """The HTTP request could not be completed (DNS, connection, timeout)."""


class ConfluenceApiError(NotifierError):
    """Confluence returned a non-2xx response or could not be reached."""

    def __init__(self, message: str, status: int | None = None, url: str | None = None):
        super().__init__(message)
        self.status = status
        self.url = url


class DeliveryError(NotifierError):
    """One or more Slack messages of a run were not delivered."""

    def __init__(self, message: str, failed: int = 0, errors: list[str] | None = None):
        super().__init__(message)
        self.failed = failed
        self.errors = errors or []


__all__ = [
    "ConfigurationError",
    "ConfluenceApiError",
    "DeliveryError",
    "NotifierError",
    "TransportError",
]
