"""
Abstract base class for notification services.

All notification implementations must inherit from NotificationService
and implement its abstract methods.
"""

from abc import ABC, abstractmethod
from typing import Any

from .types import NotificationContext, NotificationMessage, NotificationResult


class NotificationService(ABC):
    """Abstract base class for notification services.

    Usage:
        service = SlackWebhookService(webhook_url, transport)
        result = service.send_payload({"blocks": [...]})
    """

    @abstractmethod
    def send(self, message: NotificationMessage) -> NotificationResult:
        """Send a notification message.

        Implementations report failures through the result instead of
        raising.

        Args:
            message: The notification message to send.

        Returns:
            NotificationResult with success status.
        """

    def send_payload(
        self, payload: dict[str, Any], context: NotificationContext | None = None
    ) -> NotificationResult:
        """Send a prebuilt payload."""
        return self.send(NotificationMessage(payload=payload, context=context or NotificationContext()))
