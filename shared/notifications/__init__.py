"""
Notification services.

Usage:
    from notifications import SlackWebhookService

    slack = SlackWebhookService(webhook_url, transport)
    result = slack.send_payload({"blocks": [...]})
"""

from .base import NotificationService
from .slack import SlackWebhookService
from .types import NotificationContext, NotificationMessage, NotificationResult


__all__ = [
    "NotificationContext",
    "NotificationMessage",
    "NotificationResult",
    "NotificationService",
    "SlackWebhookService",
]
