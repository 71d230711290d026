"""
Notification types and data structures.

This module defines the core data types used throughout the notifications system.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class NotificationContext:
    """Context about what triggered the notification.

    Carried into logs so a delivery failure can be traced to its run.
    """

    job_name: str | None = None  # e.g. "confluence-update-notify"
    routing_key: str | None = None  # Slack route the message goes to
    run_id: str | None = None


@dataclass
class NotificationMessage:
    """A prebuilt Slack payload (Block Kit) and the run it belongs to."""

    payload: dict[str, Any]
    context: NotificationContext = field(default_factory=NotificationContext)

    def to_slack_payload(self) -> dict[str, Any]:
        """Return the body posted to the webhook."""
        return self.payload


@dataclass
class NotificationResult:
    """Result of sending a notification."""

    success: bool
    error_message: str | None = None

    # HTTP status of the delivery attempt, when one was received
    status: int | None = None
