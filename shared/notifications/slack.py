"""
Slack notification service implementation.

Posts messages to a Slack incoming webhook. Each webhook URL is bound to
one channel, so routing between channels happens one level up by picking
which service to send through.
"""

from confluence_watch.errors import TransportError
from confluence_watch.transport import HttpTransport
from notifier_config.validators import mask_url
from notifier_logging import get_logger

from .base import NotificationService
from .types import NotificationMessage, NotificationResult


logger = get_logger("slack-webhook")


class SlackWebhookService(NotificationService):
    """Slack notification service using an incoming webhook.

    Usage:
        slack = SlackWebhookService("https://hooks.slack.com/services/...", transport)

        result = slack.send_payload({"blocks": [...]})
        if not result.success:
            print(result.error_message)
    """

    def __init__(self, webhook_url: str, transport: HttpTransport, timeout: float = 10):
        """Initialize the Slack webhook service.

        Args:
            webhook_url: Incoming webhook URL
            transport: HTTP transport used to post
            timeout: Request timeout in seconds
        """
        self.webhook_url = webhook_url
        self.transport = transport
        self.timeout = timeout

    def send(self, message: NotificationMessage) -> NotificationResult:
        """Post a message to the webhook.

        Args:
            message: The notification message to send.

        Returns:
            NotificationResult; non-2xx responses and transport failures
            are reported as unsuccessful.
        """
        context = message.context

        try:
            response = self.transport.request(
                "POST",
                self.webhook_url,
                headers={"Content-Type": "application/json"},
                json_body=message.to_slack_payload(),
                timeout=self.timeout,
            )
        except TransportError as e:
            logger.error(
                "Slack webhook request failed",
                webhook=mask_url(self.webhook_url),
                routing_key=context.routing_key,
                error=str(e),
            )
            return NotificationResult(success=False, error_message=str(e))

        if not response.ok:
            error = f"Slack delivery failed: {response.status} {response.reason}"
            logger.error(
                "Slack webhook rejected message",
                webhook=mask_url(self.webhook_url),
                routing_key=context.routing_key,
                status=response.status,
            )
            return NotificationResult(success=False, error_message=error, status=response.status)

        return NotificationResult(success=True, status=response.status)
