"""
Delivery of Slack payloads to the channel a job is routed to.
"""

from collections.abc import Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from notifications import NotificationContext, NotificationResult, NotificationService, SlackWebhookService
from notifier_logging import get_current_context, get_logger

from .errors import ConfigurationError, DeliveryError
from .routes import DEFAULT_ROUTE
from .transport import HttpTransport


logger = get_logger("slack-dispatch")


class SlackRouter:
    """Maps routing keys to webhook services.

    A key without its own route falls back to ``DEFAULT`` when one is
    configured. Services are created on first use and reused for the rest
    of the run.
    """

    def __init__(self, routes: Mapping[str, str], transport: HttpTransport):
        self.routes = dict(routes)
        self.transport = transport
        self._services: dict[str, NotificationService] = {}

    def resolve(self, routing_key: str) -> str:
        """Return the route name a key is delivered through.

        Raises:
            ConfigurationError: If neither the key nor DEFAULT is configured
        """
        if routing_key in self.routes:
            return routing_key
        if DEFAULT_ROUTE in self.routes:
            return DEFAULT_ROUTE
        raise ConfigurationError(
            f"No Slack webhook configured for routing key '{routing_key}'",
            keys=["SLACK_WEBHOOK_URLS"],
        )

    def service_for(self, routing_key: str) -> NotificationService:
        route = self.resolve(routing_key)
        if route not in self._services:
            self._services[route] = SlackWebhookService(self.routes[route], self.transport)
        return self._services[route]


class Dispatcher:
    """Sends every payload of a run and fails if any were not delivered.

    With ``max_workers`` above 1 payloads are posted concurrently; arrival
    order in the channel is then not guaranteed.
    """

    def __init__(self, router: SlackRouter, max_workers: int = 1):
        self.router = router
        self.max_workers = max(1, max_workers)

    @staticmethod
    def _notification_context(routing_key: str) -> NotificationContext:
        ctx = get_current_context()
        return NotificationContext(
            job_name=ctx.job_name if ctx else None,
            routing_key=routing_key,
            run_id=ctx.run_id if ctx else None,
        )

    def send(self, payload: dict[str, Any], routing_key: str) -> NotificationResult:
        """Send one payload.

        Raises:
            ConfigurationError: If the routing key has no webhook
        """
        service = self.router.service_for(routing_key)
        return service.send_payload(payload, self._notification_context(routing_key))

    def send_all(self, payloads: Sequence[dict[str, Any]], routing_key: str) -> list[NotificationResult]:
        """Send payloads and wait for every attempt to settle.

        Raises:
            ConfigurationError: If the routing key has no webhook
            DeliveryError: If one or more payloads failed
        """
        if not payloads:
            return []

        # Resolved before sending so a missing route fails with nothing sent.
        # The log context is captured here; worker threads do not inherit it.
        service = self.router.service_for(routing_key)
        context = self._notification_context(routing_key)

        if self.max_workers == 1 or len(payloads) == 1:
            results = [service.send_payload(payload, context) for payload in payloads]
        else:
            # Workers share the run's transport (one requests.Session); each POST is self-contained
            with ThreadPoolExecutor(max_workers=min(self.max_workers, len(payloads))) as executor:
                results = list(executor.map(lambda payload: service.send_payload(payload, context), payloads))

        errors = [result.error_message or "unknown error" for result in results if not result.success]
        logger.info(
            "Dispatched Slack messages",
            routing_key=routing_key,
            sent=len(results) - len(errors),
            failed=len(errors),
        )
        if errors:
            raise DeliveryError(
                f"{len(errors)} of {len(results)} Slack messages failed: {errors[0]}",
                failed=len(errors),
                errors=errors,
            )
        return results
