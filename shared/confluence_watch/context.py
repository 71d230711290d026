"""
Per-run collaborators.

A RunContext is built once per invocation and handed to every job, so no
client or webhook connection outlives the run that created it.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from notifier_config import Settings

from .confluence import ConfluenceClient
from .dispatch import Dispatcher, SlackRouter
from .routes import JobName
from .transport import HttpTransport, create_transport
from .watermark import FileWatermarkStore, WatermarkStore


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class RunContext:
    """Everything a job needs to run.

    Attributes:
        settings: Loaded configuration
        transport: HTTP transport shared by Confluence and Slack calls
        store: Watermark storage
        dispatcher: Slack delivery
        clock: Returns the current time (aware)
    """

    settings: Settings
    transport: HttpTransport
    store: WatermarkStore
    dispatcher: Dispatcher
    clock: Callable[[], datetime] = utc_now
    _clients: dict[str, ConfluenceClient] = field(default_factory=dict, repr=False)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: HttpTransport | None = None,
        store: WatermarkStore | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> "RunContext":
        """Wire up the run from configuration.

        Raises:
            ConfigurationError: If any required setting is missing or invalid
        """
        settings.require_all()

        transport = transport or create_transport(settings.notifier.transport)
        router = SlackRouter(settings.slack.webhook_urls, transport)
        return cls(
            settings=settings,
            transport=transport,
            store=store or FileWatermarkStore(settings.notifier.data_dir),
            dispatcher=Dispatcher(router, max_workers=settings.slack.max_workers),
            clock=clock,
        )

    @property
    def display_zone(self) -> timezone:
        return self.settings.notifier.display_timezone

    def now(self) -> datetime:
        return self.clock()

    def confluence_client(self, job: JobName) -> ConfluenceClient:
        """Return the Confluence client for a job, creating it on first use.

        Raises:
            ConfigurationError: If the job has no page configuration
        """
        if job.value not in self._clients:
            confluence = self.settings.confluence
            page_config = confluence.page_config_for(job.value)
            self._clients[job.value] = ConfluenceClient(
                base_url=confluence.base_url,
                token=confluence.token,
                space_key=page_config.space_key,
                root_page_ids=page_config.root_page_ids,
                transport=self.transport,
                timeout=confluence.request_timeout,
                display_zone=self.display_zone,
            )
        return self._clients[job.value]

    def close(self) -> None:
        self.transport.close()
