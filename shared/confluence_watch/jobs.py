"""
Job orchestrators.

Every run walks the same steps:

    gate -> load watermark -> fetch -> process -> dispatch -> persist

A run outside its execution window stops at the gate without touching
storage or the network. Any failure after the gate is posted to the job's
own Slack route and the run returns FAILED; nothing is re-raised, and the
watermark is left where it was so the next run retries the same range.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from enum import Enum

from notifier_logging import ContextScope, get_logger

from .confluence import ChangeRecord, ChangeSet
from .context import RunContext
from .ordering import filter_first_version_only, latest_modified, sort_by_modified_ascending
from .payloads import to_error_payload, to_summary_payload, to_update_payload
from .routes import SLACK_ROUTE, WATERMARK_FILE, JobName
from .schedule import is_job_execution_allowed
from .timefmt import format_instant
from .watermark import NOTIFY_FALLBACK, SUMMARY_FALLBACK, Watermark, resolve_lower_bound


logger = get_logger("confluence-jobs")


class JobOutcome(Enum):
    """How a job run ended."""

    SKIPPED = "skipped"  # Outside the execution window
    BOOTSTRAPPED = "bootstrapped"  # Summary baseline recorded, nothing sent
    NO_CHANGES = "no_changes"
    COMPLETED = "completed"
    FAILED = "failed"  # Error reported to Slack


class NotificationJob(ABC):
    """Template for a scheduled notification job."""

    job: JobName

    def __init__(self, ctx: RunContext):
        self.ctx = ctx

    @property
    def routing_key(self) -> str:
        return SLACK_ROUTE[self.job]

    @property
    def watermark_key(self) -> str:
        return WATERMARK_FILE[self.job]

    def is_allowed(self, now: datetime) -> bool:
        local_now = now.astimezone(self.ctx.display_zone)
        return is_job_execution_allowed(self.job.value, local_now, self.ctx.settings.schedule.policies)

    def run(self, now: datetime | None = None) -> JobOutcome:
        """Run the job once.

        Args:
            now: Start time of the run; defaults to the context clock

        Returns:
            JobOutcome describing how the run ended
        """
        now = now or self.ctx.now()

        with ContextScope(job_name=self.job.value, routing_key=self.routing_key):
            if not self.is_allowed(now):
                logger.info("Outside execution window, skipping", now=now.isoformat())
                return JobOutcome.SKIPPED

            try:
                outcome = self.execute(now)
            except Exception as e:
                logger.exception(
                    "Job failed",
                    error=str(e),
                    error_type=type(e).__name__,
                )
                self.report_error(e)
                return JobOutcome.FAILED

            logger.info("Job finished", outcome=outcome.value)
            return outcome

    def report_error(self, error: Exception) -> None:
        """Post the failure to the job's route. Never raises."""
        try:
            self.ctx.dispatcher.send_all([to_error_payload(self.job.value, error)], self.routing_key)
        except Exception as e:
            logger.error(
                "Failed to report job error to Slack",
                error=str(e),
                error_type=type(e).__name__,
            )

    @abstractmethod
    def execute(self, now: datetime) -> JobOutcome:
        """Run every step after the gate."""


class PageNotifyJob(NotificationJob):
    """Posts one message per page changed since the watermark.

    The watermark is rewritten on every successful run, even when nothing
    changed, using the newest modification time among fetched pages.
    """

    fallback: timedelta = NOTIFY_FALLBACK

    def select(self, records: list[ChangeRecord]) -> list[ChangeRecord]:
        """Choose and order the records to notify about."""
        return sort_by_modified_ascending(records)

    def execute(self, now: datetime) -> JobOutcome:
        watermark = self.ctx.store.load(self.watermark_key)
        since = resolve_lower_bound(watermark, self.fallback, now)
        logger.debug("Resolved lower bound", since=since.isoformat(), from_watermark=watermark is not None)

        changes: ChangeSet = self.ctx.confluence_client(self.job).fetch_changes(since)

        records = self.select(changes.items)
        header_text = self.ctx.settings.slack.header_text
        payloads = [
            to_update_payload(record, changes.base_url, header_text, self.ctx.display_zone)
            for record in records
        ]
        self.ctx.dispatcher.send_all(payloads, self.routing_key)

        # Advance over everything fetched, including pages filtered out above
        latest = latest_modified(changes.items) or since
        self.ctx.store.save(self.watermark_key, Watermark(timestamp=format_instant(latest)))

        logger.info(
            "Processed changes",
            fetched=len(changes.items),
            notified=len(payloads),
            watermark=format_instant(latest),
        )
        return JobOutcome.COMPLETED if changes.items else JobOutcome.NO_CHANGES


class UpdateNotifyJob(PageNotifyJob):
    """Notifies about every changed page."""

    job = JobName.UPDATE_NOTIFY


class CreateNotifyJob(PageNotifyJob):
    """Notifies about newly created pages only."""

    job = JobName.CREATE_NOTIFY

    def select(self, records: list[ChangeRecord]) -> list[ChangeRecord]:
        return sort_by_modified_ascending(filter_first_version_only(records))


class UpdateSummaryJob(NotificationJob):
    """Posts a digest of pages changed since the last summary.

    The first run (or a run whose watermark has no version map) only
    records the current version of every watched page; later digests link
    diffs from those versions.
    """

    job = JobName.UPDATE_SUMMARY
    fallback: timedelta = SUMMARY_FALLBACK

    def bootstrap(self, now: datetime) -> JobOutcome:
        catalog = self.ctx.confluence_client(self.job).fetch_catalog()
        versions = {record.id: record.version_number or 1 for record in catalog.items}
        self.ctx.store.save(
            self.watermark_key,
            Watermark(timestamp=format_instant(now), original_versions=versions),
        )
        logger.info("Recorded summary baseline", pages=len(versions))
        return JobOutcome.BOOTSTRAPPED

    def execute(self, now: datetime) -> JobOutcome:
        watermark = self.ctx.store.load(self.watermark_key)
        if watermark is None or watermark.original_versions is None:
            return self.bootstrap(now)

        since = resolve_lower_bound(watermark, self.fallback, now)
        changes = self.ctx.confluence_client(self.job).fetch_changes(since)

        if not changes.items:
            logger.info("No recent changes", since=since.isoformat())
            return JobOutcome.NO_CHANGES

        records = sort_by_modified_ascending(changes.items)
        payload = to_summary_payload(records, watermark.original_versions, changes.base_url)
        self.ctx.dispatcher.send_all([payload], self.routing_key)

        versions = dict(watermark.original_versions)
        versions.update({record.id: record.version_number or 1 for record in changes.items})
        # Next summary covers everything after this run started
        self.ctx.store.save(
            self.watermark_key,
            Watermark(timestamp=format_instant(now), original_versions=versions),
        )

        logger.info("Sent summary", pages=len(records))
        return JobOutcome.COMPLETED


JOBS: dict[JobName, type[NotificationJob]] = {
    JobName.UPDATE_NOTIFY: UpdateNotifyJob,
    JobName.CREATE_NOTIFY: CreateNotifyJob,
    JobName.UPDATE_SUMMARY: UpdateSummaryJob,
}


def create_job(job: JobName, ctx: RunContext) -> NotificationJob:
    return JOBS[job](ctx)
