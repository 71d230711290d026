"""
Job names and their fixed per-job settings.

Every job has a Slack routing key (which webhook it posts to) and a
watermark file name (where its checkpoint lives). Adding a JobName without
entries here fails the routes test.
"""

from enum import Enum


class JobName(str, Enum):
    """Jobs the notifier can run."""

    UPDATE_NOTIFY = "confluence-update-notify"
    CREATE_NOTIFY = "confluence-create-notify"
    UPDATE_SUMMARY = "confluence-update-summary"


# Job name -> Slack routing key
SLACK_ROUTE: dict[JobName, str] = {
    JobName.UPDATE_NOTIFY: "update-notify",
    JobName.CREATE_NOTIFY: "create-notify",
    JobName.UPDATE_SUMMARY: "update-summary",
}

# Job name -> watermark file name
WATERMARK_FILE: dict[JobName, str] = {
    JobName.UPDATE_NOTIFY: "confluence-update-notify-job.json",
    JobName.CREATE_NOTIFY: "confluence-create-notify-job.json",
    JobName.UPDATE_SUMMARY: "confluence-summary-job.json",
}

# Route used by the legacy single SLACK_WEBHOOK_URL setting
DEFAULT_ROUTE = "DEFAULT"


def parse_job_name(value: str) -> JobName:
    """Resolve a job name from its value or enum member name.

    Raises:
        ValueError: If the value is not a string or matches no job
    """
    if not isinstance(value, str):
        raise ValueError(f"Job name must be a string, got {type(value).__name__}: {value!r}")
    try:
        return JobName(value)
    except ValueError:
        pass
    try:
        return JobName[value.upper().replace("-", "_")]
    except KeyError:
        valid = ", ".join(job.value for job in JobName)
        raise ValueError(f"Unknown job '{value}' (expected one of: {valid})") from None
