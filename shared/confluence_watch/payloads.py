"""
Slack Block Kit payloads for Confluence changes.

- to_update_payload: one message per changed or created page
- to_summary_payload: one digest for the summary job
- to_error_payload: failure report posted to the job's own channel
"""

from collections.abc import Mapping, Sequence
from datetime import timezone
from typing import Any
from urllib.parse import urlencode

from .confluence import ChangeRecord
from .timefmt import format_display


DEFAULT_HEADER_TEXT = "Confluence-Slack Notification"
DEFAULT_SUMMARY_TITLE = "Weekly Summary"
UNKNOWN = "unknown"

# Slack rejects context blocks with more elements than this
CONTEXT_ELEMENT_LIMIT = 10


def escape_mrkdwn(text: str) -> str:
    """Escape the characters Slack treats as control sequences in mrkdwn."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def page_url(base_url: str, page_id: str) -> str:
    return f"{base_url}/pages/viewpage.action?{urlencode({'pageId': page_id})}"


def diff_url(base_url: str, page_id: str, original_version: int, revised_version: int) -> str:
    """Build the link to Confluence's version comparison view."""
    query = urlencode(
        {
            "pageId": page_id,
            "originalVersion": original_version,
            "revisedVersion": revised_version,
        }
    )
    return f"{base_url}/pages/diffpagesbyversion.action?{query}"


def _header(text: str) -> dict[str, Any]:
    return {"type": "header", "text": {"type": "plain_text", "text": text}}


def _mrkdwn(text: str) -> dict[str, Any]:
    return {"type": "mrkdwn", "text": text}


def to_update_payload(
    record: ChangeRecord,
    base_url: str,
    header_text: str = DEFAULT_HEADER_TEXT,
    zone: timezone = timezone.utc,
) -> dict[str, Any]:
    """Build the notification for a single page.

    A diff link to the previous version is included from version 2 on.
    Editor and time render as "unknown" when the record has no version.

    Args:
        record: The changed page
        base_url: Base URL returned with the search results
        header_text: Message header
        zone: Zone for the "Updated at" time

    Returns:
        Slack message payload
    """
    link = f"<{page_url(base_url, record.id)}|{escape_mrkdwn(record.title)}>"
    number = record.version_number
    if number is not None and number > 1:
        link += f" (<{diff_url(base_url, record.id, number - 1, number)}|diff>)"

    version = record.version
    updated_by = (version.by if version else None) or UNKNOWN
    updated_at = format_display(record.modified_at, zone, default=UNKNOWN)

    return {
        "blocks": [
            _header(header_text),
            {
                "type": "section",
                "fields": [
                    _mrkdwn(f"*Page:*\n{link}"),
                    _mrkdwn(f"*Updated by:* {escape_mrkdwn(updated_by)}\n*Updated at:* {updated_at}"),
                ],
            },
        ]
    }


def summary_entry(record: ChangeRecord, original_version: int, base_url: str) -> str:
    """Render one list line of the summary digest."""
    entry = f"<{page_url(base_url, record.id)}|{escape_mrkdwn(record.title)}>"
    number = record.version_number
    if number is not None and number > 1 and number != original_version:
        url = diff_url(base_url, record.id, original_version, number)
        entry += f" (<{url}|(ver{original_version}→{number})>)"
    return f"- {entry}"


def to_summary_payload(
    records: Sequence[ChangeRecord],
    original_versions: Mapping[str, int],
    base_url: str,
    title: str = DEFAULT_SUMMARY_TITLE,
) -> dict[str, Any]:
    """Build the summary digest for every page changed this period.

    Each page links a diff from the version recorded at the previous
    summary (1 if never seen) to its current version.
    """
    entries = [
        _mrkdwn(summary_entry(record, original_versions.get(record.id, 1), base_url))
        for record in records
    ]

    blocks: list[dict[str, Any]] = [
        _header(title),
        {
            "type": "section",
            "text": {"type": "plain_text", "text": f"{len(records)} pages updated this period"},
        },
    ]
    for start in range(0, len(entries), CONTEXT_ELEMENT_LIMIT):
        blocks.append({"type": "context", "elements": entries[start : start + CONTEXT_ELEMENT_LIMIT]})

    return {"blocks": blocks}


def to_error_payload(job_name: str, error: BaseException) -> dict[str, Any]:
    """Build the failure report for a job run."""
    detail = escape_mrkdwn(str(error) or type(error).__name__)
    return {
        "blocks": [
            _header(f"{job_name} failed"),
            {
                "type": "section",
                "text": {
                    "type": "mrkdwn",
                    "text": f"*{type(error).__name__}*\n```{detail}```",
                },
            },
        ]
    }
