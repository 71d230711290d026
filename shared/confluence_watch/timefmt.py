"""
Time parsing and rendering shared by the fetcher, payloads and watermarks.
"""

from datetime import datetime, timedelta, timezone


DISPLAY_FORMAT = "%Y/%m/%d %H:%M"
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utc_offset_zone(hours: float) -> timezone:
    return timezone(timedelta(hours=hours))


def parse_instant(value: object) -> datetime | None:
    """Parse an ISO-8601 timestamp into an aware datetime.

    Accepts Confluence's "2024-01-15T10:30:00.000+09:00" as well as the
    "Z" suffix used in watermark files. Naive values are taken as UTC.

    Returns:
        The instant, or None if ``value`` is not a parsable string
    """
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_instant(value: datetime) -> str:
    """Render an instant as ISO-8601 UTC with millisecond precision."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    utc = value.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def format_display(value: datetime | None, zone: timezone, default: str = "unknown") -> str:
    """Render an instant as ``YYYY/MM/DD HH:MM`` in ``zone``."""
    if value is None:
        return default
    return value.astimezone(zone).strftime(DISPLAY_FORMAT)
