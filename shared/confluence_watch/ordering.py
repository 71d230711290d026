"""
Ordering and filtering of fetched change records.

Search returns newest first; notifications are posted oldest first so the
channel reads chronologically.
"""

from collections.abc import Iterable
from datetime import datetime

from .confluence import ChangeRecord
from .timefmt import EPOCH


def _sort_key(record: ChangeRecord) -> datetime:
    # Records without a modification time go first
    return record.modified_at or EPOCH


def sort_by_modified_ascending(records: Iterable[ChangeRecord]) -> list[ChangeRecord]:
    """Return records ordered by ``version.when``, oldest first (stable)."""
    return sorted(records, key=_sort_key)


def filter_first_version_only(records: Iterable[ChangeRecord]) -> list[ChangeRecord]:
    """Keep records at version 1, i.e. newly created pages."""
    return [record for record in records if record.version_number == 1]


def latest_modified(records: Iterable[ChangeRecord]) -> datetime | None:
    """Return the newest ``version.when`` among records, if any carry one."""
    times = [record.modified_at for record in records if record.modified_at is not None]
    return max(times, default=None)
