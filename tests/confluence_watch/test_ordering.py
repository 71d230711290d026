"""
Tests for confluence_watch.ordering module.
"""

from datetime import datetime, timezone

from confluence_watch.confluence import ChangeRecord, Version
from confluence_watch.ordering import (
    filter_first_version_only,
    latest_modified,
    sort_by_modified_ascending,
)


def record(page_id: str, number: int | None = 1, hour: int | None = 0) -> ChangeRecord:
    if number is None:
        return ChangeRecord(id=page_id, title=page_id)
    when = datetime(2024, 1, 15, hour, tzinfo=timezone.utc) if hour is not None else None
    return ChangeRecord(id=page_id, title=page_id, version=Version(number=number, when=when, by="Bob"))


def ids(records: list[ChangeRecord]) -> list[str]:
    return [r.id for r in records]


class TestSortByModifiedAscending:
    """Tests for sort_by_modified_ascending."""

    def test_orders_oldest_first(self):
        """Test records come back oldest first."""
        records = [record("c", hour=12), record("a", hour=1), record("b", hour=6)]
        assert ids(sort_by_modified_ascending(records)) == ["a", "b", "c"]

    def test_stable_for_equal_times(self):
        """Test records with the same time keep their input order."""
        records = [record("x", hour=5), record("y", hour=5), record("z", hour=5)]
        assert ids(sort_by_modified_ascending(records)) == ["x", "y", "z"]

    def test_missing_time_sorts_first(self):
        """Test records without a time go before timed ones."""
        records = [record("timed", hour=0), record("no-version", number=None), record("no-when", hour=None)]
        assert ids(sort_by_modified_ascending(records)) == ["no-version", "no-when", "timed"]

    def test_does_not_mutate_input(self):
        """Test the input list is left untouched."""
        records = [record("b", hour=2), record("a", hour=1)]
        sort_by_modified_ascending(records)
        assert ids(records) == ["b", "a"]


class TestFilterFirstVersionOnly:
    """Tests for filter_first_version_only."""

    def test_keeps_version_one_in_order(self):
        """Test only version 1 records are kept, order preserved."""
        records = [record("a", 1), record("b", 2), record("c", 1), record("d", 5)]
        assert ids(filter_first_version_only(records)) == ["a", "c"]

    def test_drops_records_without_version(self):
        """Test records without a version are not treated as new."""
        assert filter_first_version_only([record("a", None)]) == []


class TestLatestModified:
    """Tests for latest_modified."""

    def test_returns_max(self):
        """Test the newest time is returned."""
        records = [record("a", hour=3), record("b", hour=9), record("c", hour=1)]
        assert latest_modified(records) == datetime(2024, 1, 15, 9, tzinfo=timezone.utc)

    def test_ignores_missing_times(self):
        """Test records without a time are skipped."""
        records = [record("a", None), record("b", hour=2)]
        assert latest_modified(records) == datetime(2024, 1, 15, 2, tzinfo=timezone.utc)

    def test_none_when_no_times(self):
        """Test None is returned when nothing carries a time."""
        assert latest_modified([]) is None
        assert latest_modified([record("a", None)]) is None
