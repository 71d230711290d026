"""
Per-job watermarks: the point in time a job last processed up to.

Each job keeps one JSON document, e.g.:

    {"timestamp": "2024-01-15T01:30:00.000Z", "originalVersions": {"123": 4}}

``originalVersions`` is only written by the summary job; it records the
page version seen at the last summary so the next one can link a diff
from there. A file that is missing, unreadable or the wrong shape is
treated as no watermark at all.
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

from notifier_logging import get_logger

from .timefmt import parse_instant


logger = get_logger("confluence-watermark")

NOTIFY_FALLBACK = timedelta(minutes=15)
SUMMARY_FALLBACK = timedelta(days=7)


@dataclass
class Watermark:
    """Checkpoint persisted between runs.

    Attributes:
        timestamp: ISO-8601 instant of the last processed change
        original_versions: Page id -> version seen by the last summary
    """

    timestamp: str
    original_versions: dict[str, int] | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"timestamp": self.timestamp}
        if self.original_versions is not None:
            data["originalVersions"] = dict(self.original_versions)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Watermark":
        versions = data.get("originalVersions")
        return cls(
            timestamp=data["timestamp"],
            original_versions=dict(versions) if versions is not None else None,
        )


def _is_version(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_watermark(data: object) -> bool:
    """Check that decoded JSON has the shape of a Watermark.

    ``timestamp`` must be a string; ``originalVersions``, when present,
    must be an object mapping strings to integers. Never raises.
    """
    if not isinstance(data, dict):
        return False
    if not isinstance(data.get("timestamp"), str):
        return False
    if "originalVersions" in data:
        versions = data["originalVersions"]
        if not isinstance(versions, dict):
            return False
        return all(isinstance(key, str) and _is_version(value) for key, value in versions.items())
    return True


def resolve_lower_bound(watermark: Watermark | None, fallback: timedelta, now: datetime) -> datetime:
    """Return the instant to fetch changes after.

    Uses the watermark timestamp when it parses, else ``now - fallback``.
    """
    if watermark is not None:
        parsed = parse_instant(watermark.timestamp)
        if parsed is not None:
            return parsed
        logger.warning("Watermark timestamp does not parse, using fallback", timestamp=watermark.timestamp)
    return now - fallback


class WatermarkStore(ABC):
    """Keyed storage for job watermarks."""

    @abstractmethod
    def load(self, key: str) -> Watermark | None:
        """Return the stored watermark, or None if absent or malformed."""

    @abstractmethod
    def save(self, key: str, watermark: Watermark) -> None:
        """Replace the stored watermark."""


class FileWatermarkStore(WatermarkStore):
    """Stores each watermark as ``<data_dir>/<key>`` JSON."""

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    def path_for(self, key: str) -> Path:
        return self.data_dir / key

    def load(self, key: str) -> Watermark | None:
        path = self.path_for(key)
        if not path.exists():
            logger.debug("No watermark file", path=str(path))
            return None

        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(
                "Unreadable watermark file, ignoring",
                path=str(path),
                error=str(e),
                error_type=type(e).__name__,
            )
            return None

        if not is_watermark(data):
            logger.warning("Watermark file has unexpected shape, ignoring", path=str(path))
            return None

        return Watermark.from_dict(data)

    def save(self, key: str, watermark: Watermark) -> None:
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(watermark.to_dict(), f, indent=2)
        logger.debug("Saved watermark", path=str(path), timestamp=watermark.timestamp)
