"""
Runtime settings of the notifier process itself.

    NOTIFIER_DATA_DIR            Directory holding watermark files
    NOTIFIER_DISPLAY_UTC_OFFSET  Hours east of UTC used to render times and evaluate schedules
    NOTIFIER_TRANSPORT           "requests" (long-running hosts) or "urllib" (serverless hosts)
    NOTIFIER_LOG_LEVEL           Level name for notifier loggers (DEBUG, INFO, WARNING, ERROR)
"""

from dataclasses import dataclass, field
from datetime import timedelta, timezone
from pathlib import Path
from typing import Any

from notifier_logging import detect_environment, resolve_level

from ..base import BaseConfig, ValidationResult
from ..utils import get_setting, load_secrets


TRANSPORTS = ("requests", "urllib")
DEFAULT_UTC_OFFSET_HOURS = 9.0


def default_data_dir() -> Path:
    return Path.home() / ".local" / "share" / "confluence-notifier"


@dataclass
class NotifierConfig(BaseConfig):
    """Process-level notifier settings.

    Attributes:
        data_dir: Where watermark JSON files are written
        display_utc_offset: Offset in hours of the display/schedule time zone
        transport: Name of the HTTP transport implementation
        log_level: Level name for notifier loggers
    """

    data_dir: Path = field(default_factory=default_data_dir)
    display_utc_offset: float = DEFAULT_UTC_OFFSET_HOURS
    transport: str = "requests"
    log_level: str = "INFO"

    required_keys = ("NOTIFIER_TRANSPORT", "NOTIFIER_DISPLAY_UTC_OFFSET", "NOTIFIER_LOG_LEVEL")

    def validate(self) -> ValidationResult:
        errors: list[str] = []

        if resolve_level(self.log_level) is None:
            errors.append(f"NOTIFIER_LOG_LEVEL is not a logging level name, got: {self.log_level}")

        if self.transport not in TRANSPORTS:
            errors.append(
                f"NOTIFIER_TRANSPORT must be one of {', '.join(TRANSPORTS)}, got: {self.transport}"
            )

        if not -12 <= self.display_utc_offset <= 14:
            errors.append(
                f"NOTIFIER_DISPLAY_UTC_OFFSET must be between -12 and 14, got: {self.display_utc_offset}"
            )

        if errors:
            return ValidationResult.invalid(errors)

        return ValidationResult.valid()

    def to_dict(self) -> dict[str, Any]:
        return {
            "data_dir": str(self.data_dir),
            "display_utc_offset": self.display_utc_offset,
            "transport": self.transport,
            "log_level": self.log_level,
        }

    @property
    def display_timezone(self) -> timezone:
        """Fixed-offset zone for rendering times and evaluating schedules."""
        return timezone(timedelta(hours=self.display_utc_offset))

    @classmethod
    def from_env(cls) -> "NotifierConfig":
        secrets = load_secrets()
        config = cls()

        data_dir = get_setting("NOTIFIER_DATA_DIR", secrets)
        if data_dir:
            config.data_dir = Path(data_dir).expanduser()

        offset = get_setting("NOTIFIER_DISPLAY_UTC_OFFSET", secrets)
        if offset:
            try:
                config.display_utc_offset = float(offset)
            except ValueError:
                config.display_utc_offset = DEFAULT_UTC_OFFSET_HOURS

        default_transport = "urllib" if detect_environment() == "serverless" else "requests"
        config.transport = get_setting("NOTIFIER_TRANSPORT", secrets, default_transport).lower()
        config.log_level = get_setting("NOTIFIER_LOG_LEVEL", secrets, "INFO")

        return config
