"""
All notifier configuration, loaded and validated together.
"""

from dataclasses import dataclass
from typing import Any

from .base import BaseConfig, ConfigurationError, ValidationResult
from .configs import ConfluenceConfig, NotifierConfig, ScheduleConfig, SlackConfig


@dataclass
class AggregateValidationResult:
    """Aggregated validation results from all services.

    Attributes:
        all_valid: True if all configs are valid
        results: Individual validation results by service name
    """

    all_valid: bool
    results: dict[str, ValidationResult]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "all_valid": self.all_valid,
            "results": {
                name: {
                    "status": result.status.value,
                    "errors": result.errors,
                    "warnings": result.warnings,
                }
                for name, result in self.results.items()
            },
        }


@dataclass
class Settings:
    """Every config the notifier needs for one run."""

    confluence: ConfluenceConfig
    slack: SlackConfig
    schedule: ScheduleConfig
    notifier: NotifierConfig

    @property
    def configs(self) -> tuple[BaseConfig, ...]:
        return (self.confluence, self.slack, self.schedule, self.notifier)

    @classmethod
    def load(cls) -> "Settings":
        """Load every config from the environment and config files."""
        return cls(
            confluence=ConfluenceConfig.from_env(),
            slack=SlackConfig.from_env(),
            schedule=ScheduleConfig.from_env(),
            notifier=NotifierConfig.from_env(),
        )

    def validate_all(self) -> AggregateValidationResult:
        results = {config.service_name: config.validate() for config in self.configs}
        return AggregateValidationResult(
            all_valid=all(result.is_valid for result in results.values()),
            results=results,
        )

    def require_all(self) -> None:
        """Raise one ConfigurationError covering every invalid config.

        Raises:
            ConfigurationError: Message lists every failing setting
        """
        errors: list[str] = []
        keys: list[str] = []
        for config in self.configs:
            result = config.validate()
            if not result.is_valid:
                errors.extend(result.errors)
                keys.extend(config.required_keys)
        if errors:
            raise ConfigurationError(f"Invalid configuration: {'; '.join(errors)}", keys=keys)

    def to_dict(self) -> dict[str, Any]:
        return {config.service_name: config.to_dict() for config in self.configs}
