"""
Job execution-time policies.

Read from the ``schedules`` section of ~/.config/confluence-notifier/config.yaml:

    schedules:
      confluence-update-notify:
        description: Weekdays 8:00 - 19:00
        windows:
          - weekdays: [1, 2, 3, 4, 5]   # 0=Sunday ... 6=Saturday
            start_hour: 8
            end_hour: 19

Without a ``schedules`` section the built-in defaults apply. Jobs missing
from the section run at any time.
"""

from dataclasses import dataclass, field
from typing import Any

from confluence_watch.schedule import DEFAULT_POLICIES, JobExecutionPolicy, policy_from_dict

from ..base import BaseConfig, ValidationResult
from ..utils import load_settings_yaml
from ..validators import validate_hour, validate_weekdays


@dataclass
class ScheduleConfig(BaseConfig):
    """Execution policies keyed by job name.

    Attributes:
        policies: Job name -> policy
        errors: Problems found while parsing config.yaml
    """

    policies: dict[str, JobExecutionPolicy] = field(default_factory=lambda: dict(DEFAULT_POLICIES))
    errors: list[str] = field(default_factory=list)

    def validate(self) -> ValidationResult:
        """Validate windows of every policy."""
        errors = list(self.errors)

        for job_name, policy in self.policies.items():
            for index, window in enumerate(policy.windows):
                prefix = f"{job_name} window {index}"
                for ok, error in (
                    validate_weekdays(list(window.allowed_weekdays), f"{prefix} weekdays"),
                    validate_hour(window.start_hour, f"{prefix} start_hour"),
                    validate_hour(window.end_hour, f"{prefix} end_hour"),
                ):
                    if not ok:
                        errors.append(error)

        if errors:
            return ValidationResult.invalid(errors)

        return ValidationResult.valid()

    def to_dict(self) -> dict[str, Any]:
        return {
            job_name: {
                "name": policy.name,
                "description": policy.description,
                "windows": [
                    {
                        "weekdays": sorted(window.allowed_weekdays),
                        "start_hour": window.start_hour,
                        "end_hour": window.end_hour,
                    }
                    for window in policy.windows
                ],
            }
            for job_name, policy in self.policies.items()
        }

    @classmethod
    def from_mapping(cls, schedules: Any) -> "ScheduleConfig":
        """Build from the decoded ``schedules`` section."""
        config = cls(policies={})

        if not isinstance(schedules, dict):
            config.errors.append("schedules must be a mapping of job name to policy")
            return config

        for job_name, data in schedules.items():
            if not isinstance(data, dict):
                config.errors.append(f"{job_name}: policy must be a mapping")
                continue
            try:
                config.policies[str(job_name)] = policy_from_dict(str(job_name), data)
            except ValueError as e:
                config.errors.append(str(e))

        return config

    @classmethod
    def from_env(cls) -> "ScheduleConfig":
        yaml_config = load_settings_yaml()
        if "schedules" not in yaml_config:
            return cls()
        return cls.from_mapping(yaml_config["schedules"] or {})
