"""
Execution-time policies for jobs.

A policy lists one or more windows; a job may run when "now" falls inside
any of them. A window allows the whole start hour, every hour strictly
between start and end, and only the first minute (HH:00) of the end hour.
Weekdays are numbered 0=Sunday through 6=Saturday.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .routes import JobName


@dataclass(frozen=True)
class ExecutionWindow:
    """Days and hours during which a job may run."""

    allowed_weekdays: frozenset[int]
    start_hour: int
    end_hour: int


@dataclass(frozen=True)
class JobExecutionPolicy:
    """Execution policy for one job."""

    name: str
    windows: tuple[ExecutionWindow, ...] = field(default_factory=tuple)
    description: str = ""

    def allows(self, now: datetime) -> bool:
        return any(is_execution_time(now, window) for window in self.windows)


DEFAULT_POLICIES: dict[str, JobExecutionPolicy] = {
    JobName.UPDATE_NOTIFY.value: JobExecutionPolicy(
        name="Confluence update notifications",
        description="Weekdays 8:00 - 19:00",
        windows=(ExecutionWindow(frozenset({1, 2, 3, 4, 5}), start_hour=8, end_hour=19),),
    ),
}


def weekday_number(now: datetime) -> int:
    """Return the weekday with 0=Sunday ... 6=Saturday."""
    return now.isoweekday() % 7


def is_execution_time(now: datetime, window: ExecutionWindow) -> bool:
    """Check whether ``now`` falls inside ``window``.

    Args:
        now: The instant to check, already converted to the schedule's zone
        window: The execution window

    Returns:
        True if the weekday is allowed and the time is within the hours
    """
    hour = now.hour
    is_allowed_day = weekday_number(now) in window.allowed_weekdays
    is_within_hours = (
        (window.start_hour < hour < window.end_hour)
        or hour == window.start_hour
        or (hour == window.end_hour and now.minute == 0)  # end hour only at HH:00
    )
    return is_allowed_day and is_within_hours


def is_job_execution_allowed(
    job_name: str,
    now: datetime,
    policies: Mapping[str, JobExecutionPolicy] | None = None,
) -> bool:
    """Decide whether a job may run at ``now``.

    Jobs with no registered policy are always allowed.
    """
    policies = DEFAULT_POLICIES if policies is None else policies
    policy = policies.get(str(getattr(job_name, "value", job_name)))
    if policy is None:
        return True
    return policy.allows(now)


def policy_from_dict(name: str, data: Mapping[str, Any]) -> JobExecutionPolicy:
    """Build a policy from its config.yaml representation.

    Accepts either a single window at the top level or a ``windows`` list:

        confluence-update-notify:
          description: Weekdays 8:00 - 19:00
          windows:
            - weekdays: [1, 2, 3, 4, 5]
              start_hour: 8
              end_hour: 19

    Raises:
        ValueError: If a window is missing fields
    """
    raw_windows = data.get("windows")
    if raw_windows is None:
        raw_windows = [data]
    if not isinstance(raw_windows, list):
        raise ValueError(f"{name}: windows must be a list")

    windows = []
    for index, raw in enumerate(raw_windows):
        if not isinstance(raw, Mapping):
            raise ValueError(f"{name}: window {index} must be a mapping")
        try:
            windows.append(
                ExecutionWindow(
                    allowed_weekdays=frozenset(raw["weekdays"]),
                    start_hour=raw["start_hour"],
                    end_hour=raw["end_hour"],
                )
            )
        except (KeyError, TypeError) as e:
            raise ValueError(f"{name}: window {index} is missing or has invalid {e}") from e

    return JobExecutionPolicy(
        name=str(data.get("name", name)),
        windows=tuple(windows),
        description=str(data.get("description", "")),
    )
