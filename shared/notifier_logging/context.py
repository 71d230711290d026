"""
Context management for notifier_logging.

Carries the identity of the job run (job name, routing key, run id) so every
log line emitted while a job executes can be correlated with that run.
"""

import os
import secrets
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any


_current_context: ContextVar["LogContext | None"] = ContextVar(
    "notifier_log_context", default=None
)


@dataclass
class LogContext:
    """Context for log correlation.

    Attributes:
        run_id: Identifier of a single job invocation (16 hex chars)
        job_name: Name of the job being executed (e.g. "confluence-update-notify")
        routing_key: Slack routing key the job delivers to
        extra: Additional context fields to include in logs
    """

    run_id: str | None = None
    job_name: str | None = None
    routing_key: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.run_id is None:
            self.run_id = secrets.token_hex(8)

    def to_dict(self) -> dict[str, Any]:
        """Convert context to dict for log inclusion."""
        result: dict[str, Any] = {}

        if self.run_id:
            result["run_id"] = self.run_id
        if self.job_name:
            result["job_name"] = self.job_name
        if self.routing_key:
            result["routing_key"] = self.routing_key

        return result


def get_current_context() -> LogContext | None:
    """Get the current logging context."""
    return _current_context.get()


def set_current_context(ctx: LogContext | None) -> None:
    """Set the current logging context."""
    _current_context.set(ctx)


class ContextScope:
    """Context manager for scoped logging context.

    Usage:
        with ContextScope(job_name="confluence-update-notify", routing_key="update-notify"):
            logger.info("Fetching changes")
            # All logs in this scope include the job fields
    """

    def __init__(
        self,
        run_id: str | None = None,
        job_name: str | None = None,
        routing_key: str | None = None,
        **extra: Any,
    ):
        self._run_id = run_id
        self._job_name = job_name
        self._routing_key = routing_key
        self._extra = extra
        self._token: Any = None

    def __enter__(self) -> LogContext:
        parent = get_current_context()

        # A nested scope keeps the parent's run id unless one is given
        run_id = self._run_id
        if run_id is None and parent:
            run_id = parent.run_id

        new_context = LogContext(
            run_id=run_id,
            job_name=self._job_name or (parent.job_name if parent else None),
            routing_key=self._routing_key or (parent.routing_key if parent else None),
            extra=self._extra,
        )

        self._token = _current_context.set(new_context)
        return new_context

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        _current_context.reset(self._token)


def context_from_env() -> LogContext:
    """Create a context from environment variables.

    Looks for:
        - NOTIFIER_RUN_ID: Run identifier supplied by the trigger
        - NOTIFIER_JOB: Job name
    """
    return LogContext(
        run_id=os.environ.get("NOTIFIER_RUN_ID") or None,
        job_name=os.environ.get("NOTIFIER_JOB") or None,
    )
