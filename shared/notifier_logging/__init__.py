"""
notifier_logging - Structured logging for the Confluence notifier.

Usage:
    from notifier_logging import get_logger, ContextScope

    logger = get_logger("confluence-jobs")

    with ContextScope(job_name="confluence-update-notify", routing_key="update-notify"):
        logger.info("Fetched changes", count=3)

Console output is used on long-running hosts; JSON lines are emitted on
serverless hosts where the platform collects stderr.
"""

from .context import (
    ContextScope,
    LogContext,
    context_from_env,
    get_current_context,
    set_current_context,
)
from .formatters import ConsoleFormatter, JsonFormatter
from .logger import NotifierLogger, detect_environment, get_logger, resolve_level


__all__ = [
    "ConsoleFormatter",
    "ContextScope",
    "JsonFormatter",
    "LogContext",
    "NotifierLogger",
    "context_from_env",
    "detect_environment",
    "get_current_context",
    "get_logger",
    "resolve_level",
    "set_current_context",
]
