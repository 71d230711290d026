"""
NotifierLogger - Structured logging for the notifier jobs.

Wraps the standard library logger so call sites can attach structured
fields as keyword arguments and pick up the current run context.
"""

import logging
import os
import sys
from typing import Any

from .context import get_current_context
from .formatters import ConsoleFormatter, JsonFormatter


SERVICE_NAME = "confluence-notifier"


def detect_environment() -> str:
    """Detect the deployment target the process runs on.

    Returns:
        "serverless" on Cloud Run / Cloud Functions / AWS Lambda, else "server".
    """
    if os.environ.get("K_SERVICE") or os.environ.get("FUNCTION_TARGET"):
        return "serverless"
    if os.environ.get("AWS_LAMBDA_FUNCTION_NAME"):
        return "serverless"
    return "server"


def resolve_level(level: int | str | None) -> int | None:
    """Translate a level name such as "debug" into its number.

    Returns:
        The numeric level, or None for names the logging module does not know
    """
    if isinstance(level, int):
        return level
    if not level:
        return None
    return logging.getLevelNamesMapping().get(level.strip().upper())


class NotifierLogger:
    """Structured logger.

    Usage:
        from notifier_logging import get_logger

        logger = get_logger("confluence-client")
        logger.info("Fetched page", page=2, results=25)
    """

    def __init__(self, name: str, level: int | str | None = None):
        self.name = name
        self._logger = logging.getLogger(name)
        # Unknown NOTIFIER_LOG_LEVEL values are rejected by NotifierConfig.validate
        resolved = resolve_level(level or os.environ.get("NOTIFIER_LOG_LEVEL"))
        self._logger.setLevel(resolved if resolved is not None else logging.INFO)
        self._logger.propagate = False

        self._environment = detect_environment()

    def _ensure_handlers(self) -> None:
        """Attach a stderr handler on first use."""
        if self._logger.handlers:
            return

        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(logging.DEBUG)

        # Serverless log sinks parse one JSON document per line
        if self._environment == "serverless":
            handler.setFormatter(JsonFormatter(service=SERVICE_NAME, environment=self._environment))
        else:
            handler.setFormatter(ConsoleFormatter(service=SERVICE_NAME))

        self._logger.addHandler(handler)

    def _get_extra(self, fields: dict[str, Any]) -> dict[str, Any]:
        result: dict[str, Any] = {}

        ctx = get_current_context()
        if ctx:
            result.update(ctx.to_dict())
            result.update(ctx.extra)

        result.update(fields)
        return result

    def _log(self, level: int, msg: str, *args: Any, exc_info: Any = None, **kwargs: Any) -> None:
        self._ensure_handlers()
        self._logger.log(level, msg, *args, exc_info=exc_info, extra=self._get_extra(kwargs))

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args: Any, exc_info: Any = None, **kwargs: Any) -> None:
        self._log(logging.ERROR, msg, *args, exc_info=exc_info, **kwargs)

    def exception(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log an error with the active exception's traceback."""
        self._log(logging.ERROR, msg, *args, exc_info=True, **kwargs)


_loggers: dict[str, NotifierLogger] = {}


def get_logger(name: str, level: int | str | None = None) -> NotifierLogger:
    """Get or create a logger by name.

    Loggers are cached by name, so repeated calls return the same instance.
    """
    if name not in _loggers:
        _loggers[name] = NotifierLogger(name, level)
    return _loggers[name]
