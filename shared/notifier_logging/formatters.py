"""
Log formatters for notifier_logging.

Provides a JSON formatter for serverless hosts (GCP, AWS Lambda, Apps Script
style log sinks) and a human-readable formatter for terminals.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any


# LogRecord attributes that are never copied into "extra"
_STANDARD_ATTRS = {
    "name",
    "msg",
    "args",
    "created",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "stack_info",
    "exc_info",
    "exc_text",
    "thread",
    "threadName",
    "message",
    "taskName",
    "run_id",
    "job_name",
    "routing_key",
}

_CONTEXT_FIELDS = ("run_id", "job_name", "routing_key")


class JsonFormatter(logging.Formatter):
    """JSON formatter for structured log sinks.

    Output format:
        {
            "timestamp": "2025-11-28T12:34:56.789Z",
            "severity": "INFO",
            "message": "Dispatched notifications",
            "service": "confluence-notifier",
            "context": {"job_name": "confluence-update-notify", "run_id": "..."},
            "extra": {"count": 3}
        }
    """

    SEVERITY_MAP = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        logging.WARNING: "WARNING",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
    }

    def __init__(
        self,
        service: str = "confluence-notifier",
        environment: str | None = None,
        include_extra: bool = True,
    ):
        super().__init__()
        self.service = service
        self.environment = environment
        self.include_extra = include_extra

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as JSON."""
        log_entry: dict[str, Any] = {
            "timestamp": self._format_timestamp(record),
            "severity": self.SEVERITY_MAP.get(record.levelno, "DEFAULT"),
            "message": record.getMessage(),
            "service": self.service,
        }

        if self.environment:
            log_entry["environment"] = self.environment

        if record.name and record.name != self.service:
            log_entry["logger"] = record.name

        context_fields = {
            name: getattr(record, name)
            for name in _CONTEXT_FIELDS
            if getattr(record, name, None)
        }
        if context_fields:
            log_entry["context"] = context_fields

        if self.include_extra:
            extra = {
                key: value
                for key, value in record.__dict__.items()
                if key not in _STANDARD_ATTRS and not key.startswith("_")
            }
            if extra:
                log_entry["extra"] = extra

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        if record.levelno >= logging.WARNING:
            log_entry["sourceLocation"] = {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            }

        return json.dumps(log_entry, default=str, ensure_ascii=False)

    def _format_timestamp(self, record: logging.LogRecord) -> str:
        """Format timestamp in ISO 8601 format with UTC timezone."""
        dt = datetime.fromtimestamp(record.created, tz=timezone.utc)
        return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{int(dt.microsecond / 1000):03d}Z"


class ConsoleFormatter(logging.Formatter):
    """Human-readable console formatter.

    Output format:
        2025-11-28 12:34:56 [INFO    ] confluence-notifier: Dispatched notifications (job=confluence-update-notify count=3)
    """

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(
        self,
        service: str = "confluence-notifier",
        use_colors: bool | None = None,
        show_fields: bool = True,
    ):
        super().__init__()
        self.service = service
        self.use_colors = use_colors if use_colors is not None else self._detect_color_support()
        self.show_fields = show_fields

    def _detect_color_support(self) -> bool:
        if not hasattr(sys.stderr, "isatty") or not sys.stderr.isatty():
            return False
        return not os.environ.get("NO_COLOR")

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record for console output."""
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")

        level = record.levelname
        if self.use_colors:
            level = f"{self.COLORS.get(level, '')}{level:8}{self.RESET}"
        else:
            level = f"{level:8}"

        message = f"{timestamp} [{level}] {self.service}: {record.getMessage()}"

        if self.show_fields:
            parts = []
            job_name = getattr(record, "job_name", None)
            if job_name:
                parts.append(f"job={job_name}")
            for key, value in record.__dict__.items():
                if key not in _STANDARD_ATTRS and not key.startswith("_"):
                    parts.append(f"{key}={value}")
            if parts:
                fields = " ".join(parts)
                message += f" \033[90m({fields})\033[0m" if self.use_colors else f" ({fields})"

        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)

        return message
