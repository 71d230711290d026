"""
Configuration framework for the Confluence notifier.

This module provides:
- BaseConfig: Abstract base class for service configurations
- ValidationResult: Result of configuration validation
- ConfigurationError: Raised when required settings are missing or invalid
- Settings: Every service config, loaded and validated together

Usage:
    from notifier_config import Settings

    settings = Settings.load()
    settings.require_all()  # raises ConfigurationError naming the bad keys
"""

from .base import BaseConfig, ConfigStatus, ConfigurationError, ValidationResult
from .configs import (
    ConfluenceConfig,
    JobPageConfig,
    NotifierConfig,
    ScheduleConfig,
    SlackConfig,
)
from .settings import AggregateValidationResult, Settings


__all__ = [
    "AggregateValidationResult",
    "BaseConfig",
    "ConfigStatus",
    "ConfigurationError",
    "ConfluenceConfig",
    "JobPageConfig",
    "NotifierConfig",
    "ScheduleConfig",
    "Settings",
    "SlackConfig",
    "ValidationResult",
]
