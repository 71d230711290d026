"""
Service-specific configuration classes.

Each config class implements the BaseConfig interface, providing:
- Validation of configuration values
- Safe serialization with secret masking
- Loading from environment variables and config files

Available configs:
- ConfluenceConfig: Confluence URL, token and per-job page selection
- SlackConfig: Webhook routes and message settings
- ScheduleConfig: Job execution-time policies
- NotifierConfig: Data directory, display time zone and HTTP transport
"""

from .confluence import ConfluenceConfig, JobPageConfig
from .notifier import NotifierConfig
from .schedule import ScheduleConfig
from .slack import SlackConfig


__all__ = [
    "ConfluenceConfig",
    "JobPageConfig",
    "NotifierConfig",
    "ScheduleConfig",
    "SlackConfig",
]
