"""
Slack configuration for notification delivery.

Loads configuration from:
1. Environment variables (highest priority)
2. ~/.config/confluence-notifier/secrets.env (webhook URLs are secrets)

Settings:
    SLACK_WEBHOOK_URLS  JSON: {"update-notify": "https://hooks.slack.com/...", ...}
    SLACK_WEBHOOK_URL   Legacy single webhook, used as the DEFAULT route
    SLACK_HEADER_TEXT   Header of per-page notifications
    SLACK_MAX_WORKERS   Concurrent webhook posts per run (1 = sequential)
"""

from dataclasses import dataclass, field
from typing import Any

from confluence_watch.routes import DEFAULT_ROUTE

from ..base import BaseConfig, ValidationResult
from ..utils import get_setting, load_json_setting, load_secrets, safe_int
from ..validators import mask_url, validate_url


DEFAULT_HEADER_TEXT = "Confluence-Slack Notification"


@dataclass
class SlackConfig(BaseConfig):
    """Configuration for Slack incoming webhooks.

    Attributes:
        webhook_urls: Routing key -> webhook URL
        header_text: Header for update/create notifications
        max_workers: Number of webhook posts issued concurrently
    """

    webhook_urls: dict[str, str] = field(default_factory=dict)
    header_text: str = DEFAULT_HEADER_TEXT
    max_workers: int = 1

    required_keys = ("SLACK_WEBHOOK_URLS",)

    def validate(self) -> ValidationResult:
        """Validate Slack configuration."""
        errors: list[str] = []
        warnings: list[str] = []

        if not self.webhook_urls:
            errors.append("SLACK_WEBHOOK_URLS (or SLACK_WEBHOOK_URL) is not set")

        for route, url in self.webhook_urls.items():
            is_valid, error = validate_url(url, require_https=True)
            if not is_valid:
                errors.append(f"webhook for route '{route}': {error}")

        if self.max_workers < 1:
            errors.append(f"SLACK_MAX_WORKERS must be at least 1, got {self.max_workers}")

        if errors:
            return ValidationResult.invalid(errors, warnings)

        return ValidationResult.valid(warnings)

    def to_dict(self) -> dict[str, Any]:
        """Return config with webhook paths masked."""
        return {
            "webhook_urls": {route: mask_url(url) for route, url in self.webhook_urls.items()},
            "header_text": self.header_text,
            "max_workers": self.max_workers,
        }

    @classmethod
    def from_env(cls) -> "SlackConfig":
        """Load Slack configuration.

        SLACK_WEBHOOK_URLS must be a JSON object of string URLs; if it is
        missing or malformed, SLACK_WEBHOOK_URL becomes the DEFAULT route.
        """
        secrets = load_secrets()
        config = cls()

        routes = load_json_setting(get_setting("SLACK_WEBHOOK_URLS", secrets))
        if isinstance(routes, dict) and all(
            isinstance(key, str) and isinstance(value, str) for key, value in routes.items()
        ):
            config.webhook_urls = dict(routes)
        else:
            legacy_url = get_setting("SLACK_WEBHOOK_URL", secrets)
            if legacy_url:
                config.webhook_urls = {DEFAULT_ROUTE: legacy_url}

        config.header_text = get_setting("SLACK_HEADER_TEXT", secrets, DEFAULT_HEADER_TEXT)
        config.max_workers = safe_int(get_setting("SLACK_MAX_WORKERS", secrets), 1)

        return config
