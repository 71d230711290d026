"""
Confluence configuration for the notifier jobs.

Each job watches one space and one or more root pages (changes anywhere
under those pages are reported). Settings:

    CONFLUENCE_URL           Base URL including the context path, e.g. https://wiki.example.com/wiki
    CONFLUENCE_PAT           Personal access token (sent as a Bearer token)
    CONFLUENCE_PAGE_CONFIGS  JSON: {"<job>": {"spaceKey": "ENG", "rootPageIds": ["123", "456"]}, ...}
    SPACE_KEY, ROOT_PAGE_ID  Legacy single-space settings shared by every job
"""

from dataclasses import dataclass, field
from typing import Any

from confluence_watch.routes import JobName

from ..base import BaseConfig, ConfigurationError, ValidationResult
from ..utils import get_setting, load_json_setting, load_secrets, safe_int
from ..validators import mask_secret, validate_non_empty, validate_url


@dataclass(frozen=True)
class JobPageConfig:
    """Space and root pages watched by one job."""

    space_key: str
    root_page_ids: tuple[str, ...]


def parse_page_configs(raw: Any) -> dict[str, JobPageConfig] | None:
    """Parse the decoded CONFLUENCE_PAGE_CONFIGS value.

    The mapping must have an entry for every job, each with a string
    ``spaceKey`` and a list of string ``rootPageIds``.

    Returns:
        Job name -> JobPageConfig, or None if the value does not have that shape
    """
    if not isinstance(raw, dict):
        return None

    result: dict[str, JobPageConfig] = {}
    for job in JobName:
        entry = raw.get(job.value)
        if not isinstance(entry, dict):
            return None
        space_key = entry.get("spaceKey")
        root_page_ids = entry.get("rootPageIds")
        if not isinstance(space_key, str) or not space_key:
            return None
        if not isinstance(root_page_ids, list) or not all(
            isinstance(page_id, str) for page_id in root_page_ids
        ):
            return None
        result[job.value] = JobPageConfig(space_key, tuple(root_page_ids))

    return result


@dataclass
class ConfluenceConfig(BaseConfig):
    """Configuration for the Confluence content API.

    Attributes:
        base_url: Confluence base URL (page and diff links are built from the API's own base link)
        token: Personal access token
        page_configs: Job name -> watched space and root pages
        request_timeout: HTTP request timeout in seconds
    """

    base_url: str = ""
    token: str = ""
    page_configs: dict[str, JobPageConfig] = field(default_factory=dict)
    request_timeout: int = 30
    used_legacy_settings: bool = False

    required_keys = ("CONFLUENCE_URL", "CONFLUENCE_PAT", "CONFLUENCE_PAGE_CONFIGS")

    def validate(self) -> ValidationResult:
        """Validate Confluence configuration."""
        errors: list[str] = []
        warnings: list[str] = []

        # from_env stores "" for settings that are absent everywhere
        is_valid, error = validate_non_empty(self.base_url or None, "CONFLUENCE_URL")
        if not is_valid:
            errors.append(error)
        else:
            is_valid, error = validate_url(self.base_url, require_https=False)
            if not is_valid:
                errors.append(f"CONFLUENCE_URL: {error}")

        is_valid, error = validate_non_empty(self.token or None, "CONFLUENCE_PAT")
        if not is_valid:
            errors.append(error)

        if not self.page_configs:
            errors.append("CONFLUENCE_PAGE_CONFIGS (or SPACE_KEY and ROOT_PAGE_ID) is not set")
        elif self.used_legacy_settings:
            warnings.append("Using legacy SPACE_KEY/ROOT_PAGE_ID for every job")

        for job_name, page_config in self.page_configs.items():
            if not page_config.root_page_ids:
                warnings.append(f"{job_name}: no root pages, the whole space is watched")

        if errors:
            return ValidationResult.invalid(errors, warnings)

        return ValidationResult.valid(warnings)

    def to_dict(self) -> dict[str, Any]:
        """Return config with secrets masked."""
        return {
            "base_url": self.base_url,
            "token": mask_secret(self.token),
            "page_configs": {
                job_name: {
                    "space_key": page_config.space_key,
                    "root_page_ids": list(page_config.root_page_ids),
                }
                for job_name, page_config in self.page_configs.items()
            },
            "request_timeout": self.request_timeout,
        }

    def page_config_for(self, job_name: str) -> JobPageConfig:
        """Return the space and root pages a job watches.

        Raises:
            ConfigurationError: If the job has no page configuration
        """
        page_config = self.page_configs.get(job_name)
        if page_config is None:
            raise ConfigurationError(
                f"No Confluence page configuration for job '{job_name}'",
                keys=["CONFLUENCE_PAGE_CONFIGS"],
            )
        return page_config

    @classmethod
    def from_env(cls) -> "ConfluenceConfig":
        """Load Confluence configuration.

        Priority:
        1. Environment variables
        2. ~/.config/confluence-notifier/secrets.env

        CONFLUENCE_PAGE_CONFIGS wins when it parses and covers every job;
        otherwise SPACE_KEY / ROOT_PAGE_ID apply to all jobs.
        """
        secrets = load_secrets()
        config = cls()

        config.base_url = get_setting("CONFLUENCE_URL", secrets).rstrip("/")
        config.token = get_setting("CONFLUENCE_PAT", secrets)
        config.request_timeout = safe_int(get_setting("CONFLUENCE_REQUEST_TIMEOUT", secrets), 30)

        page_configs = parse_page_configs(
            load_json_setting(get_setting("CONFLUENCE_PAGE_CONFIGS", secrets))
        )
        if page_configs is None:
            space_key = get_setting("SPACE_KEY", secrets)
            root_page_id = get_setting("ROOT_PAGE_ID", secrets)
            if space_key and root_page_id:
                legacy = JobPageConfig(space_key, (root_page_id,))
                page_configs = {job.value: legacy for job in JobName}
                config.used_legacy_settings = True

        config.page_configs = page_configs or {}
        return config
