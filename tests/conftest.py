"""
Pytest configuration and shared fixtures for confluence-notifier tests.
"""

import json
import sys
from pathlib import Path
from typing import Any

import pytest


# Add project paths to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "shared"))

from confluence_watch.routes import JobName  # noqa: E402
from confluence_watch.transport import HttpResponse, HttpTransport  # noqa: E402
from notifier_config import (  # noqa: E402
    ConfluenceConfig,
    JobPageConfig,
    NotifierConfig,
    ScheduleConfig,
    Settings,
    SlackConfig,
)
from notifier_logging import set_current_context  # noqa: E402


BASE_URL = "https://wiki.example.com/wiki"

WEBHOOKS = {
    "update-notify": "https://hooks.slack.com/services/T000/B001/update",
    "create-notify": "https://hooks.slack.com/services/T000/B002/create",
    "update-summary": "https://hooks.slack.com/services/T000/B003/summary",
}

# Settings read by the config classes; cleared so the host environment never leaks in
CONFIG_ENV_VARS = (
    "CONFLUENCE_URL",
    "CONFLUENCE_PAT",
    "CONFLUENCE_PAGE_CONFIGS",
    "CONFLUENCE_REQUEST_TIMEOUT",
    "SPACE_KEY",
    "ROOT_PAGE_ID",
    "SLACK_WEBHOOK_URLS",
    "SLACK_WEBHOOK_URL",
    "SLACK_HEADER_TEXT",
    "SLACK_MAX_WORKERS",
    "NOTIFIER_DATA_DIR",
    "NOTIFIER_DISPLAY_UTC_OFFSET",
    "NOTIFIER_TRANSPORT",
    "NOTIFIER_RUN_ID",
    "NOTIFIER_JOB",
    "NOTIFIER_LOG_LEVEL",
    "K_SERVICE",
    "FUNCTION_TARGET",
    "AWS_LAMBDA_FUNCTION_NAME",
)


class FakeTransport(HttpTransport):
    """In-memory transport that records requests and replays canned responses.

    Usage:
        transport.on("GET", "/rest/api/content/search", json={"results": []})
        transport.on("POST", "hooks.slack.com", status=500, body="boom")
    """

    def __init__(self):
        self.requests: list[dict[str, Any]] = []
        self._handlers: list[tuple[str, str, list[Any]]] = []
        self.closed = False

    def on(
        self,
        method: str,
        url_part: str,
        status: int = 200,
        json: Any = None,
        body: str = "",
    ) -> "FakeTransport":
        """Queue a response for requests whose URL contains ``url_part``.

        Responses queued for the same route are returned in order; the last
        one repeats.
        """
        text = body if json is None else _dumps(json)
        return self._add(method, url_part, HttpResponse(status=status, body=text))

    def fail(self, method: str, url_part: str, error: Exception) -> "FakeTransport":
        """Queue an exception for matching requests."""
        return self._add(method, url_part, error)

    def _add(self, method: str, url_part: str, response: Any) -> "FakeTransport":
        for handler_method, handler_url, queue in self._handlers:
            if handler_method == method and handler_url == url_part:
                queue.append(response)
                return self
        self._handlers.append((method, url_part, [response]))
        return self

    def request(self, method, url, headers=None, json_body=None, timeout=30):
        self.requests.append(
            {"method": method, "url": url, "headers": headers or {}, "json": json_body}
        )
        for handler_method, handler_url, queue in self._handlers:
            if handler_method == method and handler_url in url:
                response = queue.pop(0) if len(queue) > 1 else queue[0]
                if isinstance(response, Exception):
                    raise response
                return response
        raise AssertionError(f"Unexpected request: {method} {url}")

    def close(self) -> None:
        self.closed = True

    def sent(self, method: str, url_part: str = "") -> list[dict[str, Any]]:
        """Return recorded requests matching method and URL fragment."""
        return [r for r in self.requests if r["method"] == method and url_part in r["url"]]


def _dumps(data: Any) -> str:
    return json.dumps(data)


def api_page(
    page_id: str,
    title: str | None = None,
    number: int | None = 1,
    when: str | None = "2024-01-15T10:00:00.000+09:00",
    by: str = "Alice",
) -> dict[str, Any]:
    """Build a search result entry as Confluence returns it."""
    page: dict[str, Any] = {"id": page_id, "type": "page", "title": title or f"Page {page_id}"}
    if number is not None:
        version: dict[str, Any] = {"number": number, "by": {"displayName": by}}
        if when is not None:
            version["when"] = when
        page["version"] = version
    return page


def search_response(results: list[dict[str, Any]], next_link: str | None = None) -> dict[str, Any]:
    links: dict[str, Any] = {"base": BASE_URL}
    if next_link:
        links["next"] = next_link
    return {"results": results, "size": len(results), "_links": links}


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep host settings and config files out of every test."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("NOTIFIER_CONFIG_DIR", str(config_dir))
    set_current_context(None)
    yield config_dir
    set_current_context(None)


@pytest.fixture
def config_dir(isolated_env):
    """Directory standing in for ~/.config/confluence-notifier."""
    return isolated_env


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "data"


@pytest.fixture
def settings(data_dir):
    """Complete, valid settings with no execution-time restrictions."""
    page_config = JobPageConfig(space_key="ENG", root_page_ids=("100",))
    return Settings(
        confluence=ConfluenceConfig(
            base_url=BASE_URL,
            token="test-pat",
            page_configs={job.value: page_config for job in JobName},
        ),
        slack=SlackConfig(webhook_urls=dict(WEBHOOKS)),
        schedule=ScheduleConfig(policies={}),
        notifier=NotifierConfig(data_dir=data_dir, display_utc_offset=9.0),
    )


@pytest.fixture
def make_page():
    """Factory for Confluence search result entries."""
    return api_page


@pytest.fixture
def make_search_response():
    """Factory for Confluence search responses."""
    return search_response
