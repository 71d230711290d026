"""
Confluence content search client.

Finds pages under a job's root pages through the CQL search endpoint and
follows ``_links.next`` until the result set is exhausted. Callers only
ever see complete result sets: any failed page aborts the whole fetch.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from urllib.parse import quote, urlencode

from notifier_logging import get_logger

from .errors import ConfluenceApiError, TransportError
from .timefmt import DISPLAY_FORMAT, parse_instant
from .transport import HttpTransport


logger = get_logger("confluence-client")

SEARCH_PATH = "/rest/api/content/search"
CONTENT_PATH = "/rest/api/content"


@dataclass(frozen=True)
class Version:
    """Version block of a Confluence page.

    Attributes:
        number: Version number, 1 for a newly created page
        when: Time the version was saved
        by: Display name of the editor
    """

    number: int | None = None
    when: datetime | None = None
    by: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Version":
        number = data.get("number")
        by = data.get("by")
        return cls(
            number=number if isinstance(number, int) and not isinstance(number, bool) else None,
            when=parse_instant(data.get("when")),
            by=by.get("displayName") if isinstance(by, dict) else None,
        )


@dataclass(frozen=True)
class ChangeRecord:
    """A page returned by the search endpoint.

    ``version`` is None when the API omits it; every consumer renders
    that as unknown rather than failing.
    """

    id: str
    title: str = ""
    type: str = "page"
    version: Version | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "ChangeRecord":
        version = data.get("version")
        return cls(
            id=str(data.get("id", "")),
            title=str(data.get("title", "")),
            type=str(data.get("type", "page")),
            version=Version.from_api(version) if isinstance(version, dict) else None,
        )

    @property
    def version_number(self) -> int | None:
        return self.version.number if self.version else None

    @property
    def modified_at(self) -> datetime | None:
        return self.version.when if self.version else None


@dataclass
class SearchPage:
    """One page of search results."""

    results: list[ChangeRecord]
    base_url: str
    next_link: str | None = None


@dataclass
class ChangeSet:
    """Every record of a fetch, with the base URL for building links."""

    items: list[ChangeRecord] = field(default_factory=list)
    base_url: str = ""

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)


class ConfluenceClient:
    """Client for one job's slice of a Confluence space.

    Usage:
        client = ConfluenceClient(base_url, token, "ENG", ["123"], transport)
        changes = client.fetch_changes(since)
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        space_key: str,
        root_page_ids: list[str] | tuple[str, ...],
        transport: HttpTransport,
        timeout: float = 30,
        display_zone: timezone = timezone.utc,
    ):
        """Initialize the client.

        Args:
            base_url: Confluence base URL including any context path
            token: Personal access token
            space_key: Space to search
            root_page_ids: Pages whose descendants are watched
            transport: HTTP transport
            timeout: Request timeout in seconds
            display_zone: Zone the lastModified clause is rendered in
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.space_key = space_key
        self.root_page_ids = tuple(root_page_ids)
        self.transport = transport
        self.timeout = timeout
        self.display_zone = display_zone

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/json",
        }

    def build_cql(self, extra: str = "") -> str:
        """Build the CQL query selecting this job's pages.

        Args:
            extra: Clause appended after the page filter (``AND`` is added)

        Returns:
            CQL string such as
            ``type=page AND space=ENG AND (ancestor=1 OR ancestor=2) AND ...``
        """
        clauses = ["type=page", f"space={self.space_key}"]
        if self.root_page_ids:
            ancestors = " OR ".join(f"ancestor={page_id}" for page_id in self.root_page_ids)
            clauses.append(f"({ancestors})")
        cql = " AND ".join(clauses)
        if extra:
            cql = f"{cql} AND {extra}"
        return cql

    def resolve_link(self, link: str) -> str:
        """Turn a ``_links.next`` value into an absolute URL."""
        if link.startswith(("http://", "https://")):
            return link
        return f"{self.base_url}{link}"

    def _get_json(self, url: str) -> dict[str, Any]:
        try:
            response = self.transport.request("GET", url, headers=self.headers, timeout=self.timeout)
        except TransportError as e:
            raise ConfluenceApiError(f"Confluence request failed: {e}", url=url) from e

        if not response.ok:
            raise ConfluenceApiError(
                f"Confluence returned HTTP {response.status}: {response.reason}",
                status=response.status,
                url=url,
            )

        try:
            data = response.json()
        except TransportError as e:
            raise ConfluenceApiError(str(e), status=response.status, url=url) from e

        if not isinstance(data, dict):
            raise ConfluenceApiError("Confluence response is not a JSON object", url=url)
        return data

    def _parse_page(self, data: dict[str, Any]) -> SearchPage:
        links = data.get("_links") or {}
        results = [
            ChangeRecord.from_api(item)
            for item in data.get("results", [])
            if isinstance(item, dict)
        ]
        return SearchPage(
            results=results,
            base_url=str(links.get("base") or self.base_url).rstrip("/"),
            next_link=links.get("next") or None,
        )

    def search_url(self, cql: str, expand: str, limit: int | None = None) -> str:
        params: dict[str, Any] = {"cql": cql, "expand": expand}
        if limit is not None:
            params["limit"] = limit
        return f"{self.base_url}{SEARCH_PATH}?{urlencode(params, quote_via=quote)}"

    def search(self, extra_cql: str = "", expand: str = "version", limit: int | None = None) -> SearchPage:
        """Fetch the first page of a search.

        Raises:
            ConfluenceApiError: On transport failure or non-2xx status
        """
        url = self.search_url(self.build_cql(extra_cql), expand, limit)
        return self._parse_page(self._get_json(url))

    def fetch_all(self, extra_cql: str = "", expand: str = "version", limit: int | None = None) -> ChangeSet:
        """Run a search and follow ``_links.next`` until exhausted.

        Raises:
            ConfluenceApiError: If any page fails; no partial result is returned
        """
        page = self.search(extra_cql, expand, limit)
        change_set = ChangeSet(items=list(page.results), base_url=page.base_url)
        requests_made = 1

        while page.next_link:
            page = self._parse_page(self._get_json(self.resolve_link(page.next_link)))
            change_set.items.extend(page.results)
            requests_made += 1

        logger.info(
            "Fetched search results",
            space=self.space_key,
            results=len(change_set.items),
            requests=requests_made,
        )
        return change_set

    def fetch_changes(self, since: datetime) -> ChangeSet:
        """Fetch pages modified after ``since``, newest first."""
        since_text = since.astimezone(self.display_zone).strftime(DISPLAY_FORMAT)
        extra = f"lastModified > '{since_text}' ORDER BY lastModified DESC"
        return self.fetch_all(extra, expand="history,version")

    def fetch_catalog(self) -> ChangeSet:
        """Fetch every watched page regardless of modification time."""
        return self.fetch_all(expand="version", limit=100)

    def get_page(self, page_id: str, expand: str = "version") -> dict[str, Any]:
        """Fetch a single page by id.

        Raises:
            ConfluenceApiError: On transport failure or non-2xx status
        """
        url = f"{self.base_url}{CONTENT_PATH}/{quote(str(page_id))}?{urlencode({'expand': expand})}"
        return self._get_json(url)
