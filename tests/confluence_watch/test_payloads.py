"""
Tests for confluence_watch.payloads module.
"""

from datetime import datetime, timedelta, timezone

from confluence_watch.confluence import ChangeRecord, Version
from confluence_watch.payloads import (
    DEFAULT_HEADER_TEXT,
    diff_url,
    escape_mrkdwn,
    page_url,
    summary_entry,
    to_error_payload,
    to_summary_payload,
    to_update_payload,
)


BASE_URL = "https://wiki.example.com/wiki"
JST = timezone(timedelta(hours=9))
WHEN = datetime(2024, 1, 15, 1, 5, tzinfo=timezone.utc)


def record(page_id: str = "123", number: int | None = 3, title: str = "Design Doc") -> ChangeRecord:
    version = Version(number=number, when=WHEN, by="Alice") if number is not None else None
    return ChangeRecord(id=page_id, title=title, version=version)


def fields_of(payload: dict) -> list[str]:
    return [field["text"] for field in payload["blocks"][1]["fields"]]


class TestUrls:
    """Tests for link construction."""

    def test_page_url(self):
        """Test the permalink format."""
        assert page_url(BASE_URL, "123") == f"{BASE_URL}/pages/viewpage.action?pageId=123"

    def test_diff_url(self):
        """Test the diff link carries original and revised versions."""
        assert diff_url(BASE_URL, "123", 2, 3) == (
            f"{BASE_URL}/pages/diffpagesbyversion.action"
            "?pageId=123&originalVersion=2&revisedVersion=3"
        )


class TestToUpdatePayload:
    """Tests for to_update_payload."""

    def test_header(self):
        """Test the header block uses the configured text."""
        payload = to_update_payload(record(), BASE_URL, header_text="Wiki updates")
        assert payload["blocks"][0] == {
            "type": "header",
            "text": {"type": "plain_text", "text": "Wiki updates"},
        }

    def test_default_header(self):
        """Test the default header text."""
        payload = to_update_payload(record(), BASE_URL)
        assert payload["blocks"][0]["text"]["text"] == DEFAULT_HEADER_TEXT

    def test_diff_link_for_later_versions(self):
        """Test version N links the diff from N-1 to N."""
        page_field, _ = fields_of(to_update_payload(record(number=3), BASE_URL))
        assert page_field == (
            f"*Page:*\n<{BASE_URL}/pages/viewpage.action?pageId=123|Design Doc> "
            f"(<{BASE_URL}/pages/diffpagesbyversion.action"
            "?pageId=123&originalVersion=2&revisedVersion=3|diff>)"
        )

    def test_no_diff_for_first_version(self):
        """Test a new page has no diff link."""
        page_field, _ = fields_of(to_update_payload(record(number=1), BASE_URL))
        assert "diffpagesbyversion" not in page_field
        assert page_field == f"*Page:*\n<{BASE_URL}/pages/viewpage.action?pageId=123|Design Doc>"

    def test_title_with_markup_is_escaped(self):
        """Test a title containing link syntax stays inside the link text."""
        page_field, _ = fields_of(to_update_payload(record(number=1, title="Q&A <internal> notes"), BASE_URL))
        assert page_field == (
            f"*Page:*\n<{BASE_URL}/pages/viewpage.action?pageId=123|Q&amp;A &lt;internal&gt; notes>"
        )

    def test_updated_by_and_at(self):
        """Test editor and time are rendered in the display zone."""
        _, meta = fields_of(to_update_payload(record(), BASE_URL, zone=JST))
        assert meta == "*Updated by:* Alice\n*Updated at:* 2024/01/15 10:05"

    def test_missing_version_renders_unknown(self):
        """Test a record without version renders unknown and no diff."""
        page_field, meta = fields_of(to_update_payload(record(number=None), BASE_URL))
        assert "diff" not in page_field
        assert meta == "*Updated by:* unknown\n*Updated at:* unknown"


class TestToSummaryPayload:
    """Tests for to_summary_payload."""

    def test_count_line(self):
        """Test the count section lists every record."""
        payload = to_summary_payload([record("1"), record("2", number=None)], {}, BASE_URL)
        assert payload["blocks"][1]["text"]["text"] == "2 pages updated this period"

    def test_diff_from_original_version(self):
        """Test the diff range starts at the recorded version."""
        entry = summary_entry(record("123", number=5), 2, BASE_URL)
        assert entry == (
            f"- <{BASE_URL}/pages/viewpage.action?pageId=123|Design Doc> "
            f"(<{BASE_URL}/pages/diffpagesbyversion.action"
            "?pageId=123&originalVersion=2&revisedVersion=5|(ver2→5)>)"
        )

    def test_unknown_page_defaults_to_version_one(self):
        """Test pages missing from the version map diff from version 1."""
        payload = to_summary_payload([record("9", number=4)], {}, BASE_URL)
        text = payload["blocks"][2]["elements"][0]["text"]
        assert "originalVersion=1&revisedVersion=4" in text
        assert "(ver1→4)" in text

    def test_no_diff_when_unchanged_from_original(self):
        """Test no diff when the current version equals the recorded one."""
        entry = summary_entry(record("1", number=3), 3, BASE_URL)
        assert "diffpagesbyversion" not in entry

    def test_no_diff_for_first_version(self):
        """Test a version 1 page has no diff."""
        assert "diffpagesbyversion" not in summary_entry(record("1", number=1), 1, BASE_URL)

    def test_no_diff_without_version(self):
        """Test a record without version still gets a page entry."""
        entry = summary_entry(record("1", number=None), 1, BASE_URL)
        assert entry == f"- <{BASE_URL}/pages/viewpage.action?pageId=1|Design Doc>"

    def test_entry_title_is_escaped(self):
        """Test summary entries escape titles like single notifications do."""
        entry = summary_entry(record("1", number=None, title="a > b"), 1, BASE_URL)
        assert entry == f"- <{BASE_URL}/pages/viewpage.action?pageId=1|a &gt; b>"

    def test_header_title(self):
        """Test the header carries the summary title."""
        payload = to_summary_payload([record()], {}, BASE_URL, title="Weekly digest")
        assert payload["blocks"][0]["text"]["text"] == "Weekly digest"

    def test_entries_split_into_context_blocks(self):
        """Test more than ten entries are spread over several context blocks."""
        records = [record(str(i)) for i in range(12)]
        payload = to_summary_payload(records, {}, BASE_URL)
        contexts = [block for block in payload["blocks"] if block["type"] == "context"]
        assert [len(block["elements"]) for block in contexts] == [10, 2]


class TestToErrorPayload:
    """Tests for to_error_payload."""

    def test_names_job_and_error(self):
        """Test the report names the job and the exception."""
        payload = to_error_payload("confluence-update-notify", RuntimeError("API Error"))
        assert payload["blocks"][0]["text"]["text"] == "confluence-update-notify failed"
        assert "RuntimeError" in payload["blocks"][1]["text"]["text"]
        assert "API Error" in payload["blocks"][1]["text"]["text"]

    def test_empty_message_uses_type(self):
        """Test an exception without message still renders."""
        payload = to_error_payload("job", KeyError())
        assert "KeyError" in payload["blocks"][1]["text"]["text"]

    def test_detail_is_escaped(self):
        """Test markup in an error body cannot break the message."""
        payload = to_error_payload("job", RuntimeError("<html>bad</html>"))
        assert "```&lt;html&gt;bad&lt;/html&gt;```" in payload["blocks"][1]["text"]["text"]


class TestEscapeMrkdwn:
    """Tests for escape_mrkdwn."""

    def test_control_characters(self):
        """Test ampersand and angle brackets become entities."""
        assert escape_mrkdwn("R&D <draft> notes") == "R&amp;D &lt;draft&gt; notes"

    def test_ampersand_escaped_first(self):
        """Test existing entities are not left ambiguous."""
        assert escape_mrkdwn("&lt;") == "&amp;lt;"

    def test_plain_text_unchanged(self):
        """Test ordinary titles pass through."""
        assert escape_mrkdwn("Design Doc | v2") == "Design Doc | v2"
