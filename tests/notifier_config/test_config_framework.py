"""
Tests for notifier_config base classes, validators, utils and Settings.
"""

import pytest

from notifier_config import ConfigStatus, ConfigurationError, Settings, ValidationResult
from notifier_config.utils import (
    get_setting,
    load_env_file,
    load_json_setting,
    load_yaml_file,
    safe_int,
)
from notifier_config.validators import (
    mask_secret,
    mask_url,
    validate_hour,
    validate_non_empty,
    validate_url,
    validate_weekdays,
)


class TestValidationResult:
    """Tests for ValidationResult."""

    def test_valid(self):
        """Test a valid result keeps its warnings."""
        result = ValidationResult.valid(["note"])
        assert result.is_valid
        assert result.warnings == ["note"]

    def test_invalid(self):
        """Test an invalid result carries its errors."""
        result = ValidationResult.invalid(["bad"], ["note"])
        assert result.status == ConfigStatus.INVALID
        assert not result.is_valid
        assert result.errors == ["bad"]


class TestValidators:
    """Tests for validator functions."""

    def test_validate_url(self):
        """Test URL validation."""
        assert validate_url("https://example.com") == (True, None)
        assert validate_url("http://example.com", require_https=False) == (True, None)
        assert not validate_url("http://example.com")[0]
        assert not validate_url("example.com")[0]
        assert not validate_url("ftp://example.com", require_https=False)[0]

    def test_validate_non_empty(self):
        """Test empty and whitespace-only values fail."""
        assert validate_non_empty("x", "KEY") == (True, None)
        assert validate_non_empty(None, "KEY") == (False, "KEY is not set")
        assert validate_non_empty("  ", "KEY") == (False, "KEY is empty")

    @pytest.mark.parametrize("hour,ok", [(0, True), (23, True), (-1, False), (24, False), ("8", False), (True, False)])
    def test_validate_hour(self, hour, ok):
        """Test hours must be integers 0-23."""
        assert validate_hour(hour, "start_hour")[0] is ok

    @pytest.mark.parametrize("weekdays,ok", [([0, 6], True), ([], True), ([7], False), ("12", False), ([1.0], False)])
    def test_validate_weekdays(self, weekdays, ok):
        """Test weekdays must be a list of integers 0-6."""
        assert validate_weekdays(weekdays, "weekdays")[0] is ok

    def test_mask_secret(self):
        """Test secrets keep only a short prefix."""
        assert mask_secret("abcdefgh") == "abcd****"
        assert mask_secret("abc") == "***"
        assert mask_secret("") == "[EMPTY]"

    def test_mask_url(self):
        """Test URL paths are masked and hosts kept."""
        assert mask_url("https://hooks.slack.com/abcdefgh") == "https://hooks.slack.com/abcd****"
        assert mask_url(None) == "[EMPTY]"


class TestUtils:
    """Tests for config loading helpers."""

    def test_load_env_file(self, tmp_path):
        """Test .env files are parsed with quotes and comments."""
        path = tmp_path / "secrets.env"
        path.write_text('# comment\nA=1\nB="two words"\nEMPTY\n')
        assert load_env_file(path) == {"A": "1", "B": "two words"}

    def test_load_env_file_missing(self, tmp_path):
        """Test a missing file yields an empty dict."""
        assert load_env_file(tmp_path / "nope.env") == {}

    def test_load_yaml_file(self, tmp_path):
        """Test YAML mappings are loaded."""
        path = tmp_path / "config.yaml"
        path.write_text("a: 1\nb: [x, y]\n")
        assert load_yaml_file(path) == {"a": 1, "b": ["x", "y"]}

    def test_load_yaml_file_invalid(self, tmp_path):
        """Test broken or non-mapping YAML yields an empty dict."""
        path = tmp_path / "config.yaml"
        path.write_text("a: [unclosed\n")
        assert load_yaml_file(path) == {}
        path.write_text("- just\n- a list\n")
        assert load_yaml_file(path) == {}

    def test_get_setting_priority(self, monkeypatch):
        """Test environment wins over secrets, which win over the default."""
        secrets = {"KEY": "file"}
        assert get_setting("KEY", secrets, "default") == "file"
        monkeypatch.setenv("KEY", "env")
        assert get_setting("KEY", secrets, "default") == "env"
        assert get_setting("OTHER", {}, "default") == "default"

    def test_load_json_setting(self):
        """Test JSON settings decode or return None."""
        assert load_json_setting('{"a": 1}') == {"a": 1}
        assert load_json_setting("{bad") is None
        assert load_json_setting("") is None
        assert load_json_setting(None) is None

    def test_safe_int(self):
        """Test integer parsing with fallback."""
        assert safe_int("5") == 5
        assert safe_int("x", 3) == 3
        assert safe_int(None, 7) == 7


class TestSettings:
    """Tests for Settings aggregate."""

    def test_validate_all(self, settings):
        """Test a complete configuration is valid."""
        aggregate = settings.validate_all()
        assert aggregate.all_valid
        assert set(aggregate.results) == {"confluence", "slack", "schedule", "notifier"}

    def test_require_all_names_every_problem(self):
        """Test one error lists every failing setting."""
        with pytest.raises(ConfigurationError) as exc_info:
            Settings.load().require_all()

        message = str(exc_info.value)
        assert "CONFLUENCE_URL" in message
        assert "SLACK_WEBHOOK_URLS" in message
        assert "CONFLUENCE_PAT" in exc_info.value.keys
        assert "SLACK_WEBHOOK_URLS" in exc_info.value.keys

    def test_require_all_rejects_unknown_log_level(self, settings):
        """Test a bad log level stops the run with the setting named."""
        settings.notifier.log_level = "verbose"

        with pytest.raises(ConfigurationError) as exc_info:
            settings.require_all()

        assert "NOTIFIER_LOG_LEVEL" in exc_info.value.keys

    def test_to_dict_masks_secrets(self, settings):
        """Test the combined dict never contains raw secrets."""
        data = settings.to_dict()
        assert "test-pat" not in data["confluence"]["token"]
        masked = data["slack"]["webhook_urls"]["update-notify"]
        assert masked.startswith("https://hooks.slack.com/serv*")
        assert "B001" not in masked

    def test_aggregate_to_dict(self, settings):
        """Test the aggregate result serializes statuses."""
        data = settings.validate_all().to_dict()
        assert data["all_valid"] is True
        assert data["results"]["slack"]["status"] == "valid"
