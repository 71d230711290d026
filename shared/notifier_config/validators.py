"""
Reusable validation functions for configuration values.

This module provides validators for common configuration patterns:
- URLs (HTTP/HTTPS)
- Schedule values (hours, weekdays)
- Secret masking utilities
"""

from urllib.parse import urlparse


def validate_url(url: str, *, require_https: bool = True) -> tuple[bool, str | None]:
    """Validate a URL.

    Args:
        url: The URL to validate
        require_https: If True, only HTTPS URLs are valid (default: True)

    Returns:
        Tuple of (is_valid, error_message). error_message is None if valid.
    """
    if not url:
        return False, "URL is empty"

    try:
        parsed = urlparse(url)
    except ValueError as e:
        return False, f"Invalid URL format: {e}"

    if not parsed.scheme:
        return False, "URL missing scheme (http:// or https://)"

    if not parsed.netloc:
        return False, "URL missing host"

    if parsed.scheme not in ("http", "https"):
        return False, f"URL scheme must be http or https, got {parsed.scheme}"

    if require_https and parsed.scheme != "https":
        return False, f"URL must use HTTPS, got {parsed.scheme}://"

    return True, None


def validate_non_empty(value: str | None, field_name: str) -> tuple[bool, str | None]:
    """Validate that a value is not empty or None.

    Args:
        value: The value to check
        field_name: Name of the field for error messages

    Returns:
        Tuple of (is_valid, error_message). error_message is None if valid.
    """
    if value is None:
        return False, f"{field_name} is not set"

    if not value.strip():
        return False, f"{field_name} is empty"

    return True, None


def validate_hour(hour: object, field_name: str) -> tuple[bool, str | None]:
    """Validate an hour of day (0-23)."""
    if not isinstance(hour, int) or isinstance(hour, bool):
        return False, f"{field_name} must be an integer, got: {hour!r}"
    if hour < 0 or hour > 23:
        return False, f"{field_name} must be between 0 and 23, got: {hour}"
    return True, None


def validate_weekdays(weekdays: object, field_name: str) -> tuple[bool, str | None]:
    """Validate a list of weekday numbers (0=Sunday ... 6=Saturday)."""
    if not isinstance(weekdays, (list, tuple, set, frozenset)):
        return False, f"{field_name} must be a list of weekday numbers"
    for day in weekdays:
        if not isinstance(day, int) or isinstance(day, bool) or day < 0 or day > 6:
            return False, f"{field_name} entries must be integers 0-6, got: {day!r}"
    return True, None


def mask_secret(value: str | None, *, visible_chars: int = 4) -> str:
    """Mask a secret value for safe display.

    Args:
        value: The secret value to mask (can be None)
        visible_chars: Number of characters to show at the start (default: 4)

    Returns:
        Masked string like "abcd****" or "[EMPTY]" if value is empty/None
    """
    if not value:
        return "[EMPTY]"

    if len(value) <= visible_chars:
        return "*" * len(value)

    return value[:visible_chars] + "*" * (len(value) - visible_chars)


def mask_url(url: str | None) -> str:
    """Mask the path of a URL, keeping scheme and host.

    Slack webhook URLs carry their secret in the path.
    """
    if not url:
        return "[EMPTY]"
    parsed = urlparse(url)
    if not parsed.netloc:
        return mask_secret(url)
    return f"{parsed.scheme}://{parsed.netloc}/{mask_secret(parsed.path.lstrip('/'))}"
