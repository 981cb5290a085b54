"""Unit tests for infrastructure.logging.formatters module.

Tests cover:
- mask_sensitive_data processor
- truncate_large_values processor
"""

import pytest

from infrastructure.logging.formatters import (
    SENSITIVE_PATTERNS,
    mask_sensitive_data,
    truncate_large_values,
)


@pytest.mark.unit
class TestMaskSensitiveData:
    """Test suite for mask_sensitive_data processor factory."""

    def test_masks_credentials_case_insensitively(self):
        """Keys containing a sensitive fragment are redacted."""
        processor = mask_sensitive_data()
        event_dict = {"event": "auth", "Authorization": "Bearer abc", "ID_TOKEN": "x"}

        result = processor(None, "info", event_dict)

        assert result["Authorization"] == "***REDACTED***"
        assert result["ID_TOKEN"] == "***REDACTED***"
        assert result["event"] == "auth"

    def test_device_tokens_are_not_masked(self):
        """Push device tokens stay visible for delivery troubleshooting."""
        processor = mask_sensitive_data()

        result = processor(None, "warning", {"device_token": "ExponentPushToken[x]"})

        assert result["device_token"] == "ExponentPushToken[x]"
        assert "token" not in SENSITIVE_PATTERNS

    def test_none_values_are_kept(self):
        """A None secret has nothing to hide."""
        processor = mask_sensitive_data()

        assert processor(None, "info", {"password": None})["password"] is None

    def test_additional_patterns(self):
        """Extra patterns extend the defaults."""
        processor = mask_sensitive_data(mask_value="[x]", additional_patterns=frozenset({"phone"}))

        result = processor(None, "info", {"customer_phone": "555", "password": "p"})

        assert result == {"customer_phone": "[x]", "password": "[x]"}


@pytest.mark.unit
class TestTruncateLargeValues:
    """Test suite for truncate_large_values processor factory."""

    def test_truncates_long_strings(self):
        """Strings over the limit are cut with a marker."""
        processor = truncate_large_values(max_length=10)

        result = processor(None, "info", {"body": "x" * 25, "count": 25})

        assert result["body"] == "x" * 10 + "...[truncated, 25 chars total]"
        assert result["count"] == 25

    def test_short_strings_untouched(self):
        """Strings within the limit are unchanged."""
        processor = truncate_large_values(max_length=10)

        assert processor(None, "info", {"body": "short"})["body"] == "short"
