"""Unit tests for infrastructure.logging.formatters module.

Tests cover:
- mask_sensitive_data() default and additional patterns
- truncate_large_values() length limits
"""

import pytest

from infrastructure.logging.formatters import (
    SENSITIVE_PATTERNS,
    mask_sensitive_data,
    truncate_large_values,
)
from infrastructure.logging.setup import CONTACT_PATTERNS


@pytest.mark.unit
class TestMaskSensitiveData:
    """Test suite for the masking processor."""

    def test_masks_credentials(self):
        """Provider credentials are redacted."""
        processor = mask_sensitive_data()

        result = processor(None, "info", {"event": "x", "whatsapp_api_key": "abc"})

        assert result["whatsapp_api_key"] == "***REDACTED***"
        assert result["event"] == "x"

    def test_contact_patterns_mask_phone_and_email(self):
        """Contact details are redacted when contact patterns are added."""
        processor = mask_sensitive_data(additional_patterns=CONTACT_PATTERNS)

        result = processor(
            None,
            "info",
            {"recipient_phone": "+96170123456", "email": "a@b.c", "channel": "email"},
        )

        assert result["recipient_phone"] == "***REDACTED***"
        assert result["email"] == "***REDACTED***"
        assert result["channel"] == "email"

    def test_none_values_are_kept(self):
        """None values are left alone so missing data stays visible."""
        processor = mask_sensitive_data()

        assert processor(None, "info", {"token": None})["token"] is None

    def test_custom_mask_value(self):
        """A custom mask string is used."""
        processor = mask_sensitive_data(mask_value="[hidden]")

        assert processor(None, "info", {"password": "p"})["password"] == "[hidden]"

    def test_default_patterns_do_not_include_contacts(self):
        """Contact masking is opt-in."""
        assert "phone" not in SENSITIVE_PATTERNS


@pytest.mark.unit
class TestTruncateLargeValues:
    """Test suite for the truncation processor."""

    def test_truncates_long_strings(self):
        """Long values are cut and annotated with their length."""
        processor = truncate_large_values(max_length=10)

        result = processor(None, "info", {"body": "x" * 25})

        assert result["body"] == "x" * 10 + "...[truncated, 25 chars total]"

    def test_short_and_non_string_values_untouched(self):
        """Short strings and other types pass through."""
        processor = truncate_large_values(max_length=10)

        result = processor(None, "info", {"body": "short", "count": 12345678901})

        assert result == {"body": "short", "count": 12345678901}
