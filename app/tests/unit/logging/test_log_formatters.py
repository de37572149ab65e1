"""Unit tests for structlog processors."""

import pytest

from herald.logging.formatters import (
    add_app_info,
    mask_sensitive_data,
    truncate_large_values,
)


@pytest.mark.unit
class TestMaskSensitiveData:
    """Tests for credential masking."""

    def test_masks_sensitive_keys(self):
        processor = mask_sensitive_data()

        event = processor(
            None,
            "info",
            {
                "event": "channel_registered",
                "api_key": "re_123",
                "webhook_url": "https://hooks.example.com/secret",
                "channel": "email",
            },
        )

        assert event["api_key"] == "***REDACTED***"
        assert event["webhook_url"] == "***REDACTED***"
        assert event["channel"] == "email"
        assert event["event"] == "channel_registered"

    def test_masks_nested_dicts(self):
        processor = mask_sensitive_data()

        event = processor(None, "info", {"config": {"auth_token": "t", "region": "ca"}})

        assert event["config"] == {"auth_token": "***REDACTED***", "region": "ca"}

    def test_none_values_left_alone(self):
        processor = mask_sensitive_data()

        event = processor(None, "info", {"api_key": None})

        assert event["api_key"] is None

    def test_additional_patterns(self):
        processor = mask_sensitive_data(mask_value="xxx", additional_patterns=frozenset({"phone"}))

        event = processor(None, "info", {"phone_number": "+15555550100"})

        assert event["phone_number"] == "xxx"


@pytest.mark.unit
class TestOtherProcessors:
    """Tests for app info and truncation processors."""

    def test_add_app_info(self):
        processor = add_app_info("herald", app_version="1.2.3")

        event = processor(None, "info", {"event": "x"})

        assert event["app_name"] == "herald"
        assert event["app_version"] == "1.2.3"

    def test_truncate_large_values(self):
        processor = truncate_large_values(max_length=10)

        event = processor(None, "info", {"body": "a" * 50, "short": "ok"})

        assert event["body"] == "a" * 10 + "...[truncated, 50 chars total]"
        assert event["short"] == "ok"
