"""
Unit Tests for Structured Logging

Tests request-ID context handling, the custom processors and logging setup.
"""

import logging

import pytest
import structlog

from design_system.core.logging.logger import (
    add_log_level_name,
    add_request_id,
    add_timestamp,
    clear_request_id,
    get_logger,
    get_request_id,
    set_request_id,
    setup_logging,
)


@pytest.mark.unit
class TestRequestIdContext:
    def test_set_get_clear(self):
        assert get_request_id() is None

        set_request_id("req-123")
        assert get_request_id() == "req-123"

        clear_request_id()
        assert get_request_id() is None

    def test_processor_adds_request_id(self):
        set_request_id("req-abc")
        event = add_request_id(None, "info", {"event": "hello"})
        assert event["request_id"] == "req-abc"

    def test_processor_skips_missing_request_id(self):
        event = add_request_id(None, "info", {"event": "hello"})
        assert "request_id" not in event


@pytest.mark.unit
class TestProcessors:
    def test_timestamp_is_utc_iso(self):
        event = add_timestamp(None, "info", {})
        assert event["timestamp"].endswith("Z")
        assert "T" in event["timestamp"]

    def test_level_is_uppercased(self):
        assert add_log_level_name(None, "warning", {"level": "warning"})["level"] == "WARNING"

    def test_level_processor_ignores_missing_level(self):
        assert add_log_level_name(None, "info", {"event": "x"}) == {"event": "x"}


@pytest.mark.unit
class TestSetupLogging:
    @pytest.mark.parametrize("log_format", ["json", "console"])
    def test_configures_root_level_and_structlog(self, log_format):
        setup_logging(log_level="WARNING", log_format=log_format)

        assert logging.getLogger().level == logging.WARNING
        assert structlog.is_configured()

        setup_logging(log_level="INFO", log_format="console")

    def test_get_logger_accepts_structured_fields(self):
        setup_logging(log_level="CRITICAL", log_format="json")
        logger = get_logger("tests.logging")

        logger.info("Data loaded", tokens=5, components=2)

        setup_logging(log_level="INFO", log_format="console")
