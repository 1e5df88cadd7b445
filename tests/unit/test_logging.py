"""Unit tests for structured logging."""

from unittest.mock import MagicMock

import structlog

from campaignhub.core.logging import (
    LogContext,
    add_environment_info,
    bind_contextvars,
    clear_contextvars,
    drop_color_message_key,
    get_logger,
    log_database_query,
    log_exception,
    setup_logging,
    unbind_contextvars,
)


class TestProcessors:
    """Tests for custom structlog processors."""

    def test_add_environment_info(self):
        result = add_environment_info(None, "info", {})

        assert "environment" in result

    def test_drop_color_message_key(self):
        result = drop_color_message_key(None, "info", {"color_message": "x", "event": "y"})

        assert result == {"event": "y"}


class TestContextVars:
    """Tests for context binding helpers."""

    def test_bind_and_unbind(self):
        clear_contextvars()
        bind_contextvars(request_id="r1", user_id="u1")
        assert structlog.contextvars.get_contextvars() == {"request_id": "r1", "user_id": "u1"}

        unbind_contextvars("user_id")
        assert structlog.contextvars.get_contextvars() == {"request_id": "r1"}
        clear_contextvars()

    def test_log_context_restores(self):
        clear_contextvars()
        with LogContext(campaign_id="c1"):
            assert structlog.contextvars.get_contextvars()["campaign_id"] == "c1"

        assert "campaign_id" not in structlog.contextvars.get_contextvars()


class TestHelpers:
    """Tests for logging helpers."""

    def test_setup_logging_configures_structlog(self):
        setup_logging(log_level="DEBUG", json_format=True)

        assert structlog.is_configured()
        assert get_logger("campaignhub.test") is not None

    def test_log_database_query(self):
        logger = MagicMock()

        log_database_query(logger, "find_many", "Campaign", 1.234, rows=3)

        logger.debug.assert_called_once_with(
            "database_query", query_type="find_many", table="Campaign", duration_ms=1.23, rows=3
        )

    def test_log_exception(self):
        logger = MagicMock()

        log_exception(logger, ValueError("bad"), path="/v1/campaigns")

        logger.exception.assert_called_once_with(
            "exception_occurred",
            error_type="ValueError",
            error_message="bad",
            path="/v1/campaigns",
        )
