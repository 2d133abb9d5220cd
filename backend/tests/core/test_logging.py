"""
Tests for structured logging configuration.
"""

import logging

import structlog
from structlog.contextvars import get_contextvars

from apps.core.logging import (
    _add_datadog_trace_fields,
    _convert_duration_to_nanoseconds,
    _redact_credentials,
    bind_contextvars,
    clear_contextvars,
    configure_logging,
    get_logger,
)


class TestConfigureLogging:
    def test_json_format(self):
        configure_logging(json_format=True, log_level="INFO")

        assert structlog.get_config()["wrapper_class"] is structlog.stdlib.BoundLogger
        assert logging.getLogger().level == logging.INFO

    def test_console_format(self):
        configure_logging(json_format=False, log_level="DEBUG")

        assert logging.getLogger().level == logging.DEBUG

    def test_httpx_is_quieted(self):
        """httpx request lines would otherwise log admin API URLs at INFO."""
        configure_logging(json_format=True, log_level="DEBUG")

        assert logging.getLogger("httpx").level == logging.WARNING


class TestContextVars:
    def test_bind_with_dotted_keys(self):
        bind_contextvars(**{"usr.id": "42", "usr.email": "jane@example.com"})

        ctx = get_contextvars()
        assert ctx["usr.id"] == "42"
        assert ctx["usr.email"] == "jane@example.com"

    def test_clear_removes_context(self):
        bind_contextvars(correlation_id="abc123")
        clear_contextvars()

        assert get_contextvars() == {}


class TestProcessors:
    def test_correlation_id_renamed_to_trace_id(self):
        event = _add_datadog_trace_fields(None, "info", {"correlation_id": "abc-123"})

        assert event == {"trace_id": "abc-123"}

    def test_duration_ms_converted_to_nanoseconds(self):
        event = _convert_duration_to_nanoseconds(None, "info", {"duration_ms": 150.5})

        assert event == {"duration": 150_500_000}

    def test_credentials_are_redacted(self):
        event = _redact_credentials(
            None,
            "info",
            {"event": "token_fetched", "access_token": "eyJhbGci", "client_secret": "s3cret"},
        )

        assert event == {
            "event": "token_fetched",
            "access_token": "[REDACTED]",
            "client_secret": "[REDACTED]",
        }

    def test_other_keys_untouched(self):
        event = _redact_credentials(None, "info", {"slug": "acme"})

        assert event == {"slug": "acme"}


class TestLogOutput:
    def setup_method(self):
        configure_logging(json_format=True, log_level="DEBUG")

    def test_event_reaches_stdlib(self, caplog):
        logger = get_logger("tests.output")

        with caplog.at_level(logging.DEBUG, logger="tests.output"):
            logger.info("organization_provisioned", slug="acme")

        assert "organization_provisioned" in caplog.text

    def test_exception_is_logged(self, caplog):
        logger = get_logger("tests.exception")

        with caplog.at_level(logging.DEBUG, logger="tests.exception"):
            try:
                raise ValueError("directory unreachable")
            except ValueError:
                logger.exception("reconcile_organization_failed")

        assert caplog.records
        assert caplog.records[0].levelno == logging.ERROR
