"""Testes para config.logging.

Cobre: configure_logging, get_logger, log_fallback,
RequestIdFilter, create_json_formatter.
"""

from __future__ import annotations

import json
import logging
from unittest.mock import MagicMock

import pytest

from config.logging import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    RequestIdFilter,
    configure_logging,
    create_json_formatter,
    get_logger,
    log_fallback,
)
from config.logging.config import DEFAULT_SERVICE_NAME, VALID_LOG_LEVELS


def _record(msg: str = "msg", level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=level,
        pathname="",
        lineno=0,
        msg=msg,
        args=(),
        exc_info=None,
    )


class TestConfigureLogging:
    """Testes para configure_logging."""

    def test_configure_logging_default_level(self) -> None:
        configure_logging()
        assert logging.getLogger().level == logging.INFO

    @pytest.mark.parametrize(
        ("level", "expected"),
        [
            ("DEBUG", logging.DEBUG),
            ("warning", logging.WARNING),
            ("ERROR", logging.ERROR),
        ],
    )
    def test_configure_logging_levels(self, level: str, expected: int) -> None:
        """Nível é case insensitive."""
        configure_logging(level=level)
        assert logging.getLogger().level == expected

    def test_configure_logging_invalid_level_raises(self) -> None:
        with pytest.raises(ValueError, match="Nível de log inválido"):
            configure_logging(level="INVALID")

    def test_configure_logging_replaces_handlers(self) -> None:
        root = logging.getLogger()
        root.handlers = [logging.NullHandler(), logging.NullHandler()]
        configure_logging()
        assert len(root.handlers) == 1

    def test_configure_logging_installs_request_id_filter(self) -> None:
        configure_logging(request_id_getter=lambda: "req_custom")
        handler = logging.getLogger().handlers[0]
        assert any(isinstance(f, RequestIdFilter) for f in handler.filters)

    def test_constants(self) -> None:
        assert {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} == VALID_LOG_LEVELS
        assert DEFAULT_SERVICE_NAME == "crm_bridge"


class TestGetLogger:
    def test_get_logger_returns_named_logger(self) -> None:
        logger = get_logger("test.module")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "test.module"
        assert get_logger("test.module") is logger


class TestLogFallback:
    """Testes para log_fallback."""

    def test_log_fallback_basic(self) -> None:
        logger = MagicMock(spec=logging.Logger)
        log_fallback(logger, "rate_limiter")
        logger.warning.assert_called_once()
        call_args = logger.warning.call_args
        assert call_args[0][0] == "fallback_applied"
        extra = call_args[1]["extra"]
        assert extra["fallback_used"] is True
        assert extra["component"] == "rate_limiter"
        assert "reason" not in extra
        assert "elapsed_ms" not in extra

    def test_log_fallback_with_all_params(self) -> None:
        logger = MagicMock(spec=logging.Logger)
        log_fallback(logger, "replay_guard", reason="store_timeout", elapsed_ms=151.2)
        extra = logger.warning.call_args[1]["extra"]
        assert extra["reason"] == "store_timeout"
        assert extra["elapsed_ms"] == 151.2


class TestRequestIdFilter:
    """Testes para RequestIdFilter."""

    def test_filter_adds_request_id_from_getter(self) -> None:
        filter_ = RequestIdFilter("my_service", lambda: "req_123")
        record = _record()
        assert filter_.filter(record) is True
        assert record.request_id == "req_123"
        assert record.service == "my_service"

    def test_filter_preserves_explicit_request_id(self) -> None:
        filter_ = RequestIdFilter("svc", lambda: "from-getter")
        record = _record()
        record.request_id = "explicit-id"
        filter_.filter(record)
        assert record.request_id == "explicit-id"

    def test_filter_uses_empty_string_when_no_getter(self) -> None:
        filter_ = RequestIdFilter("service_name", None)
        record = _record()
        filter_.filter(record)
        assert record.request_id == ""
        assert record.service == "service_name"


class TestCreateJsonFormatter:
    def test_required_log_fields_content(self) -> None:
        expected = {"asctime", "levelname", "name", "message", "request_id", "service"}
        assert expected == set(REQUIRED_LOG_FIELDS)

    def test_field_rename_map_content(self) -> None:
        assert FIELD_RENAME_MAP == {"levelname": "level", "name": "logger"}

    def test_json_formatter_renames_fields(self) -> None:
        formatter = create_json_formatter()
        record = _record("request_rejected", logging.WARNING)
        record.request_id = "req_abc"
        record.service = "crm_bridge"
        record.error_code = "FORBIDDEN"

        payload = json.loads(formatter.format(record))

        assert payload["message"] == "request_rejected"
        assert payload["level"] == "WARNING"
        assert payload["logger"] == "test"
        assert payload["request_id"] == "req_abc"
        assert payload["error_code"] == "FORBIDDEN"


class TestLoggingIntegration:
    def test_full_logging_flow(self) -> None:
        configure_logging(
            level="DEBUG",
            service_name="integration_test",
            request_id_getter=lambda: "req_int_001",
        )
        logger = get_logger("integration.test")
        # Não deve levantar exceção
        logger.debug("debug_event", extra={"custom_field": "value"})
        logger.warning("warning_event")
