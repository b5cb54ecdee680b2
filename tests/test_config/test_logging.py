"""Testes para config.logging.

Cobre: configure_logging, get_logger, CorrelationIdFilter,
create_json_formatter e create_text_formatter.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator

import pytest

from config.logging import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    CorrelationIdFilter,
    configure_logging,
    create_json_formatter,
    create_text_formatter,
    get_logger,
)
from config.logging.config import DEFAULT_SERVICE_NAME, NOISY_LOGGERS, VALID_LOG_LEVELS


def _record(msg: str = "message", name: str = "test") -> logging.LogRecord:
    return logging.LogRecord(
        name=name,
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg=msg,
        args=(),
        exc_info=None,
    )


@pytest.fixture(autouse=True)
def _restore_root_logger() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


class TestConfigureLogging:
    """Testes para configure_logging."""

    @pytest.mark.parametrize(
        ("level", "expected"),
        [
            ("INFO", logging.INFO),
            ("DEBUG", logging.DEBUG),
            ("warning", logging.WARNING),
            ("ERROR", logging.ERROR),
        ],
    )
    def test_configure_logging_levels(self, level: str, expected: int) -> None:
        """Nível é aplicado ao logger raiz (case insensitive)."""
        configure_logging(level=level)
        assert logging.getLogger().level == expected

    def test_configure_logging_invalid_level_raises(self) -> None:
        """Nível inválido levanta ValueError."""
        with pytest.raises(ValueError, match="Nível de log inválido"):
            configure_logging(level="INVALID")

    def test_configure_logging_replaces_handlers(self) -> None:
        """configure_logging substitui handlers existentes."""
        root = logging.getLogger()
        root.handlers = [logging.NullHandler(), logging.NullHandler()]
        configure_logging()
        assert len(root.handlers) == 1
        assert any(isinstance(f, CorrelationIdFilter) for f in root.handlers[0].filters)

    def test_noisy_loggers_are_raised_to_warning(self) -> None:
        configure_logging(level="DEBUG")
        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_text_output_in_development(self) -> None:
        configure_logging(json_output=False)
        formatter = logging.getLogger().handlers[0].formatter
        assert not isinstance(formatter, type(create_json_formatter()))

    def test_constants(self) -> None:
        assert {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} == VALID_LOG_LEVELS
        assert DEFAULT_SERVICE_NAME == "instancias_whatsapp"


class TestGetLogger:
    """Testes para get_logger."""

    def test_get_logger_same_name_returns_same_instance(self) -> None:
        logger = get_logger("app.sessions.manager")
        assert isinstance(logger, logging.Logger)
        assert logger is get_logger("app.sessions.manager")


class TestCorrelationIdFilter:
    """Testes para CorrelationIdFilter."""

    def test_filter_adds_correlation_id_from_getter(self) -> None:
        filter_ = CorrelationIdFilter("instancias", lambda: "corr-123")
        record = _record()
        assert filter_.filter(record) is True
        assert record.correlation_id == "corr-123"
        assert record.service == "instancias"

    def test_filter_preserves_explicit_correlation_id(self) -> None:
        """correlation_id passado via extra tem precedência."""
        filter_ = CorrelationIdFilter("svc", lambda: "from-getter")
        record = _record()
        record.correlation_id = "explicit-id"
        filter_.filter(record)
        assert record.correlation_id == "explicit-id"

    def test_filter_uses_empty_string_without_getter(self) -> None:
        """Tasks de reconexão rodam fora de requisição: correlation_id vazio."""
        filter_ = CorrelationIdFilter("svc")
        record = _record()
        filter_.filter(record)
        assert record.correlation_id == ""


class TestFormatters:
    """JSON estruturado e texto."""

    def test_required_fields_and_rename_map(self) -> None:
        assert set(REQUIRED_LOG_FIELDS) == {
            "asctime",
            "levelname",
            "name",
            "message",
            "correlation_id",
            "service",
        }
        assert FIELD_RENAME_MAP == {"levelname": "level", "name": "logger"}

    def test_json_formatter_renames_fields_and_keeps_extra(self) -> None:
        record = _record("instance_connected", name="app.sessions.manager")
        record.correlation_id = "abc-123"
        record.service = "instancias_whatsapp"
        record.session_id = "loja1"

        payload = json.loads(create_json_formatter().format(record))

        assert payload["message"] == "instance_connected"
        assert payload["logger"] == "app.sessions.manager"
        assert payload["level"] == "INFO"
        assert payload["correlation_id"] == "abc-123"
        assert payload["session_id"] == "loja1"

    def test_text_formatter_includes_correlation_id(self) -> None:
        record = _record("connection_opened")
        record.correlation_id = "abc-123"
        output = create_text_formatter().format(record)
        assert "[abc-123]" in output
        assert "connection_opened" in output
