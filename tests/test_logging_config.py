"""Tests for logging configuration."""

import logging
from datetime import date

import pytest
import structlog

from ledgerpilot.domain.synthesizer import compose_entries
from ledgerpilot.logging_config import configure_default_logging

TODAY = date(2025, 12, 31)


@pytest.fixture
def default_logging():
    """Start from ledgerpilot's import-time logging setup."""
    structlog.reset_defaults()
    configure_default_logging()
    yield
    structlog.reset_defaults()
    configure_default_logging()


def test_library_use_prints_nothing_to_stdout(default_logging, capsys):
    result = compose_entries("paid 10 for coffee", today=TODAY)

    assert len(result.entries) == 1
    captured = capsys.readouterr()
    assert captured.out == ""


def test_library_events_reach_stdlib_logging(default_logging, caplog):
    caplog.set_level(logging.DEBUG)

    compose_entries("paid 10 for coffee", today=TODAY)

    records = [r for r in caplog.records if r.name == "ledgerpilot.domain.extractor"]
    assert any("events_extracted" in r.getMessage() for r in records)


def test_package_logger_has_null_handler():
    handlers = logging.getLogger("ledgerpilot").handlers
    assert any(isinstance(handler, logging.NullHandler) for handler in handlers)
