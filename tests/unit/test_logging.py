"""Unit tests for logging setup."""

import logging
import sys

import orjson
import pytest

from kintone_export.core.exceptions import KintoneAPIError
from kintone_export.core.logging import ConsoleFormatter, JSONFormatter, setup_logging


def make_log_record(message, **extra):
    record = logging.LogRecord("kintone_export.test", logging.ERROR, __file__, 10, message, None, None)
    record.__dict__.update(extra)
    return record


@pytest.fixture
def restore_root():
    """Restore root logger handlers after setup_logging."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


class TestJSONFormatter:
    """Tests for JSON log output."""

    def test_fields(self):
        """Test core fields are present."""
        data = orjson.loads(JSONFormatter().format(make_log_record("Fetched 500 records")))
        assert data["level"] == "ERROR"
        assert data["logger"] == "kintone_export.test"
        assert data["message"] == "Fetched 500 records"
        assert "extra" not in data

    def test_error_details_as_extra(self):
        """Test structured error details end up under extra."""
        error = KintoneAPIError("Invalid query", status_code=400, error_code="GAIA_IQ11")
        data = orjson.loads(JSONFormatter().format(make_log_record("Export failed", **error.to_dict())))
        assert data["extra"]["error"]["code"] == "GAIA_IQ11"
        assert data["extra"]["error"]["details"]["status_code"] == 400


class TestConsoleFormatter:
    """Tests for console log output."""

    def test_level_restored(self):
        """Test colouring does not leak into the record."""
        record = make_log_record("hello")
        text = ConsoleFormatter("%(levelname)s %(message)s").format(record)
        assert "hello" in text
        assert record.levelname == "ERROR"


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_stderr_handler(self, restore_root):
        """Test a single stderr handler is installed."""
        setup_logging(log_level="debug", json_logs=True)

        assert len(restore_root.handlers) == 1
        handler = restore_root.handlers[0]
        assert handler.stream is sys.stderr
        assert isinstance(handler.formatter, JSONFormatter)
        assert restore_root.level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.WARNING
