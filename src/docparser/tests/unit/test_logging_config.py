"""
Tests for logging configuration helpers.
"""

import io
import json
import logging
import sys

import pytest

from docparser.utils.logging_config import (
    DIAGNOSTICS_LOGGER_NAME,
    JSONFormatter,
    LogFormat,
    LogLevel,
    PACKAGE_LOGGER_NAME,
    configure_logging,
    get_diagnostics_logger,
    suppress_logger,
)


@pytest.fixture
def package_logger():
    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    saved = (list(logger.handlers), logger.level)
    yield logger
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])


class TestLogLevel:

    def test_from_name(self):
        assert LogLevel.from_name("debug") is LogLevel.DEBUG
        assert LogLevel.from_name(LogLevel.ERROR) is LogLevel.ERROR

    def test_unknown_name(self):
        with pytest.raises(ValueError):
            LogLevel.from_name("chatty")


class TestConfigureLogging:

    def test_standard_format(self, package_logger):
        stream = io.StringIO()
        logger = configure_logging("WARNING", "standard", stream)
        assert logger is package_logger
        logging.getLogger("docparser.core.loader").info("hidden")
        logging.getLogger("docparser.core.loader").warning("shown")
        output = stream.getvalue()
        assert "shown" in output
        assert "hidden" not in output

    def test_json_format(self, package_logger):
        stream = io.StringIO()
        configure_logging(LogLevel.INFO, LogFormat.JSON, stream)
        logging.getLogger("docparser.cli").info("parsed %d nodes", 3, extra={"system": "demo"})
        record = json.loads(stream.getvalue().strip())
        assert record["message"] == "parsed 3 nodes"
        assert record["level"] == "INFO"
        assert record["system"] == "demo"

    def test_reconfiguring_replaces_handler(self, package_logger):
        configure_logging("INFO", "standard", io.StringIO())
        configure_logging("INFO", "detailed", io.StringIO())
        assert len(package_logger.handlers) == 1


class TestJSONFormatter:

    def test_exception_is_included(self):
        try:
            raise ValueError("bad")
        except ValueError:
            record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", None, None)
            record.exc_info = sys.exc_info()
        data = json.loads(JSONFormatter().format(record))
        assert "ValueError: bad" in data["exception"]


class TestSuppressLogger:

    def test_disables_and_restores(self):
        diagnostics = get_diagnostics_logger()
        assert diagnostics.name == DIAGNOSTICS_LOGGER_NAME
        with suppress_logger(diagnostics):
            assert diagnostics.disabled
        assert not diagnostics.disabled

    def test_restores_on_exception(self):
        diagnostics = get_diagnostics_logger()
        with pytest.raises(RuntimeError):
            with suppress_logger(diagnostics):
                raise RuntimeError("boom")
        assert not diagnostics.disabled
