import logging
import json
import re
from io import StringIO

import pytest
from mcp_grafana_launcher.logging import (
    JsonFormatter,
    configure_logging,
    log_with_data,
    get_logger,
)

ANSI_ESCAPE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


def test_format_json_log():
    """Test JSON log formatting"""
    formatter = JsonFormatter()
    record = logging.LogRecord(
        "test", logging.INFO, "test.py", 10, "Test message", (), None
    )

    output = formatter.format(record)
    data = json.loads(ANSI_ESCAPE.sub("", output))

    assert data["level"] == "INFO"
    assert data["msg"] == "Test message"
    assert data["ts"]


@pytest.mark.parametrize(
    "level,expected_color",
    [
        (logging.DEBUG, "\033[34m"),  # BLUE
        (logging.INFO, "\033[32m"),  # GREEN
        (logging.WARNING, "\033[33m"),  # YELLOW
        (logging.ERROR, "\033[31m\033[1m"),  # RED+BOLD
        (logging.CRITICAL, "\033[35m\033[1m"),  # MAGENTA+BOLD
    ],
)
def test_format_json_log_colors(level, expected_color):
    """Test log level color coding"""
    formatter = JsonFormatter()
    record = logging.LogRecord("test", level, "test.py", 10, "Test message", (), None)

    output = formatter.format(record)
    assert output.startswith(expected_color)
    assert output.endswith("\033[0m")


def test_format_without_colors():
    """Plain JSON when colors are disabled"""
    formatter = JsonFormatter(colors=False)
    record = logging.LogRecord(
        "test", logging.ERROR, "test.py", 10, "Test message", (), None
    )

    output = formatter.format(record)
    assert "\033" not in output
    assert json.loads(output)["level"] == "ERROR"


def test_format_dict_message():
    """Event dictionaries are rendered through getMessage"""
    formatter = JsonFormatter()
    record = logging.LogRecord(
        "test", logging.INFO, "test.py", 10, {"event": "binary_ready"}, (), None
    )

    data = json.loads(ANSI_ESCAPE.sub("", formatter.format(record)))
    assert "binary_ready" in data["msg"]


def test_log_with_data_json_structure():
    """Test structured logging produces valid JSON"""
    logger = logging.getLogger("test.log_with_data")
    logger.setLevel(logging.INFO)

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)

    try:
        test_data = {"key": "value", "nested": {"foo": "bar"}}
        log_with_data(logger, logging.INFO, "Test message", test_data)
    finally:
        logger.removeHandler(handler)

    data = json.loads(ANSI_ESCAPE.sub("", stream.getvalue().strip()))
    assert data["level"] == "INFO"
    assert data["msg"] == "Test message"
    assert data["data"] == test_data


def test_log_with_data_respects_level():
    """Records below the logger level are dropped"""
    logger = logging.getLogger("test.log_with_data_level")
    logger.setLevel(logging.WARNING)

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    logger.addHandler(handler)

    try:
        log_with_data(logger, logging.INFO, "Hidden", {"key": "value"})
    finally:
        logger.removeHandler(handler)

    assert stream.getvalue() == ""


def test_get_logger():
    """Test logger retrieval"""
    assert get_logger("test_module").name == "mcp_grafana_launcher.test_module"
    assert (
        get_logger("mcp_grafana_launcher.binaries.fetcher").name
        == "mcp_grafana_launcher.binaries.fetcher"
    )


def test_configure_logging():
    """Test logging configuration"""
    logger = logging.getLogger("mcp_grafana_launcher")
    saved = logger.handlers[:]
    logger.handlers = []

    try:
        configure_logging("DEBUG")

        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], logging.StreamHandler)
        assert isinstance(logger.handlers[0].formatter, JsonFormatter)
        assert not logger.propagate

        # Second call only adjusts the level
        configure_logging("WARNING")
        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1
    finally:
        logger.handlers = saved
        logger.propagate = True
        logger.setLevel(logging.NOTSET)
