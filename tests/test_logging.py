"""Tests for logging configuration and access logging."""

import json
import logging
import sys

import pytest

from shortkey.common.logging_config import JsonFormatter, setup_logging
from web_app.middleware.logging import level_for_status


def make_record(message, *args, exc_info=None):
    return logging.LogRecord(
        name="shortkey.service",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=args,
        exc_info=exc_info,
    )


class TestJsonFormatter:
    """Test JSON line rendering."""

    def test_message_with_quotes_parses_back(self):
        url = 'https://example.com/?q="a\\b"&x=</script>'
        line = JsonFormatter().format(make_record("Created short key: %s -> %s", "abc123X", url))

        data = json.loads(line)
        assert data["message"] == f"Created short key: abc123X -> {url}"
        assert data["level"] == "INFO"
        assert data["logger"] == "shortkey.service"
        assert "\n" not in line

    def test_exception_is_included(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = make_record("failed", exc_info=sys.exc_info())

        data = json.loads(JsonFormatter().format(record))
        assert "RuntimeError: boom" in data["exception"]


class TestSetupLogging:
    """Test logger setup."""

    def test_json_file_output(self, tmp_path):
        log_file = tmp_path / "shortkey.log"
        logger = setup_logging(level="DEBUG", log_file=str(log_file), json_format=True)

        logger.info('long url "quoted"')
        for handler in logger.handlers:
            handler.flush()

        lines = log_file.read_text().splitlines()
        assert json.loads(lines[-1])["message"] == 'long url "quoted"'

        setup_logging(level="DEBUG")

    def test_repeated_setup_replaces_handlers(self):
        setup_logging(level="INFO")
        logger = setup_logging(level="WARNING")

        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING

    def test_unknown_level_defaults_to_info(self):
        assert setup_logging(level="chatty").level == logging.INFO


class TestAccessLogging:
    """Test request log levels."""

    @pytest.mark.parametrize(
        "status_code, level",
        [(200, logging.INFO), (302, logging.INFO), (404, logging.WARNING), (500, logging.ERROR)],
    )
    def test_level_for_status(self, status_code, level):
        assert level_for_status(status_code) == level

    async def test_not_found_logs_warning(self, client, caplog):
        with caplog.at_level(logging.INFO, logger="shortkey.web"):
            await client.get("/abc123X", follow_redirects=False)

        records = [r for r in caplog.records if r.name == "shortkey.web"]
        assert records[-1].levelno == logging.WARNING
        assert "GET /abc123X 404" in records[-1].getMessage()
