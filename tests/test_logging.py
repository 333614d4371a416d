"""Tests for the logging bootstrap."""

import json
import logging

import pytest

from discbot.configs.system import LoggingConfig
from discbot.infra.logging import setup_logging
from discbot.infra.telemetry import tracer


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    saved = (list(root.handlers), root.level)
    uvicorn_logger = logging.getLogger("uvicorn")
    saved_uvicorn = (list(uvicorn_logger.handlers), uvicorn_logger.propagate)
    yield
    root.handlers, level = saved
    root.setLevel(level)
    uvicorn_logger.handlers, uvicorn_logger.propagate = saved_uvicorn


class TestSetupLogging:
    def test_json_lines_with_renamed_fields(self, capsys, restore_logging):
        setup_logging(LoggingConfig(level="INFO", json_output=True))

        logging.getLogger("discbot.test").info("hello %s", "world")

        record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert record["message"] == "hello world"
        assert record["level"] == "INFO"
        assert record["logger"] == "discbot.test"
        assert record["trace_id"] == ""

    def test_level_applied_to_root(self, restore_logging):
        setup_logging(LoggingConfig(level="warning"))
        assert logging.getLogger().level == logging.WARNING

    def test_quiet_loggers_capped(self, restore_logging):
        setup_logging(LoggingConfig(quiet_loggers=["noisy.client"]))
        assert logging.getLogger("noisy.client").level == logging.WARNING

    def test_uvicorn_shares_handler(self, restore_logging):
        handler = setup_logging(LoggingConfig(json_output=False))

        uvicorn_logger = logging.getLogger("uvicorn")
        assert uvicorn_logger.handlers == [handler]
        assert not uvicorn_logger.propagate

    def test_span_fields_present_inside_span(self, capsys, restore_logging):
        setup_logging(LoggingConfig(json_output=True))

        with tracer.start_as_current_span("test"):
            logging.getLogger("discbot.test").warning("inside")

        record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        # Without an SDK provider the span is non-recording and ids are empty.
        assert "trace_id" in record
        assert "span_id" in record
