"""
Unit Tests: Structured Logging
"""

import io
import json
import logging

import pytest

from region_historian.core.config import ObservabilityConfig
from region_historian.observability import (
    JsonFormatter,
    KeyValueFormatter,
    LogLevel,
    log_context,
    setup_logging,
    setup_logging_from_config,
)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def make_record(msg="Unable to retrieve region history", **extra):
    record = logging.LogRecord(
        name="region_historian.history.reader",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonFormatter:
    def test_fields_and_extras(self):
        line = JsonFormatter().format(make_record(region="t1,,1", column="historian:open"))
        data = json.loads(line)
        assert data["level"] == "WARNING"
        assert data["message"] == "Unable to retrieve region history"
        assert data["logger"] == "region_historian.history.reader"
        assert data["region"] == "t1,,1"
        assert data["column"] == "historian:open"
        assert "@timestamp" in data
        assert "lineno" not in data

    def test_log_context_fields(self):
        with log_context(server="rs-1", table="usertable"):
            inside = json.loads(JsonFormatter().format(make_record()))
        outside = json.loads(JsonFormatter().format(make_record()))
        assert inside["server"] == "rs-1"
        assert inside["table"] == "usertable"
        assert "server" not in outside

    def test_nested_context_merges(self):
        with log_context(server="rs-1"):
            with log_context(region="t1,,1"):
                data = json.loads(JsonFormatter().format(make_record()))
        assert (data["server"], data["region"]) == ("rs-1", "t1,,1")

    def test_byte_keys_are_logged_as_text(self):
        data = json.loads(JsonFormatter().format(make_record(row=b"t1,,1")))
        assert data["row"] == "t1,,1"

    def test_unserializable_values_are_stringified(self):
        data = json.loads(JsonFormatter().format(make_record(handle=object())))
        assert data["handle"].startswith("<object object")


class TestKeyValueFormatter:
    def test_fields_follow_message(self):
        line = KeyValueFormatter().format(make_record(region="t1,,1", event="open"))
        assert line.endswith("| Unable to retrieve region history | region=t1,,1 event=open")

    def test_no_fields_no_suffix(self):
        line = KeyValueFormatter().format(make_record())
        assert line.endswith("| region_historian.history.reader | Unable to retrieve region history")


class TestSetup:
    def test_json_output(self, restore_root_logger):
        stream = io.StringIO()
        setup_logging(level=LogLevel.INFO, json_output=True, stream=stream)
        logging.getLogger("region_historian.test").info("Region historian is ready", extra={"store": "memory"})
        data = json.loads(stream.getvalue().strip())
        assert data["store"] == "memory"
        assert logging.getLogger("redis").level == logging.WARNING

    def test_plain_output_respects_level(self, restore_root_logger):
        stream = io.StringIO()
        setup_logging(level=LogLevel.WARNING, json_output=False, stream=stream)
        log = logging.getLogger("region_historian.test")
        log.info("hidden")
        log.warning("Unable to open store for region historian")
        output = stream.getvalue()
        assert "hidden" not in output
        assert "| WARNING  | region_historian.test | Unable to open store" in output

    def test_from_config(self, restore_root_logger):
        stream = io.StringIO()
        setup_logging_from_config(ObservabilityConfig(log_level="DEBUG", log_json=True), stream=stream)
        assert restore_root_logger.level == logging.DEBUG
        logging.getLogger("region_historian.test").debug("verbose")
        assert json.loads(stream.getvalue())["level"] == "DEBUG"
