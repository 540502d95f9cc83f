from __future__ import annotations

import io
import json
import logging
import sys

import pytest

from glow_routines.logging import JSONFormatter, setup_logging


def test_json_formatter_includes_prefixed_extras() -> None:
    record = logging.LogRecord("glow_routines.routine", logging.INFO, __file__, 1, "Skipped %d", (2,), None)
    record.glow_count = 2
    record.unrelated = "hidden"

    entry = json.loads(JSONFormatter().format(record))
    assert entry["message"] == "Skipped 2"
    assert entry["level"] == "INFO"
    assert entry["logger"] == "glow_routines.routine"
    assert entry["glow_count"] == 2
    assert "unrelated" not in entry
    assert "exception" not in entry


def test_json_formatter_includes_exception() -> None:
    try:
        raise ValueError("boom")
    except ValueError:
        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())

    entry = json.loads(JSONFormatter().format(record))
    assert "ValueError: boom" in entry["exception"]


def test_setup_logging_json_stream() -> None:
    stream = io.StringIO()
    setup_logging("json", logging.DEBUG, stream=stream)
    logging.getLogger("glow_routines.test").debug("hello", extra={"glow_step_id": "s1"})

    entry = json.loads(stream.getvalue().strip())
    assert entry["message"] == "hello"
    assert entry["glow_step_id"] == "s1"


def test_setup_logging_text_stream() -> None:
    stream = io.StringIO()
    setup_logging("text", stream=stream)
    logging.getLogger("glow_routines.test").info("plain")
    assert "INFO glow_routines.test: plain" in stream.getvalue()


def test_setup_logging_rejects_unknown_format() -> None:
    with pytest.raises(ValueError, match="log_format must be one of"):
        setup_logging("xml")
