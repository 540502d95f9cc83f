"""Structured logging for glow-routines.

GLOW_LOG_FORMAT selects "json" (default, one object per line) or "text".
Call sites attach context through ``extra={"glow_<name>": value}``; those keys are
copied into the JSON object.
"""

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import TextIO

LOG_FORMATS = ("json", "text")
_EXTRA_PREFIX = "glow_"
_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """Emit log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "function": record.funcName,
        }

        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = "".join(traceback.format_exception(*record.exc_info))

        for key, value in record.__dict__.items():
            if key.startswith(_EXTRA_PREFIX):
                log_entry[key] = value

        # Dates and enums in extras serialize through str().
        return json.dumps(log_entry, default=str)


def setup_logging(log_format: str, level: int = logging.INFO, stream: TextIO | None = None) -> None:
    """Configure the root logger for the CLI. Replaces any existing handlers."""
    if log_format not in LOG_FORMATS:
        raise ValueError(f"log_format must be one of {LOG_FORMATS}, got {log_format!r}")

    root = logging.getLogger()
    root.setLevel(level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter() if log_format == "json" else logging.Formatter(_TEXT_FORMAT))
    root.addHandler(handler)
