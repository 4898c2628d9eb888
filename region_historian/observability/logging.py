"""
Structured Logging for Historian Events

Writer and reader warnings carry their context (region, event, error) as
`extra=` fields. This module renders those fields either as one JSON object
per line or as `key=value` pairs after a plain text message, and lets a
caller attach fields to every line emitted inside a block:

    with log_context(server="rs-1.example.com:60020"):
        historian.add_region_open(region, address)
"""

from __future__ import annotations

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from enum import IntEnum
from typing import Any, Iterable, Optional, TextIO, TYPE_CHECKING

if TYPE_CHECKING:
    from region_historian.core.config import ObservabilityConfig


class LogLevel(IntEnum):
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


_scoped_fields: ContextVar[dict[str, Any]] = ContextVar("historian_log_fields", default={})

# Present on every logging.LogRecord; anything else was passed via extra=
_STANDARD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}

_TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def _field_value(value: Any) -> Any:
    """Row and column keys arrive as bytes; log them as text."""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return value


def _record_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Scoped fields overlaid with the record's own extra= fields."""
    fields = dict(_scoped_fields.get())
    for key, value in vars(record).items():
        if key not in _STANDARD_ATTRS:
            fields[key] = _field_value(value)
    return fields


class JsonFormatter(logging.Formatter):
    """One JSON object per line: @timestamp, level, logger, message, fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "@timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(_record_fields(record))
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class KeyValueFormatter(logging.Formatter):
    """Plain text line followed by the structured fields as key=value."""

    def __init__(self) -> None:
        super().__init__(_TEXT_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = _record_fields(record)
        if not fields:
            return line
        pairs = " ".join(f"{key}={value}" for key, value in fields.items())
        return f"{line} | {pairs}"


class _LogContext:
    __slots__ = ("_fields", "_token")

    def __init__(self, fields: dict[str, Any]) -> None:
        self._fields = fields
        self._token = None

    def __enter__(self) -> _LogContext:
        self._token = _scoped_fields.set({**_scoped_fields.get(), **self._fields})
        return self

    def __exit__(self, *exc: Any) -> None:
        if self._token is not None:
            _scoped_fields.reset(self._token)
            self._token = None


def log_context(**fields: Any) -> _LogContext:
    """Add fields to every log line emitted inside the with block. Nests."""
    return _LogContext(fields)


def setup_logging(
    level: LogLevel = LogLevel.INFO,
    json_output: bool = True,
    stream: Optional[TextIO] = None,
    quiet: Iterable[str] = ("redis",),
) -> None:
    """
    Route all logging to one stream handler on the root logger.

    Args:
        level: Minimum level for the root logger and the handler
        json_output: JsonFormatter when True, KeyValueFormatter otherwise
        stream: Destination (default: stderr)
        quiet: Client library loggers held at WARNING
    """
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(JsonFormatter() if json_output else KeyValueFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_logging_from_config(config: ObservabilityConfig, stream: Optional[TextIO] = None) -> None:
    setup_logging(
        level=LogLevel[config.log_level],
        json_output=config.log_json,
        stream=stream,
    )
