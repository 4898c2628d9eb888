"""
Observability module: structured logging.
"""

from region_historian.observability.logging import (
    JsonFormatter,
    KeyValueFormatter,
    LogLevel,
    log_context,
    setup_logging,
    setup_logging_from_config,
)

__all__ = [
    "JsonFormatter",
    "KeyValueFormatter",
    "LogLevel",
    "log_context",
    "setup_logging",
    "setup_logging_from_config",
]
