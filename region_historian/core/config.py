"""
Configuration Management for the Region Historian

Provides validated configuration with sensible defaults.
Supports environment variable overrides.

Design:
- Immutable after validation
- Fail-fast on invalid configuration
- Type-safe with dataclasses
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from region_historian.core.types import Result, Ok, Err
from region_historian.core.errors import ConfigurationError
from region_historian.storage.config import (
    BackendType,
    RedisConfig,
    SQLiteConfig,
    StoreConfig,
    parse_bool,
)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ObservabilityConfig:
    """Logging configuration."""

    log_level: str = "INFO"
    log_json: bool = True


@dataclass(frozen=True)
class HistorianConfig:
    """
    Root configuration for the region historian.

    verbose_audit controls whether high-frequency maintenance events
    (compactions, flushes) are recorded. None follows the historian
    logger: they are recorded only while it is enabled for DEBUG.
    """

    store: StoreConfig = field(default_factory=StoreConfig)
    verbose_audit: Optional[bool] = None
    observability: ObservabilityConfig = field(default_factory=ObservabilityConfig)

    @classmethod
    def from_env(cls) -> Result[HistorianConfig, ConfigurationError]:
        """
        Load configuration from environment variables.

        Environment variables are prefixed with HISTORIAN_.
        Example: HISTORIAN_STORE_BACKEND=sqlite, HISTORIAN_SQLITE_DIR=/var/lib/historian
        """
        backend_str = os.getenv("HISTORIAN_STORE_BACKEND", BackendType.IN_MEMORY.value)
        try:
            backend = BackendType.parse(backend_str)
        except ValueError as e:
            return Err(ConfigurationError.invalid("HISTORIAN_STORE_BACKEND", backend_str, str(e)))

        try:
            sqlite = SQLiteConfig(
                data_dir=Path(os.getenv("HISTORIAN_SQLITE_DIR", "./data/historian")),
                busy_timeout_ms=int(os.getenv("HISTORIAN_SQLITE_BUSY_TIMEOUT_MS", "5000")),
            )
            redis = RedisConfig.from_env("HISTORIAN_REDIS")
        except (ValueError, TypeError) as e:
            return Err(ConfigurationError.invalid("HISTORIAN_*", "", str(e)))

        verbose_str = os.getenv("HISTORIAN_VERBOSE_AUDIT", "")
        verbose_audit: Optional[bool] = None
        if verbose_str:
            verbose_audit = parse_bool(verbose_str, False)

        observability = ObservabilityConfig(
            log_level=os.getenv("HISTORIAN_LOG_LEVEL", "INFO").upper(),
            log_json=parse_bool(os.getenv("HISTORIAN_LOG_JSON", ""), True),
        )

        config = cls(
            store=StoreConfig(backend=backend, sqlite=sqlite, redis=redis),
            verbose_audit=verbose_audit,
            observability=observability,
        )
        return config.validate().map(lambda _: config)

    def validate(self) -> Result[None, ConfigurationError]:
        """Validate configuration invariants."""
        if self.observability.log_level not in _LOG_LEVELS:
            return Err(ConfigurationError.invalid(
                "log_level",
                self.observability.log_level,
                f"expected one of {', '.join(_LOG_LEVELS)}",
            ))
        if self.store.sqlite.busy_timeout_ms < 0:
            return Err(ConfigurationError.invalid(
                "sqlite.busy_timeout_ms",
                self.store.sqlite.busy_timeout_ms,
                "must be >= 0",
            ))
        return Ok(None)
