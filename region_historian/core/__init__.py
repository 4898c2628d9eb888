"""
Core module: Type definitions, error hierarchy, and configuration.

This module provides the foundational abstractions for the historian:
- Result/Either monad for zero-exception control flow
- Region and server identity types
- Coded error hierarchy

HistorianConfig lives in region_historian.core.config; it depends on the
storage backend settings and is therefore not imported here.
"""

from region_historian.core.types import (
    Result,
    Ok,
    Err,
    Timestamp,
    RegionInfo,
    ServerAddress,
    current_time_millis,
)
from region_historian.core.errors import (
    ErrorCode,
    HistorianError,
    StorageError,
    ConfigurationError,
)

__all__ = [
    "Result",
    "Ok",
    "Err",
    "Timestamp",
    "RegionInfo",
    "ServerAddress",
    "current_time_millis",
    "ErrorCode",
    "HistorianError",
    "StorageError",
    "ConfigurationError",
]
