"""
Error Hierarchy for the Region Historian

Audit logging is best-effort: store failures are returned as Err values and
logged by the writer and reader, never raised to lifecycle callers.

Each error type includes:
- Unique error code for programmatic handling
- Human-readable message for logging
- Optional cause for root cause analysis
- Timestamp for correlation with server logs

Usage:
    result = writer.append(EventKind.OPEN, region, "Region opened")
    match result:
        case Ok(written):
            ...
        case Err(StorageError(code=ErrorCode.STORE_UNAVAILABLE)):
            ...
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from region_historian.core.types import Timestamp


# =============================================================================
# ERROR CODE ENUMERATION
# =============================================================================
class ErrorCode(Enum):
    """
    Unique error codes for programmatic error handling.

    Codes are grouped by subsystem:
    - 1xxx: Store errors
    - 9xxx: Internal/configuration errors
    """

    # Store errors (1xxx)
    STORE_UNAVAILABLE = 1001
    STORE_IO_ERROR = 1002

    # Internal errors (9xxx)
    CONFIGURATION_INVALID = 9002


# =============================================================================
# BASE ERROR CLASS
# =============================================================================
@dataclass
class HistorianError(Exception):
    """
    Base class for all historian errors.

    Provides common infrastructure for error handling:
    - Unique error ID for log correlation
    - Error code for programmatic handling
    - Timestamp of creation
    - Cause chain for root cause analysis
    """

    code: ErrorCode
    message: str
    error_id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: Timestamp = field(default_factory=Timestamp.now)
    cause: Optional[Exception] = None
    context: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def with_context(self, **kwargs: Any) -> HistorianError:
        """Add context to error (returns new instance of the same class)."""
        return type(self)(
            code=self.code,
            message=self.message,
            error_id=self.error_id,
            timestamp=self.timestamp,
            cause=self.cause,
            context={**self.context, **kwargs},
        )

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize error to dictionary for structured logging.

        The cause is reduced to its repr.
        """
        data: dict[str, Any] = {
            "error_id": self.error_id,
            "code": self.code.name,
            "code_value": self.code.value,
            "message": self.message,
            "timestamp_nanos": self.timestamp.nanos,
            "context": self.context,
        }
        if self.cause is not None:
            data["cause"] = repr(self.cause)
        return data

    def __str__(self) -> str:
        return f"[{self.code.name}] {self.message} (id={self.error_id[:8]})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"code={self.code.name}, "
            f"message={self.message!r}, "
            f"error_id={self.error_id!r})"
        )


# =============================================================================
# STORE ERRORS
# =============================================================================
@dataclass
class StorageError(HistorianError):
    """
    Errors from the versioned record store.

    Two kinds exist: the store as a whole is unusable (never opened,
    unreachable), or one specific put/get failed.
    """

    @classmethod
    def unavailable(
        cls,
        store: str,
        reason: str,
        cause: Optional[Exception] = None,
    ) -> StorageError:
        """Store handle was never constructed or cannot reach the store."""
        return cls(
            code=ErrorCode.STORE_UNAVAILABLE,
            message=f"Store '{store}' unavailable: {reason}",
            cause=cause,
            context={"store": store, "reason": reason},
        )

    @classmethod
    def io_failed(
        cls,
        operation: str,
        row_key: bytes,
        column_key: bytes,
        cause: Optional[Exception] = None,
    ) -> StorageError:
        """A single put or get against the store failed."""
        row = row_key.decode("utf-8", errors="replace")
        column = column_key.decode("utf-8", errors="replace")
        detail = f": {cause}" if cause is not None else ""
        return cls(
            code=ErrorCode.STORE_IO_ERROR,
            message=f"Store {operation} failed for {row!r} {column}{detail}",
            cause=cause,
            context={"operation": operation, "row": row, "column": column},
        )

    @property
    def is_unavailable(self) -> bool:
        return self.code == ErrorCode.STORE_UNAVAILABLE


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================
@dataclass
class ConfigurationError(HistorianError):
    """Invalid historian configuration."""

    @classmethod
    def invalid(
        cls,
        setting: str,
        value: Any,
        reason: str,
    ) -> ConfigurationError:
        return cls(
            code=ErrorCode.CONFIGURATION_INVALID,
            message=f"Invalid setting '{setting}': {reason}",
            context={"setting": setting, "value": str(value)[:100], "reason": reason},
        )
