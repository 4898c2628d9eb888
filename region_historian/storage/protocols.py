"""
Versioned Record Store Protocol

Structural subtyping protocol (PEP 544) for pluggable backends of the
historian's cell storage. A cell is addressed by (row_key, column_key,
timestamp); the store keeps every version of a column.

Design Principles:
    - Zero-exception control flow via Result[T, E] monad
    - Synchronous, blocking calls; timeouts belong to the backend client
    - Protocol class for structural subtyping (duck typing with type safety)
"""

from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

from region_historian.core import constants as C
from region_historian.core.types import Result, current_time_millis
from region_historian.core.errors import StorageError


# =============================================================================
# CELL
# =============================================================================
@dataclass(frozen=True, slots=True)
class Cell:
    """
    One stored version of a column.

    timestamp is in milliseconds since the Unix epoch.
    """
    timestamp: int
    value: bytes


def assign_version(requested: int, newest: Optional[int]) -> int:
    """
    Resolve the version a put is stored under.

    Explicit timestamps are kept as given. LATEST_TIMESTAMP becomes the
    current time in milliseconds, moved past the newest existing version
    of the column so that back-to-back writes never share a version.
    """
    if requested != C.LATEST_TIMESTAMP:
        return requested
    now = current_time_millis()
    if newest is not None and now <= newest:
        return newest + 1
    return now


# =============================================================================
# VERSIONED RECORD STORE
# =============================================================================
@runtime_checkable
class VersionedRecordStore(Protocol):
    """
    Protocol for stores that retain multiple timestamped versions per
    (row, column).

    Implementations:
        - InMemoryVersionedStore: development and tests
        - SQLiteVersionedStore: single node, durable
        - RedisVersionedStore: shared, networked
    """

    @abstractmethod
    def put(
        self,
        row_key: bytes,
        column_key: bytes,
        value: bytes,
        timestamp: int,
    ) -> Result[int, StorageError]:
        """
        Store one version of a column.

        Args:
            row_key: Row of the cell
            column_key: "family:qualifier" column of the cell
            value: Raw cell contents
            timestamp: Version in milliseconds, or LATEST_TIMESTAMP to
                let the store stamp the write with its own clock

        Returns:
            Ok(timestamp): The version the value was stored under
            Err(StorageError): Write failed
        """
        ...

    @abstractmethod
    def get_versions(
        self,
        row_key: bytes,
        column_key: bytes,
        max_versions: int,
    ) -> Result[list[Cell], StorageError]:
        """
        Fetch up to max_versions versions of a column, newest first.

        A column that was never written, or max_versions <= 0, yields Ok([]).
        """
        ...

    @abstractmethod
    def close(self) -> None:
        """Release client resources. Safe to call multiple times."""
        ...
