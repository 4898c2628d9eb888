"""
In-Memory Versioned Record Store: Development and Testing Implementation

Keeps every version of every (row, column) in process memory.

Design Principles:
    - Full protocol compliance for seamless production swap
    - Thread-safe operations via a single threading.Lock
    - Versions kept sorted newest first so reads are a slice

Performance Characteristics:
    - put: O(v) where v is the number of versions of the column
    - get_versions: O(k) where k is the requested version count
"""

from __future__ import annotations

import bisect
import threading
from typing import Dict, List, Tuple

from region_historian.core.types import Result, Ok, Err
from region_historian.core.errors import StorageError
from region_historian.storage.protocols import Cell, assign_version


class InMemoryVersionedStore:
    """
    In-memory store retaining all versions per column.

    Writing an existing (row, column, timestamp) replaces that version's
    value, matching the on-disk backends.

    Example:
        store = InMemoryVersionedStore()
        store.put(b"t1,,1", b"historian:open", b"opened", LATEST_TIMESTAMP)
        cells = store.get_versions(b"t1,,1", b"historian:open", ALL_VERSIONS)
    """

    __slots__ = ("_columns", "_lock", "_closed")

    def __init__(self) -> None:
        # (row, column) -> versions as (-timestamp, value), ascending,
        # which is newest first
        self._columns: Dict[Tuple[bytes, bytes], List[Tuple[int, bytes]]] = {}
        self._lock = threading.Lock()
        self._closed = False

    def put(
        self,
        row_key: bytes,
        column_key: bytes,
        value: bytes,
        timestamp: int,
    ) -> Result[int, StorageError]:
        if self._closed:
            return Err(StorageError.unavailable("memory", "store is closed"))

        with self._lock:
            versions = self._columns.setdefault((row_key, column_key), [])
            newest = -versions[0][0] if versions else None
            version = assign_version(timestamp, newest)

            idx = bisect.bisect_left(versions, (-version,))
            if idx < len(versions) and versions[idx][0] == -version:
                versions[idx] = (-version, value)
            else:
                versions.insert(idx, (-version, value))
            return Ok(version)

    def get_versions(
        self,
        row_key: bytes,
        column_key: bytes,
        max_versions: int,
    ) -> Result[list[Cell], StorageError]:
        if self._closed:
            return Err(StorageError.unavailable("memory", "store is closed"))
        if max_versions <= 0:
            return Ok([])

        with self._lock:
            versions = self._columns.get((row_key, column_key), [])
            return Ok([
                Cell(timestamp=-neg_ts, value=value)
                for neg_ts, value in versions[:max_versions]
            ])

    def close(self) -> None:
        self._closed = True

    def __len__(self) -> int:
        """Total number of stored versions across all columns."""
        with self._lock:
            return sum(len(v) for v in self._columns.values())
