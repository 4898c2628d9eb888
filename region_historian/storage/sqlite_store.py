"""
SQLite Versioned Record Store

Durable single-node backend. Every version is one row of historian_cells;
the primary key (row_key, column_key, ts) makes a repeated version an
in-place replacement.

Thread Safety:
- One connection shared across threads (check_same_thread=False)
- Writes serialized by a lock so version assignment and insert are atomic
- WAL mode keeps readers from blocking on the writer
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from typing import Optional

from region_historian.core.types import Result, Ok, Err
from region_historian.core.errors import StorageError
from region_historian.storage.config import SQLiteConfig
from region_historian.storage.protocols import Cell, assign_version

logger = logging.getLogger(__name__)


SCHEMA = """
CREATE TABLE IF NOT EXISTS historian_cells (
    row_key BLOB NOT NULL,
    column_key BLOB NOT NULL,
    ts INTEGER NOT NULL,
    value BLOB NOT NULL,
    PRIMARY KEY (row_key, column_key, ts)
) WITHOUT ROWID
"""


class SQLiteVersionedStore:
    """
    SQLite storage for historian cells.

    Usage:
        store = SQLiteVersionedStore(config)
        result = store.connect()
        if result.is_ok():
            store.put(row, column, b"Region creation", LATEST_TIMESTAMP)
    """

    __slots__ = ("_config", "_conn", "_lock")

    PRAGMAS = [
        "PRAGMA journal_mode = WAL",
        "PRAGMA synchronous = NORMAL",
        "PRAGMA temp_store = MEMORY",
    ]

    def __init__(self, config: SQLiteConfig) -> None:
        self._config = config
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.Lock()

    def connect(self) -> Result[None, StorageError]:
        """Open the database file, apply pragmas and create the schema."""
        try:
            self._config.data_dir.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(
                str(self._config.db_path),
                check_same_thread=False,
                isolation_level=None,  # Autocommit for explicit transaction control
                timeout=self._config.busy_timeout_ms / 1000,
            )
            for pragma in self.PRAGMAS:
                self._conn.execute(pragma)
            self._conn.execute(SCHEMA)

            logger.debug(
                "SQLite store opened",
                extra={"db_path": str(self._config.db_path)},
            )
            return Ok(None)

        except (sqlite3.Error, OSError) as e:
            self._conn = None
            return Err(StorageError.unavailable(
                store=str(self._config.db_path),
                reason="cannot open database",
                cause=e,
            ))

    def put(
        self,
        row_key: bytes,
        column_key: bytes,
        value: bytes,
        timestamp: int,
    ) -> Result[int, StorageError]:
        if self._conn is None:
            return Err(StorageError.unavailable(str(self._config.db_path), "not connected"))

        with self._lock:
            cursor = self._conn.cursor()
            try:
                cursor.execute("BEGIN IMMEDIATE")
                try:
                    cursor.execute(
                        "SELECT MAX(ts) FROM historian_cells "
                        "WHERE row_key = ? AND column_key = ?",
                        (row_key, column_key),
                    )
                    newest = cursor.fetchone()[0]
                    version = assign_version(timestamp, newest)
                    cursor.execute(
                        "INSERT OR REPLACE INTO historian_cells "
                        "(row_key, column_key, ts, value) VALUES (?, ?, ?, ?)",
                        (row_key, column_key, version, value),
                    )
                    cursor.execute("COMMIT")
                except sqlite3.Error:
                    cursor.execute("ROLLBACK")
                    raise
                return Ok(version)
            except sqlite3.Error as e:
                return Err(StorageError.io_failed("put", row_key, column_key, cause=e))
            finally:
                cursor.close()

    def get_versions(
        self,
        row_key: bytes,
        column_key: bytes,
        max_versions: int,
    ) -> Result[list[Cell], StorageError]:
        if self._conn is None:
            return Err(StorageError.unavailable(str(self._config.db_path), "not connected"))
        if max_versions <= 0:
            return Ok([])

        try:
            with self._lock:
                rows = self._conn.execute(
                    "SELECT ts, value FROM historian_cells "
                    "WHERE row_key = ? AND column_key = ? "
                    "ORDER BY ts DESC LIMIT ?",
                    (row_key, column_key, max_versions),
                ).fetchall()
            return Ok([Cell(timestamp=ts, value=bytes(value)) for ts, value in rows])
        except sqlite3.Error as e:
            return Err(StorageError.io_failed("get", row_key, column_key, cause=e))

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
