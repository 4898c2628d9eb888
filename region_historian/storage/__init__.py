"""
Storage Module: Versioned Record Store Abstraction
==================================================

Provides:
- Protocol definition for pluggable backends
- In-memory implementation for development/testing
- SQLite and Redis backends
- The shared, lazily opened StoreHandle
- Factory functions for backend selection

Design Principles:
-----------------
1. **Backend Agnostic**: Same interface for in-memory and production
2. **Factory Pattern**: Runtime backend selection via configuration
3. **Lazy Loading**: Production dependencies loaded only when needed
4. **Result Monad**: No exceptions for control flow

Example:
    >>> # Development (in-memory)
    >>> store = create_store()

    >>> # Production (configured)
    >>> config = StoreConfig(backend=BackendType.REDIS, redis=RedisConfig(host="redis.prod"))
    >>> result = open_store(config)
"""

from __future__ import annotations

from typing import Optional, TYPE_CHECKING

from region_historian.core.types import Result, Ok, Err
from region_historian.core.errors import StorageError

# Protocol definitions
from region_historian.storage.protocols import (
    Cell,
    VersionedRecordStore,
    assign_version,
)

# In-memory backend (always available)
from region_historian.storage.memory_store import InMemoryVersionedStore

# Configuration
from region_historian.storage.config import (
    BackendType,
    RedisMode,
    RedisConfig,
    SQLiteConfig,
    StoreConfig,
)

from region_historian.storage.handle import StoreHandle, StoreOpener

# Lazy imports for production backends
if TYPE_CHECKING:
    from region_historian.storage.redis_store import RedisVersionedStore
    from region_historian.storage.sqlite_store import SQLiteVersionedStore


# =============================================================================
# FACTORY FUNCTIONS
# =============================================================================

def create_store(config: Optional[StoreConfig] = None) -> VersionedRecordStore:
    """
    Create an unopened store for the configured backend.

    Args:
        config: Store configuration. None selects the in-memory backend.

    Returns:
        InMemoryVersionedStore, SQLiteVersionedStore or RedisVersionedStore.
        SQLite and Redis stores still need connect().
    """
    if config is None or config.backend == BackendType.IN_MEMORY:
        return InMemoryVersionedStore()

    if config.backend == BackendType.SQLITE:
        from region_historian.storage.sqlite_store import SQLiteVersionedStore
        return SQLiteVersionedStore(config.sqlite)

    if config.backend == BackendType.REDIS:
        from region_historian.storage.redis_store import RedisVersionedStore
        return RedisVersionedStore(config.redis)

    raise ValueError(f"Unsupported backend: {config.backend}")


def open_store(config: Optional[StoreConfig] = None) -> Result[VersionedRecordStore, StorageError]:
    """
    Create and connect a store.

    This is the opener StoreHandle.from_config() runs on first use.
    """
    store = create_store(config)
    connect = getattr(store, "connect", None)
    if connect is None:
        return Ok(store)

    result = connect()
    if result.is_err():
        return Err(result.error)
    return Ok(store)


# =============================================================================
# MODULE EXPORTS
# =============================================================================

__all__ = [
    # Protocols
    "Cell",
    "VersionedRecordStore",
    "assign_version",
    # Configuration
    "BackendType",
    "RedisMode",
    "RedisConfig",
    "SQLiteConfig",
    "StoreConfig",
    # Backends
    "InMemoryVersionedStore",
    # Handle
    "StoreHandle",
    "StoreOpener",
    # Factory functions
    "create_store",
    "open_store",
]
