"""
Region Historian

Lifecycle audit trail for the regions of a distributed table store:
- Every creation, open, split, compaction, flush and assignment of a region
  is appended as a timestamped, free-text cell under the region's row
- Each event kind owns one "historian:<event>" column; the store keeps
  every version
- Reading a region's history merges all columns, newest first

Writes are best-effort: a failing store never fails the lifecycle operation
being recorded.

License: MIT
"""

__version__ = "1.0.0"

# =============================================================================
# PUBLIC API EXPORTS
# =============================================================================
from region_historian.core.types import (
    Result,
    Ok,
    Err,
    RegionInfo,
    ServerAddress,
)
from region_historian.core.errors import (
    ErrorCode,
    HistorianError,
    StorageError,
    ConfigurationError,
)
from region_historian.core.config import HistorianConfig, ObservabilityConfig
from region_historian.core.constants import LATEST_TIMESTAMP, ALL_VERSIONS

# Storage exports
from region_historian.storage import (
    VersionedRecordStore,
    Cell,
    InMemoryVersionedStore,
    StoreHandle,
    StoreConfig,
    BackendType,
    create_store,
    open_store,
)

# History exports
from region_historian.history import (
    EventKind,
    HistoryRecord,
    HistoryFetch,
    HistoryWriter,
    HistoryReader,
    RegionHistorian,
    registry,
)

__all__ = [
    # Version
    "__version__",
    # Result monad
    "Result",
    "Ok",
    "Err",
    # Identity types
    "RegionInfo",
    "ServerAddress",
    # Errors
    "ErrorCode",
    "HistorianError",
    "StorageError",
    "ConfigurationError",
    # Config
    "HistorianConfig",
    "ObservabilityConfig",
    "StoreConfig",
    "BackendType",
    # Constants
    "LATEST_TIMESTAMP",
    "ALL_VERSIONS",
    # Storage
    "VersionedRecordStore",
    "Cell",
    "InMemoryVersionedStore",
    "StoreHandle",
    "create_store",
    "open_store",
    # History
    "EventKind",
    "HistoryRecord",
    "HistoryFetch",
    "HistoryWriter",
    "HistoryReader",
    "RegionHistorian",
    "registry",
]
