"""
History Module: Region Lifecycle Audit Trail

Provides:
- Registry: The fixed event kinds and their historian columns
- Writer: Best-effort append of lifecycle events
- Reader: Merged, newest-first history of a region
- Historian: Facade sharing one store handle between both

Storage Model:
    (region_name, historian:<event>, timestamp) -> description
"""

from region_historian.history.registry import (
    EventKind,
    COLUMN_KEYS,
    registry,
    label_for_column,
)
from region_historian.history.record import HistoryRecord
from region_historian.history.writer import HistoryWriter
from region_historian.history.reader import HistoryReader, HistoryFetch
from region_historian.history.historian import RegionHistorian

__all__ = [
    # Registry
    "EventKind",
    "COLUMN_KEYS",
    "registry",
    "label_for_column",
    # Records
    "HistoryRecord",
    "HistoryFetch",
    # Write/read paths
    "HistoryWriter",
    "HistoryReader",
    "RegionHistorian",
]
