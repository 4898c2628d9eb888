"""
History Reader: merged, reverse-chronological region history.

Reads every version of every historian column of a region row and merges
them into one list, newest first. Records with equal timestamps keep the
order they were gathered in (registry order, then store order), since the
sort is stable.

A failing column does not abort the read: the failure is logged and the
other columns are still gathered.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from region_historian.core import constants as C
from region_historian.core.types import Result, Ok, Err, RegionInfo
from region_historian.core.errors import StorageError
from region_historian.history.record import HistoryRecord
from region_historian.history.registry import registry, label_for_column
from region_historian.storage.handle import StoreHandle

logger = logging.getLogger(__name__)


@dataclass
class HistoryFetch:
    """Records gathered for one region plus the columns that failed."""
    records: list[HistoryRecord] = field(default_factory=list)
    failures: list[StorageError] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        """True when every historian column was read."""
        return not self.failures


class HistoryReader:
    """
    Reads region history.

    Usage:
        reader = HistoryReader(handle)
        for record in reader.fetch(region):
            print(record.timestamp_as_string(), record.event, record.description)
    """

    __slots__ = ("_handle",)

    def __init__(self, handle: StoreHandle) -> None:
        self._handle = handle

    def read(self, region: RegionInfo) -> Result[HistoryFetch, StorageError]:
        """
        Gather a region's history, reporting per-column failures.

        Returns:
            Ok(HistoryFetch): Records newest first, possibly partial
            Err(StorageError): The store handle is unusable
        """
        return self.read_row(region.region_name)

    def read_row(self, row_key: bytes) -> Result[HistoryFetch, StorageError]:
        """Same as read(), addressed by raw region name."""
        acquired = self._handle.acquire()
        if acquired.is_err():
            return Err(acquired.error)
        store = acquired.unwrap()

        fetch = HistoryFetch()
        for _kind, column_key in registry():
            try:
                result = store.get_versions(row_key, column_key, C.ALL_VERSIONS)
            except Exception as e:
                result = Err(StorageError.io_failed("get", row_key, column_key, cause=e))

            if result.is_err():
                logger.warning(
                    "Unable to retrieve region history",
                    extra={
                        "row": row_key.decode("utf-8", errors="replace"),
                        "error": result.error.to_dict(),
                    },
                )
                fetch.failures.append(result.error)
                continue

            label = label_for_column(column_key)
            fetch.records.extend(
                HistoryRecord(
                    timestamp=cell.timestamp,
                    event=label,
                    description=cell.value.decode("utf-8", errors="replace"),
                )
                for cell in result.unwrap()
            )

        fetch.records.sort(key=lambda r: r.timestamp, reverse=True)
        return Ok(fetch)

    def fetch(self, region: RegionInfo) -> list[HistoryRecord]:
        """
        A region's history, newest first.

        Never raises for store trouble: an unusable store yields [] and
        failed columns are left out.
        """
        return self.read(region).map(lambda f: f.records).unwrap_or([])

    def fetch_by_name(self, region_name: str) -> list[HistoryRecord]:
        """History of the region whose name (row key) is region_name."""
        return self.read_row(region_name.encode("utf-8")).map(lambda f: f.records).unwrap_or([])
