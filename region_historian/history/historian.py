"""
Region Historian: caller-facing facade over one shared store handle.

Owns a StoreHandle, a HistoryWriter and a HistoryReader that share it.
The application constructs one RegionHistorian at startup and hands it to
whatever records or displays region lifecycle events.
"""

from __future__ import annotations

from typing import Optional

from region_historian.core.config import HistorianConfig
from region_historian.core.types import RegionInfo, ServerAddress
from region_historian.history.reader import HistoryReader
from region_historian.history.record import HistoryRecord
from region_historian.history.writer import HistoryWriter
from region_historian.storage.handle import StoreHandle
from region_historian.storage.protocols import VersionedRecordStore


class RegionHistorian:
    """
    Records and retrieves the lifecycle history of regions.

    Usage:
        historian = RegionHistorian.from_config(HistorianConfig.from_env().unwrap())

        historian.add_region_creation(region)
        historian.add_region_assignment(region, "rs-1.example.com:60020")

        for record in historian.get_region_history(region):
            print(record.timestamp_as_string(), record.event, record.description)

    add_region_* never raise and never report store failures. Use
    `writer.append()` / `reader.read()` to see them.
    """

    __slots__ = ("_handle", "_writer", "_reader")

    def __init__(
        self,
        handle: StoreHandle,
        verbose_audit: Optional[bool] = None,
    ) -> None:
        self._handle = handle
        self._writer = HistoryWriter(handle, verbose_audit=verbose_audit)
        self._reader = HistoryReader(handle)

    @classmethod
    def from_config(cls, config: HistorianConfig) -> RegionHistorian:
        """Historian whose store opens lazily from config on first use."""
        return cls(StoreHandle.from_config(config.store), verbose_audit=config.verbose_audit)

    @classmethod
    def for_store(
        cls,
        store: VersionedRecordStore,
        verbose_audit: Optional[bool] = None,
    ) -> RegionHistorian:
        """Historian over an already opened store."""
        return cls(StoreHandle.of(store), verbose_audit=verbose_audit)

    @property
    def handle(self) -> StoreHandle:
        return self._handle

    @property
    def writer(self) -> HistoryWriter:
        return self._writer

    @property
    def reader(self) -> HistoryReader:
        return self._reader

    # -------------------------------------------------------------------------
    # WRITE SIDE
    # -------------------------------------------------------------------------

    def add_region_creation(self, region: RegionInfo) -> None:
        self._writer.add_region_creation(region)

    def add_region_open(self, region: RegionInfo, address: ServerAddress) -> None:
        self._writer.add_region_open(region, address)

    def add_region_split(
        self,
        old_region: RegionInfo,
        new_region_a: RegionInfo,
        new_region_b: RegionInfo,
    ) -> None:
        self._writer.add_region_split(old_region, new_region_a, new_region_b)

    def add_region_compaction(self, region: RegionInfo, time_taken: str) -> None:
        self._writer.add_region_compaction(region, time_taken)

    def add_region_flush(self, region: RegionInfo, time_taken: str) -> None:
        self._writer.add_region_flush(region, time_taken)

    def add_region_assignment(self, region: RegionInfo, server_name: str) -> None:
        self._writer.add_region_assignment(region, server_name)

    # -------------------------------------------------------------------------
    # READ SIDE
    # -------------------------------------------------------------------------

    def fetch_history(self, region: RegionInfo) -> list[HistoryRecord]:
        """Every recorded event of region, newest first."""
        return self._reader.fetch(region)

    get_region_history = fetch_history

    def get_region_history_by_name(self, region_name: str) -> list[HistoryRecord]:
        return self._reader.fetch_by_name(region_name)
