"""
History Writer: best-effort append of region lifecycle events.

Every record is one new version of a historian column in the region's row:

    (region.region_name, historian:<event>, timestamp) -> description

Callers are lifecycle transition points (open, split, assignment...) whose
primary operation must never fail because its audit record could not be
written. append() therefore reports failures as Err values after logging
them, and the add_region_* helpers discard even that.
"""

from __future__ import annotations

import logging
from typing import Optional

from region_historian.core import constants as C
from region_historian.core.types import Result, Ok, Err, RegionInfo, ServerAddress
from region_historian.core.errors import StorageError
from region_historian.history.registry import EventKind
from region_historian.storage.handle import StoreHandle

logger = logging.getLogger(__name__)

# Description templates. Stored text is part of existing history, keep as is.
CREATION_TEMPLATE = "Region creation"
OPEN_TEMPLATE = "Region opened on server : {hostname}"
SPLIT_TEMPLATE = "Region split from  : {parent}"
COMPACTION_TEMPLATE = "Region compaction completed in {time_taken}"
FLUSH_TEMPLATE = "Region flush completed in {time_taken}"
ASSIGNMENT_TEMPLATE = "Region assigned to server {server_name}"


class HistoryWriter:
    """
    Appends audit records for regions.

    Usage:
        writer = HistoryWriter(handle, verbose_audit=True)
        writer.add_region_open(region, ServerAddress("rs-1.example.com"))

        # Rich form
        match writer.append(EventKind.OPEN, region, "Region opened"):
            case Ok(True): ...      # stored
            case Ok(False): ...     # skipped (meta region)
            case Err(error): ...    # already logged
    """

    __slots__ = ("_handle", "_verbose_audit")

    def __init__(
        self,
        handle: StoreHandle,
        verbose_audit: Optional[bool] = None,
    ) -> None:
        self._handle = handle
        self._verbose_audit = verbose_audit

    @property
    def verbose_audit(self) -> bool:
        """
        Whether compaction and flush events are recorded.

        Unset means: only while this module's logger is enabled for DEBUG.
        """
        if self._verbose_audit is None:
            return logger.isEnabledFor(logging.DEBUG)
        return self._verbose_audit

    # -------------------------------------------------------------------------
    # CORE APPEND
    # -------------------------------------------------------------------------

    def append(
        self,
        event_kind: EventKind,
        region: RegionInfo,
        description: str,
        timestamp: int = C.LATEST_TIMESTAMP,
    ) -> Result[bool, StorageError]:
        """
        Append one record to a region's history.

        Args:
            event_kind: Event being recorded
            region: Region the event happened to
            description: Free text stored as the record
            timestamp: Version in milliseconds; LATEST_TIMESTAMP lets the
                store stamp the write

        Returns:
            Ok(True): Record stored
            Ok(False): Region is a meta region, nothing stored
            Err(StorageError): Store unusable or the put failed (logged)

        Raises:
            ValueError: description is empty
        """
        if not description:
            raise ValueError("description must not be empty")
        if region.is_meta_region:
            return Ok(False)

        acquired = self._handle.acquire()
        if acquired.is_err():
            return Err(acquired.error)
        store = acquired.unwrap()

        row_key = region.region_name
        column_key = event_kind.column_key
        try:
            result = store.put(row_key, column_key, description.encode("utf-8"), timestamp)
        except Exception as e:
            result = Err(StorageError.io_failed("put", row_key, column_key, cause=e))

        if result.is_err():
            logger.warning(
                f"Unable to '{description}'",
                extra={
                    "region": region.region_name_as_string,
                    "event": event_kind.label,
                    "error": result.error.to_dict(),
                },
            )
            return Err(result.error)
        return Ok(True)

    # -------------------------------------------------------------------------
    # LIFECYCLE HELPERS
    # -------------------------------------------------------------------------

    def add_region_creation(self, region: RegionInfo) -> None:
        self.append(EventKind.CREATION, region, CREATION_TEMPLATE)

    def add_region_open(self, region: RegionInfo, address: ServerAddress) -> None:
        self.append(
            EventKind.OPEN, region, OPEN_TEMPLATE.format(hostname=address.hostname),
        )

    def add_region_split(
        self,
        old_region: RegionInfo,
        new_region_a: RegionInfo,
        new_region_b: RegionInfo,
    ) -> None:
        """Record the split on both daughters, naming the parent."""
        description = SPLIT_TEMPLATE.format(parent=old_region.region_name_as_string)
        for daughter in (new_region_a, new_region_b):
            self.append(EventKind.SPLIT, daughter, description)

    def add_region_compaction(self, region: RegionInfo, time_taken: str) -> None:
        if self.verbose_audit:
            self.append(
                EventKind.COMPACTION, region, COMPACTION_TEMPLATE.format(time_taken=time_taken),
            )

    def add_region_flush(self, region: RegionInfo, time_taken: str) -> None:
        if self.verbose_audit:
            self.append(
                EventKind.FLUSH, region, FLUSH_TEMPLATE.format(time_taken=time_taken),
            )

    def add_region_assignment(self, region: RegionInfo, server_name: str) -> None:
        self.append(
            EventKind.ASSIGNMENT,
            region,
            ASSIGNMENT_TEMPLATE.format(server_name=server_name),
        )
