"""
Shared Store Handle

One handle to the versioned record store is shared by every writer and
reader of a process. The handle is constructed explicitly by the owning
application and injected; it opens the store on first use.

A failed open is logged once and is final: the handle stays unusable and
every later acquire() returns the same StorageError, so callers degrade to
no-ops instead of retrying the open on every lifecycle event.
close() is final as well: the store is not reopened afterwards.

No lock guards the lazy open. Two threads racing on the very first use may
both run the opener; the loser's store is closed.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from region_historian.core.types import Result, Ok, Err
from region_historian.core.errors import StorageError
from region_historian.storage.config import StoreConfig
from region_historian.storage.protocols import VersionedRecordStore

logger = logging.getLogger(__name__)

StoreOpener = Callable[[], Result[VersionedRecordStore, StorageError]]


class StoreHandle:
    """
    Lazily opened, process-lifetime reference to a VersionedRecordStore.

    Usage:
        handle = StoreHandle.from_config(config.store)
        writer = HistoryWriter(handle)
        reader = HistoryReader(handle)
    """

    __slots__ = ("_opener", "_name", "_store", "_failure", "_closed")

    def __init__(self, opener: StoreOpener, name: str = "store") -> None:
        self._opener = opener
        self._name = name
        self._store: Optional[VersionedRecordStore] = None
        self._failure: Optional[StorageError] = None
        self._closed = False

    @classmethod
    def of(cls, store: VersionedRecordStore, name: str = "store") -> StoreHandle:
        """Wrap an already opened store."""
        handle = cls(lambda: Ok(store), name=name)
        handle._store = store
        return handle

    @classmethod
    def from_config(cls, config: StoreConfig) -> StoreHandle:
        from region_historian.storage import open_store

        return cls(lambda: open_store(config), name=config.backend.value)

    def acquire(self) -> Result[VersionedRecordStore, StorageError]:
        """
        Return the open store, opening it on first call.

        Returns:
            Ok(store): Store is usable
            Err(StorageError): Open failed, now or on an earlier call, or
                the handle was closed
        """
        if self._closed:
            return Err(StorageError.unavailable(self._name, "handle closed"))
        if self._store is not None:
            return Ok(self._store)
        if self._failure is not None:
            return Err(self._failure)

        try:
            result = self._opener()
        except Exception as e:
            result = Err(StorageError.unavailable(self._name, "store construction raised", cause=e))

        if result.is_err():
            self._failure = result.error
            logger.warning(
                "Unable to open store for region historian",
                extra={"store": self._name, "error": result.error.to_dict()},
            )
            return result

        store = result.unwrap()
        if self._store is not None:
            store.close()
            return Ok(self._store)
        self._store = store
        logger.debug("Region historian is ready", extra={"store": self._name})
        return Ok(store)

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_open(self) -> bool:
        return self._store is not None

    @property
    def failure(self) -> Optional[StorageError]:
        """Error that made this handle unusable, if any."""
        return self._failure

    def close(self) -> None:
        """
        Close the store for good. Owned by the application, never called by
        the historian. Later acquire() calls return unavailable.
        """
        self._closed = True
        if self._store is not None:
            self._store.close()
            self._store = None
