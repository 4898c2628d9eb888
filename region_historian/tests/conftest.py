"""
Shared fixtures for the historian test suite.
"""

from __future__ import annotations

import pytest

from region_historian.core.types import Result, Err, RegionInfo
from region_historian.core.errors import StorageError
from region_historian.history.historian import RegionHistorian
from region_historian.storage.handle import StoreHandle
from region_historian.storage.memory_store import InMemoryVersionedStore
from region_historian.storage.protocols import Cell


class FailingColumnStore(InMemoryVersionedStore):
    """In-memory store whose reads of chosen columns fail."""

    __slots__ = ("failing_columns",)

    def __init__(self, failing_columns: set[bytes]) -> None:
        super().__init__()
        self.failing_columns = failing_columns

    def get_versions(
        self,
        row_key: bytes,
        column_key: bytes,
        max_versions: int,
    ) -> Result[list[Cell], StorageError]:
        if column_key in self.failing_columns:
            return Err(StorageError.io_failed("get", row_key, column_key))
        return super().get_versions(row_key, column_key, max_versions)


@pytest.fixture
def store() -> InMemoryVersionedStore:
    return InMemoryVersionedStore()


@pytest.fixture
def handle(store: InMemoryVersionedStore) -> StoreHandle:
    return StoreHandle.of(store, name="memory")


@pytest.fixture
def historian(store: InMemoryVersionedStore) -> RegionHistorian:
    return RegionHistorian.for_store(store, verbose_audit=True)


@pytest.fixture
def region() -> RegionInfo:
    return RegionInfo(table_name="usertable", start_key=b"row-0500", region_id=1212501909000)


@pytest.fixture
def daughters() -> tuple[RegionInfo, RegionInfo]:
    return (
        RegionInfo(table_name="usertable", start_key=b"row-0500", region_id=1212501999000),
        RegionInfo(table_name="usertable", start_key=b"row-0750", region_id=1212501999000),
    )


@pytest.fixture
def meta_region() -> RegionInfo:
    return RegionInfo(table_name=".META.", start_key=b"", region_id=1)


@pytest.fixture
def root_region() -> RegionInfo:
    return RegionInfo(table_name="-ROOT-", start_key=b"", region_id=0)
