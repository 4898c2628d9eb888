"""
Integration Tests: Region Historian Facade

End-to-end checks of recording and retrieving region lifecycle history
through RegionHistorian over the in-memory and SQLite backends.
"""

import pytest

from region_historian.core.config import HistorianConfig
from region_historian.core.constants import LATEST_TIMESTAMP
from region_historian.core.types import RegionInfo, ServerAddress
from region_historian.history import RegionHistorian
from region_historian.history.registry import EventKind
from region_historian.storage.config import BackendType, SQLiteConfig, StoreConfig


class TestLifecycle:
    """A region's life as seen by the reader."""

    def test_full_lifecycle_newest_first(self, historian, region, daughters):
        writer = historian.writer
        writer.append(EventKind.CREATION, region, "Region creation", timestamp=1000)
        writer.append(EventKind.ASSIGNMENT, region, "Region assigned to server rs-1:60020", timestamp=2000)
        writer.append(EventKind.OPEN, region, "Region opened on server : rs-1", timestamp=3000)
        writer.append(EventKind.FLUSH, region, "Region flush completed in 40ms", timestamp=4000)

        history = historian.get_region_history(region)
        assert [r.event for r in history] == ["flush", "open", "assignment", "creation"]
        assert [r.timestamp for r in history] == [4000, 3000, 2000, 1000]

    def test_open_round_trip(self, historian, region):
        historian.writer.append(
            EventKind.OPEN, region, "Region opened on server : host-1", timestamp=1212501909000,
        )
        (record,) = historian.fetch_history(region)
        assert record.event == "open"
        assert record.description == "Region opened on server : host-1"
        assert record.timestamp == 1212501909000
        assert record.timestamp_as_string() == "Tue, 3 Jun 2008 14:05:09"

    def test_rapid_events_all_survive(self, historian, region):
        for i in range(10):
            historian.add_region_assignment(region, f"rs-{i}:60020")
        history = historian.get_region_history(region)
        assert len(history) == 10
        timestamps = [r.timestamp for r in history]
        assert timestamps == sorted(timestamps, reverse=True)
        assert len(set(timestamps)) == 10
        assert history[0].description == "Region assigned to server rs-9:60020"

    def test_split_lands_on_daughters_only(self, historian, region, daughters):
        historian.add_region_split(region, *daughters)
        assert historian.get_region_history(region) == []
        for daughter in daughters:
            (record,) = historian.get_region_history(daughter)
            assert record.event == "split"
            assert record.description == f"Region split from  : {region.region_name_as_string}"

    def test_by_name_matches_by_region(self, historian, region):
        historian.add_region_open(region, ServerAddress("rs-2", 60020))
        assert historian.get_region_history_by_name(region.region_name_as_string) == (
            historian.get_region_history(region)
        )

    def test_meta_regions_have_no_history(self, historian, meta_region, root_region):
        for catalog in (meta_region, root_region):
            historian.add_region_creation(catalog)
            historian.add_region_open(catalog, ServerAddress("rs-1"))
            historian.add_region_assignment(catalog, "rs-1:60020")
            historian.add_region_compaction(catalog, "1sec")
            assert historian.get_region_history(catalog) == []

    def test_split_of_meta_parent_is_recorded_on_user_daughters(self, historian, meta_region, daughters):
        historian.add_region_split(meta_region, *daughters)
        assert all(len(historian.get_region_history(d)) == 1 for d in daughters)


class TestVerboseAudit:
    def test_maintenance_not_recorded_when_disabled(self, store, region):
        historian = RegionHistorian.for_store(store, verbose_audit=False)
        historian.add_region_compaction(region, "3sec")
        historian.add_region_flush(region, "3sec")
        historian.add_region_creation(region)
        assert [r.event for r in historian.get_region_history(region)] == ["creation"]

    def test_maintenance_recorded_when_enabled(self, historian, region):
        historian.add_region_compaction(region, "3sec")
        historian.add_region_flush(region, "1sec")
        assert {r.event for r in historian.get_region_history(region)} == {"compaction", "flush"}


class TestFromConfig:
    def test_default_config_is_in_memory(self, region):
        historian = RegionHistorian.from_config(HistorianConfig())
        assert not historian.handle.is_open
        historian.add_region_creation(region)
        assert historian.handle.is_open
        assert historian.handle.name == "memory"
        assert len(historian.get_region_history(region)) == 1

    def test_sqlite_history_outlives_the_process_handle(self, tmp_path, region):
        config = HistorianConfig(
            store=StoreConfig(backend=BackendType.SQLITE, sqlite=SQLiteConfig(data_dir=tmp_path)),
        )
        first = RegionHistorian.from_config(config)
        first.add_region_open(region, ServerAddress("rs-5"))
        first.handle.close()

        second = RegionHistorian.from_config(config)
        (record,) = second.get_region_history(region)
        second.handle.close()
        assert record.description == "Region opened on server : rs-5"

    def test_unopenable_store_degrades_to_noop(self, tmp_path, region):
        blocker = tmp_path / "file"
        blocker.write_text("")
        config = HistorianConfig(
            store=StoreConfig(backend=BackendType.SQLITE, sqlite=SQLiteConfig(data_dir=blocker / "db")),
        )
        historian = RegionHistorian.from_config(config)

        historian.add_region_creation(region)
        assert historian.get_region_history(region) == []
        assert historian.handle.failure.is_unavailable


@pytest.mark.parametrize("start_key", [b"", b"\x00\xffbinary"])
def test_binary_start_keys(historian, start_key):
    region = RegionInfo(table_name="usertable", start_key=start_key, region_id=9)
    historian.writer.append(EventKind.CREATION, region, "Region creation", timestamp=LATEST_TIMESTAMP)
    assert len(historian.get_region_history(region)) == 1
