"""
Unit Tests: Configuration
"""

from pathlib import Path

import pytest

from region_historian.core.config import HistorianConfig, ObservabilityConfig
from region_historian.core.errors import ErrorCode
from region_historian.storage.config import (
    BackendType,
    RedisConfig,
    RedisMode,
    SQLiteConfig,
    StoreConfig,
    parse_bool,
    parse_endpoints,
)

_ENV_VARS = (
    "HISTORIAN_STORE_BACKEND",
    "HISTORIAN_SQLITE_DIR",
    "HISTORIAN_SQLITE_BUSY_TIMEOUT_MS",
    "HISTORIAN_VERBOSE_AUDIT",
    "HISTORIAN_LOG_LEVEL",
    "HISTORIAN_LOG_JSON",
    "HISTORIAN_REDIS_HOST",
    "HISTORIAN_REDIS_PORT",
    "HISTORIAN_REDIS_MODE",
    "HISTORIAN_REDIS_SENTINEL_HOSTS",
    "HISTORIAN_REDIS_KEY_PREFIX",
    "HISTORIAN_REDIS_DB",
    "HISTORIAN_REDIS_SSL",
    "HISTORIAN_REDIS_PASSWORD",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestHistorianConfig:
    def test_defaults(self):
        config = HistorianConfig.from_env().unwrap()
        assert config.store.backend is BackendType.IN_MEMORY
        assert config.verbose_audit is None
        assert config.observability == ObservabilityConfig(log_level="INFO", log_json=True)

    def test_sqlite_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HISTORIAN_STORE_BACKEND", "SQLite")
        monkeypatch.setenv("HISTORIAN_SQLITE_DIR", str(tmp_path))
        monkeypatch.setenv("HISTORIAN_SQLITE_BUSY_TIMEOUT_MS", "250")

        config = HistorianConfig.from_env().unwrap()
        assert config.store.backend is BackendType.SQLITE
        assert config.store.sqlite.db_path == Path(tmp_path) / "historian.db"
        assert config.store.sqlite.busy_timeout_ms == 250

    @pytest.mark.parametrize("raw, expected", [("true", True), ("0", False), ("off", False)])
    def test_verbose_audit(self, monkeypatch, raw, expected):
        monkeypatch.setenv("HISTORIAN_VERBOSE_AUDIT", raw)
        assert HistorianConfig.from_env().unwrap().verbose_audit is expected

    def test_log_settings(self, monkeypatch):
        monkeypatch.setenv("HISTORIAN_LOG_LEVEL", "debug")
        monkeypatch.setenv("HISTORIAN_LOG_JSON", "no")
        observability = HistorianConfig.from_env().unwrap().observability
        assert observability.log_level == "DEBUG"
        assert observability.log_json is False

    def test_unknown_backend(self, monkeypatch):
        monkeypatch.setenv("HISTORIAN_STORE_BACKEND", "hbase")
        result = HistorianConfig.from_env()
        assert result.error.code == ErrorCode.CONFIGURATION_INVALID
        assert result.error.context["setting"] == "HISTORIAN_STORE_BACKEND"

    def test_unknown_log_level(self, monkeypatch):
        monkeypatch.setenv("HISTORIAN_LOG_LEVEL", "LOUD")
        assert HistorianConfig.from_env().is_err()

    def test_malformed_number(self, monkeypatch):
        monkeypatch.setenv("HISTORIAN_SQLITE_BUSY_TIMEOUT_MS", "soon")
        assert HistorianConfig.from_env().error.code == ErrorCode.CONFIGURATION_INVALID

    def test_negative_busy_timeout(self):
        config = HistorianConfig(store=StoreConfig(sqlite=SQLiteConfig(busy_timeout_ms=-1)))
        assert config.validate().is_err()


class TestRedisConfig:
    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("HISTORIAN_REDIS_HOST", "redis.internal")
        monkeypatch.setenv("HISTORIAN_REDIS_PORT", "6380")
        monkeypatch.setenv("HISTORIAN_REDIS_KEY_PREFIX", "hist")

        config = RedisConfig.from_env()
        assert (config.host, config.port, config.key_prefix) == ("redis.internal", 6380, "hist")

    def test_sentinel_from_env(self, monkeypatch):
        monkeypatch.setenv("HISTORIAN_REDIS_MODE", "sentinel")
        monkeypatch.setenv("HISTORIAN_REDIS_SENTINEL_HOSTS", "s1:26379, s2:26379")

        config = RedisConfig.from_env()
        assert config.mode is RedisMode.SENTINEL
        assert config.sentinel_hosts == (("s1", 26379), ("s2", 26379))

    @pytest.mark.parametrize("kwargs", [
        {"port": 0},
        {"max_connections": 0},
        {"key_prefix": ""},
        {"mode": RedisMode.SENTINEL},
    ])
    def test_rejects_invalid(self, kwargs):
        with pytest.raises(ValueError):
            RedisConfig(**kwargs)

    def test_connection_kwargs(self):
        kwargs = RedisConfig(host="r1", socket_timeout_ms=1500).get_connection_kwargs()
        assert kwargs["host"] == "r1"
        assert kwargs["socket_timeout"] == 1.5
        assert kwargs["decode_responses"] is False
        assert kwargs["db"] == 0

    def test_cluster_kwargs_have_no_db(self):
        kwargs = RedisConfig(mode=RedisMode.CLUSTER).get_connection_kwargs()
        assert "db" not in kwargs

    def test_sentinel_kwargs_leave_pool_settings_out(self):
        config = RedisConfig(mode=RedisMode.SENTINEL, sentinel_hosts=(("s1", 26379),))
        kwargs = config.get_connection_kwargs()
        assert "host" not in kwargs
        assert "max_connections" not in kwargs


def test_parse_bool():
    assert parse_bool(" YES ", False) is True
    assert parse_bool("maybe", True) is True
    assert parse_bool("", False) is False


def test_parse_endpoints():
    assert parse_endpoints("s1:26379,,s2:26380 ") == (("s1", 26379), ("s2", 26380))
    with pytest.raises(ValueError):
        parse_endpoints("s1")


def test_unknown_redis_mode_is_configuration_error(monkeypatch):
    monkeypatch.setenv("HISTORIAN_REDIS_MODE", "mesh")
    assert HistorianConfig.from_env().error.code == ErrorCode.CONFIGURATION_INVALID
