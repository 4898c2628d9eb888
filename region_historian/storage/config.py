"""
Store Backend Configuration
===========================

Frozen dataclasses describing which versioned record store the historian
writes to and how to reach it. Values are checked when constructed, so a
config object that exists is one the backends can use.

    StoreConfig
    ├── backend   memory | sqlite | redis
    ├── sqlite    SQLiteConfig (database directory, busy timeout)
    └── redis     RedisConfig  (topology, endpoints, pool, key prefix)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from region_historian.core import constants as C


# =============================================================================
# ENUMERATIONS
# =============================================================================

class BackendType(Enum):
    """Versioned record store backend, by its configuration spelling."""
    IN_MEMORY = "memory"  # Development/testing only
    SQLITE = "sqlite"     # Single node, durable
    REDIS = "redis"       # Shared across region servers

    @classmethod
    def parse(cls, value: str) -> BackendType:
        """Parse a backend name, raising ValueError for unknown names."""
        normalized = value.strip().lower()
        for backend in cls:
            if backend.value == normalized:
                return backend
        raise ValueError(
            f"unknown backend {value!r}, expected one of "
            f"{', '.join(b.value for b in cls)}"
        )


class RedisMode(Enum):
    STANDALONE = "standalone"
    SENTINEL = "sentinel"
    CLUSTER = "cluster"

    @classmethod
    def parse(cls, value: str) -> RedisMode:
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(
                f"unknown redis mode {value!r}, expected one of "
                f"{', '.join(m.value for m in cls)}"
            ) from None


# =============================================================================
# HELPERS
# =============================================================================

def parse_bool(value: str, default: bool) -> bool:
    """Parse the usual spellings of a boolean environment variable."""
    val = value.strip().lower()
    if val in ("true", "1", "yes", "on"):
        return True
    if val in ("false", "0", "no", "off"):
        return False
    return default


def parse_endpoints(value: str) -> Tuple[Tuple[str, int], ...]:
    """
    Parse "host:port, host:port" into (host, port) pairs.

    Raises:
        ValueError: An entry is not host:port or the port is not a number
    """
    endpoints = []
    for entry in filter(None, (e.strip() for e in value.split(","))):
        host, sep, port = entry.rpartition(":")
        if not sep or not host:
            raise ValueError(f"expected host:port, got {entry!r}")
        endpoints.append((host, int(port)))
    return tuple(endpoints)


# =============================================================================
# REDIS
# =============================================================================

@dataclass(frozen=True, slots=True)
class RedisConfig:
    """
    How the Redis backend reaches its server(s).

    In sentinel mode `host`/`port` are ignored: the master named
    `sentinel_service` is looked up through `sentinel_hosts`. In cluster
    mode `host`/`port` name any seed node and `db` is not used.

    Example:
        >>> RedisConfig(host="redis.example.com", password="secret")
        >>> RedisConfig(mode=RedisMode.SENTINEL, sentinel_hosts=(("s1", 26379),))
    """
    mode: RedisMode = RedisMode.STANDALONE
    host: str = "localhost"
    port: int = 6379
    password: Optional[str] = None
    db: int = 0
    ssl: bool = False

    sentinel_hosts: Tuple[Tuple[str, int], ...] = field(default_factory=tuple)
    sentinel_service: str = "mymaster"

    max_connections: int = 50
    connect_timeout_ms: int = 2000
    socket_timeout_ms: int = 5000

    key_prefix: str = C.REDIS_KEY_PREFIX

    def __post_init__(self) -> None:
        problems = []
        if not 1 <= self.port <= 65535:
            problems.append(f"port {self.port} outside 1..65535")
        if self.mode != RedisMode.CLUSTER and not 0 <= self.db <= 15:
            problems.append(f"db {self.db} outside 0..15")
        for name in ("max_connections", "connect_timeout_ms", "socket_timeout_ms"):
            if getattr(self, name) <= 0:
                problems.append(f"{name} must be positive")
        if self.mode == RedisMode.SENTINEL and not self.sentinel_hosts:
            problems.append("sentinel mode needs sentinel_hosts")
        if not self.key_prefix:
            problems.append("key_prefix is empty")
        if problems:
            raise ValueError("invalid redis config: " + "; ".join(problems))

    @classmethod
    def from_env(cls, prefix: str = "HISTORIAN_REDIS") -> RedisConfig:
        """
        Read {prefix}_MODE, _HOST, _PORT, _PASSWORD, _DB, _SSL,
        _SENTINEL_HOSTS (host:port list), _SENTINEL_SERVICE,
        _MAX_CONNECTIONS, _CONNECT_TIMEOUT_MS, _SOCKET_TIMEOUT_MS and
        _KEY_PREFIX. Unset variables keep the defaults.

        Raises:
            ValueError: A variable is malformed or the result is invalid
        """
        env = {
            key[len(prefix) + 1:]: value
            for key, value in os.environ.items()
            if key.startswith(prefix + "_") and value
        }
        overrides: Dict[str, Any] = {}

        if "MODE" in env:
            overrides["mode"] = RedisMode.parse(env["MODE"])
        if "SENTINEL_HOSTS" in env:
            overrides["sentinel_hosts"] = parse_endpoints(env["SENTINEL_HOSTS"])
        if "SSL" in env:
            overrides["ssl"] = parse_bool(env["SSL"], False)
        for name in ("host", "password", "sentinel_service", "key_prefix"):
            if name.upper() in env:
                overrides[name] = env[name.upper()]
        for name in ("port", "db", "max_connections", "connect_timeout_ms", "socket_timeout_ms"):
            if name.upper() in env:
                overrides[name] = int(env[name.upper()])

        return cls(**overrides)

    def get_connection_kwargs(self) -> Dict[str, Any]:
        """
        Keyword arguments for the redis-py client of this mode.

        Responses stay undecoded: cell values are raw bytes.
        """
        kwargs: Dict[str, Any] = {
            "password": self.password,
            "socket_timeout": self.socket_timeout_ms / 1000,
            "socket_connect_timeout": self.connect_timeout_ms / 1000,
            "decode_responses": False,
        }
        if self.mode != RedisMode.SENTINEL:
            # Sentinel pools pick host, port and connection class themselves
            kwargs.update(
                host=self.host,
                port=self.port,
                max_connections=self.max_connections,
                ssl=self.ssl,
            )
        if self.mode != RedisMode.CLUSTER:
            kwargs["db"] = self.db
        return kwargs


# =============================================================================
# SQLITE
# =============================================================================

@dataclass(frozen=True)
class SQLiteConfig:
    data_dir: Path = field(default_factory=lambda: Path("./data/historian"))
    busy_timeout_ms: int = C.SQLITE_BUSY_TIMEOUT_MS

    @property
    def db_path(self) -> Path:
        return self.data_dir / "historian.db"


# =============================================================================
# BACKEND SELECTION
# =============================================================================

@dataclass(frozen=True)
class StoreConfig:
    """Backend selection plus per-backend settings."""

    backend: BackendType = BackendType.IN_MEMORY
    sqlite: SQLiteConfig = field(default_factory=SQLiteConfig)
    redis: RedisConfig = field(default_factory=RedisConfig)

    @classmethod
    def for_development(cls) -> StoreConfig:
        return cls(backend=BackendType.IN_MEMORY)
