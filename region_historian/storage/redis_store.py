"""
Redis Versioned Record Store
============================

Networked backend shared by every region server of a cluster.

Key Layout:
-----------
Each (row, column) owns two keys sharing one hash tag, so they land in the
same cluster slot:

    {<prefix>:<hex(row)>:<column>}      HASH  version -> value
    {<prefix>:<hex(row)>:<column>}:ts   ZSET  version scored by version

Version assignment and the two writes happen in one Lua script, so
concurrent LATEST writers on different servers still get distinct versions.

Thread Safety:
--------------
- Connection pool is thread-safe (redis-py internal locking)
- Instance methods are stateless except for the client reference
- Lua scripts execute atomically on server
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import redis

from region_historian.core import constants as C
from region_historian.core.types import Result, Ok, Err, current_time_millis
from region_historian.core.errors import StorageError
from region_historian.storage.config import RedisConfig, RedisMode
from region_historian.storage.protocols import Cell

logger = logging.getLogger(__name__)


# KEYS[1] = value hash, KEYS[2] = version index
# ARGV[1] = requested version (or client clock when latest)
# ARGV[2] = "1" when the store picks the version
# ARGV[3] = value
LUA_PUT_SCRIPT: str = """
local version = tonumber(ARGV[1])
if ARGV[2] == '1' then
    local newest = redis.call('ZREVRANGE', KEYS[2], 0, 0, 'WITHSCORES')
    if #newest > 0 then
        local newest_version = tonumber(newest[2])
        if version <= newest_version then
            version = newest_version + 1
        end
    end
end
local field = string.format('%d', version)
redis.call('HSET', KEYS[1], field, ARGV[3])
redis.call('ZADD', KEYS[2], version, field)
return field
"""


class RedisVersionedStore:
    """
    Redis storage for historian cells.

    Usage:
        store = RedisVersionedStore(RedisConfig(host="redis.prod"))
        if store.connect().is_ok():
            store.put(row, column, b"Region creation", LATEST_TIMESTAMP)

    A pre-built client may be injected, in which case connect() only
    verifies it and loads the script.
    """

    __slots__ = ("_config", "_client", "_put_script", "_connected")

    def __init__(
        self,
        config: RedisConfig,
        client: Optional[Any] = None,
    ) -> None:
        self._config = config
        self._client = client
        self._put_script: Optional[Any] = None
        self._connected = False

    # -------------------------------------------------------------------------
    # CONNECTION MANAGEMENT
    # -------------------------------------------------------------------------

    def connect(self) -> Result[None, StorageError]:
        """Build the client for the configured topology, ping, load script."""
        try:
            if self._client is None:
                self._client = self._build_client()
            self._client.ping()
            self._put_script = self._client.register_script(LUA_PUT_SCRIPT)
            self._connected = True
            logger.debug(
                "Redis store connected",
                extra={"redis_host": self._config.host, "redis_mode": self._config.mode.value},
            )
            return Ok(None)
        except redis.RedisError as e:
            return Err(StorageError.unavailable(
                store=f"redis://{self._config.host}:{self._config.port}",
                reason="connection failed",
                cause=e,
            ))

    def _build_client(self) -> Any:
        kwargs = self._config.get_connection_kwargs()

        if self._config.mode == RedisMode.CLUSTER:
            from redis.cluster import RedisCluster
            return RedisCluster(**kwargs)

        if self._config.mode == RedisMode.SENTINEL:
            from redis.sentinel import Sentinel
            sentinel = Sentinel(
                list(self._config.sentinel_hosts),
                socket_timeout=self._config.socket_timeout_ms / 1000,
            )
            return sentinel.master_for(self._config.sentinel_service, **kwargs)

        return redis.Redis(**kwargs)

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
        self._put_script = None
        self._connected = False

    # -------------------------------------------------------------------------
    # KEYS
    # -------------------------------------------------------------------------

    def _hash_key(self, row_key: bytes, column_key: bytes) -> str:
        column = column_key.decode("utf-8")
        return f"{{{self._config.key_prefix}:{row_key.hex()}:{column}}}"

    def _index_key(self, row_key: bytes, column_key: bytes) -> str:
        return self._hash_key(row_key, column_key) + ":ts"

    # -------------------------------------------------------------------------
    # VersionedRecordStore
    # -------------------------------------------------------------------------

    def put(
        self,
        row_key: bytes,
        column_key: bytes,
        value: bytes,
        timestamp: int,
    ) -> Result[int, StorageError]:
        if not self._connected or self._put_script is None:
            return Err(StorageError.unavailable("redis", "not connected"))

        latest = timestamp == C.LATEST_TIMESTAMP
        requested = current_time_millis() if latest else timestamp
        try:
            field = self._put_script(
                keys=[
                    self._hash_key(row_key, column_key),
                    self._index_key(row_key, column_key),
                ],
                args=[requested, "1" if latest else "0", value],
            )
            return Ok(int(field))
        except redis.RedisError as e:
            return Err(StorageError.io_failed("put", row_key, column_key, cause=e))

    def get_versions(
        self,
        row_key: bytes,
        column_key: bytes,
        max_versions: int,
    ) -> Result[list[Cell], StorageError]:
        if not self._connected or self._client is None:
            return Err(StorageError.unavailable("redis", "not connected"))
        if max_versions <= 0:
            return Ok([])

        try:
            fields = self._client.zrevrange(
                self._index_key(row_key, column_key), 0, max_versions - 1,
            )
            if not fields:
                return Ok([])
            values = self._client.hmget(self._hash_key(row_key, column_key), fields)
        except redis.RedisError as e:
            return Err(StorageError.io_failed("get", row_key, column_key, cause=e))

        # Versions removed from the hash out of band are skipped
        return Ok([
            Cell(timestamp=int(field), value=value)
            for field, value in zip(fields, values)
            if value is not None
        ])
