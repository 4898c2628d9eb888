"""
Core Type Definitions for the Region Historian

Result values for store calls that can fail, plus the identity types the
historian receives from region management. Row keys are bytes, exactly as
the backing store sees them.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import (
    Any,
    Callable,
    Generic,
    Literal,
    TypeVar,
    Union,
)

from region_historian.core import constants as C

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")


# =============================================================================
# RESULT
# =============================================================================
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T

    def is_ok(self) -> Literal[True]:
        return True

    def is_err(self) -> Literal[False]:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def map(self, fn: Callable[[T], U]) -> Ok[U]:
        return Ok(fn(self.value))

    def flat_map(self, fn: Callable[[T], Result[U, E]]) -> Result[U, E]:
        return fn(self.value)

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failure value. Store errors travel as Err instead of being raised."""

    error: E

    def is_ok(self) -> Literal[False]:
        return False

    def is_err(self) -> Literal[True]:
        return True

    def unwrap(self) -> Any:
        """Raises RuntimeError: unwrapping a failure is a caller bug."""
        raise RuntimeError(f"Called unwrap() on Err: {self.error}")

    def unwrap_or(self, default: T) -> T:
        return default

    def map(self, fn: Callable[[Any], U]) -> Err[E]:
        return self

    def flat_map(self, fn: Callable[[Any], Result[U, E]]) -> Err[E]:
        return self

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Union[Ok[T], Err[E]]


# =============================================================================
# TIMESTAMP
# =============================================================================
@dataclass(frozen=True, slots=True, order=True)
class Timestamp:
    """
    Wall-clock instant in nanoseconds, stamped on every error.

    Cell versions in the store are plain millisecond integers; `millis`
    converts.
    """

    nanos: int

    @classmethod
    def now(cls) -> Timestamp:
        return cls(nanos=time.time_ns())

    @classmethod
    def from_millis(cls, millis: int) -> Timestamp:
        return cls(nanos=millis * C.NS_PER_MS)

    @property
    def millis(self) -> int:
        return self.nanos // C.NS_PER_MS

    def __repr__(self) -> str:
        return f"Timestamp({self.nanos}ns)"


def current_time_millis() -> int:
    """Milliseconds since the Unix epoch, the unit of every cell version."""
    return Timestamp.now().millis


# =============================================================================
# SERVER ADDRESS
# =============================================================================
@dataclass(frozen=True, slots=True)
class ServerAddress:
    """
    Network address of a region server.

    Invariant: 0 < port <= 65535
    """

    hostname: str
    port: int = C.DEFAULT_REGIONSERVER_PORT

    def __post_init__(self) -> None:
        if not self.hostname:
            raise ValueError("hostname must not be empty")
        if not (0 < self.port <= 65535):
            raise ValueError(f"port must be in [1, 65535], got {self.port}")

    @classmethod
    def parse(cls, host_port: str) -> Result[ServerAddress, str]:
        """
        Parse a "host:port" string.

        A bare hostname gets the default region server port.
        """
        host, sep, port_str = host_port.strip().rpartition(":")
        if not sep:
            host, port_str = port_str, ""
        try:
            if port_str:
                return Ok(cls(hostname=host, port=int(port_str)))
            return Ok(cls(hostname=host))
        except ValueError as e:
            return Err(f"Invalid server address {host_port!r}: {e}")

    def __str__(self) -> str:
        return f"{self.hostname}:{self.port}"


# =============================================================================
# REGION IDENTITY
# =============================================================================
@dataclass(frozen=True, slots=True)
class RegionInfo:
    """
    Identity of one region of a table.

    The region name doubles as the row key of the region in the catalog
    table, so it is what the historian writes its columns under:

        <table_name>,<start_key>,<region_id>

    Regions of the catalog tables themselves (-ROOT- and .META.) are meta
    regions and never carry audit columns.
    """

    table_name: str
    start_key: bytes = b""
    region_id: int = 0

    def __post_init__(self) -> None:
        if not self.table_name:
            raise ValueError("table_name must not be empty")
        if self.region_id < 0:
            raise ValueError(f"region_id must be >= 0, got {self.region_id}")

    @property
    def region_name(self) -> bytes:
        """Row key of this region."""
        return b",".join((
            self.table_name.encode("utf-8"),
            self.start_key,
            str(self.region_id).encode("ascii"),
        ))

    @property
    def region_name_as_string(self) -> str:
        return self.region_name.decode("utf-8", errors="replace")

    @property
    def is_root_region(self) -> bool:
        return self.table_name == C.ROOT_TABLE_NAME

    @property
    def is_meta_region(self) -> bool:
        """True for regions of either catalog table."""
        return self.table_name in (C.ROOT_TABLE_NAME, C.META_TABLE_NAME)

    def __str__(self) -> str:
        return self.region_name_as_string
