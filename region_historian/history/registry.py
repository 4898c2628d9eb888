"""
Event Type Registry

The fixed set of region lifecycle events and the historian columns they
are stored under. The column keys are a durable on-disk contract: renaming
one orphans every record already written under it.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping

from region_historian.core import constants as C


class EventKind(Enum):
    """Region lifecycle event recorded by the historian."""
    CREATION = "creation"
    OPEN = "open"
    SPLIT = "split"
    COMPACTION = "compaction"
    FLUSH = "flush"
    ASSIGNMENT = "assignment"

    @property
    def label(self) -> str:
        """Event name as shown to operators."""
        return self.value

    @property
    def column_key(self) -> bytes:
        return COLUMN_KEYS[self]

    @property
    def is_maintenance(self) -> bool:
        """High-frequency events recorded only under verbose audit."""
        return self in (EventKind.COMPACTION, EventKind.FLUSH)

    @classmethod
    def from_column(cls, column_key: bytes) -> EventKind:
        """
        Resolve the event stored under a historian column.

        Raises:
            ValueError: column is not one of the historian columns
        """
        kind = _KINDS_BY_COLUMN.get(column_key)
        if kind is None:
            raise ValueError(f"Not a historian column: {column_key!r}")
        return kind


COLUMN_KEYS: Mapping[EventKind, bytes] = MappingProxyType({
    kind: C.COLUMN_FAMILY_HISTORIAN + kind.value.encode("ascii")
    for kind in EventKind
})

_KINDS_BY_COLUMN: Mapping[bytes, EventKind] = MappingProxyType({
    column: kind for kind, column in COLUMN_KEYS.items()
})

_REGISTRY: tuple[tuple[EventKind, bytes], ...] = tuple(COLUMN_KEYS.items())


def registry() -> tuple[tuple[EventKind, bytes], ...]:
    """
    Every (EventKind, column_key) pair, in declaration order.

    The order carries no meaning for readers; history is ordered by
    timestamp.
    """
    return _REGISTRY


def label_for_column(column_key: bytes) -> str:
    """Qualifier of a column key: b"historian:split" -> "split"."""
    return column_key.split(C.COLUMN_FAMILY_DELIMITER, 1)[1].decode("utf-8")
