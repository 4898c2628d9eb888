"""
History Record: read-side projection of one stored audit cell.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from region_historian.core import constants as C


@dataclass(frozen=True, slots=True)
class HistoryRecord:
    """
    One event of a region's history.

    Created only by HistoryReader; never persisted as its own entity.
    timestamp is the store-assigned version in milliseconds.
    """
    timestamp: int
    event: str
    description: str

    def timestamp_as_string(self) -> str:
        """
        Timestamp rendered for operators, in UTC.

        Format: "Tue, 3 Jun 2008 14:05:09"
        """
        when = datetime.fromtimestamp(self.timestamp / C.SECOND_MS, tz=timezone.utc)
        return f"{when:%a}, {when.day} {when:%b %Y %H:%M:%S}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "event": self.event,
            "description": self.description,
        }
