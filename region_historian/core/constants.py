"""
System-Wide Constants for the Region Historian

All magic numbers, reserved names and configuration defaults centralized here.
The column family and catalog table names are part of the persisted layout:
changing them orphans previously written history.
"""

from typing import Final

# =============================================================================
# TIME UNITS
# =============================================================================
SECOND_MS: Final[int] = 1000
NS_PER_MS: Final[int] = 1_000_000

# =============================================================================
# CATALOG LAYOUT
# =============================================================================
ROOT_TABLE_NAME: Final[str] = "-ROOT-"
META_TABLE_NAME: Final[str] = ".META."

COLUMN_FAMILY_HISTORIAN: Final[bytes] = b"historian:"
COLUMN_FAMILY_DELIMITER: Final[bytes] = b":"

# =============================================================================
# CELL VERSIONS
# =============================================================================
# Ask the store to stamp the write with its own clock.
LATEST_TIMESTAMP: Final[int] = 2**63 - 1

# Version cap meaning "every stored version".
ALL_VERSIONS: Final[int] = 2**31 - 1

# =============================================================================
# NETWORK
# =============================================================================
DEFAULT_REGIONSERVER_PORT: Final[int] = 60020

# =============================================================================
# BACKENDS
# =============================================================================
SQLITE_BUSY_TIMEOUT_MS: Final[int] = 5 * SECOND_MS
REDIS_KEY_PREFIX: Final[str] = "historian"
