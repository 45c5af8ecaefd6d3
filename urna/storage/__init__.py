"""
URNA v1.0: Storage Backend Abstraction.

The ledger consumes an ordered key-value map through a narrow protocol:
point get/put/delete, compare-and-swap insert, lexicographic range scans
and atomic transactions. Switch backends via environment variable; the
contract layer never knows which one is active.

Usage:
    URNA_STORAGE=sqlite   → SQLite file (default)
    URNA_STORAGE=memory   → process-local ordered map (tests, dry runs)
"""

from __future__ import annotations

import logging
import os
from contextlib import AbstractContextManager
from enum import Enum
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

from urna.keys import prefix_range

logger = logging.getLogger("urna.storage")


class StorageMode(str, Enum):
    SQLITE = "sqlite"
    MEMORY = "memory"


@runtime_checkable
class KeyValueStore(Protocol):
    """Protocol for all storage backends.

    Keys are strings ordered lexicographically; values are opaque bytes.
    """

    def get(self, key: str) -> Optional[bytes]:
        """Return the value stored under ``key``, or None."""
        ...

    def put(self, key: str, value: bytes) -> None:
        """Insert or overwrite ``key``."""
        ...

    def put_if_absent(self, key: str, value: bytes) -> bool:
        """Write ``key`` only if it does not exist. True if written."""
        ...

    def delete(self, key: str) -> None:
        """Remove ``key``. Missing keys are ignored."""
        ...

    def scan_range(self, low: str, high: str) -> list[tuple[str, bytes]]:
        """Return every ``(key, value)`` with ``low <= key < high``, ascending.

        The result is a snapshot taken at call time; callers may delete
        the yielded keys while walking it.
        """
        ...

    def transaction(self) -> AbstractContextManager:
        """Re-entrant atomic block: all writes commit, or none do."""
        ...

    def close(self) -> None:
        """Release any underlying resources."""
        ...


def scan_prefix(store: KeyValueStore, prefix: str) -> list[tuple[str, bytes]]:
    """Scan every key under ``prefix`` (which must end with ``-``).

    The ``[<prefix>, <kind>~)`` bounds also admit keys such as
    ``adminx-1``; those are filtered out here.
    """
    return [(k, v) for k, v in store.scan_range(*prefix_range(prefix)) if k.startswith(prefix)]


def get_storage_mode(raw: Optional[str] = None) -> StorageMode:
    """Resolve the storage mode, defaulting to SQLite."""
    if raw is None:
        raw = os.environ.get("URNA_STORAGE", StorageMode.SQLITE.value)
    raw = raw.lower()
    try:
        return StorageMode(raw)
    except ValueError:
        logger.warning("Unknown URNA_STORAGE='%s', falling back to sqlite", raw)
        return StorageMode.SQLITE


def open_store(
    mode: Optional[str] = None,
    db_path: Optional[str | Path] = None,
) -> KeyValueStore:
    """Build the configured backend."""
    from urna import config

    resolved = get_storage_mode(mode if mode is not None else config.STORAGE_MODE)
    if resolved == StorageMode.MEMORY:
        from urna.storage.memory import MemoryStore

        return MemoryStore()

    from urna.storage.sqlite import SqliteStore

    return SqliteStore(db_path or config.DB_PATH)


__all__ = ["KeyValueStore", "StorageMode", "get_storage_mode", "open_store", "scan_prefix"]
