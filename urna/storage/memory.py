"""
URNA v1.0: In-Memory Ordered Store.

A dict for point lookups plus a sorted key index for range scans.
Transactions hold a re-entrant lock for their whole duration and keep an
undo journal, so a failed block restores every key it touched.
"""

from __future__ import annotations

import bisect
import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

logger = logging.getLogger("urna.storage.memory")


class MemoryStore:
    """Process-local KeyValueStore."""

    def __init__(self):
        self._data: dict[str, bytes] = {}
        self._keys: list[str] = []
        self._lock = threading.RLock()
        self._depth = 0
        # key -> value before the transaction touched it (None = absent)
        self._journal: Optional[dict[str, Optional[bytes]]] = None

    # ─── Point Operations ─────────────────────────────────────────

    def get(self, key: str) -> Optional[bytes]:
        with self._lock:
            return self._data.get(key)

    def put(self, key: str, value: bytes) -> None:
        with self._lock:
            self._remember(key)
            self._set(key, value)

    def put_if_absent(self, key: str, value: bytes) -> bool:
        with self._lock:
            if key in self._data:
                return False
            self._remember(key)
            self._set(key, value)
            return True

    def delete(self, key: str) -> None:
        with self._lock:
            if key not in self._data:
                return
            self._remember(key)
            self._unset(key)

    # ─── Range Scan ───────────────────────────────────────────────

    def scan_range(self, low: str, high: str) -> list[tuple[str, bytes]]:
        with self._lock:
            start = bisect.bisect_left(self._keys, low)
            end = bisect.bisect_left(self._keys, high)
            return [(k, self._data[k]) for k in self._keys[start:end]]

    # ─── Transactions ─────────────────────────────────────────────

    @contextmanager
    def transaction(self) -> Iterator["MemoryStore"]:
        with self._lock:
            outermost = self._depth == 0
            if outermost:
                self._journal = {}
            self._depth += 1
            try:
                yield self
            except BaseException:
                self._depth -= 1
                if outermost:
                    self._rollback()
                raise
            else:
                self._depth -= 1
                if outermost:
                    self._journal = None

    def close(self) -> None:
        with self._lock:
            self._journal = None
            self._depth = 0

    def __len__(self) -> int:
        return len(self._keys)

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    # ─── Internals ────────────────────────────────────────────────

    def _remember(self, key: str) -> None:
        if self._journal is not None and key not in self._journal:
            self._journal[key] = self._data.get(key)

    def _set(self, key: str, value: bytes) -> None:
        if key not in self._data:
            bisect.insort(self._keys, key)
        self._data[key] = bytes(value)

    def _unset(self, key: str) -> None:
        del self._data[key]
        idx = bisect.bisect_left(self._keys, key)
        del self._keys[idx]

    def _rollback(self) -> None:
        journal, self._journal = self._journal or {}, None
        for key, previous in journal.items():
            if previous is None:
                if key in self._data:
                    self._unset(key)
            else:
                self._set(key, previous)
        logger.debug("Rolled back %d key(s)", len(journal))
