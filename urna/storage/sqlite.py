"""
URNA v1.0: SQLite Key-Value Backend.

One ``kv`` table keyed by TEXT with BINARY collation, so ``ORDER BY key``
is the same byte-wise lexicographic order the key scheme relies on.
Writers are serialized with ``BEGIN IMMEDIATE``; WAL keeps readers from
blocking on them.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from urna.exceptions import StorageError

logger = logging.getLogger("urna.storage.sqlite")

KV_SCHEMA = """
CREATE TABLE IF NOT EXISTS kv (
    key   TEXT PRIMARY KEY NOT NULL,
    value BLOB NOT NULL
) WITHOUT ROWID
"""

MEMORY_PATH = ":memory:"


class SqliteStore:
    """KeyValueStore persisted in a single SQLite file."""

    def __init__(self, db_path: str | Path):
        self._memory = str(db_path) == MEMORY_PATH
        self._db_path = Path(db_path).expanduser()
        if not self._memory:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.RLock()
        self._depth = 0

    @property
    def path(self) -> Path:
        return self._db_path

    # ─── Connection ───────────────────────────────────────────────

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            try:
                conn = sqlite3.connect(
                    MEMORY_PATH if self._memory else str(self._db_path),
                    timeout=30,
                    check_same_thread=False,
                    isolation_level=None,
                )
                conn.execute("PRAGMA journal_mode=WAL")
                conn.execute("PRAGMA synchronous=NORMAL")
                conn.execute(KV_SCHEMA)
            except sqlite3.Error as e:
                logger.error("Failed to open ledger database %s: %s", self._db_path, e)
                raise StorageError("could not open ledger storage") from e
            self._conn = conn
            logger.debug("Opened SQLite store at %s", self._db_path)
        return self._conn

    def _execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        with self._lock:
            try:
                return self._get_conn().execute(sql, params)
            except sqlite3.Error as e:
                logger.error("SQLite statement failed: %s", e)
                raise StorageError("ledger storage operation failed") from e

    # ─── Point Operations ─────────────────────────────────────────

    def get(self, key: str) -> Optional[bytes]:
        with self._lock:
            row = self._execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        return bytes(row[0]) if row else None

    def put(self, key: str, value: bytes) -> None:
        self._execute(
            "INSERT OR REPLACE INTO kv (key, value) VALUES (?, ?)",
            (key, sqlite3.Binary(value)),
        )

    def put_if_absent(self, key: str, value: bytes) -> bool:
        cursor = self._execute(
            "INSERT OR IGNORE INTO kv (key, value) VALUES (?, ?)",
            (key, sqlite3.Binary(value)),
        )
        return cursor.rowcount == 1

    def delete(self, key: str) -> None:
        self._execute("DELETE FROM kv WHERE key = ?", (key,))

    # ─── Range Scan ───────────────────────────────────────────────

    def scan_range(self, low: str, high: str) -> list[tuple[str, bytes]]:
        with self._lock:
            rows = self._execute(
                "SELECT key, value FROM kv WHERE key >= ? AND key < ? ORDER BY key",
                (low, high),
            ).fetchall()
        return [(k, bytes(v)) for k, v in rows]

    # ─── Transactions ─────────────────────────────────────────────

    @contextmanager
    def transaction(self) -> Iterator["SqliteStore"]:
        with self._lock:
            outermost = self._depth == 0
            if outermost:
                self._execute("BEGIN IMMEDIATE")
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
                    try:
                        self._get_conn().execute("COMMIT")
                    except sqlite3.Error as e:
                        self._rollback()
                        raise StorageError("ledger transaction could not be committed") from e

    def _rollback(self) -> None:
        try:
            self._get_conn().execute("ROLLBACK")
        except sqlite3.Error as e:
            # No transaction is active if SQLite already rolled it back itself.
            logger.debug("Rollback skipped: %s", e)

    # ─── Lifecycle ────────────────────────────────────────────────

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
