"""Durable key-value store with named partitions.

Each partition is one SQLite table of ``(key TEXT PRIMARY KEY, value BLOB)``.
Values are JSON documents encoded as UTF-8. Every ``put`` is its own committed
transaction; writers are serialised by a lock while readers run concurrently
under WAL journaling.
"""

from __future__ import annotations

import json
import logging
import sqlite3
import threading
from pathlib import Path
from types import TracebackType
from typing import Any, Callable

from news_nearby.common.errors import (
    DeserializationError,
    NotFoundError,
    StorageWriteError,
    StoreOpenError,
)
from news_nearby.common.fs import ensure_dir
from news_nearby.common.schema import PARTITION_NAME_RE

logger = logging.getLogger(__name__)

Visitor = Callable[[str, Any], None]


def _decode(partition: str, key: str, raw: bytes) -> Any:
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise DeserializationError(f"Stored value for {partition}/{key} is not valid JSON") from exc


class GeoRecordStore:
    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._write_lock = threading.Lock()
        self._local = threading.local()
        try:
            ensure_dir(self.path.parent)
            self._conn = sqlite3.connect(
                str(self.path),
                check_same_thread=False,
                isolation_level=None,
            )
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.execute("PRAGMA synchronous=FULL")
        except (OSError, sqlite3.Error) as exc:
            raise StoreOpenError(f"Could not open record store at {self.path}: {exc}") from exc

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> "GeoRecordStore":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _partition_exists(self, partition: str) -> bool:
        if not PARTITION_NAME_RE.match(partition):
            return False
        row = self._conn.execute(
            "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?",
            (partition,),
        ).fetchone()
        return row is not None

    def _iterating(self) -> bool:
        return getattr(self._local, "depth", 0) > 0

    def put(self, partition: str, key: str, value: Any) -> None:
        try:
            payload = json.dumps(value, ensure_ascii=False, sort_keys=True).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise StorageWriteError(f"Could not serialise value for {partition}/{key}: {exc}") from exc
        self.put_raw(partition, key, payload)

    def put_raw(self, partition: str, key: str, payload: bytes) -> None:
        """Upsert pre-serialised bytes, creating the partition on first write."""
        if not PARTITION_NAME_RE.match(partition):
            raise StorageWriteError(f"Invalid partition name: {partition!r}")
        if self._iterating():
            raise StorageWriteError(f"Write to {partition}/{key} attempted during iteration")

        with self._write_lock:
            try:
                self._conn.execute("BEGIN IMMEDIATE")
                self._conn.execute(
                    f'CREATE TABLE IF NOT EXISTS "{partition}" (key TEXT PRIMARY KEY, value BLOB NOT NULL)'
                )
                self._conn.execute(
                    f'INSERT INTO "{partition}" (key, value) VALUES (?, ?) '
                    "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                    (key, sqlite3.Binary(payload)),
                )
                self._conn.execute("COMMIT")
            except sqlite3.Error as exc:
                if self._conn.in_transaction:
                    self._conn.execute("ROLLBACK")
                raise StorageWriteError(f"Could not persist {partition}/{key}: {exc}") from exc

    def get(self, partition: str, key: str) -> Any:
        if not self._partition_exists(partition):
            raise NotFoundError(f"Partition not found: {partition}")
        row = self._conn.execute(
            f'SELECT value FROM "{partition}" WHERE key = ?',
            (key,),
        ).fetchone()
        if row is None:
            raise NotFoundError(f"Key not found: {partition}/{key}")
        return _decode(partition, key, row[0])

    def for_each(self, partition: str, visit: Visitor) -> None:
        """Call ``visit(key, value)`` for every pair in ascending key order.

        Absent partitions visit nothing. Writes from inside ``visit`` are
        rejected.
        """
        if not self._partition_exists(partition):
            return
        rows = self._conn.execute(f'SELECT key, value FROM "{partition}" ORDER BY key').fetchall()
        self._local.depth = getattr(self._local, "depth", 0) + 1
        try:
            for key, raw in rows:
                visit(key, _decode(partition, key, raw))
        finally:
            self._local.depth -= 1

    def count(self, partition: str) -> int:
        if not self._partition_exists(partition):
            return 0
        row = self._conn.execute(f'SELECT COUNT(*) FROM "{partition}"').fetchone()
        return int(row[0])
