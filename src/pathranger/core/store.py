"""SQLite-backed store handle.

One `Store` is opened per command invocation and passed explicitly to the
visit and tag operations. Concurrent shells are serialised by SQLite's own
file locking: every mutation runs in a single transaction and the connection
waits up to ``busy_timeout`` seconds for a competing writer.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pathranger.core.result import StorageUnavailableError

logger = logging.getLogger(__name__)

SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS directories (
        id INTEGER PRIMARY KEY,
        path TEXT UNIQUE NOT NULL,
        visit_count INTEGER NOT NULL DEFAULT 1,
        last_visited TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS tags (
        id INTEGER PRIMARY KEY,
        name TEXT UNIQUE NOT NULL,
        path TEXT NOT NULL,
        created_at TEXT NOT NULL
    )
    """,
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_storage(moment: datetime) -> str:
    """Serialise a timestamp so that text order equals time order."""
    if moment.tzinfo is None:
        moment = moment.astimezone()
    return moment.astimezone(timezone.utc).isoformat(timespec="microseconds")


def from_storage(text: str) -> datetime:
    moment = datetime.fromisoformat(text)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


class Store:
    """An open connection to the pathranger database."""

    def __init__(self, path: Path, connection: sqlite3.Connection) -> None:
        self.path = path
        self._conn = connection

    @classmethod
    def open(cls, path: Path, *, busy_timeout: float = 5.0) -> Store:
        """Open (creating if needed) the store file and ensure the schema."""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageUnavailableError(
                "Could not create data directory",
                context={"path": str(path.parent), "error": str(exc)},
            ) from exc

        try:
            conn = sqlite3.connect(path, timeout=busy_timeout, isolation_level=None)
        except sqlite3.Error as exc:
            raise StorageUnavailableError(
                "Could not open store", context={"path": str(path), "error": str(exc)}
            ) from exc

        conn.row_factory = sqlite3.Row
        store = cls(path, conn)
        try:
            store.ensure_schema()
        except StorageUnavailableError:
            conn.close()
            raise
        logger.debug("Opened store %s", path)
        return store

    def ensure_schema(self) -> None:
        """Create tables if missing; safe to call on every startup."""
        with self.transaction() as conn:
            for statement in SCHEMA:
                conn.execute(statement)
        try:
            self._conn.execute("PRAGMA journal_mode=WAL;")
        except sqlite3.Error as exc:
            # WAL is unavailable on some network filesystems.
            logger.debug("WAL journal unavailable for %s: %s", self.path, exc)

    @contextmanager
    def transaction(self, *, immediate: bool = False) -> Iterator[sqlite3.Connection]:
        """Run a block atomically.

        ``immediate`` takes the write lock up front, which read-then-write
        sequences need so another process cannot slip in between.
        """
        try:
            self._conn.execute("BEGIN IMMEDIATE" if immediate else "BEGIN")
        except sqlite3.Error as exc:
            raise StorageUnavailableError(
                "Could not start transaction", context={"path": str(self.path), "error": str(exc)}
            ) from exc

        try:
            yield self._conn
        except sqlite3.Error as exc:
            self._rollback()
            raise StorageUnavailableError(
                "Store write failed", context={"path": str(self.path), "error": str(exc)}
            ) from exc
        except BaseException:
            self._rollback()
            raise

        try:
            self._conn.execute("COMMIT")
        except sqlite3.Error as exc:
            raise StorageUnavailableError(
                "Could not commit transaction", context={"path": str(self.path), "error": str(exc)}
            ) from exc

    def _rollback(self) -> None:
        if self._conn.in_transaction:
            self._conn.execute("ROLLBACK")

    def query(self, sql: str, params: Sequence[Any] = ()) -> list[sqlite3.Row]:
        try:
            return self._conn.execute(sql, params).fetchall()
        except sqlite3.Error as exc:
            raise StorageUnavailableError(
                "Store read failed", context={"path": str(self.path), "error": str(exc)}
            ) from exc

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> Store:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


@contextmanager
def open_store(path: Path, *, busy_timeout: float = 5.0) -> Iterator[Store]:
    """Scoped store handle: opened on entry, closed on exit."""
    store = Store.open(path, busy_timeout=busy_timeout)
    try:
        yield store
    finally:
        store.close()


__all__ = ["Store", "from_storage", "open_store", "to_storage", "utcnow"]
