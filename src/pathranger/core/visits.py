"""Visit history: the upsert-based recorder and its frecency listings.

Two orderings are exposed instead of one blended score:
    - list_top(): by visit count
    - list_recent(): by last visit time

Ties are broken by path in ascending lexical order.
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from datetime import datetime

from pathranger.core.paths import is_directory, normalize_path
from pathranger.core.store import Store, from_storage, to_storage, utcnow

logger = logging.getLogger(__name__)

_UPSERT_VISIT = """
    INSERT INTO directories (path, visit_count, last_visited) VALUES (?, 1, ?)
    ON CONFLICT(path) DO UPDATE SET
        visit_count = visit_count + 1,
        last_visited = excluded.last_visited
"""

_SELECT_COLUMNS = "SELECT path, visit_count, last_visited FROM directories"


@dataclass(frozen=True, slots=True)
class DirectoryRecord:
    path: str
    visit_count: int
    last_visited: datetime


def _row_to_record(row: sqlite3.Row) -> DirectoryRecord:
    return DirectoryRecord(
        path=row["path"],
        visit_count=int(row["visit_count"]),
        last_visited=from_storage(row["last_visited"]),
    )


def record_visit(
    store: Store, path: str, *, now: datetime | None = None
) -> DirectoryRecord | None:
    """Count a visit to ``path``.

    Returns the updated record, or None when ``path`` is not an existing
    directory (nothing is written in that case).
    """
    canonical = normalize_path(path)
    if not is_directory(canonical):
        logger.warning("Directory does not exist: %s", canonical)
        return None

    stamp = to_storage(now or utcnow())
    with store.transaction() as conn:
        conn.execute(_UPSERT_VISIT, (canonical, stamp))
        row = conn.execute(f"{_SELECT_COLUMNS} WHERE path = ?", (canonical,)).fetchone()

    record = _row_to_record(row)
    logger.debug("Recorded visit %s (count=%d)", record.path, record.visit_count)
    return record


def get_visit(store: Store, path: str) -> DirectoryRecord | None:
    rows = store.query(f"{_SELECT_COLUMNS} WHERE path = ?", (normalize_path(path),))
    return _row_to_record(rows[0]) if rows else None


def list_top(store: Store, n: int) -> list[DirectoryRecord]:
    """Most visited directories first."""
    if n <= 0:
        return []
    rows = store.query(
        f"{_SELECT_COLUMNS} ORDER BY visit_count DESC, path ASC LIMIT ?",
        (n,),
    )
    return [_row_to_record(row) for row in rows]


def list_recent(store: Store, n: int) -> list[DirectoryRecord]:
    """Most recently visited directories first."""
    if n <= 0:
        return []
    rows = store.query(
        f"{_SELECT_COLUMNS} ORDER BY last_visited DESC, path ASC LIMIT ?",
        (n,),
    )
    return [_row_to_record(row) for row in rows]


def all_paths(store: Store) -> list[str]:
    return [row["path"] for row in store.query("SELECT path FROM directories ORDER BY path ASC")]


__all__ = [
    "DirectoryRecord",
    "all_paths",
    "get_visit",
    "list_recent",
    "list_top",
    "record_visit",
]
