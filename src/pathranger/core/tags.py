"""Tag registry: short names pinned to directories.

A tag name maps to exactly one path. Reusing a name retargets it in place;
tagging a directory also counts as a visit to it.
"""

from __future__ import annotations

import logging
import re
import sqlite3
from dataclasses import dataclass
from datetime import datetime

from pathranger.core.paths import is_directory, normalize_path
from pathranger.core.result import Err, InvalidTargetError, NotFoundError, Ok, Result
from pathranger.core.store import Store, from_storage, to_storage, utcnow
from pathranger.core.visits import record_visit

logger = logging.getLogger(__name__)

_INVALID_NAME = re.compile(r"[\s/]")

_UPSERT_TAG = """
    INSERT INTO tags (name, path, created_at) VALUES (?, ?, ?)
    ON CONFLICT(name) DO UPDATE SET
        path = excluded.path,
        created_at = excluded.created_at
"""


@dataclass(frozen=True, slots=True)
class TagRecord:
    name: str
    path: str
    created_at: datetime


@dataclass(frozen=True, slots=True)
class TagChange:
    """Outcome of `set_tag`: the stored record and whether the name is new."""

    record: TagRecord
    created: bool


def _row_to_record(row: sqlite3.Row) -> TagRecord:
    return TagRecord(
        name=row["name"],
        path=row["path"],
        created_at=from_storage(row["created_at"]),
    )


def validate_tag_name(name: str) -> Result[str, InvalidTargetError]:
    if not name or _INVALID_NAME.search(name):
        return Err(
            InvalidTargetError(
                f"Invalid tag name '{name}'", context={"reason": "empty, whitespace or '/'"}
            )
        )
    return Ok(name)


def set_tag(
    store: Store, name: str, path: str, *, now: datetime | None = None
) -> Result[TagChange, InvalidTargetError]:
    """Create ``name`` or retarget it to ``path``.

    ``path`` must be an existing directory; otherwise nothing is written.
    """
    match validate_tag_name(name):
        case Err() as failure:
            return failure
        case Ok():
            pass

    canonical = normalize_path(path)
    if not is_directory(canonical):
        return Err(InvalidTargetError(f"Directory does not exist: {canonical}"))

    moment = now or utcnow()
    with store.transaction(immediate=True) as conn:
        existing = conn.execute("SELECT 1 FROM tags WHERE name = ?", (name,)).fetchone()
        conn.execute(_UPSERT_TAG, (name, canonical, to_storage(moment)))
        row = conn.execute(
            "SELECT name, path, created_at FROM tags WHERE name = ?", (name,)
        ).fetchone()

    change = TagChange(record=_row_to_record(row), created=existing is None)
    logger.debug(
        "%s tag %s -> %s", "Created" if change.created else "Updated", name, canonical
    )

    record_visit(store, canonical, now=moment)
    return Ok(change)


def resolve_tag(store: Store, name: str) -> Result[TagRecord, NotFoundError]:
    rows = store.query("SELECT name, path, created_at FROM tags WHERE name = ?", (name,))
    if not rows:
        return Err(NotFoundError(f"Tag '{name}' not found"))
    return Ok(_row_to_record(rows[0]))


def remove_tag(store: Store, name: str) -> bool:
    """Delete ``name``; returns False (not an error) when it was absent."""
    with store.transaction() as conn:
        cursor = conn.execute("DELETE FROM tags WHERE name = ?", (name,))
    removed = cursor.rowcount > 0
    logger.debug("Remove tag %s: %s", name, "deleted" if removed else "absent")
    return removed


def list_tags(store: Store) -> list[TagRecord]:
    rows = store.query("SELECT name, path, created_at FROM tags ORDER BY name ASC")
    return [_row_to_record(row) for row in rows]


__all__ = [
    "TagChange",
    "TagRecord",
    "list_tags",
    "remove_tag",
    "resolve_tag",
    "set_tag",
    "validate_tag_name",
]
