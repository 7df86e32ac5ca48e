"""Tests for core/store.py - store lifetime, schema and transactions."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from pathranger.core.result import StorageUnavailableError
from pathranger.core.store import Store, from_storage, open_store, to_storage


def test_open_creates_directory_and_file(tmp_path: Path) -> None:
    db_path = tmp_path / "nested" / "data" / "pathranger.db"
    with open_store(db_path) as store:
        assert store.path == db_path
    assert db_path.exists()


def test_schema_creation_is_idempotent(tmp_path: Path) -> None:
    db_path = tmp_path / "pathranger.db"
    for _ in range(3):
        with open_store(db_path) as store:
            tables = {row["name"] for row in store.query("SELECT name FROM sqlite_master")}
            assert {"directories", "tags"} <= tables


def test_unwritable_data_dir_is_storage_unavailable(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    with pytest.raises(StorageUnavailableError):
        Store.open(blocker / "sub" / "pathranger.db")


def test_store_path_that_is_a_directory_is_storage_unavailable(tmp_path: Path) -> None:
    db_path = tmp_path / "pathranger.db"
    db_path.mkdir()
    with pytest.raises(StorageUnavailableError):
        Store.open(db_path)


def test_storage_unavailable_exit_code() -> None:
    assert StorageUnavailableError("boom").exit_code == 2


def test_transaction_commits(store: Store) -> None:
    with store.transaction() as conn:
        conn.execute(
            "INSERT INTO tags (name, path, created_at) VALUES (?, ?, ?)",
            ("t", "/x", to_storage(datetime.now(timezone.utc))),
        )
    assert len(store.query("SELECT * FROM tags")) == 1


def test_transaction_rolls_back_on_error(store: Store) -> None:
    with pytest.raises(RuntimeError):
        with store.transaction(immediate=True) as conn:
            conn.execute(
                "INSERT INTO tags (name, path, created_at) VALUES (?, ?, ?)",
                ("t", "/x", to_storage(datetime.now(timezone.utc))),
            )
            raise RuntimeError("abort")
    assert store.query("SELECT * FROM tags") == []


def test_sqlite_errors_become_storage_unavailable(store: Store) -> None:
    with pytest.raises(StorageUnavailableError):
        with store.transaction() as conn:
            conn.execute("INSERT INTO missing_table VALUES (1)")
    with pytest.raises(StorageUnavailableError):
        store.query("SELECT * FROM missing_table")


def test_unique_path_constraint(store: Store) -> None:
    stamp = to_storage(datetime.now(timezone.utc))
    with store.transaction() as conn:
        conn.execute(
            "INSERT INTO directories (path, visit_count, last_visited) VALUES (?, 1, ?)",
            ("/a", stamp),
        )
    with pytest.raises(StorageUnavailableError) as excinfo:
        with store.transaction() as conn:
            conn.execute(
                "INSERT INTO directories (path, visit_count, last_visited) VALUES (?, 1, ?)",
                ("/a", stamp),
            )
    assert isinstance(excinfo.value.__cause__, sqlite3.IntegrityError)


class TestTimestamps:
    def test_round_trip_preserves_instant(self) -> None:
        moment = datetime(2024, 5, 1, 12, 30, 15, 123456, tzinfo=timezone(timedelta(hours=2)))
        restored = from_storage(to_storage(moment))
        assert restored == moment
        assert restored.tzinfo is not None

    def test_text_order_matches_time_order_across_offsets(self) -> None:
        earlier = datetime(2024, 5, 1, 12, 0, tzinfo=timezone(timedelta(hours=5)))
        later = datetime(2024, 5, 1, 8, 0, 0, 1, tzinfo=timezone.utc)
        assert earlier < later
        assert to_storage(earlier) < to_storage(later)

    def test_whole_seconds_keep_fixed_width(self) -> None:
        moment = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)
        assert to_storage(moment) == "2024-05-01T12:00:00.000000+00:00"
