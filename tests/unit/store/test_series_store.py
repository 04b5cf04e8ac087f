"""Unit tests for the SQLite series store."""

from __future__ import annotations

from datetime import datetime, timezone
import os
from pathlib import Path
import sqlite3

import pytest

from core.errors import StoreOpenError, StoreWriteError, TempMonitorStoreError
from core.types import Reading
from store.series_store import SeriesStore

_INGESTION_TIME = datetime(2016, 1, 1, 9, 15, 42, 123456, tzinfo=timezone.utc)


def _reading(hour: int = 3, temperature: int = -2) -> Reading:
    return Reading(
        observation_time=datetime(2016, 1, 1, hour, tzinfo=timezone.utc),
        temperature=temperature,
        ingestion_time=_INGESTION_TIME,
    )


def _open_with_schema(tmp_path: Path) -> SeriesStore:
    store = SeriesStore.open(tmp_path / "forecast.db")
    store.ensure_schema()
    return store


def test_open_raises_for_missing_parent_directory(tmp_path: Path) -> None:
    """Opening under a non-existent directory should fail."""
    with pytest.raises(StoreOpenError):
        SeriesStore.open(tmp_path / "missing" / "forecast.db")


def test_open_raises_for_non_database_file(tmp_path: Path) -> None:
    """Opening a file that is not SQLite should fail before schema work."""
    store_path = tmp_path / "notes.db"
    store_path.write_text("this is not a database " * 100, encoding="utf-8")

    with pytest.raises(StoreOpenError):
        SeriesStore.open(store_path)


@pytest.mark.skipif(
    hasattr(os, "geteuid") and os.geteuid() == 0,
    reason="root ignores file permission bits",
)
def test_open_raises_for_read_only_database_file(tmp_path: Path) -> None:
    """A write-protected database should fail at open, not at the first write."""
    store_path = tmp_path / "forecast.db"
    with SeriesStore.open(store_path) as store:
        store.ensure_schema()
    store_path.chmod(0o444)

    try:
        with pytest.raises(StoreOpenError) as error_info:
            SeriesStore.open(store_path)
    finally:
        store_path.chmod(0o644)

    assert str(store_path) in str(error_info.value)


def test_open_leaves_no_transaction_active(tmp_path: Path) -> None:
    """The write check at open should be rolled back before returning."""
    with SeriesStore.open(tmp_path / "forecast.db") as store:
        with store.transaction():
            store.ensure_schema()

        assert store.has_schema()


def test_ensure_schema_is_idempotent(tmp_path: Path) -> None:
    """Calling ensure_schema twice should leave exactly one table."""
    with _open_with_schema(tmp_path) as store:
        store.ensure_schema()

    connection = sqlite3.connect(tmp_path / "forecast.db")
    tables = connection.execute(
        "select name from sqlite_master where type = 'table' and name = 'predictions'"
    ).fetchall()
    connection.close()

    assert tables == [("predictions",)]


def test_ensure_schema_keeps_existing_rows(tmp_path: Path) -> None:
    """ensure_schema on an existing table should append, not truncate."""
    with _open_with_schema(tmp_path) as store:
        store.insert(_reading())
        store.ensure_schema()

        assert store.count_predictions() == 1


def test_recreate_schema_on_fresh_store(tmp_path: Path) -> None:
    """Recreating a store that never had the table should succeed."""
    with SeriesStore.open(tmp_path / "forecast.db") as store:
        store.recreate_schema()

        assert store.has_schema()


def test_recreate_then_ensure_yields_empty_table(tmp_path: Path) -> None:
    """Recreate followed by ensure should drop previously stored rows."""
    with _open_with_schema(tmp_path) as store:
        store.insert(_reading(hour=0))
        store.insert(_reading(hour=3))

        store.recreate_schema()
        store.ensure_schema()

        assert store.count_predictions() == 0


def test_insert_roundtrip_preserves_seconds(tmp_path: Path) -> None:
    """Stored rows should read back with equal temperature and epoch seconds."""
    with _open_with_schema(tmp_path) as store:
        store.insert(_reading(hour=3, temperature=-2))

        row = store.fetch_predictions()[0]

    assert row.temperature == -2
    assert row.observation_time == datetime(2016, 1, 1, 3, tzinfo=timezone.utc)
    assert row.ingestion_time == _INGESTION_TIME.replace(microsecond=0)


def test_insert_stores_integer_epoch_columns(tmp_path: Path) -> None:
    """The on-disk columns should hold integer epoch seconds."""
    with _open_with_schema(tmp_path) as store:
        store.insert(_reading(hour=3))

    connection = sqlite3.connect(tmp_path / "forecast.db")
    row = connection.execute(
        "select dt, typeof(dt), temperature, upload_time, typeof(upload_time) from predictions"
    ).fetchone()
    connection.close()

    assert row == (1451617200, "integer", -2, 1451639742, "integer")


def test_insert_allows_duplicate_readings(tmp_path: Path) -> None:
    """The store enforces no uniqueness across identical readings."""
    with _open_with_schema(tmp_path) as store:
        first_id = store.insert(_reading())
        second_id = store.insert(_reading())

        assert second_id != first_id
        assert store.count_predictions() == 2


def test_insert_without_schema_raises_write_error(tmp_path: Path) -> None:
    """Inserting before the table exists should raise StoreWriteError."""
    with SeriesStore.open(tmp_path / "forecast.db") as store:
        with pytest.raises(StoreWriteError):
            store.insert(_reading())


def test_insert_all_returns_row_count(tmp_path: Path) -> None:
    """insert_all should write rows in iteration order."""
    with _open_with_schema(tmp_path) as store:
        written = store.insert_all(_reading(hour=hour) for hour in (0, 3, 6))
        hours = [row.observation_time.hour for row in store.fetch_predictions()]

    assert (written, hours) == (3, [0, 3, 6])


def test_transaction_commits_on_success(tmp_path: Path) -> None:
    """Rows written inside a transaction should persist after commit."""
    with SeriesStore.open(tmp_path / "forecast.db") as store:
        with store.transaction():
            store.ensure_schema()
            store.insert(_reading())

    with SeriesStore.open(tmp_path / "forecast.db") as reopened:
        assert reopened.count_predictions() == 1


def test_transaction_rolls_back_on_failure(tmp_path: Path) -> None:
    """A failure inside a transaction should leave no rows behind."""
    with _open_with_schema(tmp_path) as store:
        with pytest.raises(RuntimeError):
            with store.transaction():
                store.insert(_reading(hour=0))
                store.insert(_reading(hour=3))
                raise RuntimeError("boom")

        assert store.count_predictions() == 0


def test_transaction_rollback_restores_dropped_table(tmp_path: Path) -> None:
    """Rolling back a recreate should restore the previous rows."""
    with _open_with_schema(tmp_path) as store:
        store.insert(_reading())
        with pytest.raises(RuntimeError):
            with store.transaction():
                store.recreate_schema()
                raise RuntimeError("boom")

        assert store.count_predictions() == 1


def test_transaction_rejects_nesting(tmp_path: Path) -> None:
    """A second transaction on the same store should be refused."""
    with SeriesStore.open(tmp_path / "forecast.db") as store:
        with store.transaction():
            with pytest.raises(StoreWriteError):
                with store.transaction():
                    pass


def test_count_predictions_without_table_raises_store_error(tmp_path: Path) -> None:
    """Reading a store without the table should raise a store error."""
    with SeriesStore.open(tmp_path / "forecast.db") as store:
        with pytest.raises(TempMonitorStoreError):
            store.count_predictions()
