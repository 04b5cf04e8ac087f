"""SQLite-backed forecast series store.

This module owns the ``predictions`` table: schema creation,
destructive recreation, row insertion and read-back. The on-disk
layout is a durable contract read by other tools:

    predictions(id integer primary key, dt timestamp not null,
                temperature integer not null, upload_time timestamp not null)

``dt`` and ``upload_time`` hold integer epoch seconds.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
import sqlite3
from typing import Any, Iterable, Iterator

from core.constants import PREDICTIONS_TABLE_NAME
from core.errors import StoreOpenError, StoreWriteError, TempMonitorStoreError
from core.logging_config import get_logger
from core.time_utils import from_epoch_seconds, to_epoch_seconds
from core.types import PredictionRow, Reading

_LOGGER = get_logger(__name__)

_CREATE_TABLE_SQL = f"""
    create table if not exists {PREDICTIONS_TABLE_NAME} (
        id integer primary key,
        dt timestamp not null,
        temperature integer not null,
        upload_time timestamp not null
    )
"""
_DROP_TABLE_SQL = f"drop table if exists {PREDICTIONS_TABLE_NAME}"
_INSERT_SQL = (
    f"insert into {PREDICTIONS_TABLE_NAME} (dt, temperature, upload_time) values (?, ?, ?)"
)
_SELECT_SQL = f"select id, dt, temperature, upload_time from {PREDICTIONS_TABLE_NAME} order by id"
_COUNT_SQL = f"select count(*) from {PREDICTIONS_TABLE_NAME}"
_TABLE_EXISTS_SQL = "select count(*) from sqlite_master where type = 'table' and name = ?"


class SeriesStore:
    """Single-writer store for the forecast time series.

    Statements run in autocommit mode, so each mutating call is
    durable when it returns. Inside ``transaction()`` all statements
    become durable together at commit, or not at all.
    """

    def __init__(self, connection: sqlite3.Connection, path: str) -> None:
        """Wrap an open connection. Use ``SeriesStore.open`` instead."""
        self._connection = connection
        self._path = path

    @classmethod
    def open(cls, path: str | Path) -> "SeriesStore":
        """Open or create the store at ``path``.

        The connection takes and releases a write lock before returning,
        so a read-only database file fails here rather than at the first
        write.

        Args:
            path: SQLite database file path.

        Returns:
            Open store owning its connection.

        Raises:
            StoreOpenError: If the path is unusable, not a database, or
                not writable.
        """
        store_path = str(path)
        connection: sqlite3.Connection | None = None
        try:
            connection = sqlite3.connect(store_path, isolation_level=None)
            connection.execute("select count(*) from sqlite_master").fetchone()
            connection.execute("begin immediate")
            connection.execute("rollback")
        except sqlite3.Error as error:
            if connection is not None:
                connection.close()
            raise StoreOpenError(
                f"Failed to open store at {store_path}: {error}. "
                "Check that the parent directory exists and the file is a writable SQLite database."
            ) from error
        _LOGGER.debug("store_opened", store_path=store_path)
        return cls(connection, store_path)

    @property
    def path(self) -> str:
        """Database file path the store was opened with."""
        return self._path

    def close(self) -> None:
        """Close the underlying connection."""
        self._connection.close()

    def __enter__(self) -> "SeriesStore":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @contextmanager
    def transaction(self) -> Iterator["SeriesStore"]:
        """Run enclosed statements as one atomic unit.

        Commits when the block exits normally and rolls back on any
        exception, which is then re-raised.

        Raises:
            StoreWriteError: If begin or commit fails, or a transaction
                is already open.
        """
        if self._connection.in_transaction:
            raise StoreWriteError(
                f"Cannot begin transaction on {self._path}: a transaction is already open."
            )
        self._execute("begin immediate", (), "begin transaction")
        try:
            yield self
        except BaseException:
            self._rollback()
            raise
        self._execute("commit", (), "commit transaction")

    def recreate_schema(self) -> None:
        """Drop the predictions table if present, then create it fresh.

        Raises:
            StoreWriteError: If either statement fails.
        """
        self._execute(_DROP_TABLE_SQL, (), "drop predictions table")
        self._execute(_CREATE_TABLE_SQL, (), "create predictions table")
        _LOGGER.info("schema_recreated", store_path=self._path, table=PREDICTIONS_TABLE_NAME)

    def ensure_schema(self) -> None:
        """Create the predictions table if absent.

        Raises:
            StoreWriteError: If the statement fails.
        """
        self._execute(_CREATE_TABLE_SQL, (), "create predictions table")

    def insert(self, reading: Reading) -> int:
        """Append one row for ``reading`` and return its store-assigned id.

        Raises:
            StoreWriteError: If the insert fails.
        """
        params = (
            to_epoch_seconds(reading.observation_time),
            reading.temperature,
            to_epoch_seconds(reading.ingestion_time),
        )
        cursor = self._execute(_INSERT_SQL, params, "insert reading")
        return int(cursor.lastrowid)

    def insert_all(self, readings: Iterable[Reading]) -> int:
        """Insert readings in iteration order and return how many were written."""
        row_count = 0
        for reading in readings:
            self.insert(reading)
            row_count += 1
        return row_count

    def has_schema(self) -> bool:
        """Return whether the predictions table exists."""
        row = self._query(_TABLE_EXISTS_SQL, (PREDICTIONS_TABLE_NAME,)).fetchone()
        return bool(row[0])

    def count_predictions(self) -> int:
        """Return the number of persisted rows."""
        row = self._query(_COUNT_SQL, ()).fetchone()
        return int(row[0])

    def fetch_predictions(self) -> list[PredictionRow]:
        """Return all persisted rows ordered by id."""
        return [
            PredictionRow(
                row_id=row_id,
                observation_time=from_epoch_seconds(observation_seconds),
                temperature=temperature,
                ingestion_time=from_epoch_seconds(ingestion_seconds),
            )
            for row_id, observation_seconds, temperature, ingestion_seconds in self._query(
                _SELECT_SQL, ()
            ).fetchall()
        ]

    def _execute(self, sql: str, params: tuple[Any, ...], action: str) -> sqlite3.Cursor:
        try:
            return self._connection.execute(sql, params)
        except sqlite3.Error as error:
            raise StoreWriteError(
                f"Failed to {action} in store {self._path}: {error}."
            ) from error

    def _query(self, sql: str, params: tuple[Any, ...]) -> sqlite3.Cursor:
        try:
            return self._connection.execute(sql, params)
        except sqlite3.Error as error:
            raise TempMonitorStoreError(
                f"Failed to read predictions from store {self._path}: {error}. "
                "Run an ingest first to create the table."
            ) from error

    def _rollback(self) -> None:
        if not self._connection.in_transaction:
            return
        try:
            self._connection.execute("rollback")
        except sqlite3.Error as error:
            _LOGGER.error("rollback_failed", store_path=self._path, error=str(error))
            return
        _LOGGER.warning("transaction_rolled_back", store_path=self._path)
