"""Shared typed models.

This module defines immutable data models used by the ingest,
store, and CLI layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from core.constants import DEFAULT_SOURCE_URI


@dataclass(frozen=True)
class ForecastRep:
    """One decoded report inside a forecast period.

    Attributes:
        minutes_after_midnight: Non-negative offset from the period date.
        temperature: Temperature in integer degrees.
    """

    minutes_after_midnight: int
    temperature: int


@dataclass(frozen=True)
class ForecastPeriod:
    """One decoded forecast day.

    Attributes:
        midnight: Aware UTC datetime at midnight of the period date.
        reps: Reports in document order.
    """

    midnight: datetime
    reps: tuple[ForecastRep, ...]


@dataclass(frozen=True)
class ForecastDocument:
    """Typed forecast document decoded from raw JSON.

    Attributes:
        periods: Periods in document order.
    """

    periods: tuple[ForecastPeriod, ...]

    @property
    def rep_count(self) -> int:
        """Total number of reports across all periods."""
        return sum(len(period.reps) for period in self.periods)


@dataclass(frozen=True)
class Reading:
    """Normalized time-series output unit.

    Attributes:
        observation_time: UTC moment the forecast applies to.
        temperature: Temperature in integer degrees.
        ingestion_time: UTC moment the producing run started.
    """

    observation_time: datetime
    temperature: int
    ingestion_time: datetime


@dataclass(frozen=True)
class PredictionRow:
    """One persisted ``predictions`` row read back from the store.

    Attributes:
        row_id: Store-assigned surrogate identity.
        observation_time: Stored observation time at second precision.
        temperature: Stored temperature.
        ingestion_time: Stored ingestion time at second precision.
    """

    row_id: int
    observation_time: datetime
    temperature: int
    ingestion_time: datetime


@dataclass(frozen=True)
class IngestOptions:
    """Ingest run options.

    Attributes:
        store_path: Path of the SQLite store to write.
        source_uri: Local file path, ``s3://`` URI, or ``datapoint[:<id>]``.
        recreate: Drop and recreate the predictions table first.
        ingestion_time: Optional fixed ingestion stamp; now when omitted.
    """

    store_path: str
    source_uri: str = DEFAULT_SOURCE_URI
    recreate: bool = False
    ingestion_time: datetime | None = None


@dataclass(frozen=True)
class IngestResult:
    """Outcome of a completed ingest run.

    Attributes:
        store_path: Store that received the rows.
        row_count: Number of rows inserted by this run.
        ingestion_time: Ingestion stamp shared by every inserted row.
        recreated: Whether the predictions table was recreated.
    """

    store_path: str
    row_count: int
    ingestion_time: datetime
    recreated: bool
