"""Reading derivation from decoded forecast documents.

This module maps a typed ``ForecastDocument`` onto the flat
``Reading`` time series. The mapping is lazy and restartable:
each iteration walks the document again from the first period.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterator

from core.time_utils import add_minutes, ensure_utc
from core.types import ForecastDocument, Reading


class ForecastReadings:
    """Lazy, re-iterable sequence of readings for one document and run."""

    def __init__(self, document: ForecastDocument, ingestion_time: datetime) -> None:
        self._document = document
        self._ingestion_time = ensure_utc(ingestion_time)

    def __iter__(self) -> Iterator[Reading]:
        return iter_readings(self._document, self._ingestion_time)

    def __len__(self) -> int:
        return self._document.rep_count

    @property
    def ingestion_time(self) -> datetime:
        """UTC stamp shared by every reading in the sequence."""
        return self._ingestion_time


def iter_readings(document: ForecastDocument, ingestion_time: datetime) -> Iterator[Reading]:
    """Yield one reading per report, periods and reports in document order.

    Args:
        document: Decoded forecast document.
        ingestion_time: Stamp shared by every reading of the run.

    Yields:
        Readings with ``observation_time = period midnight + offset``.
    """
    stamp = ensure_utc(ingestion_time)
    for period in document.periods:
        for rep in period.reps:
            yield Reading(
                observation_time=add_minutes(period.midnight, rep.minutes_after_midnight),
                temperature=rep.temperature,
                ingestion_time=stamp,
            )


def parse_readings(document: ForecastDocument, ingestion_time: datetime) -> ForecastReadings:
    """Return the lazy reading sequence for a decoded document."""
    return ForecastReadings(document, ingestion_time)
