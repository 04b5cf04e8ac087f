"""Unit tests for reading derivation."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from core.types import ForecastDocument, ForecastPeriod, ForecastRep, Reading
from ingest.document_decoder import decode_document
from ingest.document_parser import iter_readings, parse_readings
from tests.fixture_paths import fixture_bytes

_INGESTION_TIME = datetime(2016, 1, 1, 9, 15, 42, tzinfo=timezone.utc)


def _single_period_document(*offsets: int) -> ForecastDocument:
    reps = tuple(ForecastRep(minutes_after_midnight=offset, temperature=1) for offset in offsets)
    midnight = datetime(2016, 1, 1, tzinfo=timezone.utc)
    return ForecastDocument(periods=(ForecastPeriod(midnight=midnight, reps=reps),))


def test_parse_readings_emits_one_reading_per_rep() -> None:
    """Reading count should equal the total rep count."""
    document = decode_document(fixture_bytes("response.json"))

    readings = list(parse_readings(document, _INGESTION_TIME))

    assert len(readings) == document.rep_count == 12


def test_parse_readings_reconstructs_observation_times() -> None:
    """Observation time should be period midnight plus the rep offset."""
    document = _single_period_document(0, 180, 1439)

    times = [reading.observation_time for reading in parse_readings(document, _INGESTION_TIME)]

    assert times == [
        datetime(2016, 1, 1, 0, 0, tzinfo=timezone.utc),
        datetime(2016, 1, 1, 3, 0, tzinfo=timezone.utc),
        datetime(2016, 1, 1, 23, 59, tzinfo=timezone.utc),
    ]


def test_parse_readings_share_one_ingestion_time() -> None:
    """Every reading of a run should carry the same ingestion stamp."""
    document = decode_document(fixture_bytes("response.json"))

    stamps = {reading.ingestion_time for reading in parse_readings(document, _INGESTION_TIME)}

    assert stamps == {_INGESTION_TIME}


def test_parse_readings_preserves_document_order() -> None:
    """Readings should follow periods and reps in document order."""
    document = decode_document(fixture_bytes("response.json"))

    times = [reading.observation_time for reading in parse_readings(document, _INGESTION_TIME)]

    assert times == sorted(times)
    assert times[8] == datetime(2016, 1, 2, tzinfo=timezone.utc)


def test_parse_readings_does_not_resort_unsorted_documents() -> None:
    """The pipeline keeps document order even when it is not chronological."""
    document = _single_period_document(720, 0)

    hours = [
        reading.observation_time.hour for reading in parse_readings(document, _INGESTION_TIME)
    ]

    assert hours == [12, 0]


def test_parse_readings_is_restartable() -> None:
    """Iterating the sequence twice should yield equal readings."""
    readings = parse_readings(decode_document(fixture_bytes("response.json")), _INGESTION_TIME)

    assert list(readings) == list(readings)


def test_iter_readings_is_lazy() -> None:
    """The generator should produce readings on demand."""
    readings = iter_readings(_single_period_document(0, 180), _INGESTION_TIME)

    first = next(readings)

    assert first == Reading(
        observation_time=datetime(2016, 1, 1, tzinfo=timezone.utc),
        temperature=1,
        ingestion_time=_INGESTION_TIME,
    )


def test_parse_readings_normalizes_ingestion_time_to_utc() -> None:
    """A non-UTC ingestion stamp should be converted to UTC once."""
    stamp = datetime(2016, 1, 1, 11, tzinfo=timezone(timedelta(hours=2)))

    readings = parse_readings(_single_period_document(0), stamp)

    assert readings.ingestion_time == datetime(2016, 1, 1, 9, tzinfo=timezone.utc)
    assert len(readings) == 1
