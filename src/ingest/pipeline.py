"""Ingest orchestration for forecast imports.

This module coordinates store opening, document retrieval, decoding,
and the single transaction that writes every reading of a run.
"""

from __future__ import annotations

from datetime import datetime, timezone

from core.config import TempMonitorConfig
from core.errors import TempMonitorError
from core.logging_config import get_logger
from core.time_utils import ensure_utc
from core.types import ForecastDocument, IngestOptions, IngestResult
from ingest.document_decoder import decode_document
from ingest.document_parser import ForecastReadings, parse_readings
from ingest.document_source import read_document_bytes
from store.series_store import SeriesStore

_LOGGER = get_logger(__name__)


class IngestPipelineRunner:
    """Runner for one forecast ingest run."""

    def __init__(self, options: IngestOptions, config: TempMonitorConfig) -> None:
        self._options = options
        self._config = config
        self._ingestion_time = _resolve_ingestion_time(options.ingestion_time)

    def run(self) -> IngestResult:
        """Execute the run and return its outcome.

        The store is opened before the document is fetched, so an
        unusable store path fails fast. All schema work and inserts
        share one transaction: any failure leaves the store unchanged.
        """
        _LOGGER.info(
            "ingest_started",
            store_path=self._options.store_path,
            source_uri=self._options.source_uri,
            recreate=self._options.recreate,
            ingestion_time=self._ingestion_time.isoformat(),
        )
        with SeriesStore.open(self._options.store_path) as store:
            document = self._load_document()
            readings = parse_readings(document, self._ingestion_time)
            row_count = self._write_readings(store, readings)
        result = IngestResult(
            store_path=self._options.store_path,
            row_count=row_count,
            ingestion_time=self._ingestion_time,
            recreated=self._options.recreate,
        )
        _log_ingest_completion(self._options, document, result)
        return result

    def _load_document(self) -> ForecastDocument:
        payload = read_document_bytes(self._options.source_uri, self._config)
        return decode_document(payload)

    def _write_readings(self, store: SeriesStore, readings: ForecastReadings) -> int:
        with store.transaction():
            if self._options.recreate:
                store.recreate_schema()
            store.ensure_schema()
            return store.insert_all(readings)


def ingest_forecast(options: IngestOptions, config: TempMonitorConfig) -> IngestResult:
    """Run one forecast import into the series store.

    Args:
        options: Ingest run options.
        config: Runtime configuration.

    Returns:
        Summary of the completed run.

    Raises:
        DocumentSourceError: If the document cannot be retrieved.
        StructureError: If the document is missing a field or has the wrong shape.
        FormatError: If a document field fails to parse.
        StoreOpenError: If the store cannot be opened.
        StoreWriteError: If a schema or insert statement fails.
    """
    runner = IngestPipelineRunner(options, config)
    try:
        return runner.run()
    except TempMonitorError as error:
        _LOGGER.error(
            "ingest_failed",
            store_path=options.store_path,
            source_uri=options.source_uri,
            error_type=type(error).__name__,
            error=str(error),
        )
        raise


def _resolve_ingestion_time(ingestion_time: datetime | None) -> datetime:
    """Capture the run stamp once, before any reading is derived."""
    if ingestion_time is None:
        return datetime.now(timezone.utc)
    return ensure_utc(ingestion_time)


def _log_ingest_completion(
    options: IngestOptions,
    document: ForecastDocument,
    result: IngestResult,
) -> None:
    """Log pipeline completion with contextual metadata."""
    _LOGGER.info(
        "ingest_completed",
        store_path=options.store_path,
        source_uri=options.source_uri,
        period_count=len(document.periods),
        row_count=result.row_count,
        recreated=result.recreated,
        ingestion_time=result.ingestion_time.isoformat(),
    )
