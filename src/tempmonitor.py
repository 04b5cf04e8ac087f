"""Public SDK surface for tempmonitor.

This module provides a stable import path for scripted imports.
It re-exports the pipeline entry point, store, and typed models.
"""

from __future__ import annotations

from core.config import TempMonitorConfig
from core.errors import (
    DocumentSourceError,
    FormatError,
    StoreOpenError,
    StoreWriteError,
    StructureError,
    TempMonitorError,
)
from core.types import IngestOptions, IngestResult, PredictionRow, Reading
from ingest.document_decoder import decode_document
from ingest.document_parser import parse_readings
from ingest.pipeline import ingest_forecast
from store.series_store import SeriesStore

__all__ = [
    "DocumentSourceError",
    "FormatError",
    "IngestOptions",
    "IngestResult",
    "PredictionRow",
    "Reading",
    "SeriesStore",
    "StoreOpenError",
    "StoreWriteError",
    "StructureError",
    "TempMonitorConfig",
    "TempMonitorError",
    "decode_document",
    "ingest_forecast",
    "parse_readings",
]
