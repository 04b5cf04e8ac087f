"""Tempmonitor exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each pipeline stage raises a specific error type so a failed run
reports exactly which stage stopped it.
"""

from __future__ import annotations


class TempMonitorError(Exception):
    """Base exception for all tempmonitor failures."""


class TempMonitorConfigError(TempMonitorError):
    """Raised for invalid runtime configuration."""


class TempMonitorDependencyError(TempMonitorError):
    """Raised when an optional runtime dependency is missing."""


class DocumentSourceError(TempMonitorError):
    """Raised when raw document bytes cannot be retrieved."""


class DocumentError(TempMonitorError):
    """Base class for forecast document decode failures."""


class StructureError(DocumentError):
    """Raised when an expected document field is absent or has the wrong shape."""


class FormatError(DocumentError):
    """Raised when a document field has the right shape but fails to parse."""


class TempMonitorStoreError(TempMonitorError):
    """Base class for series store failures."""


class StoreOpenError(TempMonitorStoreError):
    """Raised when the backing store cannot be opened."""


class StoreWriteError(TempMonitorStoreError):
    """Raised when a schema or insert statement fails."""
