"""Forecast document sources.

This module loads raw forecast document bytes from a local file,
an S3 object, or the Met Office DataPoint forecast service.
Transport and retry policy stay inside this module.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from core.config import TempMonitorConfig
from core.constants import (
    DATAPOINT_RESOLUTION,
    DATAPOINT_SOURCE_SCHEME,
    HTTP_RETRY_BACKOFF_FACTOR,
    HTTP_RETRY_STATUS_CODES,
    HTTP_RETRY_TOTAL,
)
from core.errors import DocumentSourceError, TempMonitorConfigError, TempMonitorDependencyError
from core.logging_config import get_logger
from core.s3_uri import parse_s3_uri

_LOGGER = get_logger(__name__)


def read_document_bytes(source_uri: str, config: TempMonitorConfig) -> bytes:
    """Load one complete forecast document.

    Args:
        source_uri: ``datapoint``, ``datapoint:<location_id>``,
            ``s3://bucket/key``, or a local file path.
        config: Runtime configuration for remote credentials.

    Returns:
        Raw document bytes.

    Raises:
        DocumentSourceError: If the document cannot be retrieved.
        TempMonitorConfigError: If DataPoint credentials are missing.
    """
    if _is_datapoint_source(source_uri):
        payload = _read_datapoint_document(source_uri, config)
    elif source_uri.startswith("s3://"):
        payload = _read_s3_document(source_uri, config)
    else:
        payload = _read_local_document(Path(source_uri).expanduser())
    _LOGGER.info("document_fetched", source_uri=source_uri, size_bytes=len(payload))
    return payload


def build_datapoint_url(location_id: str, config: TempMonitorConfig) -> str:
    """Build the DataPoint forecast URL for a site, without credentials."""
    return f"{config.datapoint_url}/{location_id}"


def _is_datapoint_source(source_uri: str) -> bool:
    return source_uri == DATAPOINT_SOURCE_SCHEME or source_uri.startswith(
        f"{DATAPOINT_SOURCE_SCHEME}:"
    )


def _read_local_document(source_path: Path) -> bytes:
    """Read a document from the local file system.

    Raises:
        DocumentSourceError: If path is missing or unreadable.
    """
    if not source_path.is_file():
        raise DocumentSourceError(
            f"Failed to read forecast document at {source_path}: file does not exist. "
            "Provide an existing JSON file."
        )
    try:
        return source_path.read_bytes()
    except OSError as error:
        raise DocumentSourceError(
            f"Failed to read forecast document at {source_path}: {error}."
        ) from error


def _read_datapoint_document(source_uri: str, config: TempMonitorConfig) -> bytes:
    """Fetch a forecast document from DataPoint.

    Args:
        source_uri: ``datapoint`` or ``datapoint:<location_id>``.
        config: Runtime configuration holding key, default site and timeout.

    Returns:
        Response body bytes.

    Raises:
        TempMonitorConfigError: If key or location id is missing.
        DocumentSourceError: If the request fails.
    """
    location_id = _resolve_location_id(source_uri, config)
    if not config.api_key:
        raise TempMonitorConfigError(
            "DataPoint source requires an API key. Set TEMPMONITOR_API_KEY and retry."
        )
    url = build_datapoint_url(location_id, config)
    params = {"res": DATAPOINT_RESOLUTION, "key": config.api_key}
    session = _build_session()
    try:
        response = session.get(url, params=params, timeout=config.http_timeout)
        response.raise_for_status()
    except requests.RequestException as error:
        raise DocumentSourceError(
            f"Failed to fetch DataPoint forecast for location {location_id}: "
            f"{_describe_request_error(error)}."
        ) from error
    return response.content


def _resolve_location_id(source_uri: str, config: TempMonitorConfig) -> str:
    _, _, location_id = source_uri.partition(":")
    location_id = location_id or config.location_id or ""
    if not location_id:
        raise TempMonitorConfigError(
            "DataPoint source requires a location id. "
            "Use --source datapoint:<location_id> or set TEMPMONITOR_LOCATION_ID."
        )
    return location_id


def _build_session() -> requests.Session:
    """Build an HTTP session with bounded retries for server errors."""
    session = requests.Session()
    retries = Retry(
        total=HTTP_RETRY_TOTAL,
        backoff_factor=HTTP_RETRY_BACKOFF_FACTOR,
        status_forcelist=list(HTTP_RETRY_STATUS_CODES),
        allowed_methods=["GET"],
    )
    adapter = HTTPAdapter(max_retries=retries)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


def _describe_request_error(error: requests.RequestException) -> str:
    """Describe a request failure without echoing the query string key."""
    response = error.response
    if response is not None:
        return f"HTTP {response.status_code}"
    return type(error).__name__


def _read_s3_document(source_uri: str, config: TempMonitorConfig) -> bytes:
    """Download a document stored as an S3 object.

    Raises:
        DocumentSourceError: If the URI is invalid or download fails.
    """
    location = parse_s3_uri(source_uri)
    s3_client = _create_s3_client(config)
    try:
        return s3_client.get_object(Bucket=location.bucket, Key=location.key)["Body"].read()
    except Exception as error:
        raise DocumentSourceError(
            f"Failed to download forecast document from {source_uri}: {error}."
        ) from error


def _create_s3_client(config: TempMonitorConfig) -> Any:
    """Create a boto3 S3 client.

    Raises:
        TempMonitorDependencyError: If boto3 is missing.
    """
    try:
        import boto3
    except ImportError as error:
        raise TempMonitorDependencyError(
            "S3 support requires boto3, but it is not installed. "
            "Install boto3 to read s3:// sources."
        ) from error
    session_kwargs = _build_boto3_session_kwargs(config)
    session = boto3.session.Session(**session_kwargs)
    return session.client("s3")


def _build_boto3_session_kwargs(config: TempMonitorConfig) -> dict[str, str]:
    kwargs: dict[str, str] = {}
    if config.s3_profile:
        kwargs["profile_name"] = config.s3_profile
    if config.s3_region:
        kwargs["region_name"] = config.s3_region
    return kwargs