"""Runtime configuration model for tempmonitor.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os

from core.constants import DEFAULT_DATAPOINT_URL, DEFAULT_HTTP_TIMEOUT_SECONDS
from core.errors import TempMonitorConfigError


@dataclass(frozen=True)
class TempMonitorConfig:
    """Validated runtime configuration.

    Attributes:
        api_key: Optional DataPoint access key.
        location_id: Optional default DataPoint site identifier.
        datapoint_url: Base URL of the DataPoint forecast endpoint.
        http_timeout: Request timeout in seconds for remote fetches.
        s3_region: Optional default AWS region for S3 document sources.
        s3_profile: Optional AWS profile for boto3 session initialization.
    """

    api_key: str | None
    location_id: str | None
    datapoint_url: str = DEFAULT_DATAPOINT_URL
    http_timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS
    s3_region: str | None = None
    s3_profile: str | None = None

    @classmethod
    def from_env(cls) -> "TempMonitorConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            TempMonitorConfigError: If environment values are invalid.
        """
        timeout_value = os.getenv("TEMPMONITOR_HTTP_TIMEOUT", str(DEFAULT_HTTP_TIMEOUT_SECONDS))
        return cls(
            api_key=os.getenv("TEMPMONITOR_API_KEY") or None,
            location_id=os.getenv("TEMPMONITOR_LOCATION_ID") or None,
            datapoint_url=os.getenv("TEMPMONITOR_DATAPOINT_URL", DEFAULT_DATAPOINT_URL).rstrip("/"),
            http_timeout=_parse_http_timeout(timeout_value),
            s3_region=os.getenv("TEMPMONITOR_S3_REGION") or None,
            s3_profile=os.getenv("TEMPMONITOR_S3_PROFILE") or None,
        )


def _parse_http_timeout(raw_value: str) -> float:
    """Parse the HTTP timeout environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Positive timeout in seconds.

    Raises:
        TempMonitorConfigError: If value is not a positive number.
    """
    try:
        timeout = float(raw_value)
    except ValueError as error:
        raise TempMonitorConfigError(
            "Invalid TEMPMONITOR_HTTP_TIMEOUT value: "
            f"expected number of seconds, got '{raw_value}'. "
            "Set TEMPMONITOR_HTTP_TIMEOUT to a positive number."
        ) from error
    if timeout <= 0:
        raise TempMonitorConfigError(
            "Invalid TEMPMONITOR_HTTP_TIMEOUT value: "
            f"expected a positive number, got '{raw_value}'."
        )
    return timeout
