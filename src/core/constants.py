"""Core constants used across tempmonitor modules.

This module centralizes document field names, schema names and defaults.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

PROGRAM_NAME = "tempmonitor"
PROGRAM_VERSION = "0.1.0"

DATAPOINT_SOURCE_SCHEME = "datapoint"
DEFAULT_SOURCE_URI = DATAPOINT_SOURCE_SCHEME
DEFAULT_DATAPOINT_URL = "http://datapoint.metoffice.gov.uk/public/data/val/wxfcs/all/json"
DATAPOINT_RESOLUTION = "3hourly"
DEFAULT_HTTP_TIMEOUT_SECONDS = 30.0
HTTP_RETRY_TOTAL = 3
HTTP_RETRY_BACKOFF_FACTOR = 1.0
HTTP_RETRY_STATUS_CODES = (500, 502, 503, 504)

PERIOD_COLLECTION_PATH = ("SiteRep", "DV", "Location", "Period")
PERIOD_DATE_FIELD = "value"
PERIOD_REPS_FIELD = "Rep"
REP_MINUTES_FIELD = "$"
REP_TEMPERATURE_FIELD = "F"
PERIOD_DATE_SUFFIX = "Z"

# Expected, not enforced: offsets past a day roll into the following date.
MINUTES_PER_DAY = 1440

# Magnitude bounds for decoded integers: SQLite INTEGER and a 32-bit offset.
MAX_TEMPERATURE = 2**63 - 1
MAX_MINUTES_OFFSET = 2**31 - 1

PREDICTIONS_TABLE_NAME = "predictions"
