"""Forecast document decoding.

This module turns raw DataPoint JSON bytes into a typed
``ForecastDocument``. Every missing field, wrong shape, and
unparseable scalar is reported here with the JSON path that
caused it, so later stages only handle well-typed values.
"""

from __future__ import annotations

from datetime import datetime
import json
import re
from typing import Any

from core.constants import (
    MAX_MINUTES_OFFSET,
    MAX_TEMPERATURE,
    PERIOD_COLLECTION_PATH,
    PERIOD_DATE_FIELD,
    PERIOD_REPS_FIELD,
    REP_MINUTES_FIELD,
    REP_TEMPERATURE_FIELD,
)
from core.errors import FormatError, StructureError
from core.time_utils import add_minutes, parse_period_midnight
from core.types import ForecastDocument, ForecastPeriod, ForecastRep

_UNSIGNED_PATTERN = re.compile(r"[0-9]+")
_SIGNED_PATTERN = re.compile(r"[+-]?[0-9]+")


def decode_document(payload: bytes) -> ForecastDocument:
    """Decode raw document bytes into a typed forecast document.

    Args:
        payload: UTF-8 encoded JSON document.

    Returns:
        Typed document with periods and reps in document order.

    Raises:
        FormatError: If the payload is not UTF-8 JSON, or a scalar
            field fails to parse.
        StructureError: If a required field is absent or has the
            wrong shape.
    """
    try:
        root = json.loads(payload.decode("utf-8"))
    except UnicodeDecodeError as error:
        raise FormatError(f"Forecast document is not valid UTF-8: {error.reason}.") from error
    except json.JSONDecodeError as error:
        raise FormatError(
            f"Forecast document is not valid JSON: {error.msg} "
            f"at line {error.lineno} column {error.colno}."
        ) from error
    return decode_tree(root)


def decode_tree(root: Any) -> ForecastDocument:
    """Decode an already-parsed JSON tree into a typed forecast document."""
    _require_object(root, "document root")
    node = root
    path = ""
    for field_name in PERIOD_COLLECTION_PATH[:-1]:
        path = _join(path, field_name)
        node = _require_field(node, field_name, path, dict)
    path = _join(path, PERIOD_COLLECTION_PATH[-1])
    raw_periods = _require_field(node, PERIOD_COLLECTION_PATH[-1], path, list)
    periods = tuple(
        _decode_period(raw_period, f"{path}[{index}]")
        for index, raw_period in enumerate(raw_periods)
    )
    return ForecastDocument(periods=periods)


def _decode_period(raw_period: Any, path: str) -> ForecastPeriod:
    _require_object(raw_period, path)
    date_path = _join(path, PERIOD_DATE_FIELD)
    date_value = _require_field(raw_period, PERIOD_DATE_FIELD, date_path, str)
    try:
        midnight = parse_period_midnight(date_value)
    except ValueError as error:
        raise FormatError(f"Invalid period date at {date_path}: {error}.") from error
    reps_path = _join(path, PERIOD_REPS_FIELD)
    raw_reps = _require_field(raw_period, PERIOD_REPS_FIELD, reps_path, list)
    reps = tuple(
        _decode_rep(raw_rep, f"{reps_path}[{index}]") for index, raw_rep in enumerate(raw_reps)
    )
    for index, rep in enumerate(reps):
        _require_representable_time(midnight, rep, f"{reps_path}[{index}]")
    return ForecastPeriod(midnight=midnight, reps=reps)


def _decode_rep(raw_rep: Any, path: str) -> ForecastRep:
    _require_object(raw_rep, path)
    minutes_path = _join(path, REP_MINUTES_FIELD)
    minutes_value = _require_field(raw_rep, REP_MINUTES_FIELD, minutes_path, str)
    temperature_path = _join(path, REP_TEMPERATURE_FIELD)
    temperature_value = _require_field(raw_rep, REP_TEMPERATURE_FIELD, temperature_path, str)
    return ForecastRep(
        # Range 0-1439 is expected; larger offsets up to the 32-bit bound roll over.
        minutes_after_midnight=_parse_integer(
            minutes_value,
            minutes_path,
            _UNSIGNED_PATTERN,
            "non-negative integer",
            MAX_MINUTES_OFFSET,
        ),
        temperature=_parse_integer(
            temperature_value, temperature_path, _SIGNED_PATTERN, "integer", MAX_TEMPERATURE
        ),
    )


def _require_object(node: Any, path: str) -> None:
    if not isinstance(node, dict):
        raise StructureError(
            f"Invalid forecast document at {path}: expected object, got {_type_name(node)}."
        )


def _require_field(node: Any, field_name: str, path: str, expected_type: type) -> Any:
    """Return a field value after checking presence and JSON type.

    Raises:
        StructureError: If the field is missing or has another type.
    """
    if field_name not in node:
        raise StructureError(f"Invalid forecast document: missing field {path}.")
    value = node[field_name]
    if not isinstance(value, expected_type):
        raise StructureError(
            f"Invalid forecast document at {path}: expected {_JSON_TYPE_NAMES[expected_type]}, "
            f"got {_type_name(value)}."
        )
    return value


def _parse_integer(
    value: str,
    path: str,
    pattern: re.Pattern[str],
    description: str,
    limit: int,
) -> int:
    """Parse a decimal field whose magnitude must not exceed ``limit``.

    Raises:
        FormatError: If the text is not an integer or is out of range.
    """
    if pattern.fullmatch(value) is None:
        raise FormatError(
            f"Invalid value at {path}: expected {description}, got '{_preview(value)}'."
        )
    try:
        parsed = int(value)
    except ValueError as error:
        raise FormatError(
            f"Invalid value at {path}: {description} has too many digits ({len(value)})."
        ) from error
    if abs(parsed) > limit:
        raise FormatError(
            f"Invalid value at {path}: {description} '{_preview(value)}' is out of range "
            f"(magnitude at most {limit})."
        )
    return parsed


def _require_representable_time(midnight: datetime, rep: ForecastRep, path: str) -> None:
    try:
        add_minutes(midnight, rep.minutes_after_midnight)
    except OverflowError as error:
        raise FormatError(
            f"Invalid value at {_join(path, REP_MINUTES_FIELD)}: offset "
            f"{rep.minutes_after_midnight} minutes from {midnight.date().isoformat()} "
            "is past the last representable date."
        ) from error


def _preview(value: str) -> str:
    return value if len(value) <= 40 else f"{value[:37]}..."


def _join(path: str, field_name: str) -> str:
    return f"{path}.{field_name}" if path else field_name


_JSON_TYPE_NAMES: dict[type, str] = {dict: "object", list: "array", str: "string"}


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    return _JSON_TYPE_NAMES.get(type(value), type(value).__name__)
