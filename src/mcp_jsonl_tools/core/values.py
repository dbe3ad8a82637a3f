"""Value helpers shared by the analysis engines.

JSON values arrive as plain Python objects; these helpers give them a single
canonical string form, a JSON type tag, and a best-effort timestamp reading.
"""

from __future__ import annotations

import json
import math
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from typing import Any

TIMESTAMP_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%SZ",
    "%Y/%m/%d %H:%M:%S",
    "%d-%m-%Y %H:%M:%S",
)


def json_type(value: Any) -> str:
    """Return the JSON type tag for a decoded JSON value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, dict):
        return "object"
    if isinstance(value, (list, tuple)):
        return "array"
    return type(value).__name__


def stringify(value: Any) -> str:
    """Canonical string form used for matching, grouping and error typing."""
    if isinstance(value, str):
        return value
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)


def to_json_line(record: Any) -> str:
    """Compact single-line JSON, as the record would appear in a JSONL file."""
    return json.dumps(record, ensure_ascii=False, separators=(",", ":"), default=str)


def parse_iso_timestamp(value: str) -> datetime | None:
    """Parse an ISO8601 timestamp string. Naive values are taken as UTC."""
    try:
        ts = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC)


def _parse_with_formats(value: str) -> datetime | None:
    for fmt in TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


def parse_timestamp(value: Any) -> datetime | None:
    """Read a timestamp from a JSON value, or None when it is not one.

    Strings may be ISO8601, RFC 2822, or one of ``TIMESTAMP_FORMATS`` (naive
    values are UTC). Numbers are epoch milliseconds.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return None
        try:
            return datetime.fromtimestamp(value / 1000, tz=UTC)
        except (OverflowError, OSError, ValueError):
            return None
    if not isinstance(value, str) or not value.strip():
        return None

    ts = parse_iso_timestamp(value)
    if ts is not None:
        return ts
    try:
        ts = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        ts = _parse_with_formats(value.strip())
    if ts is None:
        return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC)


def hour_bucket(ts: datetime) -> str:
    """Truncate to the UTC hour, e.g. ``2025-01-01T10:00``."""
    return ts.astimezone(UTC).strftime("%Y-%m-%dT%H:00")
