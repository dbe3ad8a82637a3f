"""Display formatting for records returned by tools.

Formatting always works on a deep copy; parsed records are never modified.
"""

from __future__ import annotations

import copy
import json
from collections.abc import Sequence
from typing import Any

from .config import DisplayConfig
from .fields import resolve_field, set_nested_field
from .models import Record

TRUNCATION_SUFFIX = "... [truncated]"
LINE_NUMBER_KEY = "_line_number"


def truncate_values(obj: Any, max_length: int) -> Any:
    """Truncate long strings in place at every depth of ``obj``."""
    if isinstance(obj, dict):
        for key, value in obj.items():
            if isinstance(value, str) and len(value) > max_length:
                obj[key] = value[:max_length] + TRUNCATION_SUFFIX
            else:
                truncate_values(value, max_length)
    elif isinstance(obj, list):
        for i, value in enumerate(obj):
            if isinstance(value, str) and len(value) > max_length:
                obj[i] = value[:max_length] + TRUNCATION_SUFFIX
            else:
                truncate_values(value, max_length)
    return obj


def _expand_json_string(value: Any) -> Any:
    """Decode a JSON-encoded object/array string; leave anything else alone."""
    if not isinstance(value, str):
        return value
    s = value.strip()
    if not (s.startswith("{") or s.startswith("[")):
        return value
    try:
        return json.loads(s)
    except json.JSONDecodeError:
        return value


def format_record(
    record: Record,
    *,
    display: DisplayConfig,
    api_response_fields: Sequence[str] = (),
    line_no: int | None = None,
) -> Record:
    """Return a display copy of ``record`` according to ``display`` settings."""
    formatted = copy.deepcopy(record)

    if display.pretty_print_api_responses:
        for path in api_response_fields:
            value = resolve_field(formatted, path)
            expanded = _expand_json_string(value)
            if expanded is not value:
                set_nested_field(formatted, path, expanded)

    if display.max_field_value_length > 0:
        truncate_values(formatted, display.max_field_value_length)

    if display.show_line_numbers and line_no is not None:
        formatted[LINE_NUMBER_KEY] = line_no

    return formatted
