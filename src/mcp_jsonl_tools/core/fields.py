"""Dotted field-path helpers.

A path like ``user.profile.id`` walks nested objects one key at a time.
Resolution distinguishes "absent" (``MISSING``) from values that are present
but null, false, zero or empty.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import Any, Final

from .values import stringify


class _Missing(Enum):
    MISSING = "MISSING"

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Final = _Missing.MISSING


def _step(current: Any, part: str) -> Any:
    if isinstance(current, dict):
        return current.get(part, MISSING)
    if isinstance(current, list) and part.isdigit():
        idx = int(part)
        return current[idx] if idx < len(current) else MISSING
    return MISSING


def resolve_field(record: Any, path: str) -> Any:
    """Return the value at ``path`` or ``MISSING``."""
    current = record
    for part in path.split("."):
        if current is None or current is MISSING:
            return MISSING
        current = _step(current, part)
    return current


def set_nested_field(record: dict[str, Any], path: str, value: Any) -> None:
    """Set ``path`` on ``record``, creating intermediate objects as needed."""
    parts = path.split(".")
    current = record
    for part in parts[:-1]:
        nxt = current.get(part)
        if not isinstance(nxt, dict):
            nxt = {}
            current[part] = nxt
        current = nxt
    current[parts[-1]] = value


def find_correlation_fields(
    record: dict[str, Any],
    correlation_id: str,
    fields: Iterable[str],
) -> list[str]:
    """Return every configured path whose value contains ``correlation_id``.

    Matching is a case-sensitive substring test on the value's canonical
    string form. Absent, null, false, zero and empty values never match.
    """
    found: list[str] = []
    for path in fields:
        value = resolve_field(record, path)
        if not is_truthy(value):
            continue
        if correlation_id in stringify(value):
            found.append(path)
    return found


def is_truthy(value: Any) -> bool:
    """True for present values other than null, false, 0 and "".

    Empty objects and arrays count as present.
    """
    if value is MISSING or value is None or value is False:
        return False
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value != 0
    if isinstance(value, str):
        return value != ""
    return True
