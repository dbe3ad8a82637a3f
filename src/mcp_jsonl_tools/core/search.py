"""Substring search and field filters over parsed records."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .fields import MISSING, find_correlation_fields, resolve_field
from .models import ParsedLine, Record
from .values import parse_timestamp, stringify, to_json_line


@dataclass(frozen=True, slots=True)
class SearchHit:
    line_no: int
    record: Record
    matched_field: str | None
    correlation_fields: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class FilterHit:
    line_no: int
    record: Record
    matched_filters: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class RecordFilter:
    """AND-combined record criteria. Unset criteria always pass."""

    level: str | None = None
    event: str | None = None
    time_from: datetime | None = None
    time_to: datetime | None = None
    custom: Mapping[str, Any] | None = None

    def match(
        self,
        record: Record,
        *,
        level_field: str,
        event_field: str | None,
        timestamp_field: str,
    ) -> tuple[str, ...] | None:
        """Return the labels of the filters that matched, or None on a miss."""
        matched: list[str] = []

        if self.level is not None:
            if resolve_field(record, level_field) != self.level:
                return None
            matched.append(f"level:{self.level}")

        if self.event is not None:
            if not event_field or resolve_field(record, event_field) != self.event:
                return None
            matched.append(f"event:{self.event}")

        if self.time_from is not None or self.time_to is not None:
            value = resolve_field(record, timestamp_field)
            ts = parse_timestamp(value) if value is not MISSING else None
            if ts is None:
                return None
            if self.time_from is not None and ts < self.time_from:
                return None
            if self.time_to is not None and ts > self.time_to:
                return None
            matched.append("time_range")

        for path, expected in (self.custom or {}).items():
            actual = resolve_field(record, path)
            if actual is MISSING or not _same_json_value(actual, expected):
                return None
            matched.append(f"{path}:{stringify(expected)}")

        return tuple(matched)


def _same_json_value(a: Any, b: Any) -> bool:
    # Keep JSON true distinct from 1.
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b
    return a == b


def _contains(haystack: str, needle: str, case_sensitive: bool) -> bool:
    if case_sensitive:
        return needle in haystack
    return needle.lower() in haystack.lower()


def search_records(
    parsed_lines: Iterable[ParsedLine],
    term: str,
    *,
    field: str | None = None,
    case_sensitive: bool = False,
    limit: int = 100,
    correlation_fields: Sequence[str] = (),
) -> list[SearchHit]:
    """Find records containing ``term``, in one field or anywhere in the record."""
    hits: list[SearchHit] = []
    for parsed in parsed_lines:
        if len(hits) >= limit:
            break
        record = parsed.record
        if record is None:
            continue

        matched_field: str | None = None
        if field:
            value = resolve_field(record, field)
            if value is MISSING or not _contains(stringify(value), term, case_sensitive):
                continue
            matched_field = field
        else:
            if not _contains(to_json_line(record), term, case_sensitive):
                continue
            for key, value in record.items():
                if _contains(stringify(value), term, case_sensitive):
                    matched_field = key
                    break

        hits.append(
            SearchHit(
                line_no=parsed.line_no,
                record=record,
                matched_field=matched_field,
                correlation_fields=tuple(
                    find_correlation_fields(record, term, correlation_fields)
                ),
            )
        )
    return hits


def filter_records(
    parsed_lines: Iterable[ParsedLine],
    criteria: RecordFilter,
    *,
    level_field: str,
    event_field: str | None,
    timestamp_field: str,
    limit: int = 100,
) -> list[FilterHit]:
    """Return records matching every criterion in ``criteria``."""
    hits: list[FilterHit] = []
    for parsed in parsed_lines:
        if len(hits) >= limit:
            break
        if not parsed.is_valid:
            continue
        matched = criteria.match(
            parsed.record,
            level_field=level_field,
            event_field=event_field,
            timestamp_field=timestamp_field,
        )
        if matched is not None:
            hits.append(FilterHit(parsed.line_no, parsed.record, matched))
    return hits
