"""Grouping, hourly timeline and error-rate analysis over a record set."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence
from typing import Any

from .fields import MISSING, is_truthy, resolve_field
from .models import (
    ErrorAnalysis,
    FieldPattern,
    GroupByAnalysis,
    ParsedLine,
    PatternAnalysis,
    Record,
    TimelineBucket,
)
from .values import hour_bucket, json_type, parse_timestamp, stringify

MAX_SAMPLE_VALUES = 5
ERROR_TYPE_MAX_LEN = 50
ABSENT_GROUP_KEY = "undefined"


def error_type(value: Any) -> str:
    """Classify an error value: text before the first ":" for strings."""
    if isinstance(value, str):
        return value.split(":", 1)[0]
    return stringify(value)[:ERROR_TYPE_MAX_LEN]


def error_percentage(total_errors: int, valid_logs: int) -> str:
    if valid_logs <= 0:
        return "0%"
    return f"{total_errors / valid_logs * 100:.2f}%"


def first_error_value(record: Record, error_fields: Iterable[str]) -> Any:
    """Value of the first configured error field that is set, else MISSING.

    Only one error is counted per record even when several fields are populated.
    """
    for path in error_fields:
        value = resolve_field(record, path)
        if is_truthy(value):
            return value
    return MISSING


def _hour_of(record: Record, timestamp_field: str) -> str | None:
    value = resolve_field(record, timestamp_field)
    if value is MISSING:
        return None
    ts = parse_timestamp(value)
    return hour_bucket(ts) if ts is not None else None


def _timeline(buckets: Counter[str]) -> list[TimelineBucket]:
    return [TimelineBucket(timestamp=k, count=buckets[k]) for k in sorted(buckets)]


def _observe_fields(
    patterns: dict[str, FieldPattern],
    record: Record,
    *,
    correlation_fields: Sequence[str],
    api_response_fields: Sequence[str],
    error_fields: Sequence[str],
) -> None:
    for key, value in record.items():
        entry = patterns.get(key)
        if entry is None:
            entry = FieldPattern(
                is_correlation_field=key in correlation_fields,
                is_api_response_field=key in api_response_fields,
                is_error_field=key in error_fields,
            )
            patterns[key] = entry
        entry.count += 1
        tag = json_type(value)
        if tag not in entry.types:
            entry.types.append(tag)
        if len(entry.sample_values) < MAX_SAMPLE_VALUES:
            entry.sample_values.append(value)


def analyze_patterns(
    parsed_lines: Sequence[ParsedLine],
    *,
    group_by: str | None = None,
    include_timeline: bool = False,
    analyze_errors: bool = False,
    error_fields: Sequence[str] = (),
    timestamp_field: str = "timestamp",
    correlation_fields: Sequence[str] = (),
    api_response_fields: Sequence[str] = (),
) -> PatternAnalysis:
    """Summarize a record set into counts, a timeline, and an error breakdown.

    ``group_by`` must already be a concrete field path.
    """
    groups: Counter[str] = Counter()
    timeline: Counter[str] = Counter()
    error_types: Counter[str] = Counter()
    error_timeline: Counter[str] = Counter()
    patterns: dict[str, FieldPattern] = {}
    total_errors = 0
    valid = 0

    for parsed in parsed_lines:
        record = parsed.record
        if record is None:
            continue
        valid += 1

        if group_by:
            value = resolve_field(record, group_by)
            groups[ABSENT_GROUP_KEY if value is MISSING else stringify(value)] += 1

        bucket = _hour_of(record, timestamp_field) if include_timeline else None
        if bucket is not None:
            timeline[bucket] += 1

        if analyze_errors:
            err = first_error_value(record, error_fields)
            if err is not MISSING:
                total_errors += 1
                error_types[error_type(err)] += 1
                if bucket is not None:
                    error_timeline[bucket] += 1

        _observe_fields(
            patterns,
            record,
            correlation_fields=correlation_fields,
            api_response_fields=api_response_fields,
            error_fields=error_fields,
        )

    errors = None
    if analyze_errors:
        errors = ErrorAnalysis(
            total_errors=total_errors,
            error_types=dict(error_types),
            error_percentage=error_percentage(total_errors, valid),
            timeline=_timeline(error_timeline) if include_timeline else None,
        )

    return PatternAnalysis(
        total_logs=len(parsed_lines),
        valid_logs=valid,
        invalid_logs=len(parsed_lines) - valid,
        patterns=patterns,
        group_by=GroupByAnalysis(field=group_by, groups=dict(groups)) if group_by else None,
        timeline=_timeline(timeline) if include_timeline else None,
        errors=errors,
    )
