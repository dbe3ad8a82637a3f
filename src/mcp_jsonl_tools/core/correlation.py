"""Related-record discovery for a correlation identifier.

Three passes run in a fixed order because each later pass excludes the
positions claimed by the earlier ones:

1. direct matches on the configured correlation fields,
2. positional context around each direct match,
3. records whose timestamp is within the time window of a direct match.

A position is claimed at most once, so precedence is
direct_match > context > time_related.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime

from .fields import MISSING, find_correlation_fields, resolve_field
from .models import ParsedLine, Record, RelatedRecord, RelationType
from .values import parse_timestamp

logger = logging.getLogger(__name__)


def _timestamp_of(record: Record, timestamp_field: str) -> datetime | None:
    value = resolve_field(record, timestamp_field)
    if value is MISSING:
        return None
    return parse_timestamp(value)


def _direct_pass(
    valid: Sequence[ParsedLine],
    correlation_id: str,
    correlation_fields: Sequence[str],
) -> dict[int, RelatedRecord]:
    out: dict[int, RelatedRecord] = {}
    for parsed in valid:
        matched = find_correlation_fields(parsed.record, correlation_id, correlation_fields)
        if matched:
            out[parsed.line_no] = RelatedRecord(
                line_no=parsed.line_no,
                record=parsed.record,
                relation_type=RelationType.DIRECT_MATCH,
                correlation_fields=tuple(matched),
            )
    return out


def _context_pass(
    by_line: dict[int, ParsedLine],
    direct: dict[int, RelatedRecord],
    context_window: int,
) -> dict[int, RelatedRecord]:
    out: dict[int, RelatedRecord] = {}
    if context_window <= 0 or not by_line:
        return out
    first, last = min(by_line), max(by_line)
    for pos in direct:
        lo = max(first, pos - context_window)
        hi = min(last, pos + context_window)
        for line_no in range(lo, hi + 1):
            if line_no in direct or line_no in out:
                continue
            parsed = by_line.get(line_no)
            if parsed is None:
                # Malformed line.
                continue
            out[line_no] = RelatedRecord(
                line_no=line_no,
                record=parsed.record,
                relation_type=RelationType.CONTEXT,
            )
    return out


def _time_pass(
    valid: Sequence[ParsedLine],
    direct: dict[int, RelatedRecord],
    claimed: set[int],
    time_window_minutes: float,
    timestamp_field: str,
) -> dict[int, RelatedRecord]:
    window_seconds = time_window_minutes * 60
    candidates: list[tuple[ParsedLine, datetime]] = []
    for parsed in valid:
        if parsed.line_no in claimed:
            continue
        ts = _timestamp_of(parsed.record, timestamp_field)
        if ts is not None:
            candidates.append((parsed, ts))

    out: dict[int, RelatedRecord] = {}
    for match in direct.values():
        anchor = _timestamp_of(match.record, timestamp_field)
        if anchor is None:
            continue
        for parsed, ts in candidates:
            if parsed.line_no in out:
                continue
            if abs((ts - anchor).total_seconds()) <= window_seconds:
                out[parsed.line_no] = RelatedRecord(
                    line_no=parsed.line_no,
                    record=parsed.record,
                    relation_type=RelationType.TIME_RELATED,
                )
    return out


def find_related(
    parsed_lines: Iterable[ParsedLine],
    correlation_id: str,
    correlation_fields: Sequence[str],
    context_window: int,
    time_window_minutes: float,
    timestamp_field: str,
) -> list[RelatedRecord]:
    """Return every record related to ``correlation_id``, ordered by line number."""
    if context_window < 0:
        raise ValueError("context_window must be >= 0")
    if time_window_minutes < 0:
        raise ValueError("time_window_minutes must be >= 0")

    valid = [p for p in parsed_lines if p.is_valid]
    by_line = {p.line_no: p for p in valid}

    direct = _direct_pass(valid, correlation_id, correlation_fields)
    context = _context_pass(by_line, direct, context_window)

    claimed = set(direct) | set(context)
    timed: dict[int, RelatedRecord] = {}
    if direct:
        timed = _time_pass(valid, direct, claimed, time_window_minutes, timestamp_field)

    logger.debug(
        "find_related(%r): %d direct, %d context, %d time-related",
        correlation_id,
        len(direct),
        len(context),
        len(timed),
    )
    related = [*direct.values(), *context.values(), *timed.values()]
    related.sort(key=lambda r: r.line_no)
    return related
