"""JSON-lines record parsing."""

from __future__ import annotations

import json
from collections.abc import Iterable

from .models import ParsedLine


def parse_line(line_no: int, line: str) -> ParsedLine:
    """Parse one line into a record (a JSON object) or a recorded failure."""
    s = line.strip()
    try:
        obj = json.loads(s)
    except json.JSONDecodeError as e:
        return ParsedLine(line_no=line_no, record=None, error=str(e))

    if not isinstance(obj, dict):
        return ParsedLine(
            line_no=line_no,
            record=None,
            error=f"expected a JSON object, got {type(obj).__name__}",
        )
    return ParsedLine(line_no=line_no, record=obj)


def parse_lines(lines: Iterable[str], *, start: int = 1) -> list[ParsedLine]:
    """Parse non-blank lines, numbering them from ``start``."""
    out: list[ParsedLine] = []
    line_no = start
    for line in lines:
        if not line.strip():
            continue
        out.append(parse_line(line_no, line))
        line_no += 1
    return out
