"""Schema inference for JSONL sources with unknown field names.

Scans a bounded sample, runs every heuristic against every top-level field
occurrence, and reduces the per-field flags to a suggested schema.
"""

from __future__ import annotations

from collections.abc import Sequence

from .heuristics import FieldHeuristic, default_heuristics
from .models import DetectedFields, FieldAnalysis, ParsedLine, SchemaDetectionResult
from .values import json_type

DEFAULT_SAMPLE_SIZE = 100
MAX_EXAMPLES = 3

# (FieldAnalysis flag, DetectedFields attribute, suggestion label)
_SINGULAR_ROLES: tuple[tuple[str, str, str], ...] = (
    ("is_likely_timestamp", "timestamp_field", "timestamp"),
    ("is_likely_level", "level_field", "level"),
    ("is_likely_message", "message_field", "message"),
    ("is_likely_event", "event_field", "event"),
)
_SET_ROLES: tuple[tuple[str, str], ...] = (
    ("is_likely_correlation_id", "correlation_fields"),
    ("is_likely_api_response", "api_response_fields"),
    ("is_likely_error", "error_fields"),
)


def _analyze_fields(
    sample: Sequence[ParsedLine],
    heuristics: Sequence[FieldHeuristic],
) -> tuple[dict[str, FieldAnalysis], int]:
    # dict preserves first-observed order, which role resolution relies on.
    analysis: dict[str, FieldAnalysis] = {}
    valid = 0
    for parsed in sample:
        if not parsed.is_valid:
            continue
        valid += 1
        for name, value in parsed.record.items():
            entry = analysis.get(name)
            if entry is None:
                entry = FieldAnalysis(type=json_type(value))
                analysis[name] = entry

            entry.frequency += 1
            if len(entry.examples) < MAX_EXAMPLES:
                entry.examples.append(value)

            for h in heuristics:
                # Flags only ever turn on.
                if not getattr(entry, h.flag) and h.classify(name, value):
                    setattr(entry, h.flag, True)
    return analysis, valid


def _reduce(analysis: dict[str, FieldAnalysis]) -> tuple[DetectedFields, list[str]]:
    detected = DetectedFields()
    suggestions: list[str] = []
    for name, entry in analysis.items():
        for flag, attr, label in _SINGULAR_ROLES:
            if getattr(entry, flag) and getattr(detected, attr) is None:
                setattr(detected, attr, name)
                suggestions.append(f"Detected {label} field: {name}")
        for flag, attr in _SET_ROLES:
            if getattr(entry, flag):
                getattr(detected, attr).append(name)
    return detected, suggestions


def infer_schema(
    parsed_lines: Sequence[ParsedLine],
    sample_size: int = DEFAULT_SAMPLE_SIZE,
    *,
    heuristics: Sequence[FieldHeuristic] | None = None,
) -> SchemaDetectionResult:
    """Classify fields of the first ``sample_size`` lines into semantic roles.

    Confidence is the fraction of sampled lines that parsed as records. It is
    informational only and never suppresses suggestions.
    """
    if sample_size < 0:
        raise ValueError("sample_size must be >= 0")

    sample = list(parsed_lines[:sample_size])
    if heuristics is None:
        heuristics = default_heuristics()

    analysis, valid = _analyze_fields(sample, heuristics)
    detected, suggestions = _reduce(analysis)
    confidence = valid / len(sample) if sample else 0.0

    return SchemaDetectionResult(
        detected_fields=detected,
        field_analysis=analysis,
        confidence=confidence,
        suggestions=suggestions,
        sample_size=len(sample),
        valid_logs=valid,
    )
