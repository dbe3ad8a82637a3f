"""Core data models for JSONL analysis."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

Record = dict[str, Any]


class RelationType(str, Enum):
    """Why a record was included in a related-records result."""

    DIRECT_MATCH = "direct_match"
    CONTEXT = "context"
    TIME_RELATED = "time_related"


@dataclass(frozen=True, slots=True)
class ParsedLine:
    """One non-blank source line: a record, or the reason it failed to parse."""

    line_no: int
    record: Record | None
    error: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.record is not None


@dataclass(slots=True)
class FieldAnalysis:
    """Per-field statistics collected during schema inference."""

    type: str
    examples: list[Any] = field(default_factory=list)
    frequency: int = 0
    is_likely_timestamp: bool = False
    is_likely_level: bool = False
    is_likely_message: bool = False
    is_likely_event: bool = False
    is_likely_correlation_id: bool = False
    is_likely_api_response: bool = False
    is_likely_error: bool = False


@dataclass(slots=True)
class DetectedFields:
    """Suggested role bindings produced by schema inference."""

    timestamp_field: str | None = None
    level_field: str | None = None
    message_field: str | None = None
    event_field: str | None = None
    correlation_fields: list[str] = field(default_factory=list)
    api_response_fields: list[str] = field(default_factory=list)
    error_fields: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class SchemaDetectionResult:
    detected_fields: DetectedFields
    field_analysis: dict[str, FieldAnalysis]
    confidence: float
    suggestions: list[str]
    sample_size: int
    valid_logs: int


@dataclass(frozen=True, slots=True)
class RelatedRecord:
    """A record pulled into a correlation result, tagged with how it got there."""

    line_no: int
    record: Record
    relation_type: RelationType
    correlation_fields: tuple[str, ...] | None = None  # direct matches only


@dataclass(frozen=True, slots=True)
class TimelineBucket:
    timestamp: str
    count: int


@dataclass(frozen=True, slots=True)
class GroupByAnalysis:
    field: str
    groups: dict[str, int]

    @property
    def unique_values(self) -> int:
        return len(self.groups)


@dataclass(frozen=True, slots=True)
class ErrorAnalysis:
    total_errors: int
    error_types: dict[str, int]
    error_percentage: str
    timeline: list[TimelineBucket] | None = None


@dataclass(slots=True)
class FieldPattern:
    """By-product summary of one top-level field across all valid records."""

    count: int = 0
    types: list[str] = field(default_factory=list)
    sample_values: list[Any] = field(default_factory=list)
    is_correlation_field: bool = False
    is_api_response_field: bool = False
    is_error_field: bool = False


@dataclass(frozen=True, slots=True)
class PatternAnalysis:
    total_logs: int
    valid_logs: int
    invalid_logs: int
    patterns: dict[str, FieldPattern]
    group_by: GroupByAnalysis | None = None
    timeline: list[TimelineBucket] | None = None
    errors: ErrorAnalysis | None = None
