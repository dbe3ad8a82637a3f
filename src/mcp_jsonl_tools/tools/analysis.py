"""Analysis tool implementations: schema detection, related logs, patterns.

Keep this layer thin: validate inputs, read the source, call the engine, and
return JSON-serializable data structures.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any

from mcp_jsonl_tools.core.config import LogConfig
from mcp_jsonl_tools.core.correlation import find_related
from mcp_jsonl_tools.core.log_service import load_parsed_lines
from mcp_jsonl_tools.core.models import (
    PatternAnalysis,
    RelatedRecord,
    RelationType,
    SchemaDetectionResult,
    TimelineBucket,
)
from mcp_jsonl_tools.core.patterns import analyze_patterns
from mcp_jsonl_tools.core.schema_inference import DEFAULT_SAMPLE_SIZE, infer_schema

from .common import check_limit, display_record, source_path

logger = logging.getLogger(__name__)


def _detection_to_dict(result: SchemaDetectionResult) -> dict[str, Any]:
    return {
        "detected_fields": dataclasses.asdict(result.detected_fields),
        "field_analysis": {
            name: dataclasses.asdict(entry) for name, entry in result.field_analysis.items()
        },
        "confidence": result.confidence,
        "suggestions": list(result.suggestions),
    }


def _suggested_schema(config: LogConfig, result: SchemaDetectionResult) -> dict[str, Any]:
    """Current schema with the detected bindings laid over it."""
    detected = result.detected_fields
    update: dict[str, Any] = {
        "correlation_fields": detected.correlation_fields,
        "api_response_fields": detected.api_response_fields,
        "error_fields": detected.error_fields,
    }
    for attr in ("timestamp_field", "level_field", "message_field", "event_field"):
        value = getattr(detected, attr)
        if value is not None:
            update[attr] = value
    schema = config.schema_config.model_copy(update=update)
    return {"schema": schema.model_dump(mode="json", by_alias=True)}


async def detect_schema_impl(
    *,
    config: LogConfig,
    file_path: str,
    sample_size: int = DEFAULT_SAMPLE_SIZE,
) -> dict[str, Any]:
    """Implementation for the `detect_schema` tool."""
    check_limit("sample_size", sample_size)
    path = source_path(file_path, config)
    parsed = await load_parsed_lines(path, limit=sample_size)
    result = infer_schema(parsed, sample_size)
    logger.info(
        "Schema detection on %s: %d/%d valid, confidence %.2f",
        path,
        result.valid_logs,
        result.sample_size,
        result.confidence,
    )
    return {
        "file_path": str(path),
        "sample_size": result.sample_size,
        "valid_logs": result.valid_logs,
        "schema_detection": _detection_to_dict(result),
        "suggested_config_update": _suggested_schema(config, result),
    }


def _related_to_dict(item: RelatedRecord, config: LogConfig) -> dict[str, Any]:
    d: dict[str, Any] = {
        "line_number": item.line_no,
        "log": display_record(item.record, item.line_no, config),
        "relation_type": item.relation_type.value,
    }
    if item.correlation_fields:
        d["correlation_fields"] = list(item.correlation_fields)
    return d


async def find_related_logs_impl(
    *,
    config: LogConfig,
    file_path: str,
    correlation_id: str,
    context_window: int | None = None,
    time_window_minutes: float | None = None,
) -> dict[str, Any]:
    """Implementation for the `find_related_logs` tool."""
    if not correlation_id:
        raise ValueError("correlation_id must be a non-empty string")
    if context_window is None:
        context_window = config.defaults.context_window
    if time_window_minutes is None:
        time_window_minutes = config.defaults.time_window_minutes

    schema = config.schema_config
    path = source_path(file_path, config)
    parsed = await load_parsed_lines(path)
    related = find_related(
        parsed,
        correlation_id,
        schema.correlation_fields,
        context_window,
        time_window_minutes,
        schema.timestamp_field,
    )
    direct = sum(1 for r in related if r.relation_type is RelationType.DIRECT_MATCH)

    return {
        "file_path": str(path),
        "correlation_id": correlation_id,
        "direct_matches": direct,
        "total_related": len(related),
        "context_window": context_window,
        "time_window_minutes": time_window_minutes,
        "config_used": {
            "correlation_fields": list(schema.correlation_fields),
            "timestamp_field": schema.timestamp_field,
        },
        "related_logs": [_related_to_dict(r, config) for r in related],
    }


def _timeline_to_list(buckets: list[TimelineBucket]) -> list[dict[str, Any]]:
    return [{"timestamp": b.timestamp, "count": b.count} for b in buckets]


def _analysis_to_dict(
    analysis: PatternAnalysis,
    *,
    group_by: str | None,
) -> dict[str, Any]:
    out: dict[str, Any] = {
        "total_logs": analysis.total_logs,
        "valid_logs": analysis.valid_logs,
        "invalid_logs": analysis.invalid_logs,
        "patterns": {k: dataclasses.asdict(v) for k, v in analysis.patterns.items()},
    }
    if analysis.group_by is not None:
        out["group_by_analysis"] = {
            "field": group_by,
            "resolved_field": analysis.group_by.field,
            "groups": analysis.group_by.groups,
            "unique_values": analysis.group_by.unique_values,
        }
    if analysis.timeline is not None:
        out["timeline"] = _timeline_to_list(analysis.timeline)
    if analysis.errors is not None:
        errors: dict[str, Any] = {
            "total_errors": analysis.errors.total_errors,
            "error_types": analysis.errors.error_types,
            "error_percentage": analysis.errors.error_percentage,
        }
        if analysis.errors.timeline is not None:
            errors["timeline"] = _timeline_to_list(analysis.errors.timeline)
        out["error_analysis"] = errors
    return out


async def analyze_log_patterns_impl(
    *,
    config: LogConfig,
    file_path: str,
    group_by: str | None = None,
    include_timeline: bool = False,
    analyze_errors: bool = False,
) -> dict[str, Any]:
    """Implementation for the `analyze_log_patterns` tool."""
    schema = config.schema_config
    path = source_path(file_path, config)
    resolved_group_by = config.resolve_field_name(group_by) if group_by else None

    parsed = await load_parsed_lines(path)
    analysis = analyze_patterns(
        parsed,
        group_by=resolved_group_by,
        include_timeline=include_timeline,
        analyze_errors=analyze_errors,
        error_fields=schema.error_fields,
        timestamp_field=schema.timestamp_field,
        correlation_fields=schema.correlation_fields,
        api_response_fields=schema.api_response_fields,
    )

    out = {"file_path": str(path), **_analysis_to_dict(analysis, group_by=group_by)}
    out["config_used"] = {
        "timestamp_field": schema.timestamp_field,
        "level_field": schema.level_field,
        "event_field": schema.event_field,
        "error_fields": list(schema.error_fields),
    }
    return out
