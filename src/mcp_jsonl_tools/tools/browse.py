"""Browsing tool implementations: list, page, search and filter JSONL files."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from mcp_jsonl_tools.core.config import LogConfig
from mcp_jsonl_tools.core.log_service import (
    list_log_files,
    load_parsed_lines,
    parse_failures,
    read_lines,
)
from mcp_jsonl_tools.core.records import parse_lines
from mcp_jsonl_tools.core.search import RecordFilter, filter_records, search_records
from mcp_jsonl_tools.core.values import parse_timestamp

from .common import check_limit, display_record, source_path


async def list_log_files_impl(*, config: LogConfig, pattern: str | None = None) -> dict[str, Any]:
    """Implementation for the `list_log_files` tool."""
    files = await list_log_files(config.log_directory, config.file_patterns, extra_pattern=pattern)
    return {
        "log_directory": config.log_directory,
        "total_files": len(files),
        "files": [
            {
                "name": f.name,
                "size": f.size,
                "modified": f.modified.isoformat(),
                "path": str(f.path),
            }
            for f in files
        ],
    }


async def parse_jsonl_impl(
    *,
    config: LogConfig,
    file_path: str,
    limit: int | None = None,
    offset: int = 0,
) -> dict[str, Any]:
    """Implementation for the `parse_jsonl` tool."""
    limit = check_limit("limit", limit if limit is not None else config.defaults.parse_limit)
    if offset < 0:
        raise ValueError("offset must be >= 0")

    path = source_path(file_path, config)
    lines = await read_lines(path)
    end = min(offset + limit, len(lines))
    parsed = parse_lines(lines[offset:end], start=offset + 1)
    errors = parse_failures(parsed)

    out: dict[str, Any] = {
        "file_path": str(path),
        "total_lines": len(lines),
        "parsed_count": len(parsed) - len(errors),
        "error_count": len(errors),
        "range": f"{offset + 1}-{end}",
        "config_used": {
            "log_directory": config.log_directory,
            "display_settings": config.display.model_dump(mode="json", by_alias=True),
        },
        "logs": [
            display_record(p.record, p.line_no, config) for p in parsed if p.is_valid
        ],
    }
    if errors:
        out["errors"] = errors
    return out


async def search_logs_impl(
    *,
    config: LogConfig,
    file_path: str,
    search_term: str,
    field: str | None = None,
    case_sensitive: bool | None = None,
    limit: int | None = None,
) -> dict[str, Any]:
    """Implementation for the `search_logs` tool."""
    if not search_term:
        raise ValueError("search_term must be a non-empty string")
    if case_sensitive is None:
        case_sensitive = config.defaults.case_sensitive
    limit = check_limit("limit", limit if limit is not None else config.defaults.search_limit)

    schema = config.schema_config
    resolved_field = config.resolve_field_name(field) if field else None
    path = source_path(file_path, config)
    parsed = await load_parsed_lines(path)
    hits = search_records(
        parsed,
        search_term,
        field=resolved_field,
        case_sensitive=case_sensitive,
        limit=limit,
        correlation_fields=schema.correlation_fields,
    )

    results = []
    for hit in hits:
        item: dict[str, Any] = {
            "line_number": hit.line_no,
            "log": display_record(hit.record, hit.line_no, config),
            "matched_field": hit.matched_field,
        }
        if hit.correlation_fields:
            item["correlation_fields"] = list(hit.correlation_fields)
        results.append(item)

    return {
        "file_path": str(path),
        "search_term": search_term,
        "field": field,
        "resolved_field": resolved_field,
        "case_sensitive": case_sensitive,
        "results_count": len(results),
        "config_used": {
            "correlation_fields": list(schema.correlation_fields),
            "search_limit": limit,
        },
        "results": results,
    }


def _parse_bound(name: str, value: str | None) -> datetime | None:
    if value is None:
        return None
    ts = parse_timestamp(value)
    if ts is None:
        raise ValueError(f"{name} must be an ISO-8601 timestamp (e.g., 2025-01-01T00:00:00Z)")
    return ts


async def filter_logs_impl(
    *,
    config: LogConfig,
    file_path: str,
    level: str | None = None,
    event: str | None = None,
    time_from: str | None = None,
    time_to: str | None = None,
    custom_filter: dict[str, Any] | None = None,
    limit: int | None = None,
) -> dict[str, Any]:
    """Implementation for the `filter_logs` tool."""
    limit = check_limit("limit", limit if limit is not None else config.defaults.filter_limit)
    criteria = RecordFilter(
        level=level,
        event=event,
        time_from=_parse_bound("time_from", time_from),
        time_to=_parse_bound("time_to", time_to),
        custom=custom_filter,
    )
    if criteria.time_from and criteria.time_to and criteria.time_from > criteria.time_to:
        raise ValueError("time_from must be <= time_to")

    schema = config.schema_config
    path = source_path(file_path, config)
    parsed = await load_parsed_lines(path)
    hits = filter_records(
        parsed,
        criteria,
        level_field=schema.level_field,
        event_field=schema.event_field,
        timestamp_field=schema.timestamp_field,
        limit=limit,
    )

    return {
        "file_path": str(path),
        "filters": {
            "level": level,
            "event": event,
            "time_from": time_from,
            "time_to": time_to,
            "custom_filter": custom_filter,
        },
        "results_count": len(hits),
        "config_used": {
            "level_field": schema.level_field,
            "event_field": schema.event_field,
            "timestamp_field": schema.timestamp_field,
        },
        "results": [
            {
                "line_number": h.line_no,
                "log": display_record(h.record, h.line_no, config),
                "matched_filters": list(h.matched_filters),
            }
            for h in hits
        ],
    }
