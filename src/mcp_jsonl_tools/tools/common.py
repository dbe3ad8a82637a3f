"""Helpers shared by the tool implementations."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from mcp_jsonl_tools.core.config import LogConfig
from mcp_jsonl_tools.core.display import format_record
from mcp_jsonl_tools.core.log_service import resolve_log_path
from mcp_jsonl_tools.core.models import Record


def source_path(file_path: str, config: LogConfig) -> Path:
    if not file_path or not file_path.strip():
        raise ValueError("file_path must be a non-empty string")
    return resolve_log_path(file_path, config.log_directory)


def display_record(record: Record, line_no: int, config: LogConfig) -> dict[str, Any]:
    return format_record(
        record,
        display=config.display,
        api_response_fields=config.schema_config.api_response_fields,
        line_no=line_no,
    )


def check_limit(name: str, value: int) -> int:
    if value <= 0:
        raise ValueError(f"{name} must be > 0")
    return value
