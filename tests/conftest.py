from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from mcp_jsonl_tools.core.config import LogConfig
from mcp_jsonl_tools.core.models import ParsedLine
from mcp_jsonl_tools.core.records import parse_lines


def _to_line(item: Any) -> str:
    return item if isinstance(item, str) else json.dumps(item)


@pytest.fixture
def parsed() -> Callable[..., list[ParsedLine]]:
    """Build ParsedLines from dicts (records) and raw strings (e.g. malformed lines)."""

    def _parse(*items: Any) -> list[ParsedLine]:
        return parse_lines(_to_line(item) for item in items)

    return _parse


@pytest.fixture
def write_jsonl() -> Callable[[Path, list[Any]], Path]:
    def _write(path: Path, items: list[Any]) -> Path:
        path.write_text("\n".join(_to_line(i) for i in items) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def migration_log() -> list[dict[str, Any]]:
    return [
        {"timestamp": "2025-01-01T10:00:00Z", "level": "info", "event": "start", "migrationId": "mig-123"},
        {"timestamp": "2025-01-01T10:01:00Z", "level": "info", "event": "step", "migrationId": "mig-123"},
        {"timestamp": "2025-01-01T12:00:00Z", "level": "info", "event": "other", "migrationId": "mig-999"},
        {"timestamp": "2025-01-01T10:02:00Z", "level": "error", "event": "fail", "migrationId": "mig-123",
         "error": "DatabaseError: connection refused"},
    ]


@pytest.fixture
def config(tmp_path: Path) -> LogConfig:
    return LogConfig(log_directory=str(tmp_path))
