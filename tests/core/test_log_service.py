from __future__ import annotations

import gzip
import os
from pathlib import Path

import pytest

from mcp_jsonl_tools.core.config import FilePatterns
from mcp_jsonl_tools.core.log_service import (
    list_log_files,
    load_parsed_lines,
    parse_failures,
    read_lines,
    resolve_log_path,
)


@pytest.mark.asyncio
async def test_read_lines_skips_blank_lines(tmp_path: Path) -> None:
    path = tmp_path / "app.jsonl"
    path.write_text('{"a": 1}\n\n   \n{"a": 2}\r\n', encoding="utf-8")

    assert await read_lines(path) == ['{"a": 1}', '{"a": 2}']
    assert await read_lines(path, limit=1) == ['{"a": 1}']


@pytest.mark.asyncio
async def test_read_lines_gzip(tmp_path: Path) -> None:
    path = tmp_path / "app.jsonl.gz"
    with gzip.open(path, "wt", encoding="utf-8") as f:
        f.write('{"a": 1}\n{"a": 2}\n')

    parsed = await load_parsed_lines(path)
    assert [p.record for p in parsed] == [{"a": 1}, {"a": 2}]


@pytest.mark.asyncio
async def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        await read_lines(tmp_path / "nope.jsonl")


@pytest.mark.asyncio
async def test_load_parsed_lines_numbers_non_blank_lines(tmp_path: Path) -> None:
    path = tmp_path / "app.jsonl"
    path.write_text('{"a": 1}\n\nnot json\n{"a": 3}\n', encoding="utf-8")

    parsed = await load_parsed_lines(path)
    assert [p.line_no for p in parsed] == [1, 2, 3]
    assert parsed[1].record is None
    failures = parse_failures(parsed)
    assert len(failures) == 1
    assert failures[0].startswith("Line 2: ")


def test_resolve_log_path(tmp_path: Path) -> None:
    assert resolve_log_path("app.jsonl", tmp_path) == (tmp_path / "app.jsonl").resolve()
    absolute = tmp_path / "elsewhere.jsonl"
    assert resolve_log_path(str(absolute), "/unused") == absolute


@pytest.mark.asyncio
async def test_list_log_files_applies_patterns(tmp_path: Path) -> None:
    for name in ("old.jsonl", "new.jsonl", "app.log", "notes.txt", "old.jsonl.bak"):
        (tmp_path / name).write_text("{}\n", encoding="utf-8")
    (tmp_path / "nested.jsonl").mkdir()
    os.utime(tmp_path / "old.jsonl", (1_000_000, 1_000_000))

    files = await list_log_files(tmp_path, FilePatterns())
    names = [f.name for f in files]
    assert set(names) == {"old.jsonl", "new.jsonl", "app.log"}
    assert names[-1] == "old.jsonl"

    only_jsonl = await list_log_files(tmp_path, FilePatterns(), extra_pattern="*.jsonl")
    assert {f.name for f in only_jsonl} == {"old.jsonl", "new.jsonl"}


@pytest.mark.asyncio
async def test_list_log_files_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        await list_log_files(tmp_path / "missing", FilePatterns())
