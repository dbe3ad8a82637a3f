"""Log source access: path resolution, line reading and file listing.

This module is the integration point that reads JSONL sources from disk and
hands parsed lines to the analysis engines.
"""

from __future__ import annotations

import asyncio
import fnmatch
import gzip
import logging
from collections.abc import Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

import aiofiles
from aiofiles.threadpool import wrap

from .config import FilePatterns
from .models import ParsedLine
from .records import parse_lines

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LogFileInfo:
    name: str
    size: int
    modified: datetime
    path: Path


@asynccontextmanager
async def _open_text(path: Path, *, encoding: str, decode_errors: str):
    """Open a log file for async text reading (plain or gzip)."""
    if path.suffix.lower() == ".gz":
        f = gzip.open(path, mode="rt", encoding=encoding, errors=decode_errors)
        af = wrap(f)
        try:
            yield af
        finally:
            await af.close()
    else:
        async with aiofiles.open(path, encoding=encoding, errors=decode_errors) as f:
            yield f


def resolve_log_path(file_path: str | Path, log_directory: str | Path) -> Path:
    """Absolute paths are used as-is; relative ones live under ``log_directory``."""
    p = Path(file_path).expanduser()
    if p.is_absolute():
        return p
    return (Path(log_directory).expanduser() / p).resolve()


async def read_lines(
    path: Path,
    *,
    limit: int | None = None,
    encoding: str = "utf-8",
    decode_errors: str = "replace",
) -> list[str]:
    """Read the non-blank lines of ``path``, stopping after ``limit`` lines."""
    if not path.is_file():
        raise FileNotFoundError(f"Log file not found: {path}")
    if limit is not None and limit < 0:
        raise ValueError("limit must be >= 0")

    out: list[str] = []
    async with _open_text(path, encoding=encoding, decode_errors=decode_errors) as f:
        async for line in f:
            if limit is not None and len(out) >= limit:
                break
            line = line.rstrip("\r\n")
            if not line.strip():
                continue
            out.append(line)
    logger.debug("Read %d lines from %s", len(out), path)
    return out


async def load_parsed_lines(path: Path, *, limit: int | None = None) -> list[ParsedLine]:
    """Read and parse a JSONL source; line numbers count non-blank lines from 1."""
    parsed = parse_lines(await read_lines(path, limit=limit))
    invalid = sum(1 for p in parsed if not p.is_valid)
    if invalid:
        logger.debug("%s: %d of %d lines failed to parse", path, invalid, len(parsed))
    return parsed


def matches_pattern(name: str, pattern: str) -> bool:
    return fnmatch.fnmatchcase(name, pattern)


def _list_files(
    directory: Path,
    patterns: FilePatterns,
    extra_pattern: str | None,
) -> list[LogFileInfo]:
    if not directory.is_dir():
        raise FileNotFoundError(f"Log directory not found: {directory}")

    out: list[LogFileInfo] = []
    for entry in directory.iterdir():
        if not entry.is_file():
            continue
        name = entry.name
        if patterns.include and not any(matches_pattern(name, p) for p in patterns.include):
            continue
        if any(matches_pattern(name, p) for p in patterns.exclude):
            continue
        if extra_pattern and not matches_pattern(name, extra_pattern):
            continue
        st = entry.stat()
        out.append(
            LogFileInfo(
                name=name,
                size=st.st_size,
                modified=datetime.fromtimestamp(st.st_mtime, tz=UTC),
                path=entry,
            )
        )
    out.sort(key=lambda f: f.modified, reverse=True)
    return out


async def list_log_files(
    directory: str | Path,
    patterns: FilePatterns,
    *,
    extra_pattern: str | None = None,
) -> list[LogFileInfo]:
    """List log files in ``directory``, newest first."""
    return await asyncio.to_thread(
        _list_files, Path(directory).expanduser(), patterns, extra_pattern
    )


def parse_failures(parsed: Sequence[ParsedLine]) -> list[str]:
    """Human-readable parse failures, one per malformed line."""
    return [f"Line {p.line_no}: {p.error}" for p in parsed if not p.is_valid]
