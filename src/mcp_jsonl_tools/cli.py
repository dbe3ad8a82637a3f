"""Local command-line entrypoint for the analysis tools (no MCP transport).

Examples:
    mcp-jsonl-tools-cli detect-schema app.jsonl --sample-size 200
    mcp-jsonl-tools-cli related app.jsonl mig-123 --context-window 2
    mcp-jsonl-tools-cli patterns app.jsonl --group-by level --timeline --errors
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from mcp_jsonl_tools.core.config import ConfigStore
from mcp_jsonl_tools.tools.analysis import (
    analyze_log_patterns_impl,
    detect_schema_impl,
    find_related_logs_impl,
)


def _non_negative_int(s: str) -> int:
    value = int(s)
    if value < 0:
        raise argparse.ArgumentTypeError("must be >= 0")
    return value


def _non_negative_float(s: str) -> float:
    value = float(s)
    if value < 0:
        raise argparse.ArgumentTypeError("must be >= 0")
    return value


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Schema inference and correlation for JSONL logs.")
    p.add_argument("--config", default=None, help="Path to a config file (JSON)")
    p.add_argument("--verbose", "-v", action="store_true")
    sub = p.add_subparsers(dest="command", required=True)

    detect = sub.add_parser("detect-schema", help="Infer field roles from a sample")
    detect.add_argument("file_path")
    detect.add_argument("--sample-size", type=int, default=100)

    related = sub.add_parser("related", help="Find records related to an identifier")
    related.add_argument("file_path")
    related.add_argument("correlation_id")
    related.add_argument("--context-window", type=_non_negative_int, default=None)
    related.add_argument("--time-window", type=_non_negative_float, default=None,
                         help="Time window in minutes")

    patterns = sub.add_parser("patterns", help="Group, timeline and error analysis")
    patterns.add_argument("file_path")
    patterns.add_argument("--group-by", default=None)
    patterns.add_argument("--timeline", action="store_true")
    patterns.add_argument("--errors", action="store_true")
    return p


async def _run(args: argparse.Namespace, store: ConfigStore) -> dict[str, Any]:
    config = store.config
    if args.command == "detect-schema":
        return await detect_schema_impl(
            config=config, file_path=args.file_path, sample_size=args.sample_size
        )
    if args.command == "related":
        return await find_related_logs_impl(
            config=config,
            file_path=args.file_path,
            correlation_id=args.correlation_id,
            context_window=args.context_window,
            time_window_minutes=args.time_window,
        )
    return await analyze_log_patterns_impl(
        config=config,
        file_path=args.file_path,
        group_by=args.group_by,
        include_timeline=args.timeline,
        analyze_errors=args.errors,
    )


def main(argv: Sequence[str] | None = None) -> None:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    store = ConfigStore(path=Path(args.config).expanduser() if args.config else None)
    store.load()
    try:
        out = asyncio.run(_run(args, store))
    except FileNotFoundError as e:
        print(str(e), file=sys.stderr)
        raise SystemExit(2)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(2)

    json.dump(out, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")


if __name__ == "__main__":
    main()
