"""MCP server entrypoint (stdio transport).

This module wires together:
- Tools: configuration, browsing, search/filter and analysis of JSONL logs
- Resources: help, current configuration, config schema, a sample log
- Prompts: workflow templates for investigating IDs and summarizing files

Run locally (stdio):
    python -m mcp_jsonl_tools.server.log_server
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Sequence
from typing import Any

from mcp.server.fastmcp import FastMCP

from mcp_jsonl_tools.core.config import ConfigStore
from mcp_jsonl_tools.prompts.registry import register_prompts
from mcp_jsonl_tools.resources.registry import register_resources
from mcp_jsonl_tools.tools.analysis import (
    analyze_log_patterns_impl,
    detect_schema_impl,
    find_related_logs_impl,
)
from mcp_jsonl_tools.tools.browse import (
    filter_logs_impl,
    list_log_files_impl,
    parse_jsonl_impl,
    search_logs_impl,
)
from mcp_jsonl_tools.tools.settings import get_config_impl, set_config_impl

LOGGER = logging.getLogger(__name__)
LOG_LEVEL_ENV = "JSONL_TOOLS_LOG_LEVEL"


def _configure_logging() -> None:
    """Configure logging on stderr; stdout carries the stdio transport."""
    level_name = os.getenv(LOG_LEVEL_ENV, "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        stream=sys.stderr,
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _register_tools(mcp: FastMCP, store: ConfigStore) -> None:
    """Register tools; each call receives a fresh config snapshot from ``store``."""

    @mcp.tool()
    def get_config() -> dict[str, Any]:
        """Get current configuration settings."""
        return get_config_impl(store=store)

    @mcp.tool()
    def set_config(config: dict[str, Any]) -> dict[str, Any]:
        """Update configuration settings.

        ``config`` is deep-merged into the current configuration and saved.
        Keys follow the config file format (e.g. {"schema": {"levelField": "severity"}}).
        """
        return set_config_impl(store=store, config=config)

    @mcp.tool()
    async def detect_schema(file_path: str, sample_size: int = 100) -> dict[str, Any]:
        """Auto-detect field roles from a sample of a JSONL file.

        Returns per-field analysis, a confidence score (fraction of sampled lines
        that parsed), and a suggested schema update for `set_config`.
        """
        return await detect_schema_impl(
            config=store.config, file_path=file_path, sample_size=sample_size
        )

    @mcp.tool()
    async def list_log_files(pattern: str | None = None) -> dict[str, Any]:
        """List log files in the configured directory, newest first.

        ``pattern`` is an optional extra shell-style filter (e.g. "api-*.jsonl").
        """
        return await list_log_files_impl(config=store.config, pattern=pattern)

    @mcp.tool()
    async def parse_jsonl(
        file_path: str,
        limit: int | None = None,
        offset: int = 0,
    ) -> dict[str, Any]:
        """Parse and read a JSONL file page (uses config for defaults and formatting)."""
        return await parse_jsonl_impl(
            config=store.config, file_path=file_path, limit=limit, offset=offset
        )

    @mcp.tool()
    async def search_logs(
        file_path: str,
        search_term: str,
        field: str | None = None,
        case_sensitive: bool | None = None,
        limit: int | None = None,
    ) -> dict[str, Any]:
        """Search JSONL records for a substring.

        ``field`` may be a dotted path or a semantic name ("message", "level",
        "event", "timestamp") resolved through the configured schema.
        """
        return await search_logs_impl(
            config=store.config,
            file_path=file_path,
            search_term=search_term,
            field=field,
            case_sensitive=case_sensitive,
            limit=limit,
        )

    @mcp.tool()
    async def filter_logs(
        file_path: str,
        level: str | None = None,
        event: str | None = None,
        time_from: str | None = None,
        time_to: str | None = None,
        custom_filter: dict[str, Any] | None = None,
        limit: int | None = None,
    ) -> dict[str, Any]:
        """Filter records by level, event, time range and exact field values.

        Time bounds are ISO-8601 and inclusive; records without a readable
        timestamp are excluded when a bound is given.
        """
        return await filter_logs_impl(
            config=store.config,
            file_path=file_path,
            level=level,
            event=event,
            time_from=time_from,
            time_to=time_to,
            custom_filter=custom_filter,
            limit=limit,
        )

    @mcp.tool()
    async def find_related_logs(
        file_path: str,
        correlation_id: str,
        context_window: int | None = None,
        time_window_minutes: float | None = None,
    ) -> dict[str, Any]:
        """Find logs related to an ID using the configured correlation fields.

        Returns direct matches, up to ``context_window`` neighbouring lines around
        each match, and records within ``time_window_minutes`` of a match. Each
        line appears once, ordered by line number.
        """
        return await find_related_logs_impl(
            config=store.config,
            file_path=file_path,
            correlation_id=correlation_id,
            context_window=context_window,
            time_window_minutes=time_window_minutes,
        )

    @mcp.tool()
    async def analyze_log_patterns(
        file_path: str,
        group_by: str | None = None,
        include_timeline: bool = False,
        analyze_errors: bool = False,
    ) -> dict[str, Any]:
        """Analyze patterns and statistics in a JSONL file.

        Parameters
        ----------
        group_by:
            Field to group by (dotted path or semantic name like "level").
        include_timeline:
            Add hourly (UTC) record counts.
        analyze_errors:
            Count records carrying a configured error field, by error type.
        """
        return await analyze_log_patterns_impl(
            config=store.config,
            file_path=file_path,
            group_by=group_by,
            include_timeline=include_timeline,
            analyze_errors=analyze_errors,
        )


def build_server(store: ConfigStore) -> FastMCP:
    """Create the FastMCP server bound to ``store``."""
    mcp = FastMCP("jsonl-tools", json_response=True)
    _register_tools(mcp, store)
    register_resources(mcp, store)
    register_prompts(mcp)
    return mcp


def main(argv: Sequence[str] | None = None) -> None:
    """Start the MCP server over stdio."""
    _configure_logging()
    _ = argv or sys.argv[1:]
    store = ConfigStore()
    store.load()
    LOGGER.info("JSONL tools server starting (config=%s)", store.path)
    build_server(store).run(transport="stdio")


if __name__ == "__main__":
    main()
