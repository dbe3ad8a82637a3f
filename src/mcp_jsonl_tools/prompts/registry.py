"""MCP prompt registry.

Prompts are predefined conversation/workflow templates that the client can invoke explicitly.
"""

from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import FastMCP


def register_prompts(mcp: FastMCP) -> None:
    """Register prompt templates on the MCP server."""

    @mcp.prompt()
    def investigate_correlation_id(
        file_path: str,
        correlation_id: str,
        context_window: int | None = None,
        time_window_minutes: float | None = None,
    ) -> list[dict[str, Any]]:
        """Build a prompt that traces everything related to one identifier."""
        args = [f'- file_path: "{file_path}"', f'- correlation_id: "{correlation_id}"']
        if context_window is not None:
            args.append(f"- context_window: {context_window}")
        if time_window_minutes is not None:
            args.append(f"- time_window_minutes: {time_window_minutes}")
        return [
            {
                "role": "system",
                "content": (
                    "You are a careful incident investigator working with JSONL logs. "
                    "Base every claim on specific line numbers from tool output."
                ),
            },
            {
                "role": "user",
                "content": (
                    "Call `find_related_logs` with:\n"
                    + "\n".join(args)
                    + "\n\nThen:\n"
                    "1. Reconstruct the timeline of the direct matches.\n"
                    "2. Point out errors or warnings among context and time-related lines.\n"
                    "3. Say which related lines are likely coincidental.\n"
                    "If there are no direct matches, run `detect_schema` and check that the "
                    "ID field is among the configured correlation fields."
                ),
            },
        ]

    @mcp.prompt()
    def summarize_log_file(file_path: str, group_by: str = "level") -> list[dict[str, Any]]:
        """Build a prompt that summarizes a JSONL file's shape and error profile."""
        return [
            {
                "role": "system",
                "content": (
                    "You are a precise assistant. Summarize log files clearly and concisely, "
                    "quoting counts exactly as the tools report them."
                ),
            },
            {
                "role": "user",
                "content": (
                    f'1. Call `detect_schema` on "{file_path}" and report the detected fields '
                    "and confidence.\n"
                    f'2. Call `analyze_log_patterns` with group_by="{group_by}", '
                    "include_timeline=true, analyze_errors=true.\n"
                    "3. Summarize volume over time, the dominant error types, and the error "
                    "percentage. Flag any hour with an unusual error spike."
                ),
            },
        ]
