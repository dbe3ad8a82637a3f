"""MCP resource registry.

Resources are addressable by URI and can be fetched by the MCP client on demand.
"""

from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import FastMCP

from mcp_jsonl_tools.core.config import ConfigStore, LogConfig

SAMPLE_LOG = (
    '{"timestamp":"2025-01-01T10:00:00Z","level":"info","event":"migration_started",'
    '"message":"starting migration","migrationId":"mig-20250101-001"}\n'
    '{"timestamp":"2025-01-01T10:00:05Z","level":"info","event":"task_created",'
    '"message":"created task","migrationId":"mig-20250101-001","taskId":"task-abc123def456"}\n'
    '{"timestamp":"2025-01-01T10:02:00Z","level":"error","event":"api_call",'
    '"message":"upstream rejected request","taskId":"task-abc123def456",'
    '"error":"RateLimitError: too many requests","response":{"status":429}}\n'
    '{"timestamp":"2025-01-01T11:15:00Z","level":"info","event":"migration_finished",'
    '"message":"migration complete","migrationId":"mig-20250101-001"}\n'
)


def register_resources(mcp: FastMCP, store: ConfigStore) -> None:
    """Register resource handlers on the MCP server."""

    @mcp.resource("app://jsonl-tools/help")
    def help_resource() -> str:
        """Return a short list of available resource URIs."""
        cfg = store.config
        return (
            "Resources:\n"
            "- app://jsonl-tools/help\n"
            "- app://jsonl-tools/config\n"
            "- app://jsonl-tools/schemas/config\n"
            "- app://jsonl-tools/examples/sample-log\n"
            f"\nLog directory: {cfg.log_directory}\n"
            f"Config file: {store.path}\n"
        )

    @mcp.resource("app://jsonl-tools/config")
    def current_config() -> dict[str, Any]:
        """Return the active configuration."""
        return store.config.to_json_dict()

    @mcp.resource("app://jsonl-tools/schemas/config")
    def config_schema() -> dict[str, Any]:
        """Return the JSON schema accepted by `set_config`."""
        return LogConfig.model_json_schema(by_alias=True)

    @mcp.resource("app://jsonl-tools/examples/sample-log")
    def sample_log() -> str:
        """Return a tiny JSONL sample for demos and tests."""
        return SAMPLE_LOG
