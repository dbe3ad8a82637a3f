"""Configuration tool implementations."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from mcp_jsonl_tools.core.config import ConfigStore

logger = logging.getLogger(__name__)


def get_config_impl(*, store: ConfigStore) -> dict[str, Any]:
    """Implementation for the `get_config` tool."""
    return {
        "config": store.config.to_json_dict(),
        "config_path": str(store.path),
    }


def set_config_impl(*, store: ConfigStore, config: dict[str, Any]) -> dict[str, Any]:
    """Implementation for the `set_config` tool."""
    if not isinstance(config, dict):
        raise ValueError("config must be an object")
    try:
        updated = store.update(config)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e
    logger.info("Configuration updated (%s)", ", ".join(sorted(config)) or "no keys")
    return {
        "message": "Configuration updated successfully",
        "config": updated.to_json_dict(),
    }
