"""Configuration models and the on-disk config store.

The JSON file uses camelCase keys (``timestampField``, ``correlationFields``);
snake_case is accepted on input as well.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".jsonl-tools-config.json"
CONFIG_PATH_ENV = "JSONL_TOOLS_CONFIG"
LOG_DIR_ENV = "JSONL_TOOLS_LOG_DIR"

SEMANTIC_FIELDS = {
    "timestamp": "timestamp_field",
    "level": "level_field",
    "message": "message_field",
    "event": "event_field",
}


class _Model(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SchemaConfig(_Model):
    """Role -> field-path bindings for one family of log producers."""

    timestamp_field: str = "timestamp"
    level_field: str = "level"
    message_field: str = "message"
    event_field: str | None = "event"
    correlation_fields: list[str] = Field(
        default_factory=lambda: [
            "migrationId",
            "taskId",
            "listId",
            "spaceId",
            "folderId",
            "userId",
            "requestId",
            "sessionId",
            "traceId",
            "correlationId",
        ]
    )
    api_response_fields: list[str] = Field(
        default_factory=lambda: ["response", "data", "payload", "result", "apiResponse"]
    )
    error_fields: list[str] = Field(
        default_factory=lambda: ["error", "errorMessage", "stackTrace", "exception"]
    )


class DefaultsConfig(_Model):
    search_limit: int = Field(default=100, ge=1)
    filter_limit: int = Field(default=100, ge=1)
    parse_limit: int = Field(default=1000, ge=1)
    context_window: int = Field(default=5, ge=0)
    time_window_minutes: float = Field(default=10, ge=0)
    case_sensitive: bool = False


class FilePatterns(_Model):
    include: list[str] = Field(default_factory=lambda: ["*.jsonl", "*.log", "*.ndjson"])
    exclude: list[str] = Field(default_factory=lambda: ["*.tmp", "*.bak", "*~"])


class DisplayConfig(_Model):
    pretty_print_api_responses: bool = True
    show_line_numbers: bool = True
    max_field_value_length: int = Field(default=500, ge=0)
    date_format: str | None = "ISO"


class LogConfig(_Model):
    log_directory: str = "./logs"
    schema_config: SchemaConfig = Field(default_factory=SchemaConfig, alias="schema")
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    file_patterns: FilePatterns = Field(default_factory=FilePatterns)
    field_mappings: dict[str, str] | None = None
    display: DisplayConfig = Field(default_factory=DisplayConfig)

    def resolve_field_name(self, name: str) -> str:
        """Map a semantic name (``level``) or alias to a concrete field path."""
        attr = SEMANTIC_FIELDS.get(name)
        if attr is not None:
            configured = getattr(self.schema_config, attr)
            if configured:
                return configured
        if self.field_mappings and name in self.field_mappings:
            return self.field_mappings[name]
        return name

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


def deep_merge(base: dict[str, Any], update: dict[str, Any]) -> dict[str, Any]:
    """Return ``base`` with ``update`` merged in; nested objects merge key by key."""
    out = dict(base)
    for key, value in update.items():
        current = out.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            out[key] = deep_merge(current, value)
        else:
            out[key] = value
    return out


def default_config_path() -> Path:
    raw = os.getenv(CONFIG_PATH_ENV)
    if raw:
        return Path(raw).expanduser()
    return Path.cwd() / CONFIG_FILE_NAME


class ConfigStore:
    """Owns the persisted configuration; hands out immutable-by-convention snapshots."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or default_config_path()
        self._config = LogConfig()

    @property
    def config(self) -> LogConfig:
        """Return a copy so callers cannot mutate the stored config."""
        return self._config.model_copy(deep=True)

    def load(self) -> LogConfig:
        """Load the config file over defaults. Falls back to defaults on any problem."""
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            if not isinstance(raw, dict):
                raise ValueError("config file must contain a JSON object")
            merged = deep_merge(LogConfig().to_json_dict(), raw)
            self._config = LogConfig.model_validate(merged)
        except FileNotFoundError:
            logger.info("No config file at %s; using defaults", self.path)
            self._config = LogConfig()
        except (OSError, ValueError, ValidationError) as e:
            logger.warning("Using default config, could not load %s: %s", self.path, e)
            self._config = LogConfig()

        log_dir = os.getenv(LOG_DIR_ENV)
        if log_dir:
            self._config = self._config.model_copy(update={"log_directory": log_dir})
        return self.config

    def update(self, changes: dict[str, Any]) -> LogConfig:
        """Deep-merge ``changes`` into the config, validate, and persist."""
        merged = deep_merge(self._config.to_json_dict(), _camelize_keys(changes))
        new_config = LogConfig.model_validate(merged)
        self.save(new_config)
        self._config = new_config
        return self.config

    def save(self, config: LogConfig | None = None) -> None:
        cfg = config or self._config
        try:
            self.path.write_text(json.dumps(cfg.to_json_dict(), indent=2), encoding="utf-8")
        except OSError as e:
            raise RuntimeError(f"Failed to save config to {self.path}: {e}") from e
        logger.debug("Saved config to %s", self.path)


def _camelize_keys(changes: dict[str, Any]) -> dict[str, Any]:
    """Normalize snake_case config keys so they merge over the camelCase dump.

    Only known structural keys are renamed; ``fieldMappings`` entries are user data.
    """
    out: dict[str, Any] = {}
    for key, value in changes.items():
        if key == "schema_config":
            key = "schema"
        new_key = to_camel(key) if "_" in key else key
        if isinstance(value, dict) and new_key != "fieldMappings":
            value = _camelize_keys(value)
        out[new_key] = value
    return out
