from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import replace
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    EditorConfig,
    EditorSettings,
    LoggingConfig,
    ServerConfig,
    SheetsConfig,
)

"""Config loader.

Responsibilities:
- Load YAML config (default ``config/editor.yml``)
- Validate against the bundled JSON schema (``config_schema.json``)
- Apply defaults for every omitted key
- Apply environment overrides (EDITOR_HOST / EDITOR_PORT / EDITOR_LOG_LEVEL /
  GOOGLE_ACCESS_TOKEN), which take precedence over the file
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "load_config",
    "default_config",
    "apply_env_overrides",
]

DEFAULT_CONFIG_PATH = Path("config/editor.yml")
SCHEMA_PATH = Path(__file__).parent / "config_schema.json"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Args:
        data: Configuration data to validate

    Raises:
        ConfigError: If the schema file is missing or not valid JSON, or the
            config data fails validation (unknown keys, wrong types, ...).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def default_config() -> EditorConfig:
    """Configuration with every key at its default value."""
    return EditorConfig()


def _build_config(data: Mapping[str, Any]) -> EditorConfig:
    server_raw = data.get("server", {})
    editor_raw = data.get("editor", {})
    sheets_raw = data.get("sheets", {})
    logging_raw = data.get("logging", {})

    server_defaults = ServerConfig()
    server = ServerConfig(
        host=server_raw.get("host", server_defaults.host),
        port=server_raw.get("port", server_defaults.port),
        cors_origins=tuple(server_raw.get("cors_origins", server_defaults.cors_origins)),
        max_upload_mb=server_raw.get("max_upload_mb", server_defaults.max_upload_mb),
    )
    editor_defaults = EditorSettings()
    editor = EditorSettings(
        page_size=editor_raw.get("page_size", editor_defaults.page_size),
        default_link_columns=tuple(
            editor_raw.get("default_link_columns", editor_defaults.default_link_columns)
        ),
    )
    sheets_defaults = SheetsConfig()
    sheets = SheetsConfig(
        api_base_url=str(sheets_raw.get("api_base_url", sheets_defaults.api_base_url)).rstrip("/"),
        header_rows=sheets_raw.get("header_rows", sheets_defaults.header_rows),
        value_input_option=sheets_raw.get("value_input_option", sheets_defaults.value_input_option),
        timeout_seconds=float(sheets_raw.get("timeout_seconds", sheets_defaults.timeout_seconds)),
    )
    log_cfg = LoggingConfig(level=logging_raw.get("level", LoggingConfig().level))
    return EditorConfig(server=server, editor=editor, sheets=sheets, logging=log_cfg)


def apply_env_overrides(cfg: EditorConfig, environ: Mapping[str, str] | None = None) -> EditorConfig:
    """Return a copy of ``cfg`` with environment variables applied.

    Raises:
        ConfigError: If EDITOR_PORT is set but not an integer.
    """
    env = os.environ if environ is None else environ
    server = cfg.server
    if env.get("EDITOR_HOST"):
        server = replace(server, host=env["EDITOR_HOST"])
    if env.get("EDITOR_PORT"):
        try:
            server = replace(server, port=int(env["EDITOR_PORT"]))
        except ValueError as e:
            raise ConfigError(f"EDITOR_PORT must be an integer: {env['EDITOR_PORT']!r}") from e
    sheets = cfg.sheets
    if env.get("GOOGLE_ACCESS_TOKEN"):
        sheets = replace(sheets, access_token=env["GOOGLE_ACCESS_TOKEN"])
    log_cfg = cfg.logging
    if env.get("EDITOR_LOG_LEVEL"):
        log_cfg = replace(log_cfg, level=env["EDITOR_LOG_LEVEL"].upper())
    return replace(cfg, server=server, sheets=sheets, logging=log_cfg)


def load_config(path: Path) -> EditorConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)
    return _build_config(data)
