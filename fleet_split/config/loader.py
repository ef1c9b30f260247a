from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Config loader for the report split tool.

Responsibilities:
- Load YAML config (default ``config/split.yml``)
- Validate keys against the bundled JSON schema (extra keys rejected)
- Apply defaults for omitted keys
"""

__all__ = [
    "ConfigError",
    "SplitConfig",
    "DEFAULT_CONFIG_PATH",
    "CONFIG_ENV_VAR",
    "SCHEMA_PATH",
    "load_config",
    "resolve_config_path",
]

DEFAULT_CONFIG_PATH = Path("config/split.yml")
CONFIG_ENV_VAR = "FLEET_SPLIT_CONFIG"
SCHEMA_PATH = Path(__file__).with_name("config_schema.json")


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class SplitConfig:
    """Root configuration object for a split run.

    Column names follow the Route Dispatch Report layout.
    """
    status_column: str = "FinalStatus"
    wanted_status: str = "DELIVERED"
    group_column: str = "FleeName"
    undefined_key: str = "undefined"  # グループ列が空のときのキー
    excluded_columns: tuple[str, ...] = ("sync time", "planDeliveryDate")
    column_width: float = 15
    compression_level: int = 6
    table_extension: str = "xlsx"
    archive_extension: str = "zip"
    on_name_collision: str = "suffix"  # suffix | overwrite
    source: Path | None = field(default=None, compare=False)  # 読込元 (None = 既定値)


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against JSON schema.

    Raises:
        ConfigError: If the schema file is missing or invalid, or the config
            data fails schema validation (wrong types, unknown keys, ...).
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


def resolve_config_path(explicit: Path | None = None) -> tuple[Path, bool]:
    """Pick the config file to load.

    Priority: explicit path (``--config``) > ``FLEET_SPLIT_CONFIG`` > default.

    Returns:
        (path, required) where ``required`` is False only for the default path,
        which may legitimately be absent.
    """
    if explicit is not None:
        return explicit, True
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path), True
    return DEFAULT_CONFIG_PATH, False


def load_config(path: Path | None = None, *, required: bool = True) -> SplitConfig:
    if path is None or not path.exists():
        if required:
            raise ConfigError(f"config file not found: {path}")
        return SplitConfig()
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)

    defaults = SplitConfig()
    excluded = data.get("excluded_columns")
    return SplitConfig(
        status_column=data.get("status_column", defaults.status_column),
        wanted_status=data.get("wanted_status", defaults.wanted_status),
        group_column=data.get("group_column", defaults.group_column),
        undefined_key=data.get("undefined_key", defaults.undefined_key),
        excluded_columns=tuple(excluded) if excluded is not None else defaults.excluded_columns,
        column_width=data.get("column_width", defaults.column_width),
        compression_level=data.get("compression_level", defaults.compression_level),
        table_extension=data.get("table_extension", defaults.table_extension),
        archive_extension=data.get("archive_extension", defaults.archive_extension),
        on_name_collision=data.get("on_name_collision", defaults.on_name_collision),
        source=path,
    )
