from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    DEFAULT_BASE_URL,
    DEFAULT_OUTPUT_PATH,
    DEFAULT_SCHEMA_VERSION,
    DisplayConfig,
    FetchConfig,
    SheetDescriptor,
    SnapshotConfig,
)

"""Config loader.

Responsibilities:
- Load YAML (default: config/sheets.yml)
- Validate against config_schema.json (shipped next to this module)
- Apply defaults (timezone=UTC, schema_version=2.0, display block)
- Resolve each sheet's primary key (sheet value, else the top-level default)

Environment overrides (GOOGLE_SHEET_ID) are applied by the CLI, not here.
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/sheets.yml")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If the schema file is missing or unreadable, or the data
            violates it (missing required keys, wrong types, extra keys...)
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        location = "/".join(str(p) for p in e.absolute_path)
        where = f" at '{location}'" if location else ""
        raise ConfigError(f"config validation failed{where}: {e.message}") from e


def _validate_timezone(name: str) -> None:
    if name.upper() == "UTC":
        return
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigError(f"unknown timezone: {name}") from e


def _build_sheets(raw_sheets: list[dict[str, Any]], default_primary_key: str | None) -> tuple[SheetDescriptor, ...]:
    sheets: list[SheetDescriptor] = []
    seen: set[str] = set()
    for raw in raw_sheets:
        key = raw["key"]
        if key in seen:
            raise ConfigError(f"duplicate sheet key: {key}")
        seen.add(key)

        primary_key = raw.get("primary_key") or default_primary_key
        if not primary_key:
            raise ConfigError(f"sheet '{key}' has no primary_key and no top-level default is set")

        gid = raw.get("gid")
        sheets.append(
            SheetDescriptor(
                key=key,
                name=raw["name"].strip(),
                primary_key=primary_key.strip(),
                gid=str(gid).strip() if gid not in (None, "") else None,
            )
        )
    return tuple(sheets)


def parse_config(data: dict[str, Any]) -> SnapshotConfig:
    """Build a SnapshotConfig from already-parsed YAML data."""
    _validate_config_schema(data)

    tz = data.get("timezone", "UTC")
    _validate_timezone(tz)

    fetch_raw = data.get("fetch") or {}
    fetch = FetchConfig(
        strategy=fetch_raw.get("strategy", "csv_export"),
        base_url=fetch_raw.get("base_url", DEFAULT_BASE_URL),
        timeout_seconds=float(fetch_raw.get("timeout_seconds", 30.0)),
        max_workers=int(fetch_raw.get("max_workers", 8)),
    )

    display_raw = data.get("display") or {}
    display = DisplayConfig(
        map_enabled=display_raw.get("map_enabled", False),
        share_preview_enabled=display_raw.get("share_preview_enabled", True),
        default_location_id=display_raw.get("default_location_id", "london"),
    )

    return SnapshotConfig(
        source_sheet_id=(data.get("source_sheet_id") or "").strip(),
        sheets=_build_sheets(data["sheets"], data.get("primary_key")),
        schema_version=data.get("schema_version", DEFAULT_SCHEMA_VERSION),
        timezone=tz,
        output_path=data.get("output_path", DEFAULT_OUTPUT_PATH),
        fetch=fetch,
        display=display,
    )


def load_config(path: Path) -> SnapshotConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")
    return parse_config(data)
