from __future__ import annotations

from dataclasses import dataclass, field, replace

"""Config dataclasses for the sheet snapshot builder.

These are the values the loader in sheet_snapshot/config/loader.py produces and
the orchestrator consumes. Nothing here reads the environment; overrides such as
GOOGLE_SHEET_ID are applied by the CLI via ``SnapshotConfig.with_source_sheet_id``.
"""

DEFAULT_SCHEMA_VERSION = "2.0"
DEFAULT_OUTPUT_PATH = "public/report-data.json"
DEFAULT_BASE_URL = "https://docs.google.com/spreadsheets/d"


@dataclass(frozen=True)
class SheetDescriptor:
    """One logical sheet of the source spreadsheet.

    ``gid`` is the stable tab identifier; when it is missing the sheet is
    addressed by its display ``name``.
    """
    key: str  # key in the snapshot "sheets" mapping
    name: str  # display name of the tab
    primary_key: str  # column that must be non-blank for a row to be kept
    gid: str | None = None

    @property
    def addressing(self) -> str:
        return "gid" if self.gid else "name"


@dataclass(frozen=True)
class FetchConfig:
    """Transport and scheduling settings shared by all sheet fetches."""
    strategy: str = "csv_export"
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = 30.0
    max_workers: int = 8


@dataclass(frozen=True)
class DisplayConfig:
    """Static block copied verbatim into the snapshot "config" section."""
    map_enabled: bool = False
    share_preview_enabled: bool = True
    default_location_id: str = "london"

    def to_dict(self) -> dict[str, object]:
        return {
            "map_enabled": self.map_enabled,
            "share_preview_enabled": self.share_preview_enabled,
            "default_location_id": self.default_location_id,
        }


@dataclass(frozen=True)
class SnapshotConfig:
    """Root configuration object for one snapshot run."""
    source_sheet_id: str  # spreadsheet id; may be empty until the env override is applied
    sheets: tuple[SheetDescriptor, ...]
    schema_version: str = DEFAULT_SCHEMA_VERSION
    timezone: str = "UTC"  # used to derive the reporting period
    output_path: str = DEFAULT_OUTPUT_PATH
    fetch: FetchConfig = field(default_factory=FetchConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)

    @property
    def sheet_keys(self) -> list[str]:
        return [sheet.key for sheet in self.sheets]

    def with_source_sheet_id(self, source_sheet_id: str | None) -> SnapshotConfig:
        """Return a copy using ``source_sheet_id`` when it is non-blank."""
        if source_sheet_id and source_sheet_id.strip():
            return replace(self, source_sheet_id=source_sheet_id.strip())
        return self

    def with_output_path(self, output_path: str | None) -> SnapshotConfig:
        if output_path:
            return replace(self, output_path=output_path)
        return self
