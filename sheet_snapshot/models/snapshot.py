from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from .config_models import DisplayConfig
from .sheet_process import Record

"""Snapshot document model.

The document is the only artifact a run produces. Its JSON form is consumed by
the report frontend, so key names and order are part of the contract:

    {"meta": {...}, "sheets": {<key>: [<record>, ...]}, "config": {...}}
"""

__all__ = [
    "SnapshotMeta",
    "SnapshotDocument",
    "dumps_compact",
]


def dumps_compact(value: Any) -> str:
    """Serialize ``value`` as strict, compact JSON (no NaN/Infinity, no spaces)."""
    return json.dumps(value, ensure_ascii=False, allow_nan=False, separators=(",", ":"))


@dataclass(frozen=True)
class SnapshotMeta:
    generated_at: str  # ISO8601 UTC with millisecond precision and 'Z' suffix
    source_sheet_id: str
    reporting_quarter: str  # "{year}Q{n}"
    reporting_year: int
    reporting_quarter_number: int  # 1..4
    schema_version: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "generated_at": self.generated_at,
            "source_sheet_id": self.source_sheet_id,
            "reporting_quarter": self.reporting_quarter,
            "reporting_year": self.reporting_year,
            "reporting_quarter_number": self.reporting_quarter_number,
            "schema_version": self.schema_version,
        }


@dataclass(frozen=True)
class SnapshotDocument:
    """Assembled snapshot: metadata, per-sheet records and the display block.

    ``sheets`` holds one entry per configured sheet, in configuration order,
    including sheets whose fetch failed (mapped to an empty list).
    """
    meta: SnapshotMeta
    sheets: dict[str, list[Record]]
    config: DisplayConfig

    def to_dict(self) -> dict[str, Any]:
        return {
            "meta": self.meta.to_dict(),
            "sheets": {key: [dict(record) for record in records] for key, records in self.sheets.items()},
            "config": self.config.to_dict(),
        }

    def to_json(self) -> str:
        return dumps_compact(self.to_dict())

    def sheet_size(self, key: str) -> int:
        """Size in bytes of one sheet's serialized record array."""
        return len(dumps_compact(self.sheets[key]).encode("utf-8"))
