from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from ..models.config_models import SnapshotConfig
from ..models.snapshot import SnapshotMeta

"""Reporting period and snapshot metadata derivation.

Every metadata field of one run is derived from a single captured instant, so
a run that straddles midnight on a quarter boundary still reports consistent
values.
"""

__all__ = [
    "ReportingPeriod",
    "quarter_for_month",
    "format_generated_at",
    "build_meta",
]


def quarter_for_month(month: int) -> int:
    """Return the calendar quarter (1..4) of ``month`` (1..12)."""
    if not 1 <= month <= 12:
        raise ValueError(f"month must be in 1..12, got {month}")
    return math.ceil(month / 3)


@dataclass(frozen=True)
class ReportingPeriod:
    year: int
    quarter: int

    @property
    def label(self) -> str:
        return f"{self.year}Q{self.quarter}"

    @classmethod
    def from_datetime(cls, moment: datetime) -> ReportingPeriod:
        return cls(year=moment.year, quarter=quarter_for_month(moment.month))


def _as_utc(moment: datetime) -> datetime:
    # naive datetimes are taken to be UTC already
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC)


def _local(moment: datetime, timezone: str) -> datetime:
    if timezone.upper() == "UTC":
        return _as_utc(moment)
    return _as_utc(moment).astimezone(ZoneInfo(timezone))


def format_generated_at(moment: datetime) -> str:
    """ISO8601 in UTC with millisecond precision and a 'Z' suffix."""
    return _as_utc(moment).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_meta(moment: datetime, config: SnapshotConfig) -> SnapshotMeta:
    period = ReportingPeriod.from_datetime(_local(moment, config.timezone))
    return SnapshotMeta(
        generated_at=format_generated_at(moment),
        source_sheet_id=config.source_sheet_id,
        reporting_quarter=period.label,
        reporting_year=period.year,
        reporting_quarter_number=period.quarter,
        schema_version=config.schema_version,
    )
