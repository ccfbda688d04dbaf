from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .snapshot import SnapshotDocument

"""Processing result models for the sheet snapshot builder.

Aggregates per-sheet outcomes into the figures used for the SUMMARY line and
the per-sheet size report printed after a run.
"""


@dataclass(frozen=True)
class SheetStat:
    """Per-sheet statistics (internal helper for ProcessingResult)."""
    sheet_key: str
    sheet_name: str
    status: str  # success/failed
    raw_rows: int  # records before the primary key filter
    rows: int  # records written to the snapshot
    size_bytes: int  # serialized size of the sheet's record array
    elapsed_seconds: float
    error: str | None = None


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results of one snapshot run."""
    success_sheets: int
    failed_sheets: int
    total_rows: int
    start_time: datetime  # the single instant every metadata field derives from
    end_time: datetime
    elapsed_seconds: float
    document: SnapshotDocument
    sheet_stats: list[SheetStat] | None = None

    @property
    def total_sheets(self) -> int:
        return self.success_sheets + self.failed_sheets

    @property
    def partial(self) -> bool:
        """True when at least one sheet failed and the document has gaps."""
        return self.failed_sheets > 0
