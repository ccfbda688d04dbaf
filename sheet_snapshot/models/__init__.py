"""Domain models for the sheet snapshot builder.

Configuration values, per-sheet outcomes, run aggregates and the snapshot
document itself.
"""

from .config_models import DisplayConfig, FetchConfig, SheetDescriptor, SnapshotConfig
from .processing_result import ProcessingResult, SheetStat
from .sheet_process import Record, SheetProcess
from .snapshot import SnapshotDocument, SnapshotMeta

__all__ = [
    # Configuration models
    "DisplayConfig",
    "FetchConfig",
    "SheetDescriptor",
    "SnapshotConfig",
    # Processing models
    "Record",
    "SheetProcess",
    "SheetStat",
    "ProcessingResult",
    # Output
    "SnapshotDocument",
    "SnapshotMeta",
]
