from __future__ import annotations

from dataclasses import dataclass, field

from .config_models import SheetDescriptor

"""SheetProcess model: the outcome of fetching and normalizing one sheet.

Each worker thread returns exactly one SheetProcess. A failed sheet carries an
error message and an empty record list, never a partial one.
"""

__all__ = [
    "Record",
    "SheetProcess",
]

# header label -> trimmed cell value
Record = dict[str, str]


@dataclass(frozen=True)
class SheetProcess:
    """Processing unit for a single sheet."""
    descriptor: SheetDescriptor
    records: list[Record] = field(default_factory=list)  # rows that passed the primary key filter
    raw_records: int = 0  # rows that survived mapping, before filtering
    columns: list[str] = field(default_factory=list)
    elapsed_seconds: float = 0.0
    error: str | None = None  # sheet-level error message
    error_type: str | None = None  # UPPER_SNAKE classification for the error log

    @property
    def key(self) -> str:
        return self.descriptor.key

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @classmethod
    def failed(
        cls,
        descriptor: SheetDescriptor,
        *,
        error: str,
        error_type: str,
        elapsed_seconds: float = 0.0,
    ) -> SheetProcess:
        return cls(
            descriptor=descriptor,
            records=[],
            raw_records=0,
            columns=[],
            elapsed_seconds=elapsed_seconds,
            error=error,
            error_type=error_type,
        )
