from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from ..models.config_models import SheetDescriptor
from ..models.sheet_process import Record
from .tokenizer import RawRow, tokenize_rows

"""Record mapping and filtering for tokenized sheet rows.

The first row is the header row, every later row is data. Mapping is purely
structural; the primary key filter is the only completeness check.
"""

__all__ = [
    "SheetData",
    "map_records",
    "filter_records",
    "normalize_sheet",
]

logger = logging.getLogger(__name__)


@dataclass
class SheetData:
    sheet_key: str
    columns: list[str]  # non-blank header labels, source order
    raw_records: int  # records produced by mapping
    records: list[Record] = field(default_factory=list)  # records kept by the filter


def _header_labels(header_row: RawRow) -> list[str]:
    return [label.strip() for label in header_row]


def map_records(rows: Sequence[RawRow]) -> list[Record]:
    """Pair the header row with each data row.

    - blank header labels drop their whole column
    - values are trimmed; blank values are not stored
    - data fields past the last header are ignored, missing ones count as blank
    - a row with no non-blank value is dropped

    Fewer than two rows (no header or no data) yields ``[]``.
    """
    if len(rows) < 2:
        return []

    headers = _header_labels(rows[0])
    records: list[Record] = []
    for row in rows[1:]:
        record: Record = {}
        for j, header in enumerate(headers):
            if not header:
                continue
            value = row[j].strip() if j < len(row) else ""
            if value:
                record[header] = value
        if record:
            records.append(record)
    return records


def filter_records(records: Iterable[Record], primary_key: str) -> list[Record]:
    """Keep records whose ``primary_key`` value is present and non-blank."""
    return [r for r in records if r.get(primary_key, "").strip()]


def normalize_sheet(text: str, descriptor: SheetDescriptor) -> SheetData:
    """Tokenize, map and filter the CSV text of one sheet."""
    rows = tokenize_rows(text)
    columns = [label for label in _header_labels(rows[0]) if label] if rows else []
    mapped = map_records(rows)
    kept = filter_records(mapped, descriptor.primary_key)

    logger.debug("[%s] Columns: %s", descriptor.name, ", ".join(columns))
    if mapped and not kept and descriptor.primary_key not in columns:
        logger.warning(
            "[%s] primary key column '%s' not found in header; every row was dropped",
            descriptor.name,
            descriptor.primary_key,
        )
    logger.info("[%s] Raw: %d -> Filtered: %d rows", descriptor.name, len(mapped), len(kept))

    return SheetData(
        sheet_key=descriptor.key,
        columns=columns,
        raw_records=len(mapped),
        records=kept,
    )
