from __future__ import annotations

from datetime import UTC, datetime

import pytest

from sheet_snapshot.models import DisplayConfig, SnapshotDocument, SnapshotMeta
from sheet_snapshot.models.processing_result import ProcessingResult, SheetStat

"""Unit tests for processing result models."""


def _document() -> SnapshotDocument:
    meta = SnapshotMeta("2026-10-18T09:00:00.000Z", "sheet-abc", "2026Q4", 2026, 4, "2.0")
    return SnapshotDocument(meta=meta, sheets={"a": [], "b": [], "c": []}, config=DisplayConfig())


class TestSheetStat:
    """Test SheetStat dataclass."""

    def test_sheet_stat_creation(self):
        stat = SheetStat(
            sheet_key="locations",
            sheet_name="Locations Metadata",
            status="success",
            raw_rows=10,
            rows=8,
            size_bytes=512,
            elapsed_seconds=0.4,
        )

        assert stat.sheet_key == "locations"
        assert stat.raw_rows == 10
        assert stat.rows == 8
        assert stat.error is None

    def test_sheet_stat_with_error(self):
        stat = SheetStat("top_rounds", "Top Rounds", "failed", 0, 0, 2, 0.1, error="HTTP 500")
        assert stat.status == "failed"
        assert stat.error == "HTTP 500"


class TestProcessingResult:
    """Test ProcessingResult dataclass."""

    def test_processing_result_creation(self):
        start = datetime(2026, 10, 18, 9, 0, 0, tzinfo=UTC)
        end = datetime(2026, 10, 18, 9, 0, 2, tzinfo=UTC)

        result = ProcessingResult(
            success_sheets=2,
            failed_sheets=1,
            total_rows=42,
            start_time=start,
            end_time=end,
            elapsed_seconds=2.0,
            document=_document(),
        )

        assert result.total_sheets == 3
        assert result.partial is True
        assert result.sheet_stats is None

    def test_processing_result_all_success_is_not_partial(self):
        start = datetime(2026, 10, 18, tzinfo=UTC)
        result = ProcessingResult(3, 0, 10, start, start, 0.0, _document())
        assert result.partial is False

    def test_processing_result_is_frozen(self):
        start = datetime(2026, 10, 18, tzinfo=UTC)
        result = ProcessingResult(3, 0, 10, start, start, 0.0, _document())
        with pytest.raises(AttributeError):
            result.total_rows = 11  # type: ignore[misc]
