from __future__ import annotations

import pytest
from sheet_snapshot.models.config_models import SheetDescriptor
from sheet_snapshot.models.sheet_process import SheetProcess


@pytest.fixture()
def descriptor() -> SheetDescriptor:
    return SheetDescriptor(key="top_rounds", name="Top Rounds", primary_key="location_database_name")


def test_sheet_process_creation_minimal(descriptor: SheetDescriptor):
    """A fresh SheetProcess is an empty success."""
    sheet = SheetProcess(descriptor=descriptor)

    assert sheet.key == "top_rounds"
    assert sheet.records == []
    assert sheet.raw_records == 0
    assert sheet.columns == []
    assert sheet.error is None
    assert sheet.succeeded is True


def test_sheet_process_with_records(descriptor: SheetDescriptor):
    records = [{"location_database_name": "paris", "company": "Acme"}]
    sheet = SheetProcess(
        descriptor=descriptor,
        records=records,
        raw_records=2,
        columns=["location_database_name", "company"],
        elapsed_seconds=0.25,
    )

    assert sheet.records == records
    assert sheet.raw_records == 2
    assert sheet.succeeded is True


def test_sheet_process_failed_has_no_records(descriptor: SheetDescriptor):
    sheet = SheetProcess.failed(
        descriptor,
        error='Failed to fetch "Top Rounds": HTTP 404',
        error_type="FETCH_ERROR",
        elapsed_seconds=1.5,
    )

    assert sheet.succeeded is False
    assert sheet.records == []
    assert sheet.raw_records == 0
    assert sheet.error_type == "FETCH_ERROR"
    assert sheet.elapsed_seconds == 1.5


def test_sheet_process_default_lists_are_not_shared(descriptor: SheetDescriptor):
    first = SheetProcess(descriptor=descriptor)
    second = SheetProcess(descriptor=descriptor)
    assert first.records is not second.records
