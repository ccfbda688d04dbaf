from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from contextlib import ExitStack
from datetime import UTC, datetime, timedelta
from typing import Callable

from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..models.config_models import SheetDescriptor, SnapshotConfig
from ..models.processing_result import ProcessingResult, SheetStat
from ..models.sheet_process import SheetProcess
from ..models.snapshot import SnapshotDocument
from ..sheets.fetcher import SheetFetchError, SheetSource, build_source
from ..sheets.reader import normalize_sheet
from ..sheets.transport import Fetch, HttpTransport
from .progress import ProgressTracker
from .reporting import build_meta

"""Acquisition orchestration: fetch every configured sheet and assemble the snapshot.

Sheets are fetched concurrently on a thread pool. Each task catches its own
failure and reports it as a failed SheetProcess, so one broken sheet never
prevents the document from being produced. Results are merged only after every
task has settled, in configuration order.
"""

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class ProcessingError(Exception):
    """Fatal run-level error (bad configuration). Raised before any fetch."""


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _process_single_sheet(descriptor: SheetDescriptor, source: SheetSource) -> SheetProcess:
    """Fetch, tokenize, map and filter one sheet. Never raises."""
    started = time.perf_counter()
    try:
        text = source.fetch_text(descriptor)
        sheet_data = normalize_sheet(text, descriptor)
    except SheetFetchError as e:
        return SheetProcess.failed(
            descriptor,
            error=str(e),
            error_type=e.error_type,
            elapsed_seconds=time.perf_counter() - started,
        )
    except Exception as e:
        logger.debug("sheet=%s unexpected failure", descriptor.key, exc_info=True)
        return SheetProcess.failed(
            descriptor,
            error=f"{type(e).__name__}: {e}",
            error_type="PROCESSING_ERROR",
            elapsed_seconds=time.perf_counter() - started,
        )

    return SheetProcess(
        descriptor=descriptor,
        records=sheet_data.records,
        raw_records=sheet_data.raw_records,
        columns=sheet_data.columns,
        elapsed_seconds=time.perf_counter() - started,
    )


def _run_all(config: SnapshotConfig, source: SheetSource) -> dict[str, SheetProcess]:
    outcomes: dict[str, SheetProcess] = {}
    workers = max(1, min(config.fetch.max_workers, len(config.sheets)))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="sheet-fetch") as executor, \
            ProgressTracker(len(config.sheets)) as progress:
        futures = {executor.submit(_process_single_sheet, sheet, source): sheet for sheet in config.sheets}
        for future in as_completed(futures):
            sheet = futures[future]
            outcome = future.result()
            outcomes[sheet.key] = outcome
            progress.finish_sheet(sheet.name, success=outcome.succeeded)
    return outcomes


def process_all(
    config: SnapshotConfig,
    *,
    source: SheetSource | None = None,
    transport: Fetch | None = None,
    clock: Clock | None = None,
    error_log: ErrorLogBuffer | None = None,
) -> ProcessingResult:
    """Fetch every configured sheet and build the snapshot document.

    Args:
        config: Snapshot configuration (sheets, source id, display block)
        source: Sheet source to use; built from ``config.fetch`` when omitted
        transport: ``fetch(url) -> (status, text)`` for the built source;
            an ``HttpTransport`` is created (and closed) when omitted
        clock: Returns the run instant; called exactly once
        error_log: Receives one ErrorRecord per failed sheet

    Returns:
        ProcessingResult holding the document and per-sheet statistics

    Raises:
        ProcessingError: If the configuration cannot drive a run (no source
            sheet id, no sheets, unknown strategy)
    """
    if not config.source_sheet_id or not config.source_sheet_id.strip():
        raise ProcessingError("source sheet id is not set (GOOGLE_SHEET_ID)")
    if not config.sheets:
        raise ProcessingError("no sheets configured")

    start_time = (clock or _utc_now)()
    started = time.perf_counter()

    logger.info("Fetching %d sheets from %s", len(config.sheets), config.source_sheet_id)

    with ExitStack() as stack:
        if source is None:
            if transport is None:
                transport = stack.enter_context(HttpTransport(timeout_seconds=config.fetch.timeout_seconds))
            try:
                source = build_source(config, transport)
            except ValueError as e:
                raise ProcessingError(f"Invalid configuration: {e}") from e
        outcomes = _run_all(config, source)

    elapsed_seconds = time.perf_counter() - started
    end_time = start_time + timedelta(seconds=elapsed_seconds)

    # Merge in configuration order; every configured key is present.
    sheets = {sheet.key: outcomes[sheet.key].records for sheet in config.sheets}
    document = SnapshotDocument(
        meta=build_meta(start_time, config),
        sheets=sheets,
        config=config.display,
    )

    sheet_stats: list[SheetStat] = []
    success_count = 0
    failed_count = 0
    total_rows = 0
    for sheet in config.sheets:
        outcome = outcomes[sheet.key]
        if outcome.succeeded:
            success_count += 1
            total_rows += len(outcome.records)
        else:
            failed_count += 1
            logger.error("sheet=%s recorded as empty: %s", sheet.key, outcome.error)
            if error_log is not None:
                error_log.append(
                    ErrorRecord.create(
                        sheet_key=sheet.key,
                        sheet_name=sheet.name,
                        error_type=outcome.error_type or "PROCESSING_ERROR",
                        message=outcome.error or "",
                    )
                )
        sheet_stats.append(
            SheetStat(
                sheet_key=sheet.key,
                sheet_name=sheet.name,
                status="success" if outcome.succeeded else "failed",
                raw_rows=outcome.raw_records,
                rows=len(outcome.records),
                size_bytes=document.sheet_size(sheet.key),
                elapsed_seconds=outcome.elapsed_seconds,
                error=outcome.error,
            )
        )

    return ProcessingResult(
        success_sheets=success_count,
        failed_sheets=failed_count,
        total_rows=total_rows,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=elapsed_seconds,
        document=document,
        sheet_stats=sheet_stats,
    )
