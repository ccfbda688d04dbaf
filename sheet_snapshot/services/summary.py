from __future__ import annotations

from ..models.processing_result import ProcessingResult

"""Summary rendering for the end-of-run report.

Format of the SUMMARY line:

    SUMMARY sheets={total}/{configured} success={n} failed={n} rows={n}
    quarter={label} elapsed_sec={seconds}
"""


def _format_seconds(seconds: float) -> str:
    if seconds == 0:
        return "0"
    if seconds == int(seconds):
        return str(int(seconds))
    if seconds < 0.01:
        # avoid scientific notation for tiny values
        return f"{seconds:.6f}".rstrip("0").rstrip(".")
    return f"{seconds:.2f}".rstrip("0").rstrip(".")


def render_summary_line(result: ProcessingResult) -> str:
    """Render the SUMMARY line for a finished run.

    Examples:
        >>> from datetime import datetime, timezone
        >>> from sheet_snapshot.models import DisplayConfig, SnapshotDocument, SnapshotMeta
        >>> meta = SnapshotMeta("2024-01-01T10:00:00.000Z", "abc", "2024Q1", 2024, 1, "2.0")
        >>> doc = SnapshotDocument(meta=meta, sheets={"a": []}, config=DisplayConfig())
        >>> start = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2024, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = ProcessingResult(
        ...     success_sheets=1, failed_sheets=0, total_rows=10,
        ...     start_time=start, end_time=end, elapsed_seconds=2.0, document=doc,
        ... )
        >>> render_summary_line(result)
        'SUMMARY sheets=1/1 success=1 failed=0 rows=10 quarter=2024Q1 elapsed_sec=2'
    """
    configured = len(result.document.sheets)
    return (
        f"SUMMARY sheets={result.total_sheets}/{configured} "
        f"success={result.success_sheets} "
        f"failed={result.failed_sheets} "
        f"rows={result.total_rows} "
        f"quarter={result.document.meta.reporting_quarter} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )


def render_sheet_lines(result: ProcessingResult) -> list[str]:
    """One line per sheet: ``<name>: <rows> rows, <size> KB`` (FAILED marker on errors)."""
    lines: list[str] = []
    for stat in result.sheet_stats or []:
        line = f"{stat.sheet_name}: {stat.rows} rows, {stat.size_bytes / 1024:.1f} KB"
        if stat.status != "success":
            line += " (FAILED)"
        lines.append(line)
    return lines


def render_total_size(size_bytes: int) -> str:
    return f"Total size: {size_bytes / 1024 / 1024:.2f} MB"
