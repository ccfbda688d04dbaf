from __future__ import annotations

import argparse
import os
import sys
from contextlib import ExitStack
from pathlib import Path

import pandas as pd
from dotenv import load_dotenv

from sheet_snapshot.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from sheet_snapshot.logging.error_log import ErrorLogBuffer
from sheet_snapshot.logging.init import log_summary, setup_logging
from sheet_snapshot.models.config_models import SnapshotConfig
from sheet_snapshot.services.orchestrator import ProcessingError, process_all
from sheet_snapshot.services.output import OutputError, write_snapshot
from sheet_snapshot.services.summary import render_sheet_lines, render_summary_line, render_total_size
from sheet_snapshot.sheets.fetcher import SheetFetchError, build_source
from sheet_snapshot.sheets.reader import normalize_sheet
from sheet_snapshot.sheets.transport import Fetch, HttpTransport

"""CLI entrypoint.

Flow:
- Load .env, then config/sheets.yml (or --config)
- Resolve the spreadsheet id: --sheet-id > GOOGLE_SHEET_ID > config file
- Fetch all sheets, write the snapshot JSON, flush the error log
- Print per-sheet sizes and one SUMMARY line

Exit codes: 0 when the snapshot was written (failed sheets included, they are
empty in the document), 1 for fatal errors (configuration, missing sheet id,
unwritable output).
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1

SHEET_ID_ENV = "GOOGLE_SHEET_ID"
INSPECT_ROWS = 3


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv.

    override=True lets a local .env win over variables already in the process.
    """
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Google Sheets -> JSON snapshot builder")
    p.add_argument("--config", default=str(DEFAULT_CONFIG_PATH), help="Path to the YAML config")
    p.add_argument("--output", help="Override output_path from the config")
    p.add_argument("--sheet-id", help=f"Spreadsheet id (overrides {SHEET_ID_ENV})")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print sheet columns & first rows then exit")
    return p.parse_args(argv)


def _resolve_config(args: argparse.Namespace) -> SnapshotConfig:
    cfg = load_config(Path(args.config))
    return (
        cfg.with_source_sheet_id(os.getenv(SHEET_ID_ENV))
        .with_source_sheet_id(args.sheet_id)
        .with_output_path(args.output)
    )


def _inspect_data(cfg: SnapshotConfig, transport: Fetch) -> int:
    source = build_source(cfg, transport)
    for sheet in cfg.sheets:
        try:
            data = normalize_sheet(source.fetch_text(sheet), sheet)
        except SheetFetchError as e:
            print(f"SHEET: {sheet.key} error={e}")
            continue
        print(f"SHEET: {sheet.key} ({sheet.name}) rows={len(data.records)} cols={data.columns}")
        if not data.records:
            print("    (no rows)")
            continue
        frame = pd.DataFrame.from_records(data.records[:INSPECT_ROWS], columns=data.columns).fillna("")
        for line in frame.to_string(index=False).splitlines():
            print(f"    {line}")
    return EXIT_SUCCESS


def main(argv: list[str] | None = None, *, transport: Fetch | None = None) -> int:
    # None means "read the process arguments"; an explicit [] (tests) must not.
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)

    logger = setup_logging(debug=args.debug)
    if args.debug:
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"), override=True)

    try:
        cfg = _resolve_config(args)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if not cfg.source_sheet_id:
        logger.error(f"{SHEET_ID_ENV} environment variable is not set")
        return EXIT_FATAL

    logger.info(f"Sheet ID: {cfg.source_sheet_id}")

    with ExitStack() as stack:
        if transport is None:
            transport = stack.enter_context(HttpTransport(timeout_seconds=cfg.fetch.timeout_seconds))

        if args.inspect_data:
            return _inspect_data(cfg, transport)

        error_log = ErrorLogBuffer()
        try:
            result = process_all(cfg, transport=transport, error_log=error_log)
        except ProcessingError as e:
            logger.error(f"processing: {e}")
            return EXIT_FATAL

    output_path = Path(cfg.output_path)
    try:
        total_size = write_snapshot(result.document, output_path)
    except OutputError as e:
        logger.error(f"output: {e}")
        return EXIT_FATAL

    try:
        error_file = error_log.flush()
    except OSError as e:
        logger.warning(f"could not write error log: {e}")
    else:
        if error_file is not None:
            logger.warning(f"{result.failed_sheets} sheet(s) failed; details in {error_file}")

    logger.info(f"Snapshot written to {output_path}")
    logger.info(f"Reporting: {result.document.meta.reporting_quarter}")
    for line in render_sheet_lines(result):
        logger.info(line)
    logger.info(render_total_size(total_size))

    summary_line = render_summary_line(result)
    log_summary(summary_line.removeprefix("SUMMARY "))

    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
