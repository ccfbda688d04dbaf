from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Progress display with tqdm (TTY only).

Sheets finish in completion order, not configuration order, so the bar only
counts settled fetches and shows the most recent sheet in its description. In
non-TTY environments (CI, cron) no bar is created at all.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    """Return True if stdout is a TTY and progress should be displayed."""
    return sys.stdout.isatty()


class ProgressTracker:
    """Progress tracker over the configured sheets."""

    def __init__(self, total_sheets: int, *, description: str = "Fetching sheets") -> None:
        """Initialize progress tracker.

        Args:
            total_sheets: Total number of sheets that will be fetched
            description: Description for the progress bar
        """
        self.total_sheets = total_sheets
        self.description = description
        self.finished = 0
        self.failed = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_sheets,
                desc=description,
                unit="sheet",
                disable=False,
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def finish_sheet(self, sheet_name: str, success: bool = True) -> None:
        """Record one settled sheet.

        Args:
            sheet_name: Display name of the sheet that just settled
            success: Whether the sheet was fetched and parsed successfully
        """
        self.finished += 1
        if not success:
            self.failed += 1

        if self.enabled and self.pbar is not None:
            self.pbar.set_description(f"{self.description} ({sheet_name})")
            self.pbar.update(1)
            self.pbar.set_postfix(failed=self.failed)

    def close(self) -> None:
        """Close the progress bar."""
        if self.enabled and self.pbar is not None:
            self.pbar.set_description(self.description)
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
