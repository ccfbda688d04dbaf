from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for error logging.

This module defines the ErrorRecord dataclass used for structured logging of
sheet-level failures. One record is written per failed sheet; the JSON Lines
schema is fixed (no extra keys).
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        sheet_key: Snapshot key of the failed sheet
        sheet_name: Display name of the failed sheet
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Error message or description
    """
    timestamp: str  # ISO8601 UTC
    sheet_key: str
    sheet_name: str
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(sheet_key: str, sheet_name: str, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord with current UTC timestamp."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            sheet_key=sheet_key,
            sheet_name=sheet_name,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        """Serialize ErrorRecord to JSON Lines format."""
        return json.dumps(asdict(self), ensure_ascii=False)
