from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for error logging.

ErrorRecord is the fixed-schema JSON Lines entry written for every row that
was rejected during preview or failed during commit. ``row=-1`` marks
source-level errors (unreadable file, empty paste) where no row applies.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        source: CSV file name, or "<paste>" for pasted text
        row: Row number (1-based, header = 1). Use -1 for source-level errors
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Validation message or store error text
    """
    timestamp: str
    source: str
    row: int
    error_type: str
    message: str

    @staticmethod
    def create(source: str, row: int, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            source=source,
            row=row,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        # dataclass -> dict keeps the key set fixed
        return json.dumps(asdict(self), ensure_ascii=False)
