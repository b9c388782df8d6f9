from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from pharma_import.models.error_record import ErrorRecord

"""Error log buffering.

Row-level problems are buffered in memory during a run and written once as
JSON Lines to ``<log_dir>/errors-YYYYMMDD-HHMMSS.log`` (UTC). The file is only
created when there is something to write.
"""

__all__ = [
    "ErrorRecord",
    "ErrorLogBuffer",
    "ROW_INVALID",
    "COMMIT_ERROR",
    "ACQUISITION_ERROR",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"

ROW_INVALID = "ROW_INVALID"
COMMIT_ERROR = "COMMIT_ERROR"
ACQUISITION_ERROR = "ACQUISITION_ERROR"


class ErrorLogBuffer:
    """In-memory buffer for error records. Flush writes JSON Lines.

    - The file path is decided on first access and reused by later flushes
    - Single import flow at a time, so no locking
    """
    def __init__(self, log_dir: Path | None = None) -> None:
        self._log_dir = log_dir if log_dir is not None else LOGS_DIR
        self._records: list[ErrorRecord] = []
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self._log_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._log_dir / f"errors-{stamp}.log"
        return self._file_path

    def append(self, record: ErrorRecord) -> None:
        self._records.append(record)

    def record(self, source: str, row: int, error_type: str, message: str) -> None:
        self.append(ErrorRecord.create(source, row, error_type, message))

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._records)

    def flush(self) -> Path | None:
        """Append buffered records to the log file.

        Returns:
            Path of the log file, or None when nothing was buffered
        """
        if not self._records:
            return self._file_path
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
