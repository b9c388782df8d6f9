from __future__ import annotations

import time
from dataclasses import dataclass

"""Import outcome models.

ImportOutcome is the user-facing report of one commit run. It is assembled
row by row through OutcomeAccumulator and frozen once the commit loop ends.
"""

__all__ = [
    "ImportOutcome",
    "OutcomeAccumulator",
]


@dataclass(frozen=True)
class ImportOutcome:
    """Aggregated result of committing a batch of candidates."""
    success_count: int
    failure_count: int
    errors: tuple[str, ...] = ()  # "row {n}: {message}", input order
    not_attempted: int = 0  # rows left over after a cancel
    cancelled: bool = False
    elapsed_seconds: float = 0.0

    @property
    def attempted(self) -> int:
        return self.success_count + self.failure_count


class OutcomeAccumulator:
    """Collects per-row commit results and builds the final ImportOutcome."""

    def __init__(self) -> None:
        self.success_count = 0
        self.failure_count = 0
        self.errors: list[str] = []
        self.not_attempted = 0
        self.cancelled = False
        self._started = time.perf_counter()

    def add_success(self) -> None:
        self.success_count += 1

    def add_failure(self, row_number: int, message: str) -> None:
        self.failure_count += 1
        self.errors.append(format_row_error(row_number, message))

    def mark_cancelled(self, remaining: int) -> None:
        self.cancelled = True
        self.not_attempted = remaining

    def build(self) -> ImportOutcome:
        return ImportOutcome(
            success_count=self.success_count,
            failure_count=self.failure_count,
            errors=tuple(self.errors),
            not_attempted=self.not_attempted,
            cancelled=self.cancelled,
            elapsed_seconds=time.perf_counter() - self._started,
        )


def format_row_error(row_number: int, message: str) -> str:
    return f"row {row_number}: {message}"
