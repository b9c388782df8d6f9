from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Commit progress display with tqdm (TTY only).

A single tqdm bar advances once per committed row. In non-TTY environments
(CI, redirected output) the bar is disabled to avoid ANSI control sequence
spam in logs.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    """Check if TTY output is enabled.

    Returns:
        True if stdout is a TTY and progress should be displayed, False otherwise
    """
    return sys.stdout.isatty()


class ProgressTracker:
    """Row progress tracker for the commit loop."""

    def __init__(
        self, total_rows: int, *, description: str = "Importing rows", enabled: bool = True
    ) -> None:
        """Initialize progress tracker.

        Args:
            total_rows: Number of rows that will be committed
            description: Description for the progress bar
            enabled: False turns the bar off even on a TTY
        """
        self.total_rows = total_rows
        self.description = description
        self.current_row = 0
        self.succeeded = 0
        self.failed = 0

        self.enabled = enabled and is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_rows,
                desc=description,
                unit="row",
                disable=False,
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def advance(self, success: bool = True) -> None:
        """Record one committed row."""
        self.current_row += 1
        if success:
            self.succeeded += 1
        else:
            self.failed += 1

        if self.enabled and self.pbar is not None:
            self.pbar.update(1)
            self.pbar.set_postfix(success=self.succeeded, failed=self.failed)

    def close(self) -> None:
        if self.enabled and self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
