from __future__ import annotations

from ..models.outcome import ImportOutcome

"""SUMMARY line rendering.

Format:
SUMMARY rows={rows} valid={valid} invalid={invalid} success={success}
failed={failed} elapsed_sec={elapsed}

``not_attempted={n}`` is appended only for a cancelled commit.
"""


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation for very small numbers
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(total_rows: int, valid_rows: int, outcome: ImportOutcome | None) -> str:
    """Render the SUMMARY line for one import run.

    Args:
        total_rows: Data rows read from the source
        valid_rows: Rows that passed validation
        outcome: Commit outcome; None for a dry run (nothing committed)

    Returns:
        Formatted SUMMARY line

    Examples:
        >>> outcome = ImportOutcome(success_count=2, failure_count=1, elapsed_seconds=1.5)
        >>> render_summary_line(4, 3, outcome)
        'SUMMARY rows=4 valid=3 invalid=1 success=2 failed=1 elapsed_sec=1.5'
    """
    success = outcome.success_count if outcome is not None else 0
    failed = outcome.failure_count if outcome is not None else 0
    elapsed = outcome.elapsed_seconds if outcome is not None else 0.0
    line = (
        f"SUMMARY rows={total_rows} "
        f"valid={valid_rows} "
        f"invalid={total_rows - valid_rows} "
        f"success={success} "
        f"failed={failed} "
        f"elapsed_sec={_format_seconds(elapsed)}"
    )
    if outcome is not None and outcome.cancelled:
        line += f" not_attempted={outcome.not_attempted}"
    return line
