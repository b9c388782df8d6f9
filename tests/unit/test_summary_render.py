from __future__ import annotations

from pharma_import.models.outcome import ImportOutcome
from pharma_import.services.summary import render_summary_line


def test_render_summary_line_basic():
    outcome = ImportOutcome(success_count=2, failure_count=1, elapsed_seconds=1.5)
    line = render_summary_line(4, 3, outcome)
    assert line == "SUMMARY rows=4 valid=3 invalid=1 success=2 failed=1 elapsed_sec=1.5"


def test_render_summary_line_dry_run():
    line = render_summary_line(3, 3, None)
    assert line == "SUMMARY rows=3 valid=3 invalid=0 success=0 failed=0 elapsed_sec=0"


def test_render_summary_line_rounds_elapsed():
    outcome = ImportOutcome(success_count=1, failure_count=0, elapsed_seconds=0.123456)
    assert render_summary_line(1, 1, outcome).endswith("elapsed_sec=0.123")


def test_render_summary_line_tiny_elapsed_avoids_scientific_notation():
    outcome = ImportOutcome(success_count=1, failure_count=0, elapsed_seconds=0.0000042)
    line = render_summary_line(1, 1, outcome)
    assert "e-" not in line
    assert line.endswith("elapsed_sec=0.000004")


def test_render_summary_line_cancelled_appends_not_attempted():
    outcome = ImportOutcome(
        success_count=1, failure_count=0, not_attempted=2, cancelled=True, elapsed_seconds=2.0
    )
    line = render_summary_line(3, 3, outcome)
    assert line == (
        "SUMMARY rows=3 valid=3 invalid=0 success=1 failed=0 elapsed_sec=2 not_attempted=2"
    )
