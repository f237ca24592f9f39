"""Read the current code coverage from a coverage.py JSON report."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from pr_bumper.exceptions import CoverageError

if TYPE_CHECKING:
    from pathlib import Path


def get_current_coverage(report_path: Path) -> float:
    """Get the combined line and branch coverage percentage.

    The report is the output of ``coverage json``. Branches are counted
    only when the report was produced with branch coverage on.

    Args:
        report_path: Path to the JSON report

    Returns:
        Coverage percentage rounded to two decimals, or ``-1`` when the
        report lists no statements

    Raises:
        CoverageError: If the report cannot be read
    """
    try:
        report = json.loads(report_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise CoverageError(f"Unable to read coverage report {report_path}: {e}") from e

    totals = report.get("totals", {}) if isinstance(report, dict) else {}
    statements = totals.get("num_statements") or 0
    if statements <= 0:
        return -1

    covered = totals.get("covered_lines", 0) + totals.get("covered_branches", 0)
    total = statements + totals.get("num_branches", 0)

    return round(covered / total * 100, 2)
