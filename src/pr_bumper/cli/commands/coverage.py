"""Implementation of the 'check-coverage' command."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape

from pr_bumper.cli.commands import create_bumper
from pr_bumper.exceptions import PrBumperError

if TYPE_CHECKING:
    from rich.console import Console


def run_check_coverage(
    path: str | None,
    skip_comments: bool,
    console: Console,
    err_console: Console,
) -> None:
    """Run the check-coverage command."""
    bumper = create_bumper(path, skip_comments, err_console)
    baseline = bumper.config.computed.baseline_coverage

    try:
        current = bumper.check_coverage()
    except PrBumperError as e:
        err_console.print(f"[red]Error:[/] {escape(str(e))}")
        raise SystemExit(1) from e
    finally:
        bumper.vcs.close()

    console.print(f"Code coverage [green]{current:.2f}%[/] (baseline {baseline:.2f}%)")
