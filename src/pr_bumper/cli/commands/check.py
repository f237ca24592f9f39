"""Implementation of the 'check' command."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape

from pr_bumper.cli.commands import create_bumper
from pr_bumper.exceptions import PrBumperError

if TYPE_CHECKING:
    from rich.console import Console


def run_check(
    path: str | None,
    skip_comments: bool,
    console: Console,
    err_console: Console,
) -> None:
    """Run the check command.

    Args:
        path: Optional path to project directory
        skip_comments: Do not post comments on the PR
        console: Console for standard output
        err_console: Console for error output
    """
    bumper = create_bumper(path, skip_comments, err_console)

    try:
        info = bumper.check()
    except PrBumperError as e:
        err_console.print(f"[red]Error:[/] {escape(str(e))}")
        raise SystemExit(1) from e
    finally:
        bumper.vcs.close()

    if info is None:
        console.print("[yellow]Not a PR build, skipping check.[/]")
        return

    console.print(f"Found a [green]{info.scope}[/] bump for the current PR")
    if info.changelog:
        console.print("[dim]Changelog entry:[/]")
        console.print(escape(info.changelog))
