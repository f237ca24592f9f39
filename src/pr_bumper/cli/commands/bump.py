"""Implementation of the 'bump' command.

The bump command runs on merge builds: it applies the scope of the PR
that was just merged, then commits, tags and pushes the result.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape
from rich.panel import Panel

from pr_bumper.cli.commands import create_bumper
from pr_bumper.exceptions import BumpCancelledError, PrBumperError

if TYPE_CHECKING:
    from rich.console import Console


def run_bump(
    path: str | None,
    skip_comments: bool,
    console: Console,
    err_console: Console,
) -> None:
    """Run the bump command.

    Args:
        path: Optional path to project directory
        skip_comments: Do not post comments on the PR
        console: Console for standard output
        err_console: Console for error output
    """
    bumper = create_bumper(path, skip_comments, err_console)

    try:
        info = bumper.bump()
    except BumpCancelledError as e:
        console.print(f"[yellow]{escape(str(e))}[/]")
        return
    except PrBumperError as e:
        err_console.print(f"[red]Error:[/] {escape(str(e))}")
        raise SystemExit(1) from e
    finally:
        bumper.vcs.close()

    if info is None:
        console.print("[yellow]Not a merge build, skipping bump.[/]")
        return

    if info.version is None:
        console.print(f"[yellow]Scope is {info.scope}, version left unchanged.[/]")
        return

    files = "\n".join(f"  • {escape(name)}" for name in info.modified_files)
    console.print(
        Panel(
            f"[green]Bumped to version {info.version}[/] ([cyan]{info.scope}[/])\n\n"
            f"Modified files:\n{files}",
            title="[green]Bump Complete[/]",
            border_style="green",
        )
    )
