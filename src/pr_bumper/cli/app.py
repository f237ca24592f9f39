"""pr-bumper command line interface."""

from __future__ import annotations

import logging
import os
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from pr_bumper import __version__

app = typer.Typer(
    name="pr-bumper",
    help="Bump the version of a repository based on pull request descriptions.",
    no_args_is_help=True,
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)

PathOption = Annotated[
    str | None,
    typer.Option("--path", "-p", help="Project directory (default: current directory)."),
]
SkipCommentsOption = Annotated[
    bool,
    typer.Option("--skip-comments", help="Do not post comments on the pull request."),
]


def configure_logging(verbose: bool) -> None:
    """Send log records through rich; INFO when verbose, WARNING otherwise."""
    level = logging.INFO if verbose or os.environ.get("VERBOSE") else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"pr-bumper {__version__}")
        raise typer.Exit


@app.callback()
def callback(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show informational log messages.")
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version", callback=_version_callback, is_eager=True, help="Show version and exit."
        ),
    ] = False,
) -> None:
    configure_logging(verbose)


@app.command()
def check(path: PathOption = None, skip_comments: SkipCommentsOption = False) -> None:
    """Verify the current PR has a valid version-bump scope."""
    from pr_bumper.cli.commands.check import run_check

    run_check(path, skip_comments, console, err_console)


@app.command()
def bump(path: PathOption = None, skip_comments: SkipCommentsOption = False) -> None:
    """Bump the version based on the last merged PR."""
    from pr_bumper.cli.commands.bump import run_bump

    run_bump(path, skip_comments, console, err_console)


@app.command("check-coverage")
def check_coverage(path: PathOption = None, skip_comments: SkipCommentsOption = False) -> None:
    """Make sure code coverage did not drop below the baseline."""
    from pr_bumper.cli.commands.coverage import run_check_coverage

    run_check_coverage(path, skip_comments, console, err_console)


def main() -> None:
    app()
