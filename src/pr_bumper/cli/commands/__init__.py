"""Command implementations and the setup they share."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from pr_bumper.ci import get_ci
from pr_bumper.config import load_config
from pr_bumper.core.bumper import Bumper
from pr_bumper.exceptions import PrBumperError
from pr_bumper.vcs import get_vcs

if TYPE_CHECKING:
    from rich.console import Console


def create_bumper(path: str | None, skip_comments: bool, err_console: Console) -> Bumper:
    """Load configuration and wire up the Bumper for ``path``.

    Exits with status 1 when the configuration or providers are invalid.
    """
    project_path = Path(path) if path else Path.cwd()

    try:
        config = load_config(project_path)
        if skip_comments:
            config = config.with_comments_disabled()
        vcs = get_vcs(config)
        ci = get_ci(config, vcs, project_path)
    except PrBumperError as e:
        err_console.print(f"[red]Error loading config:[/] {e}")
        raise SystemExit(1) from e

    return Bumper(config, vcs, ci, project_path)
