"""Base CI implementation providing the git operations pr-bumper needs."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import TYPE_CHECKING

from pr_bumper.exceptions import GitError

if TYPE_CHECKING:
    from pr_bumper.config.models import PrBumperConfig
    from pr_bumper.vcs.github import GitHub

logger = logging.getLogger(__name__)


class CiBase:
    """Runs git commands for a CI build.

    Args:
        config: The merged configuration
        vcs: The VCS client (used to get a remote to push to)
        path: Working directory of the repository
    """

    def __init__(self, config: PrBumperConfig, vcs: GitHub, path: Path | None = None) -> None:
        self.config = config
        self.vcs = vcs
        self.path = path or Path.cwd()

    def _git(self, *args: str) -> str:
        """Run a git command and return its stdout.

        Raises:
            GitError: If git fails
        """
        try:
            result = subprocess.run(
                ["git", *args],
                capture_output=True,
                text=True,
                check=True,
                cwd=self.path,
            )
        except subprocess.CalledProcessError as e:
            raise GitError(f"git {args[0]} failed with exit code {e.returncode}", stderr=e.stderr) from e
        except FileNotFoundError as e:
            raise GitError("git not found") from e
        return result.stdout

    def setup_git_env(self) -> None:
        """Configure the git user for the automated commits."""
        user = self.config.ci.git_user
        self._git("config", "--global", "user.email", user.email)
        self._git("config", "--global", "user.name", user.name)

    def add(self, files: list[str]) -> None:
        self._git("add", *files)

    def commit(self, summary: str, message: str) -> None:
        self._git("commit", "-m", summary, "-m", message)

    def tag(self, name: str, message: str) -> None:
        self._git("tag", name, "-a", "-m", message)

    def get_last_commit_msg(self) -> str:
        """Return the summary line of the most recent commit."""
        return self._git("log", "--pretty=format:%s", "-1").strip()

    def get_recent_log(self, count: int = 10) -> str:
        """Return ``git log --oneline`` for the last ``count`` commits."""
        return self._git("log", f"-{count}", "--oneline")

    def push(self) -> None:
        """Push the current branch and tags."""
        remote = self.vcs.add_remote_for_push(self.path)
        branch = self.config.computed.ci.branch
        logger.info("Pushing %s to %s", branch, remote)
        self._git("push", remote, branch, "--tags")
