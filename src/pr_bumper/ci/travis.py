"""CI interface for Travis CI.

Travis checks out a detached HEAD, so the bump is committed on a local
``ci-<branch>`` branch and pushed back to ``<branch>``.
"""

from __future__ import annotations

import logging

from pr_bumper.ci.base import CiBase

logger = logging.getLogger(__name__)


class Travis(CiBase):
    def setup_git_env(self) -> None:
        super().setup_git_env()
        self._git("checkout", "-b", f"ci-{self.config.computed.ci.branch}")

    def push(self) -> None:
        remote = self.vcs.add_remote_for_push(self.path)
        branch = self.config.computed.ci.branch
        logger.info("Pushing ci-%s to %s", branch, remote)
        self._git("push", remote, f"ci-{branch}:refs/heads/{branch}", "--tags")
