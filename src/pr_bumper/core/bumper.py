"""Bump orchestration.

The Bumper ties the pieces together for the three CI entry points:

- ``check``: on a PR build, make sure the PR description has a valid
  scope (and changelog, when that feature is on)
- ``bump``: on a merge build, bump the version from the merged PR,
  update the changelog and baseline coverage, then commit, tag and push
- ``check_coverage``: compare current coverage against the baseline
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, TypeVar

from pr_bumper.core.coverage import get_current_coverage
from pr_bumper.core.pull_request import PullRequest, get_changelog_for_pr, get_scope_for_pr
from pr_bumper.core.scope import Scope
from pr_bumper.core.version import Version
from pr_bumper.exceptions import (
    BumpCancelledError,
    CoverageError,
    GitError,
    PrBumperError,
    VcsError,
)
from pr_bumper.project.pyproject import (
    PYPROJECT,
    get_pyproject_version,
    update_baseline_coverage,
    update_pyproject_version,
)

if TYPE_CHECKING:
    from pr_bumper.ci.base import CiBase
    from pr_bumper.config.models import PrBumperConfig
    from pr_bumper.vcs.github import GitHub

logger = logging.getLogger(__name__)

T = TypeVar("T")

COMMIT_PREFIX = "[pr-bumper]"
COVERAGE_DOCS = "https://github.com/ciena-blueplanet/pr-bumper#featurescoverage"
MERGE_COMMIT_PATTERN = re.compile(r"Merge pull request #(\d+) from")


@dataclass
class BumpInfo:
    """What a bump is going to do, filled in step by step."""

    scope: Scope
    changelog: str = ""
    version: str | None = None
    modified_files: list[str] = field(default_factory=list)


class Bumper:
    """Drives a check or bump against one repository.

    Args:
        config: The merged configuration
        vcs: VCS client used to fetch PRs and post comments
        ci: CI helper used for git operations
        project_path: Repository root (defaults to the current directory)
        env: Environment mapping (defaults to ``os.environ``)
    """

    def __init__(
        self,
        config: PrBumperConfig,
        vcs: GitHub,
        ci: CiBase,
        project_path: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self.config = config
        self.vcs = vcs
        self.ci = ci
        self.project_path = project_path or Path.cwd()
        self.env = os.environ if env is None else env

    # Comments

    def _should_comment(self) -> bool:
        return (
            not self.env.get("SKIP_COMMENTS")
            and self.config.computed.ci.is_pr
            and self.config.is_enabled("comments")
        )

    def maybe_post_comment(self, message: str, is_error: bool = False) -> None:
        """Post ``message`` on the current PR when comments are enabled.

        Raises:
            VcsError: If posting the comment fails
        """
        if not self._should_comment():
            return

        comment = f"## ERROR\n{message}" if is_error else message
        try:
            self.vcs.post_comment(self.config.computed.ci.pr_number, comment)
        except VcsError as e:
            raise VcsError(
                f"Received error: {e} while trying to post PR comment: {comment}",
                status_code=e.status_code,
            ) from e

    def maybe_post_comment_on_error(self, func: Callable[[], T]) -> T:
        """Call ``func``; if it fails, report the error on the PR and re-raise."""
        try:
            return func()
        except PrBumperError as e:
            if self._should_comment():
                try:
                    self.vcs.post_comment(self.config.computed.ci.pr_number, f"## ERROR\n{e}")
                except VcsError as err:
                    raise VcsError(
                        f"Received error: {err} while trying to post PR comment about error: {e}",
                        status_code=err.status_code,
                    ) from e
            raise

    # PR info

    def _pr_info(self, pr: PullRequest) -> BumpInfo:
        scope = get_scope_for_pr(pr, self.config.max_scope)
        changelog = ""
        if scope != Scope.NONE and self.config.is_enabled("changelog"):
            changelog = get_changelog_for_pr(pr)
        return BumpInfo(scope=scope, changelog=changelog)

    def get_open_pr_info(self) -> BumpInfo:
        """Get scope (and changelog) of the PR being built."""
        pr = self.vcs.get_pr(self.config.computed.ci.pr_number)
        return self.maybe_post_comment_on_error(lambda: self._pr_info(pr))

    def get_last_pr(self) -> PullRequest:
        """Find the most recently merged PR from the git log.

        Raises:
            GitError: If no merge commit is found in the last 10 commits
        """
        log = self.ci.get_recent_log(10)
        match = MERGE_COMMIT_PATTERN.search(log)
        if match is None:
            raise GitError("Unable to find a merged PR in the last 10 commits")

        pr_number = match.group(1)
        logger.info("Found merged PR #%s", pr_number)
        return self.vcs.get_pr(pr_number)

    def get_merged_pr_info(self) -> BumpInfo:
        """Get scope (and changelog) of the PR that was just merged."""
        return self._pr_info(self.get_last_pr())

    # Entry points

    def check(self) -> BumpInfo | None:
        """Validate the scope (and changelog) of the current PR.

        Returns:
            The PR info, or None when this is not a PR build
        """
        if not self.config.computed.ci.is_pr:
            logger.info("Not a PR build, skipping check")
            return None

        info = self.get_open_pr_info()
        logger.info("Found a %s bump for the current PR", info.scope)
        return info

    def bump(self) -> BumpInfo | None:
        """Bump the version based on the last merged PR.

        Returns:
            The applied bump info, or None when this is not a merge build

        Raises:
            BumpCancelledError: If the last commit was made by pr-bumper
        """
        if self.config.computed.ci.is_pr:
            logger.info("Not a merge build, skipping bump")
            return None

        last_commit = self.ci.get_last_commit_msg()
        if last_commit.startswith(COMMIT_PREFIX):
            raise BumpCancelledError("Skipping bump on pr-bumper commit.")

        info = self.get_merged_pr_info()
        self._maybe_bump_version(info)
        self._maybe_prepend_changelog(info)
        self._maybe_update_baseline_coverage(info)
        self._maybe_commit_changes(info)
        self._maybe_create_tag(info)
        self._maybe_push_changes(info)
        return info

    def check_coverage(self) -> float:
        """Compare current code coverage with the baseline.

        Returns:
            The current coverage

        Raises:
            CoverageError: If the feature is off, no coverage is available,
                or coverage dropped
        """
        if not self.config.is_enabled("coverage"):
            message = (
                f"Code coverage feature not enabled!\nSee {COVERAGE_DOCS} for configuration info."
            )
            self.maybe_post_comment(message, is_error=True)
            raise CoverageError(message)

        baseline = self.config.computed.baseline_coverage
        current = self._current_coverage()

        if current < 0:
            message = (
                f"No current coverage info found!\nSee {COVERAGE_DOCS} for configuration info."
            )
            self.maybe_post_comment(message, is_error=True)
            raise CoverageError(message)

        delta = round(current - baseline, 2)
        if delta < 0:
            message = (
                f"Code Coverage: `{current:.2f}%` (dropped `{-delta:.2f}%` from `{baseline:.2f}%`)"
            )
            self.maybe_post_comment(message)
            raise CoverageError(message)

        if delta > 0:
            message = (
                f"Code Coverage: `{current:.2f}%` (increased `{delta:.2f}%` from `{baseline:.2f}%`)"
            )
        else:
            message = f"Code Coverage: `{current:.2f}%` (no change)"

        self.maybe_post_comment(message)
        logger.info(message)
        return current

    # Bump steps

    def _current_coverage(self) -> float:
        report = self.project_path / self.config.features.coverage.file
        if not report.is_file():
            return -1
        return get_current_coverage(report)

    def _maybe_bump_version(self, info: BumpInfo) -> BumpInfo:
        if info.scope == Scope.NONE:
            logger.info('Skipping version bump because of "none" scope.')
            return info

        current = Version.parse(get_pyproject_version(self.project_path))
        new_version = str(current.bump(info.scope))
        update_pyproject_version(self.project_path, new_version)

        info.version = new_version
        info.modified_files.append(PYPROJECT)
        return info

    def _maybe_prepend_changelog(self, info: BumpInfo) -> BumpInfo:
        if not self.config.is_enabled("changelog"):
            logger.info("Skipping prepending changelog because of config option.")
            return info

        if info.scope == Scope.NONE:
            logger.info('Skipping prepending changelog because of "none" scope.')
            return info

        filename = self.config.features.changelog.file
        changelog_path = self.project_path / filename
        date = datetime.now(UTC).strftime("%Y-%m-%d")
        entry = f"# {info.version} ({date})\n{info.changelog}\n\n"

        existing = changelog_path.read_text() if changelog_path.exists() else ""
        changelog_path.write_text(entry + existing)

        info.modified_files.append(filename)
        return info

    def _maybe_update_baseline_coverage(self, info: BumpInfo) -> BumpInfo:
        if not self.config.is_enabled("coverage"):
            logger.info("Skipping updating baseline code coverage because of config option.")
            return info

        current = self._current_coverage()
        if current < 0:
            raise CoverageError(
                f"No current coverage info found!\nSee {COVERAGE_DOCS} for configuration info."
            )

        logger.info("Updating baseline code coverage to %s", current)
        update_baseline_coverage(self.project_path, current)
        if PYPROJECT not in info.modified_files:
            info.modified_files.append(PYPROJECT)
        return info

    def _maybe_commit_changes(self, info: BumpInfo) -> BumpInfo:
        if not info.modified_files:
            logger.info("Skipping commit because no files were changed.")
            return info

        build_number = self.config.computed.ci.build_number
        self.ci.setup_git_env()
        self.ci.add(info.modified_files)
        self.ci.commit(
            f"{COMMIT_PREFIX} Automated version bump",
            f"From CI build {build_number}\n\n[ci skip] [skip ci]",
        )
        return info

    def _maybe_create_tag(self, info: BumpInfo) -> BumpInfo:
        if info.scope == Scope.NONE or info.version is None:
            logger.info('Skipping tag creation because of "none" scope.')
            return info

        build_number = self.config.computed.ci.build_number
        self.ci.tag(f"v{info.version}", f"Generated tag from CI build {build_number}")
        return info

    def _maybe_push_changes(self, info: BumpInfo) -> BumpInfo:
        if not info.modified_files:
            logger.info("Skipping push because nothing changed.")
            return info

        self.ci.push()
        return info
