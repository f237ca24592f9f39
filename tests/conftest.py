"""Shared test fixtures."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import MagicMock

import pytest

from pr_bumper.ci.base import CiBase
from pr_bumper.config.loader import merge_config
from pr_bumper.core.pull_request import PullRequest
from pr_bumper.vcs.github import GitHub

if TYPE_CHECKING:
    from pathlib import Path

    from pr_bumper.config.models import PrBumperConfig


PR_TEMPLATE = """\
Fixes the login redirect loop.

### Please select one
- [ ] #none# - no release
- [ ] #patch# - bug fix
- [x] #minor# - new feature
- [ ] #major# - breaking change

# CHANGELOG
* Added a **remember me** option to the login form
"""


@pytest.fixture
def merge_env() -> dict[str, str]:
    """Environment of a Travis merge build."""
    return {
        "TRAVIS_BRANCH": "main",
        "TRAVIS_BUILD_NUMBER": "12345",
        "TRAVIS_PULL_REQUEST": "false",
        "TRAVIS_REPO_SLUG": "octo/widgets",
        "GITHUB_TOKEN": "write-token",
        "RO_GH_TOKEN": "read-token",
    }


@pytest.fixture
def pr_env(merge_env: dict[str, str]) -> dict[str, str]:
    """Environment of a Travis PR build for PR #7."""
    return {**merge_env, "TRAVIS_PULL_REQUEST": "7"}


@pytest.fixture
def merge_config_obj(merge_env: dict[str, str]) -> PrBumperConfig:
    return merge_config({}, merge_env)


@pytest.fixture
def sample_pr() -> PullRequest:
    return PullRequest(
        number=7,
        url="https://github.com/octo/widgets/pull/7",
        description=PR_TEMPLATE,
        head_sha="abc123",
    )


@pytest.fixture
def mock_vcs(sample_pr: PullRequest) -> MagicMock:
    vcs = MagicMock(spec=GitHub)
    vcs.get_pr.return_value = sample_pr
    return vcs


@pytest.fixture
def mock_ci() -> MagicMock:
    ci = MagicMock(spec=CiBase)
    ci.get_last_commit_msg.return_value = "Merge pull request #7 from octo/remember-me"
    ci.get_recent_log.return_value = (
        "98a148c Merge pull request #7 from octo/remember-me\n"
        "1b1bd97 Added remember me checkbox\n"
        "4a61a20 [pr-bumper] Automated version bump\n"
    )
    return ci


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A project with a pyproject.toml at version 1.2.3."""
    (tmp_path / "pyproject.toml").write_text(
        """\
[project]
name = "widgets"
version = "1.2.3"  # bumped by CI

[tool.pr-bumper]
coverage = 85.93
"""
    )
    return tmp_path
