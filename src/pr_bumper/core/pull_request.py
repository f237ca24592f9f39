"""Scope and changelog extraction from pull request descriptions.

A PR description carries its version-bump scope as a ``#scope#`` marker
and, optionally, a changelog entry below a ``# CHANGELOG`` heading::

    This fixes the flaky login redirect.

    - [ ] #patch#
    - [x] #minor#
    - [ ] #major#

    # CHANGELOG
    * Added a **remember me** option to the login form

Everything here is pure text processing; fetching the PR is left to the
VCS layer.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from pr_bumper.core.scope import Scope, resolve_scope
from pr_bumper.exceptions import (
    MultipleChangelogSectionsError,
    NoChangelogContentError,
    NoScopeFoundError,
    TooManyScopesFoundError,
)

SCOPE_PATTERN = re.compile(r"#[A-Za-z]+#")
CHECKED_SCOPE_PATTERN = re.compile(r"-\s\[x\].*?#(\w+)#", re.IGNORECASE)
CHANGELOG_HEADERS = frozenset({"#changelog", "# changelog"})

DOCS_URL = "https://github.com/ciena-blueplanet/pr-bumper"


@dataclass(frozen=True)
class PullRequest:
    """A pull request as returned by the VCS layer."""

    number: int
    url: str
    description: str
    head_sha: str = ""


def _pr_link(pr_number: int | str | None, pr_url: str | None) -> str:
    return f"[PR #{pr_number}]({pr_url})"


def extract_scope(
    description: str | None,
    max_scope: str | None = "major",
    *,
    pr_number: int | str | None = None,
    pr_url: str | None = None,
) -> Scope:
    """Find the version-bump scope in a PR description.

    A single ``#scope#`` marker is used as-is. When there are several
    markers, exactly one of them must sit on a checked GFM checkbox line
    (``- [x] ... #scope#``); unchecked lines and markers elsewhere are
    ignored in that case.

    Args:
        description: The PR description text
        max_scope: Highest scope allowed
        pr_number: Number of the PR, used in error messages
        pr_url: URL of the PR, used in error messages

    Returns:
        The canonical scope

    Raises:
        NoScopeFoundError: If no marker is present
        TooManyScopesFoundError: If several markers are present and not
            exactly one is checked
        InvalidScopeError: If the marker is not a known scope
        ScopeExceedsMaximumError: If the scope is above ``max_scope``
    """
    text = description or ""
    link = _pr_link(pr_number, pr_url)
    matches = SCOPE_PATTERN.findall(text)

    if not matches:
        raise NoScopeFoundError(
            f"No version-bump scope found for {link}\n"
            "Please include a scope (e.g. `#major#`, `#minor#`, `#patch#`) in your PR description.\n"
            f"See {DOCS_URL}#pull-requests for more details."
        )

    if len(matches) > 1:
        checked = CHECKED_SCOPE_PATTERN.findall(text)
        if len(checked) != 1:
            raise TooManyScopesFoundError(f"Too many version-bump scopes found for {link}")
        token = checked[0]
    else:
        token = matches[0].strip("#")

    return resolve_scope(token, max_scope, pr_number, pr_url)


def _changelog_header_index(lines: list[str]) -> int:
    index = -1
    for i, line in enumerate(lines):
        if line.strip().lower() in CHANGELOG_HEADERS:
            if index != -1:
                raise MultipleChangelogSectionsError(index + 1, i + 1)
            index = i
    return index


def extract_changelog(description: str | None) -> str:
    """Return the text below the ``# CHANGELOG`` heading of a PR description.

    The heading match ignores case and surrounding whitespace. The content
    is returned as written, minus the ``\\r`` of CRLF line endings.

    Raises:
        MultipleChangelogSectionsError: If there is more than one heading
        NoChangelogContentError: If there is no heading or nothing below it
    """
    lines = re.split(r"\r?\n", description or "")
    index = _changelog_header_index(lines)

    changelog = "\n".join(lines[index + 1 :]) if index >= 0 else ""

    if not changelog.strip():
        raise NoChangelogContentError(
            "No CHANGELOG content found in PR description.\n"
            "Please add a `# CHANGELOG` section to your PR description with some content "
            "describing your change.\n"
            f"See {DOCS_URL}#changelog for details."
        )

    return changelog


def get_scope_for_pr(pr: PullRequest, max_scope: str | None = "major") -> Scope:
    """Extract the scope of ``pr``."""
    return extract_scope(pr.description, max_scope, pr_number=pr.number, pr_url=pr.url)


def get_changelog_for_pr(pr: PullRequest) -> str:
    """Extract the changelog of ``pr``."""
    return extract_changelog(pr.description)
