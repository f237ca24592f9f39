"""Core business logic for pr-bumper.

This module contains the fundamental building blocks:
- Version-bump scopes and their validation
- Scope and changelog extraction from PR descriptions
- Semantic version bumping
"""

from __future__ import annotations

from pr_bumper.core.pull_request import (
    PullRequest,
    extract_changelog,
    extract_scope,
    get_changelog_for_pr,
    get_scope_for_pr,
)
from pr_bumper.core.scope import SCOPE_ALIASES, Scope, resolve_scope
from pr_bumper.core.version import Version

__all__ = [
    # Scope
    "SCOPE_ALIASES",
    # Pull requests
    "PullRequest",
    "Scope",
    "Version",
    "extract_changelog",
    "extract_scope",
    "get_changelog_for_pr",
    "get_scope_for_pr",
    "resolve_scope",
]
