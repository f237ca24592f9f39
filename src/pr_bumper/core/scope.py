"""Version-bump scopes.

A PR declares how far the version should move with a scope token. The
canonical scopes are ordered ``none < patch < minor < major``; ``fix``,
``feature`` and ``breaking`` are accepted as aliases.
"""

from __future__ import annotations

from enum import StrEnum

from pr_bumper.exceptions import InvalidScopeError, ScopeExceedsMaximumError


class Scope(StrEnum):
    """Canonical version-bump scope."""

    NONE = "none"
    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"

    @property
    def weight(self) -> int:
        return _SCOPE_WEIGHTS[self]


_SCOPE_WEIGHTS = {
    Scope.NONE: 0,
    Scope.PATCH: 1,
    Scope.MINOR: 2,
    Scope.MAJOR: 3,
}

SCOPE_ALIASES: dict[str, Scope] = {
    "fix": Scope.PATCH,
    "patch": Scope.PATCH,
    "feature": Scope.MINOR,
    "minor": Scope.MINOR,
    "breaking": Scope.MAJOR,
    "major": Scope.MAJOR,
    "none": Scope.NONE,
}


def _pr_ref(pr_number: int | str | None, pr_url: str | None) -> str:
    return f"PR #{pr_number} ({pr_url})"


def resolve_scope(
    raw_scope: str,
    max_scope: str | None = "major",
    pr_number: int | str | None = None,
    pr_url: str | None = None,
) -> Scope:
    """Validate a scope token and map it to its canonical scope.

    Args:
        raw_scope: Token as written in the PR (e.g. ``"fix"``, ``"MAJOR"``)
        max_scope: Highest scope allowed; ``None`` means ``"major"``
        pr_number: Number of the PR, used in error messages
        pr_url: URL of the PR, used in error messages

    Returns:
        The canonical scope

    Raises:
        InvalidScopeError: If the token (or the ceiling) is not a known scope
        ScopeExceedsMaximumError: If the scope is above ``max_scope``
    """
    scope = SCOPE_ALIASES.get(raw_scope.lower())
    if scope is None:
        raise InvalidScopeError(
            f'Invalid version-bump scope "{raw_scope}" found for {_pr_ref(pr_number, pr_url)}'
        )

    max_scope = max_scope or "major"
    ceiling = SCOPE_ALIASES.get(max_scope.lower())
    if ceiling is None:
        raise InvalidScopeError(
            f'Invalid maximum version-bump scope "{max_scope}" configured for '
            f"{_pr_ref(pr_number, pr_url)}"
        )

    if scope.weight > ceiling.weight:
        raise ScopeExceedsMaximumError(
            f'Version-bump scope "{raw_scope}" is higher than the maximum "{max_scope}" '
            f"for {_pr_ref(pr_number, pr_url)}"
        )

    return scope
