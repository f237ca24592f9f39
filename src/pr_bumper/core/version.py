"""Semantic version parsing and bumping."""

from __future__ import annotations

import re
from dataclasses import dataclass

from pr_bumper.core.scope import Scope
from pr_bumper.exceptions import VersionNotFoundError

_VERSION_RE = re.compile(
    r"^v?(?P<major>\d+)\.(?P<minor>\d+)\.(?P<patch>\d+)(?:[-.]?(?P<pre>[0-9A-Za-z.-]+))?$"
)


@dataclass(frozen=True, order=True)
class Version:
    """A ``major.minor.patch`` version with an optional pre-release suffix."""

    major: int
    minor: int
    patch: int
    prerelease: str | None = None

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse a version string such as ``1.2.3`` or ``v2.0.0-rc.1``.

        Raises:
            VersionNotFoundError: If ``text`` is not a version
        """
        match = _VERSION_RE.match(text.strip())
        if not match:
            raise VersionNotFoundError(f"Invalid version: {text!r}")
        return cls(
            int(match.group("major")),
            int(match.group("minor")),
            int(match.group("patch")),
            match.group("pre"),
        )

    def bump(self, scope: Scope) -> Version:
        """Return the next version for ``scope``.

        A pre-release suffix is dropped by any real bump; ``none`` keeps
        the version unchanged.
        """
        if scope == Scope.MAJOR:
            return Version(self.major + 1, 0, 0)
        if scope == Scope.MINOR:
            return Version(self.major, self.minor + 1, 0)
        if scope == Scope.PATCH:
            return Version(self.major, self.minor, self.patch + 1)
        return self

    def __str__(self) -> str:
        base = f"{self.major}.{self.minor}.{self.patch}"
        return f"{base}-{self.prerelease}" if self.prerelease else base
