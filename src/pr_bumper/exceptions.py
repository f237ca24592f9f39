"""Exception hierarchy for pr-bumper.

Every error raised on purpose by pr-bumper derives from PrBumperError so
the CLI can tell user-facing failures apart from unexpected bugs.
"""

from __future__ import annotations


class PrBumperError(Exception):
    """Base class for all pr-bumper errors."""


# Configuration


class ConfigError(PrBumperError):
    """Problem with the merged configuration."""


class ConfigParseError(ConfigError):
    """The override file exists but is not valid JSON."""


class UnknownFeatureError(ConfigError):
    """A feature name outside the known set was requested."""

    def __init__(self, feature_name: str) -> None:
        self.feature_name = feature_name
        super().__init__(f"Unknown feature {feature_name}")


# Scope


class ScopeError(PrBumperError):
    """Base class for version-bump scope problems."""


class InvalidScopeError(ScopeError):
    """The scope token is not a known scope or alias."""


class ScopeExceedsMaximumError(ScopeError):
    """The scope is higher than the configured maximum."""


class NoScopeFoundError(ScopeError):
    """The PR description has no scope marker."""


class TooManyScopesFoundError(ScopeError):
    """The PR description has more than one scope and no single checked one."""


# Changelog


class ChangelogError(PrBumperError):
    """Base class for changelog extraction problems."""


class MultipleChangelogSectionsError(ChangelogError):
    """More than one changelog heading in the PR description."""

    def __init__(self, first_line: int, second_line: int) -> None:
        self.first_line = first_line
        self.second_line = second_line
        super().__init__(
            f"Multiple changelog sections found. Line {first_line} and line {second_line}."
        )


class NoChangelogContentError(ChangelogError):
    """No changelog heading, or nothing below it."""


# Project files


class ProjectError(PrBumperError):
    """Problem reading or updating project files."""


class VersionNotFoundError(ProjectError):
    """No version could be located in the project manifest."""


class CoverageError(PrBumperError):
    """Coverage information is missing or has dropped."""


# Collaborators


class GitError(PrBumperError):
    """A git command failed."""

    def __init__(self, message: str, stderr: str | None = None) -> None:
        self.stderr = stderr
        if stderr:
            message = f"{message}\n{stderr.strip()}"
        super().__init__(message)


class VcsError(PrBumperError):
    """The VCS API returned an error response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class CiError(PrBumperError):
    """Unknown or misconfigured CI/VCS provider."""


class BumpCancelledError(PrBumperError):
    """The bump was skipped because the last commit came from pr-bumper."""
