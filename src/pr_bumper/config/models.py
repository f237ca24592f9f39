"""Configuration models for pr-bumper.

The models mirror the layout of ``.pr-bumper.json``: keys are camelCase in
JSON and snake_case on the Python side. Every model is frozen, so the
defaults (and any merged configuration) cannot be changed in place.

The configuration has three zones:

- static settings (``ci``, ``features``, ``vcs``) that may be overridden
- environment mappings (``ci.env``, ``vcs.env``) naming the environment
  variables to read
- the ``computed`` zone, always derived from the environment by the loader
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from pr_bumper.core.scope import SCOPE_ALIASES
from pr_bumper.exceptions import UnknownFeatureError


class _ConfigModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# CI


class CiEnv(_ConfigModel):
    """Names of the environment variables provided by the CI system."""

    branch: str = "TRAVIS_BRANCH"
    build_number: str = "TRAVIS_BUILD_NUMBER"
    pr: str = "TRAVIS_PULL_REQUEST"
    repo_slug: str = "TRAVIS_REPO_SLUG"


class GitUser(_ConfigModel):
    """Identity used for the automated commits."""

    email: str = "travis.ci.ciena@gmail.com"
    name: str = "Travis CI"


class CiConfig(_ConfigModel):
    env: CiEnv = Field(default_factory=CiEnv)
    git_user: GitUser = Field(default_factory=GitUser)
    provider: str = "travis"


# Computed


class ComputedCi(_ConfigModel):
    build_number: str = ""
    branch: str = ""
    is_pr: bool = False
    pr_number: str = ""


class VcsAuth(_ConfigModel):
    """Credentials resolved from the environment."""

    username: str | None = ""
    password: str | None = ""
    read_token: str | None = None
    write_token: str | None = None


class ComputedVcs(_ConfigModel):
    auth: VcsAuth = Field(default_factory=VcsAuth)


class ComputedConfig(_ConfigModel):
    """Values derived once per run. Never read from the override file."""

    baseline_coverage: float = 0
    ci: ComputedCi = Field(default_factory=ComputedCi)
    vcs: ComputedVcs = Field(default_factory=ComputedVcs)


# Features


class ChangelogFeature(_ConfigModel):
    enabled: bool = False
    file: str = "CHANGELOG.md"


class CommentsFeature(_ConfigModel):
    enabled: bool = False


class ComplianceOutput(_ConfigModel):
    directory: str | None = None
    ignore_file: str = "ignore"
    repos_file: str = "repos"
    requirements_file: str = "requirements.json"


class ComplianceFeature(_ConfigModel):
    additional_repos: tuple[str, ...] = ()
    enabled: bool = False
    production: bool = False
    output: ComplianceOutput = Field(default_factory=ComplianceOutput)


class CoverageFeature(_ConfigModel):
    enabled: bool = False
    file: str = "coverage.json"


class DependenciesFeature(_ConfigModel):
    enabled: bool = False
    snapshot_file: str = "dependency-snapshot.json"


class MaxScopeFeature(_ConfigModel):
    enabled: bool = False
    value: str = "major"

    @field_validator("value")
    @classmethod
    def validate_value(cls, v: str) -> str:
        """Only known scopes (or their aliases) can be a ceiling."""
        if v.lower() not in SCOPE_ALIASES:
            raise ValueError(f"unknown scope {v!r}, expected one of {sorted(SCOPE_ALIASES)}")
        return v.lower()


class FeaturesConfig(_ConfigModel):
    changelog: ChangelogFeature = Field(default_factory=ChangelogFeature)
    comments: CommentsFeature = Field(default_factory=CommentsFeature)
    compliance: ComplianceFeature = Field(default_factory=ComplianceFeature)
    coverage: CoverageFeature = Field(default_factory=CoverageFeature)
    dependencies: DependenciesFeature = Field(default_factory=DependenciesFeature)
    max_scope: MaxScopeFeature = Field(default_factory=MaxScopeFeature)


# VCS


class VcsEnv(_ConfigModel):
    """Names of the environment variables holding VCS credentials."""

    password: str = ""
    read_token: str = "RO_GH_TOKEN"
    username: str = ""
    write_token: str = "GITHUB_TOKEN"


class RepositoryConfig(_ConfigModel):
    name: str = ""
    owner: str = ""


class VcsConfig(_ConfigModel):
    domain: str = "github.com"
    env: VcsEnv = Field(default_factory=VcsEnv)
    provider: str = "github"
    repository: RepositoryConfig = Field(default_factory=RepositoryConfig)


class PrBumperConfig(_ConfigModel):
    """Complete pr-bumper configuration."""

    ci: CiConfig = Field(default_factory=CiConfig)
    computed: ComputedConfig = Field(default_factory=ComputedConfig)
    features: FeaturesConfig = Field(default_factory=FeaturesConfig)
    vcs: VcsConfig = Field(default_factory=VcsConfig)

    def is_enabled(self, feature_name: str) -> bool:
        """Check if the given feature is enabled.

        Args:
            feature_name: Feature name as used in ``.pr-bumper.json``
                (e.g. ``"changelog"`` or ``"maxScope"``)

        Returns:
            The feature's ``enabled`` flag

        Raises:
            UnknownFeatureError: If the feature is not a known feature
        """
        field_name = _field_for_alias(FeaturesConfig, feature_name)
        if field_name is None:
            raise UnknownFeatureError(feature_name)
        return getattr(self.features, field_name).enabled

    @property
    def max_scope(self) -> str:
        """The scope ceiling in effect (``major`` unless maxScope is enabled)."""
        if self.features.max_scope.enabled:
            return self.features.max_scope.value
        return "major"

    def with_comments_disabled(self) -> PrBumperConfig:
        """Return a copy with the comments feature turned off."""
        features = self.features.model_copy(update={"comments": CommentsFeature(enabled=False)})
        return self.model_copy(update={"features": features})


FEATURE_NAMES: tuple[str, ...] = tuple(
    info.alias or name for name, info in FeaturesConfig.model_fields.items()
)

DEFAULT_CONFIG = PrBumperConfig()


def _field_for_alias(model: type[BaseModel], key: str) -> str | None:
    for name, info in model.model_fields.items():
        if key == (info.alias or name):
            return name
    return None


def iter_leaves(model: BaseModel, prefix: str = "") -> Iterator[tuple[str, Any]]:
    """Yield ``(dotted.path, value)`` for every leaf of a config model.

    Paths use the JSON (camelCase) key names. Nested models are walked;
    tuples and scalars are leaves.
    """
    for name, info in type(model).model_fields.items():
        key = info.alias or name
        path = f"{prefix}.{key}" if prefix else key
        value = getattr(model, name)
        if isinstance(value, BaseModel):
            yield from iter_leaves(value, path)
        else:
            yield path, value


def get_path(model: BaseModel, path: str) -> Any:
    """Read the value at a dotted camelCase path.

    Raises:
        KeyError: If any segment of the path is not a config key
    """
    value: Any = model
    for key in path.split("."):
        if not isinstance(value, BaseModel):
            raise KeyError(path)
        field_name = _field_for_alias(type(value), key)
        if field_name is None:
            raise KeyError(path)
        value = getattr(value, field_name)
    return value
