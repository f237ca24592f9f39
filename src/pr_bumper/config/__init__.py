"""Configuration management for pr-bumper."""

from __future__ import annotations

from pr_bumper.config.loader import OVERRIDE_FILE, load_config, merge_config
from pr_bumper.config.models import (
    DEFAULT_CONFIG,
    FEATURE_NAMES,
    ChangelogFeature,
    CiConfig,
    ComputedConfig,
    FeaturesConfig,
    MaxScopeFeature,
    PrBumperConfig,
    VcsConfig,
    get_path,
    iter_leaves,
)

__all__ = [
    "DEFAULT_CONFIG",
    "FEATURE_NAMES",
    "OVERRIDE_FILE",
    "ChangelogFeature",
    "CiConfig",
    "ComputedConfig",
    "FeaturesConfig",
    "MaxScopeFeature",
    "PrBumperConfig",
    "VcsConfig",
    "get_path",
    "iter_leaves",
    "load_config",
    "merge_config",
]
