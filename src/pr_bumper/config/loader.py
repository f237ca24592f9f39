"""Configuration loading and merging.

The final configuration is built from three layers:

1. the defaults in :mod:`pr_bumper.config.models`
2. ``.pr-bumper.json`` at the repository root (optional)
3. the environment, which fills the ``computed`` zone

and finally the baseline coverage recorded in pyproject.toml.
"""

from __future__ import annotations

import copy
import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from pydantic.alias_generators import to_snake

from pr_bumper.config.models import ComputedCi, PrBumperConfig, VcsAuth
from pr_bumper.exceptions import ConfigParseError
from pr_bumper.project.pyproject import get_baseline_coverage

logger = logging.getLogger(__name__)

OVERRIDE_FILE = ".pr-bumper.json"


def get_env(env: Mapping[str, str], key: str, default: str | None = None) -> str | None:
    """Look up ``key`` in ``env``, treating the string "undefined" as unset.

    Args:
        env: Environment mapping (usually ``os.environ``)
        key: Name of the variable; an empty name means "not configured"
        default: Value returned when the variable is unset

    Returns:
        The variable's value, or ``default``
    """
    if not key:
        return default
    value = env.get(key)
    if value is None or value == "undefined":
        return default
    return value


def read_override_file(path: Path) -> dict[str, Any]:
    """Read and parse the override file.

    Raises:
        FileNotFoundError: If the file does not exist
        ConfigParseError: If the file is not a JSON object
    """
    text = path.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigParseError(f"Unable to parse {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigParseError(f"{path} must contain a JSON object")

    return data


def load_override(path: Path) -> dict[str, Any]:
    """Load the override file, falling back to ``{}`` when it is missing or broken."""
    try:
        return read_override_file(path)
    except FileNotFoundError:
        logger.info("No %s found, using defaults", path.name)
    except ConfigParseError as e:
        logger.info("%s, using defaults", e)
    return {}


def _apply_env(config: PrBumperConfig, env: Mapping[str, str]) -> PrBumperConfig:
    ci_env = config.ci.env
    vcs_env = config.vcs.env

    pr_number = get_env(env, ci_env.pr, "false")
    computed_ci = ComputedCi(
        build_number=get_env(env, ci_env.build_number, ""),
        branch=get_env(env, ci_env.branch, "master"),
        is_pr=pr_number != "false",
        pr_number=pr_number,
    )
    logger.info("prNumber [%s], isPr [%s]", computed_ci.pr_number, computed_ci.is_pr)

    auth = VcsAuth(
        username=get_env(env, vcs_env.username),
        password=get_env(env, vcs_env.password),
        read_token=get_env(env, vcs_env.read_token),
        write_token=get_env(env, vcs_env.write_token),
    )

    repository = config.vcs.repository
    repo_slug = get_env(env, ci_env.repo_slug)
    if repo_slug:
        owner, _, name = repo_slug.partition("/")
        repository = repository.model_copy(
            update={
                "owner": repository.owner or owner,
                "name": repository.name or name,
            }
        )

    computed = config.computed.model_copy(
        update={
            "ci": computed_ci,
            "vcs": config.computed.vcs.model_copy(update={"auth": auth}),
        }
    )
    vcs = config.vcs.model_copy(update={"repository": repository})

    return config.model_copy(update={"computed": computed, "vcs": vcs})


def _drop_invalid(data: dict[str, Any], errors: list[Any]) -> list[str]:
    """Remove the override entries named by pydantic ``errors``.

    The whole entry is removed when an error points inside a list.

    Returns:
        Dotted paths of the removed entries
    """
    dropped = []
    for error in errors:
        node: Any = data
        path: list[str] = []
        for key in error["loc"]:
            if not isinstance(node, dict):
                break
            name = key if key in node else to_snake(str(key))
            if name not in node:
                break
            path.append(str(name))
            if not isinstance(node[name], dict) or len(path) == len(error["loc"]):
                del node[name]
                dropped.append(".".join(path))
                break
            node = node[name]
    return dropped


def _validate_override(data: dict[str, Any]) -> PrBumperConfig:
    """Validate ``data``, using the default for every invalid value."""
    while True:
        try:
            return PrBumperConfig.model_validate(data)
        except ValidationError as e:
            dropped = _drop_invalid(data, e.errors())
            if not dropped:
                logger.warning("Ignoring invalid %s, using defaults:\n%s", OVERRIDE_FILE, e)
                return PrBumperConfig()
            logger.warning(
                "Ignoring invalid values in %s, using defaults for: %s",
                OVERRIDE_FILE,
                ", ".join(dropped),
            )


def merge_config(
    override: Mapping[str, Any] | None,
    env: Mapping[str, str],
    baseline_coverage: float | None = None,
) -> PrBumperConfig:
    """Build the configuration for one run.

    Keys present in ``override`` win over the defaults, object by object;
    everything else keeps its default. The ``computed`` zone is always
    derived from ``env`` and is dropped from ``override``.

    Args:
        override: Parsed ``.pr-bumper.json`` content
        env: Environment mapping
        baseline_coverage: Coverage recorded in the project manifest

    Returns:
        The merged configuration
    """
    data = copy.deepcopy(dict(override or {}))
    if "computed" in data:
        logger.warning("Ignoring 'computed' in %s, it is derived from the environment", OVERRIDE_FILE)
        del data["computed"]

    config = _validate_override(data)
    config = _apply_env(config, env)

    if baseline_coverage is not None:
        computed = config.computed.model_copy(update={"baseline_coverage": baseline_coverage})
        config = config.model_copy(update={"computed": computed})

    return config


def load_config(
    project_path: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> PrBumperConfig:
    """Load the configuration for the project at ``project_path``.

    Args:
        project_path: Repository root (defaults to the current directory)
        env: Environment mapping (defaults to ``os.environ``)

    Returns:
        The merged configuration
    """
    project_path = project_path or Path.cwd()
    override = load_override(project_path / OVERRIDE_FILE)
    coverage = get_baseline_coverage(project_path)
    return merge_config(override, os.environ if env is None else env, coverage)
