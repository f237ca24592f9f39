"""pyproject.toml access.

pyproject.toml is the project manifest pr-bumper works with: it holds the
version that gets bumped and, under ``[tool.pr-bumper]``, the baseline
coverage recorded by the last bump.

Updates preserve formatting and comments by using regex-based
replacement rather than full TOML parsing and rewriting.
"""

from __future__ import annotations

import logging
import re
import tomllib
from pathlib import Path

from pr_bumper.exceptions import ProjectError, VersionNotFoundError

logger = logging.getLogger(__name__)

PYPROJECT = "pyproject.toml"
TOOL_SECTION = "pr-bumper"

_VERSION_LINE = r'^(version\s*=\s*)["\'][^"\']+["\']'


def _resolve(path: Path | None) -> Path:
    if path is None:
        return Path.cwd() / PYPROJECT
    if path.is_dir():
        return path / PYPROJECT
    return path


def get_pyproject_version(path: Path | None = None) -> str:
    """Get the version from pyproject.toml.

    Args:
        path: Path to pyproject.toml or the directory holding it

    Returns:
        Version string

    Raises:
        ProjectError: If pyproject.toml does not exist
        VersionNotFoundError: If version cannot be found
    """
    pyproject_path = _resolve(path)
    if not pyproject_path.is_file():
        raise ProjectError(f"{pyproject_path} not found")

    content = pyproject_path.read_text()

    # Try PEP 621 format first: [project] version = "..."
    pep621_match = re.search(
        r'^\[project\].*?^version\s*=\s*["\']([^"\']+)["\']',
        content,
        re.MULTILINE | re.DOTALL,
    )
    if pep621_match:
        return pep621_match.group(1)

    # Try Poetry format: [tool.poetry] version = "..."
    poetry_match = re.search(
        r'^\[tool\.poetry\].*?^version\s*=\s*["\']([^"\']+)["\']',
        content,
        re.MULTILINE | re.DOTALL,
    )
    if poetry_match:
        return poetry_match.group(1)

    raise VersionNotFoundError(
        f"Could not find version in {pyproject_path}. "
        "Expected [project].version or [tool.poetry].version."
    )


def _replace_in_section(content: str, header: str, pattern: str, replacement: str) -> str:
    """Replace the first ``pattern`` match inside the ``[header]`` section."""

    def replace(match: re.Match[str]) -> str:
        return re.sub(pattern, replacement, match.group(0), count=1, flags=re.MULTILINE)

    section_pattern = rf"^\[{re.escape(header)}\].*?(?=^\[|\Z)"
    return re.sub(section_pattern, replace, content, count=1, flags=re.MULTILINE | re.DOTALL)


def update_pyproject_version(path: Path | None, new_version: str) -> Path:
    """Update the version in pyproject.toml.

    Args:
        path: Path to pyproject.toml or the directory holding it
        new_version: New version string to set

    Returns:
        Path to the updated pyproject.toml

    Raises:
        VersionNotFoundError: If version cannot be found
        ProjectError: If the file is missing or the version did not change
    """
    pyproject_path = _resolve(path)
    if not pyproject_path.is_file():
        raise ProjectError(f"{pyproject_path} not found")

    content = pyproject_path.read_text()
    replacement = rf'\g<1>"{new_version}"'

    new_content = content
    for header in ("project", "tool.poetry"):
        new_content = _replace_in_section(content, header, _VERSION_LINE, replacement)
        if new_content != content:
            break

    if new_content == content:
        # Distinguish "no version at all" from "already at new_version"
        get_pyproject_version(pyproject_path)
        raise ProjectError(
            f"Version in {pyproject_path} was not updated. It may already be {new_version}."
        )

    pyproject_path.write_text(new_content)
    logger.info("Updated version in %s to %s", pyproject_path, new_version)
    return pyproject_path


def get_baseline_coverage(path: Path | None = None) -> float | None:
    """Read ``[tool.pr-bumper] coverage`` from pyproject.toml.

    Returns:
        The recorded coverage, or None when the file, section or key is
        missing (or the file cannot be parsed)
    """
    pyproject_path = _resolve(path)
    try:
        with pyproject_path.open("rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return None
    except tomllib.TOMLDecodeError as e:
        logger.info("Unable to parse %s, ignoring baseline coverage: %s", pyproject_path, e)
        return None

    coverage = data.get("tool", {}).get(TOOL_SECTION, {}).get("coverage")
    if isinstance(coverage, bool) or not isinstance(coverage, int | float):
        return None
    return float(coverage)


def update_baseline_coverage(path: Path | None, coverage: float) -> Path:
    """Record ``coverage`` under ``[tool.pr-bumper]`` in pyproject.toml.

    The key (and the section) are added when missing.

    Raises:
        ProjectError: If pyproject.toml does not exist
    """
    pyproject_path = _resolve(path)
    if not pyproject_path.is_file():
        raise ProjectError(f"{pyproject_path} not found")

    content = pyproject_path.read_text()
    header = f"tool.{TOOL_SECTION}"
    line = f"coverage = {coverage}"

    if re.search(rf"^\[{re.escape(header)}\]", content, re.MULTILINE) is None:
        if content and not content.endswith("\n"):
            content += "\n"
        separator = "\n" if content else ""
        new_content = f"{content}{separator}[{header}]\n{line}\n"
    else:
        new_content = _replace_in_section(content, header, r"^coverage\s*=\s*[0-9.eE+-]+", line)
        # Section exists without a coverage key
        if new_content == content and get_baseline_coverage(pyproject_path) != coverage:
            new_content = re.sub(
                rf"^(\[{re.escape(header)}\]\n)",
                rf"\g<1>{line}\n",
                content,
                count=1,
                flags=re.MULTILINE,
            )

    pyproject_path.write_text(new_content)
    logger.info("Updated baseline coverage in %s to %s", pyproject_path, coverage)
    return pyproject_path
