"""Continuous integration providers."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pr_bumper.ci.base import CiBase
from pr_bumper.ci.travis import Travis
from pr_bumper.exceptions import CiError

if TYPE_CHECKING:
    from pathlib import Path

    from pr_bumper.config.models import PrBumperConfig
    from pr_bumper.vcs.github import GitHub

logger = logging.getLogger(__name__)

__all__ = ["CiBase", "Travis", "get_ci"]

_PROVIDERS: dict[str, type[CiBase]] = {
    "generic": CiBase,
    "travis": Travis,
}


def get_ci(config: PrBumperConfig, vcs: GitHub, path: Path | None = None) -> CiBase:
    """Create the CI helper for ``ci.provider``.

    Raises:
        CiError: If the provider is not supported
    """
    provider = config.ci.provider
    logger.info("Detected CI provider: %s", provider)

    try:
        ci_class = _PROVIDERS[provider]
    except KeyError:
        raise CiError(f"Invalid ci provider: [{provider}]") from None

    return ci_class(config, vcs, path)
