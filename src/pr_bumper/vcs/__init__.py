"""Version control system integrations."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pr_bumper.exceptions import CiError
from pr_bumper.vcs.github import GitHub

if TYPE_CHECKING:
    from pr_bumper.config.models import PrBumperConfig

logger = logging.getLogger(__name__)

__all__ = ["GitHub", "get_vcs"]


def get_vcs(config: PrBumperConfig) -> GitHub:
    """Create the VCS client for ``vcs.provider``.

    Raises:
        CiError: If the provider is not supported
    """
    provider = config.vcs.provider
    logger.info("Detected VCS provider: %s", provider)

    if provider in ("github", "github-enterprise"):
        return GitHub(config)

    raise CiError(f"Invalid vcs provider: [{provider}]")
