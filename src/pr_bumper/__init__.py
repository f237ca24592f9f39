"""pr-bumper: semantic version bumps driven by pull request descriptions."""

from __future__ import annotations

__version__ = "0.1.0"
