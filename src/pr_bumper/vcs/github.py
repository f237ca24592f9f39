"""GitHub (and GitHub Enterprise) API client."""

from __future__ import annotations

import logging
import subprocess
from typing import TYPE_CHECKING, Any

import httpx

from pr_bumper.core.pull_request import PullRequest
from pr_bumper.exceptions import GitError, VcsError

if TYPE_CHECKING:
    from pathlib import Path

    from pr_bumper.config.models import PrBumperConfig

logger = logging.getLogger(__name__)

PUSH_REMOTE = "ci-origin"


def api_base_url(domain: str) -> str:
    """Return the REST API root for a GitHub domain."""
    if domain == "github.com":
        return "https://api.github.com"
    return f"https://{domain}/api/v3"


def convert_pr(data: dict[str, Any]) -> PullRequest:
    """Convert a GitHub pull request payload to a PullRequest."""
    return PullRequest(
        number=data["number"],
        url=data["html_url"],
        description=data.get("body") or "",
        head_sha=data.get("head", {}).get("sha", ""),
    )


class GitHub:
    """VCS interface for GitHub."""

    def __init__(self, config: PrBumperConfig, client: httpx.Client | None = None) -> None:
        self.config = config
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=30.0)

    def __enter__(self) -> GitHub:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            self._client.close()

    @property
    def _repo_path(self) -> str:
        repository = self.config.vcs.repository
        return f"/repos/{repository.owner}/{repository.name}"

    def _url(self, path: str) -> str:
        return f"{api_base_url(self.config.vcs.domain)}{self._repo_path}{path}"

    def _headers(self, token: str | None) -> dict[str, str]:
        headers = {"Accept": "application/vnd.github+json"}
        if token:
            headers["Authorization"] = f"token {token}"
        return headers

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if response.is_success:
            return
        try:
            detail = response.json()
        except ValueError:
            detail = response.text
        raise VcsError(f"{response.status_code}: {detail}", status_code=response.status_code)

    def get_pr(self, pr_number: int | str) -> PullRequest:
        """Fetch a pull request.

        Args:
            pr_number: The PR number (e.g. ``31``)

        Returns:
            The pull request

        Raises:
            VcsError: If the API returns an error
        """
        url = self._url(f"/pulls/{pr_number}")
        logger.info("About to send GET to %s", url)

        auth = self.config.computed.vcs.auth
        response = self._client.get(url, headers=self._headers(auth.read_token))
        self._raise_for_status(response)
        return convert_pr(response.json())

    def post_comment(self, pr_number: int | str, comment: str) -> None:
        """Post a comment on a pull request.

        Raises:
            VcsError: If the API returns an error
        """
        url = self._url(f"/issues/{pr_number}/comments")
        logger.info("About to send POST to %s", url)

        auth = self.config.computed.vcs.auth
        response = self._client.post(
            url,
            json={"body": comment},
            headers=self._headers(auth.write_token or auth.read_token),
        )
        self._raise_for_status(response)

    def add_remote_for_push(self, cwd: Path | None = None) -> str:
        """Add a git remote that can be pushed to with the write token.

        Returns:
            Name of the remote
        """
        token = self.config.computed.vcs.auth.write_token
        if not token:
            raise VcsError(f"No write token found in ${self.config.vcs.env.write_token}")

        repository = self.config.vcs.repository
        url = f"https://{token}@{self.config.vcs.domain}/{repository.owner}/{repository.name}"

        logger.info("Adding %s remote", PUSH_REMOTE)
        try:
            subprocess.run(
                ["git", "remote", "add", PUSH_REMOTE, url],
                capture_output=True,
                text=True,
                check=True,
                cwd=cwd,
            )
        except subprocess.CalledProcessError:
            # The url holds the token; keep it out of the message
            raise GitError(f"Unable to add {PUSH_REMOTE} remote") from None
        return PUSH_REMOTE
