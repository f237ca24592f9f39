"""Tests for the GitHub client."""

from __future__ import annotations

import json
import subprocess
from unittest.mock import patch

import httpx
import pytest

from pr_bumper.config.loader import merge_config
from pr_bumper.core.pull_request import PullRequest
from pr_bumper.exceptions import CiError, GitError, VcsError
from pr_bumper.vcs import get_vcs
from pr_bumper.vcs.github import GitHub, api_base_url, convert_pr

PR_PAYLOAD = {
    "number": 7,
    "html_url": "https://github.com/octo/widgets/pull/7",
    "body": "#minor#",
    "head": {"sha": "abc123"},
    "base": {"sha": "def456"},
}


def make_github(env: dict[str, str], handler, override: dict | None = None) -> GitHub:
    config = merge_config(override or {}, env)
    return GitHub(config, client=httpx.Client(transport=httpx.MockTransport(handler)))


class TestHelpers:
    """Tests for module-level helpers."""

    def test_api_base_url(self):
        assert api_base_url("github.com") == "https://api.github.com"
        assert api_base_url("git.corp.example") == "https://git.corp.example/api/v3"

    def test_convert_pr(self):
        assert convert_pr(PR_PAYLOAD) == PullRequest(
            number=7,
            url="https://github.com/octo/widgets/pull/7",
            description="#minor#",
            head_sha="abc123",
        )

    def test_convert_pr_null_body(self):
        """A PR without a description has empty text."""
        assert convert_pr({**PR_PAYLOAD, "body": None}).description == ""


class TestGetPr:
    """Tests for GitHub.get_pr()."""

    def test_get_pr(self, merge_env: dict[str, str]):
        """The PR is fetched with the read token."""
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=PR_PAYLOAD)

        pr = make_github(merge_env, handler).get_pr("7")

        assert pr.number == 7
        assert pr.description == "#minor#"
        assert str(requests[0].url) == "https://api.github.com/repos/octo/widgets/pulls/7"
        assert requests[0].headers["Authorization"] == "token read-token"

    def test_get_pr_without_token(self, merge_env: dict[str, str]):
        """No Authorization header without a read token."""
        env = {k: v for k, v in merge_env.items() if k != "RO_GH_TOKEN"}
        seen: dict[str, httpx.Headers] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["headers"] = request.headers
            return httpx.Response(200, json=PR_PAYLOAD)

        make_github(env, handler).get_pr(7)
        assert "Authorization" not in seen["headers"]

    def test_get_pr_enterprise(self, merge_env: dict[str, str]):
        """GitHub Enterprise domains use the /api/v3 root."""
        urls: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            urls.append(str(request.url))
            return httpx.Response(200, json=PR_PAYLOAD)

        make_github(merge_env, handler, {"vcs": {"domain": "git.corp.example"}}).get_pr(7)
        assert urls == ["https://git.corp.example/api/v3/repos/octo/widgets/pulls/7"]

    def test_get_pr_error(self, merge_env: dict[str, str]):
        """Error responses raise VcsError with the status."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"message": "Not Found"})

        with pytest.raises(VcsError, match="404") as exc_info:
            make_github(merge_env, handler).get_pr(7)
        assert exc_info.value.status_code == 404


class TestPostComment:
    """Tests for GitHub.post_comment()."""

    def test_post_comment(self, pr_env: dict[str, str]):
        """The comment body is posted to the issue comments endpoint."""
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(201, json={"id": 1})

        make_github(pr_env, handler).post_comment("7", "## ERROR\nboom")

        request = requests[0]
        assert request.method == "POST"
        assert str(request.url) == "https://api.github.com/repos/octo/widgets/issues/7/comments"
        assert json.loads(request.content) == {"body": "## ERROR\nboom"}
        assert request.headers["Authorization"] == "token write-token"

    def test_post_comment_error(self, pr_env: dict[str, str]):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403, text="forbidden")

        with pytest.raises(VcsError, match="403: forbidden"):
            make_github(pr_env, handler).post_comment("7", "hi")


class TestAddRemoteForPush:
    """Tests for GitHub.add_remote_for_push()."""

    def test_adds_remote(self, merge_env: dict[str, str]):
        github = make_github(merge_env, lambda r: httpx.Response(200))

        with patch("subprocess.run") as mock_run:
            assert github.add_remote_for_push() == "ci-origin"

        args = mock_run.call_args[0][0]
        assert args == [
            "git",
            "remote",
            "add",
            "ci-origin",
            "https://write-token@github.com/octo/widgets",
        ]

    def test_missing_token(self, merge_env: dict[str, str]):
        env = {k: v for k, v in merge_env.items() if k != "GITHUB_TOKEN"}
        github = make_github(env, lambda r: httpx.Response(200))

        with pytest.raises(VcsError, match="GITHUB_TOKEN"):
            github.add_remote_for_push()

    def test_git_failure_hides_token(self, merge_env: dict[str, str]):
        github = make_github(merge_env, lambda r: httpx.Response(200))

        with patch("subprocess.run") as mock_run:
            mock_run.side_effect = subprocess.CalledProcessError(
                128, "git", stderr="remote ci-origin already exists"
            )
            with pytest.raises(GitError) as exc_info:
                github.add_remote_for_push()

        assert "write-token" not in str(exc_info.value)


class TestClose:
    """Tests for GitHub.close()."""

    def test_closes_own_client(self, merge_env: dict[str, str]):
        github = GitHub(merge_config({}, merge_env))
        with github:
            pass
        assert github._client.is_closed

    def test_leaves_given_client_open(self, merge_env: dict[str, str]):
        """A client passed in stays open for its owner."""
        client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        GitHub(merge_config({}, merge_env), client=client).close()
        assert not client.is_closed
        client.close()


class TestGetVcs:
    """Tests for get_vcs()."""

    def test_github(self, merge_env: dict[str, str]):
        assert isinstance(get_vcs(merge_config({}, merge_env)), GitHub)

    def test_unknown_provider(self, merge_env: dict[str, str]):
        config = merge_config({"vcs": {"provider": "bitbucket-server"}}, merge_env)
        with pytest.raises(CiError, match="bitbucket-server"):
            get_vcs(config)
