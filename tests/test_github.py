"""
Tests for distrolog.github module.

Tests the GitHub REST API client including:
- Token handling (argument, environment, ${VAR} expansion)
- Compare pagination
- Pull requests for a commit
- Error mapping to NetworkError
"""

from __future__ import annotations

import pytest
import requests
import requests_mock

from distrolog.changelog.models import CommitRef, PullRequest
from distrolog.exceptions import NetworkError
from distrolog.github import GitHubClient, expand_env

API = "https://api.github.com"
COMPARE_URL = f"{API}/repos/k3s-io/k3s/compare/v1.0.0...v1.1.0"
PULLS_URL = f"{API}/repos/k3s-io/k3s/commits/abc123/pulls"


def _commit(sha: str, message: str = "") -> dict:
    return {"sha": sha, "commit": {"message": message or f"commit {sha}"}}


class TestToken:
    """Tests for token resolution."""

    def test_explicit_token_sent(self):
        client = GitHubClient(token="secret")

        with requests_mock.Mocker() as m:
            m.get(PULLS_URL, json=[])
            client.list_pull_requests_with_commit("k3s-io", "k3s", "abc123")

            assert m.last_request.headers["Authorization"] == "token secret"

    def test_env_reference_expanded(self, monkeypatch):
        monkeypatch.setenv("DISTROLOG_TEST_TOKEN", "from-env")
        client = GitHubClient(token="${DISTROLOG_TEST_TOKEN}")

        with requests_mock.Mocker() as m:
            m.get(PULLS_URL, json=[])
            client.list_pull_requests_with_commit("k3s-io", "k3s", "abc123")

            assert m.last_request.headers["Authorization"] == "token from-env"

    def test_unset_env_reference_means_anonymous(self, monkeypatch):
        monkeypatch.delenv("DISTROLOG_TEST_TOKEN", raising=False)
        client = GitHubClient(token="${DISTROLOG_TEST_TOKEN}")

        with requests_mock.Mocker() as m:
            m.get(PULLS_URL, json=[])
            client.list_pull_requests_with_commit("k3s-io", "k3s", "abc123")

            assert "Authorization" not in m.last_request.headers

    def test_default_token_from_environment(self, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "gh-env")
        client = GitHubClient()

        with requests_mock.Mocker() as m:
            m.get(PULLS_URL, json=[])
            client.list_pull_requests_with_commit("k3s-io", "k3s", "abc123")

            assert m.last_request.headers["Authorization"] == "token gh-env"

    def test_expand_env(self, monkeypatch):
        monkeypatch.setenv("DISTROLOG_TEST_VALUE", "x")
        assert expand_env("${DISTROLOG_TEST_VALUE}") == "x"
        assert expand_env("plain") == "plain"
        assert expand_env(None) is None


class TestCompareCommits:
    """Tests for compare_commits."""

    def test_single_page(self):
        client = GitHubClient(token="t")

        with requests_mock.Mocker() as m:
            m.get(
                COMPARE_URL,
                json={"total_commits": 2, "commits": [_commit("a", "first"), _commit("b")]},
            )
            commits = client.compare_commits("k3s-io", "k3s", "v1.0.0", "v1.1.0")

        assert commits == [CommitRef("a", "first"), CommitRef("b", "commit b")]

    def test_pages_until_total(self):
        """Test that pages are requested until total_commits are read."""
        client = GitHubClient(token="t")
        first = [_commit(f"a{i}") for i in range(100)]
        second = [_commit("b0"), _commit("b1")]

        with requests_mock.Mocker() as m:
            m.get(
                COMPARE_URL,
                [
                    {"json": {"total_commits": 102, "commits": first}},
                    {"json": {"total_commits": 102, "commits": second}},
                ],
            )
            commits = client.compare_commits("k3s-io", "k3s", "v1.0.0", "v1.1.0")

            assert m.call_count == 2
            assert m.request_history[0].qs == {"per_page": ["100"], "page": ["1"]}
            assert m.request_history[1].qs == {"per_page": ["100"], "page": ["2"]}

        assert len(commits) == 102
        assert commits[-1].sha == "b1"

    def test_not_found_raises(self):
        client = GitHubClient(token="t")

        with requests_mock.Mocker() as m:
            m.get(COMPARE_URL, status_code=404)
            with pytest.raises(NetworkError, match="not found"):
                client.compare_commits("k3s-io", "k3s", "v1.0.0", "v1.1.0")


class TestListPullRequests:
    """Tests for list_pull_requests_with_commit."""

    def test_returns_pull_requests(self):
        client = GitHubClient(token="t")

        with requests_mock.Mocker() as m:
            m.get(
                PULLS_URL,
                json=[
                    {
                        "number": 42,
                        "title": "[release-1.27] Bump kine",
                        "body": None,
                        "html_url": "https://github.com/k3s-io/k3s/pull/42",
                    }
                ],
            )
            prs = client.list_pull_requests_with_commit("k3s-io", "k3s", "abc123")

        assert prs == [
            PullRequest(
                number=42,
                title="[release-1.27] Bump kine",
                body="",
                html_url="https://github.com/k3s-io/k3s/pull/42",
            )
        ]

    def test_rate_limit_raises(self):
        client = GitHubClient(token="t")

        with requests_mock.Mocker() as m:
            m.get(PULLS_URL, status_code=403)
            with pytest.raises(NetworkError, match="rate limit") as exc_info:
                client.list_pull_requests_with_commit("k3s-io", "k3s", "abc123")

        assert isinstance(exc_info.value.__cause__, requests.exceptions.HTTPError)

    def test_server_error_raises(self):
        client = GitHubClient(token="t")

        with requests_mock.Mocker() as m:
            m.get(PULLS_URL, status_code=500, reason="Internal Server Error")
            with pytest.raises(NetworkError, match="500"):
                client.list_pull_requests_with_commit("k3s-io", "k3s", "abc123")

    def test_connection_error_raises(self):
        client = GitHubClient(token="t")

        with requests_mock.Mocker() as m:
            m.get(PULLS_URL, exc=requests.exceptions.ConnectionError("refused"))
            with pytest.raises(NetworkError, match="refused"):
                client.list_pull_requests_with_commit("k3s-io", "k3s", "abc123")

    def test_custom_api_url(self):
        client = GitHubClient(token="t", api_url="https://ghe.example.com/api/v3/")

        with requests_mock.Mocker() as m:
            m.get("https://ghe.example.com/api/v3/repos/k3s-io/k3s/commits/abc123/pulls", json=[])
            assert client.list_pull_requests_with_commit("k3s-io", "k3s", "abc123") == []
