"""
Pytest configuration and shared fixtures for distrolog tests.

This module provides reusable fixtures and test utilities used across
the test suite.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
import yaml

from distrolog.artifacts import ArtifactBundle
from distrolog.changelog.models import CommitRef, PullRequest
from distrolog.exceptions import NetworkError
from distrolog.logging import SilentLogger, set_global_logger

FIXTURES = Path(__file__).parent / "fixtures"

K3S_VERSION = "v1.27.3+k3s1"
RKE2_VERSION = "v1.27.3+rke2r1"
RAW = "https://raw.githubusercontent.com"


@pytest.fixture(autouse=True)
def silent_logger() -> Iterator[None]:
    """Restore the silent global logger after every test."""
    yield
    set_global_logger(SilentLogger())


@pytest.fixture
def fixtures_dir() -> Path:
    """Provide path to test fixtures directory."""
    return FIXTURES


@pytest.fixture
def k3s_bundle() -> ArtifactBundle:
    """Provide the artifacts of a k3s release, read from fixtures."""
    return ArtifactBundle(
        dockerfile=(FIXTURES / "k3s" / "Dockerfile.dapper").read_bytes(),
        image_list=(FIXTURES / "k3s" / "image-list.txt").read_bytes(),
        mod_file=(FIXTURES / "k3s" / "go.mod").read_bytes(),
        version_script=(FIXTURES / "k3s" / "version.sh").read_bytes(),
        sqlite_binding=(FIXTURES / "sqlite3-binding.h").read_bytes(),
    )


@pytest.fixture
def rke2_bundle() -> ArtifactBundle:
    """Provide the artifacts of an RKE2 release, read from fixtures."""
    return ArtifactBundle(
        dockerfile=(FIXTURES / "rke2" / "Dockerfile").read_bytes(),
        image_list=(FIXTURES / "rke2" / "build-images").read_bytes(),
        mod_file=(FIXTURES / "rke2" / "go.mod").read_bytes(),
        version_script=(FIXTURES / "rke2" / "version.sh").read_bytes(),
    )


@pytest.fixture
def artifact_urls() -> dict[str, bytes]:
    """
    Provide raw artifact URLs mapped to fixture content.

    Covers both product lines at K3S_VERSION / RKE2_VERSION, plus the
    go-sqlite3 binding header pinned by the k3s go.mod.
    """
    return {
        f"{RAW}/k3s-io/k3s/{K3S_VERSION}/Dockerfile.dapper": (
            FIXTURES / "k3s" / "Dockerfile.dapper"
        ).read_bytes(),
        f"{RAW}/k3s-io/k3s/{K3S_VERSION}/scripts/airgap/image-list.txt": (
            FIXTURES / "k3s" / "image-list.txt"
        ).read_bytes(),
        f"{RAW}/k3s-io/k3s/{K3S_VERSION}/scripts/version.sh": (
            FIXTURES / "k3s" / "version.sh"
        ).read_bytes(),
        f"{RAW}/k3s-io/k3s/{K3S_VERSION}/go.mod": (FIXTURES / "k3s" / "go.mod").read_bytes(),
        f"{RAW}/mattn/go-sqlite3/v1.14.17/sqlite3-binding.h": (
            FIXTURES / "sqlite3-binding.h"
        ).read_bytes(),
        f"{RAW}/rancher/rke2/{RKE2_VERSION}/Dockerfile": (
            FIXTURES / "rke2" / "Dockerfile"
        ).read_bytes(),
        f"{RAW}/rancher/rke2/{RKE2_VERSION}/scripts/build-images": (
            FIXTURES / "rke2" / "build-images"
        ).read_bytes(),
        f"{RAW}/rancher/rke2/{RKE2_VERSION}/scripts/version.sh": (
            FIXTURES / "rke2" / "version.sh"
        ).read_bytes(),
        f"{RAW}/rancher/rke2/{RKE2_VERSION}/go.mod": (FIXTURES / "rke2" / "go.mod").read_bytes(),
    }


class FakeFetcher:
    """In-memory artifact fetcher recording every requested URL."""

    def __init__(self, content: dict[str, bytes]) -> None:
        self.content = content
        self.requested: list[str] = []

    def __call__(self, url: str) -> bytes:
        self.requested.append(url)
        if url not in self.content:
            raise NetworkError(f"download failed for {url}: 404 Not Found")
        return self.content[url]


@pytest.fixture
def fake_fetcher(artifact_urls: dict[str, bytes]) -> FakeFetcher:
    """Provide a FakeFetcher serving the fixture artifacts."""
    return FakeFetcher(artifact_urls)


class FakeGitHub:
    """
    In-memory stand-in for GitHubClient.

    Args:
        pulls: Commit SHA to the pull requests containing it. SHAs that are
            not listed have no pull requests.
        commits: Commits returned by compare_commits.
        fail_on: SHA whose pull request query raises NetworkError.
    """

    def __init__(
        self,
        pulls: dict[str, list[PullRequest]] | None = None,
        commits: list[CommitRef] | None = None,
        fail_on: str | None = None,
    ) -> None:
        self.pulls = pulls or {}
        self.commits = commits or []
        self.fail_on = fail_on
        self.queries: list[tuple[str, str, str]] = []
        self.compares: list[tuple[str, str, str, str]] = []

    def list_pull_requests_with_commit(
        self, organization: str, repository: str, sha: str
    ) -> list[PullRequest]:
        self.queries.append((organization, repository, sha))
        if sha == self.fail_on:
            raise NetworkError(f"GitHub API request failed: 500 for {sha}")
        return list(self.pulls.get(sha, []))

    def compare_commits(
        self, organization: str, repository: str, base: str, head: str
    ) -> list[CommitRef]:
        self.compares.append((organization, repository, base, head))
        return list(self.commits)


def make_pr(number: int, title: str = "", body: str = "") -> PullRequest:
    """Build a PullRequest with a github.com URL for ``number``."""
    return PullRequest(
        number=number,
        title=title or f"Change {number}",
        body=body,
        html_url=f"https://github.com/k3s-io/k3s/pull/{number}",
    )


@pytest.fixture
def create_yaml_file(tmp_path: Path):
    """
    Factory fixture for creating temporary YAML files.

    Usage:
        yaml_path = create_yaml_file("config.yaml", {"key": "value"})
    """

    def _create(filename: str, data: Any) -> Path:
        path = tmp_path / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.dump(data, f)
        return path

    return _create
