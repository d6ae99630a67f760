# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""The per-release aggregate for distrolog.

A Repo binds one product release to its artifacts and to the commits
between the previous milestone and this one. It is the entry point for
everything a changelog needs: component versions and correlated issues.

Example:
    ```python
    from distrolog.changelog.repo import make_repo
    from distrolog.github import GitHubClient

    client = GitHubClient()
    repo = make_repo(client, "k3s-io", "k3s", "v1.27.2+k3s1", "v1.27.3+k3s1")
    print(repo.component("kine").version)
    for issue in repo.issues(client):
        print(issue.number, issue.title)
    ```
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

from distrolog.artifacts.bundle import ArtifactBundle
from distrolog.artifacts.sources import Fetcher, ProductLine, fetch_bundle
from distrolog.changelog import components as _components
from distrolog.changelog.issues import PullRequestSource, collect_issues
from distrolog.changelog.models import CommitRef, Component, Issue
from distrolog.exceptions import MissingArgumentError
from distrolog.io import DEFAULT_TIMEOUT
from distrolog.logging import get_global_logger


class CommitSource(Protocol):
    """Anything that can list the commits between two refs."""

    def compare_commits(
        self, organization: str, repository: str, base: str, head: str
    ) -> list[CommitRef]:
        ...


@dataclass
class Repo:
    """One product release and the commits that produced it.

    Attributes:
        product: Product line (also the GitHub repository name).
        organization: GitHub organization owning the repository.
        version: Release tag (the milestone).
        commits: Commits between the previous milestone and this one.
        files: Artifacts of the release.

    """

    product: ProductLine
    organization: str
    version: str
    commits: list[CommitRef] = field(default_factory=list)
    files: ArtifactBundle = field(default_factory=ArtifactBundle)

    def component(self, name: str) -> Component:
        """Resolve a single component by name.

        Raises:
            ConfigError: If no resolver is registered under ``name``.
            NotFoundError: If the component's key is missing from its artifact.
            ParseError: If go.mod cannot be parsed.
            InvalidVersionError: If the resolved version cannot build its URL.
        """
        return _components.get_resolver(name)(self.product, self.files)

    def components(self, names: Sequence[str] | None = None) -> list[Component]:
        """Resolve several components, in registry order by default.

        The first failing component aborts the call; callers that want a
        best-effort listing should call component() per name.
        """
        if names is None:
            names = _components.component_names()
        return [self.component(name) for name in names]

    def cnis(self) -> list[Component]:
        return _components.cnis(self.product, self.files)

    def issues(self, source: PullRequestSource) -> list[Issue]:
        """Correlate this release's commits with their pull requests."""
        return collect_issues(self.commits, source, self.organization, self.product.value)


def make_repo(
    client: CommitSource,
    organization: str,
    name: str,
    previous_milestone: str,
    milestone: str,
    *,
    fetch: Fetcher | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Repo:
    """Build the Repo for ``milestone`` of product ``name``.

    Args:
        client: Commit comparison source (e.g., GitHubClient).
        organization: GitHub organization (e.g., "rancher").
        name: Product line name, also the repository name ("k3s" or "rke2").
        previous_milestone: Tag of the previous release.
        milestone: Tag of the release being described.
        fetch: Optional artifact fetcher (URL -> bytes).
        timeout: Per-request timeout for the default fetcher.

    Raises:
        MissingArgumentError: If either milestone is empty.
        UnsupportedProductError: If ``name`` is not a known product line.
        NetworkError: If the comparison or any artifact retrieval fails.
    """
    if not milestone:
        raise MissingArgumentError("milestone is required")
    if not previous_milestone:
        raise MissingArgumentError("previous milestone is required")

    product = ProductLine.from_name(name)
    commits = client.compare_commits(organization, name, previous_milestone, milestone)
    get_global_logger().verbose(
        "REPO", f"{name} {previous_milestone}...{milestone}: {len(commits)} commits"
    )
    files = fetch_bundle(product, milestone, fetch=fetch, timeout=timeout)
    return Repo(
        product=product,
        organization=organization,
        version=milestone,
        commits=commits,
        files=files,
    )
