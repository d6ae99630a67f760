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

"""Core orchestration for distrolog.

This module coordinates configuration, artifact retrieval, component
resolution and issue correlation for the CLI and other callers.

Design Principles:

- Library modules raise; this layer decides what a partial result is
- Each component is resolved independently, so one unreadable artifact
  does not hide the other components (the failure is recorded in
  ``errors`` and the component is reported without a version)
- Retrieval and correlation failures abort the whole operation
- Functions return frozen dataclasses from distrolog.results

Example:
    Programmatic usage:
        ```python
        from distrolog.core import generate_changelog

        result = generate_changelog("rke2", "v1.27.2+rke2r1", "v1.27.3+rke2r1")
        for component in result.components:
            print(component.name, component.link or "N/A")
        for issue in result.issues:
            print(f"#{issue.number} {issue.title}")
        ```

"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from distrolog.artifacts.bundle import ArtifactBundle
from distrolog.artifacts.sources import Fetcher, ProductLine, fetch_bundle
from distrolog.changelog.components import component_names, get_resolver
from distrolog.changelog.models import Component
from distrolog.changelog.repo import make_repo
from distrolog.config import load_config
from distrolog.exceptions import ConfigError, DistrologError
from distrolog.github import GitHubClient
from distrolog.logging import get_global_logger
from distrolog.results import ChangelogResult, VersionsResult


def _resolve_all(
    product: ProductLine, bundle: ArtifactBundle, names: Sequence[str]
) -> tuple[list[Component], dict[str, str]]:
    """Resolve each component, recording failures instead of aborting."""
    logger = get_global_logger()
    components: list[Component] = []
    errors: dict[str, str] = {}
    for name in names:
        resolver = get_resolver(name)
        try:
            components.append(resolver(product, bundle))
        except DistrologError as err:
            logger.verbose("COMPONENT", f"{name}: {err}")
            errors[name] = str(err)
            components.append(Component(name))
    return components, errors


def _organization(config: dict[str, Any], product: ProductLine) -> str:
    try:
        return config["products"][product.value]["organization"]
    except (KeyError, TypeError) as err:
        raise ConfigError(
            f"no organization configured for product {product.value!r}"
        ) from err


def make_client(config: dict[str, Any]) -> GitHubClient:
    """Create a GitHubClient from the 'github' section of a loaded config."""
    github = config.get("github") or {}
    return GitHubClient(
        token=github.get("token"),
        api_url=github.get("api_url") or "https://api.github.com",
    )


def resolve_versions(
    product: str,
    version: str,
    *,
    names: Sequence[str] | None = None,
    config: dict[str, Any] | None = None,
    fetch: Fetcher | None = None,
) -> VersionsResult:
    """Fetch the artifacts of a release and resolve its component versions.

    Args:
        product: Product line name ("k3s" or "rke2").
        version: Release tag (e.g., "v1.27.3+k3s1").
        names: Components to resolve. Defaults to every registered component.
        config: Loaded configuration. Defaults to load_config().
        fetch: Optional artifact fetcher (URL -> bytes), mainly for tests.

    Returns:
        VersionsResult with one Component per requested name.

    Raises:
        UnsupportedProductError: If ``product`` is unknown.
        ConfigError: If a requested component name is not registered.
        NetworkError: If any artifact retrieval fails.
    """
    logger = get_global_logger()
    config = config if config is not None else load_config()
    line = ProductLine.from_name(product)
    names = list(names) if names is not None else component_names()
    for name in names:
        get_resolver(name)

    logger.step(1, 2, "Fetching release artifacts...")
    bundle = fetch_bundle(line, version, fetch=fetch, timeout=config["http"]["timeout"])

    logger.step(2, 2, "Resolving component versions...")
    components, errors = _resolve_all(line, bundle, names)
    return VersionsResult(
        product=line.value, version=version, components=components, errors=errors
    )


def generate_changelog(
    product: str,
    previous_milestone: str,
    milestone: str,
    *,
    names: Sequence[str] | None = None,
    config: dict[str, Any] | None = None,
    client: GitHubClient | None = None,
    fetch: Fetcher | None = None,
) -> ChangelogResult:
    """Collect the component versions and issues of a release.

    Args:
        product: Product line name ("k3s" or "rke2").
        previous_milestone: Tag of the previous release.
        milestone: Tag of the release being described.
        names: Components to resolve. Defaults to every registered component.
        config: Loaded configuration. Defaults to load_config().
        client: GitHub client. Defaults to one built from ``config``.
        fetch: Optional artifact fetcher (URL -> bytes), mainly for tests.

    Raises:
        MissingArgumentError: If either milestone is empty.
        UnsupportedProductError: If ``product`` is unknown.
        ConfigError: If the product has no organization configured.
        NetworkError: If the comparison, an artifact, or a PR query fails.
    """
    logger = get_global_logger()
    config = config if config is not None else load_config()
    line = ProductLine.from_name(product)
    organization = _organization(config, line)
    client = client or make_client(config)
    names = list(names) if names is not None else component_names()

    logger.step(1, 3, "Comparing milestones and fetching artifacts...")
    repo = make_repo(
        client,
        organization,
        line.value,
        previous_milestone,
        milestone,
        fetch=fetch,
        timeout=config["http"]["timeout"],
    )

    logger.step(2, 3, "Resolving component versions...")
    components, errors = _resolve_all(repo.product, repo.files, names)

    logger.step(3, 3, "Correlating commits with pull requests...")
    issues = repo.issues(client)
    logger.verbose("ISSUES", f"{len(issues)} issues from {len(repo.commits)} commits")

    return ChangelogResult(
        product=line.value,
        previous_milestone=previous_milestone,
        milestone=milestone,
        commit_count=len(repo.commits),
        components=components,
        issues=issues,
        errors=errors,
    )
