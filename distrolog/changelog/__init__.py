"""Changelog building blocks for distrolog.

Modules:
    models : Component, Issue, CommitRef, PullRequest.
    components : Per-component resolvers and their registry.
    issues : Commit to pull request correlation.
    repo : Repo, the per-release aggregate, and make_repo.

Example:
    from distrolog.changelog import make_repo
    from distrolog.github import GitHubClient

    client = GitHubClient()
    repo = make_repo(client, "rancher", "rke2", "v1.27.2+rke2r1", "v1.27.3+rke2r1")
    for component in repo.components(["containerd", "etcd"]):
        print(component.name, component.version)

"""

from .components import component_names, get_resolver, register_resolver
from .issues import collect_issues, extract_release_note, strip_backport_tag
from .models import CommitRef, Component, Issue, PullRequest
from .repo import Repo, make_repo

__all__ = [
    "CommitRef",
    "Component",
    "Issue",
    "PullRequest",
    "Repo",
    "collect_issues",
    "component_names",
    "extract_release_note",
    "get_resolver",
    "make_repo",
    "register_resolver",
    "strip_backport_tag",
]
