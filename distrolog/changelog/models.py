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

"""Changelog domain types.

All types are frozen dataclasses: a Component or Issue is never mutated
after the resolver or correlator creates it.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class Component:
    """One dependency's resolved version for a release.

    An empty ``version`` means "not available" (placeholder components and
    components a product line does not ship), not an error.

    Attributes:
        name: Component name (e.g., "containerd").
        version: Raw version string (e.g., "v1.7.1-k3s1"), or "".
        url: Release notes / release page for this version, or "".
        fips_compliant: Whether the shipped build is FIPS compliant.

    """

    name: str
    version: str = ""
    url: str = ""
    fips_compliant: bool = False

    @property
    def available(self) -> bool:
        return bool(self.version)

    @property
    def link(self) -> str:
        """Markdown link ``[version](url)``, or "" when unavailable."""
        if not self.version:
            return ""
        if not self.url:
            return self.version
        return f"[{self.version}]({self.url})"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Issue:
    """A pull request correlated with a commit of the release range.

    Attributes:
        title: PR title with any backport tag removed.
        note: Release-note block from the PR body, or "".
        number: PR number, unique within one correlation result.
        url: PR web URL.

    """

    title: str
    note: str
    number: int
    url: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CommitRef:
    """A commit of the release range."""

    sha: str
    message: str = ""


@dataclass(frozen=True)
class PullRequest:
    """The subset of a GitHub pull request the correlator reads."""

    number: int
    title: str
    body: str
    html_url: str

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> PullRequest:
        """Create from a GitHub REST API pull request object."""
        return cls(
            number=int(data.get("number", 0)),
            title=data.get("title") or "",
            body=data.get("body") or "",
            html_url=data.get("html_url") or "",
        )
