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

"""Public API return types for distrolog.

All dataclasses are frozen (immutable) to prevent accidental mutation of
return values.

Example:
    Using result types:
        ```python
        from distrolog.core import resolve_versions
        from distrolog.results import VersionsResult

        result: VersionsResult = resolve_versions("k3s", "v1.27.3+k3s1")
        for component in result.components:
            print(component.name, component.version or "N/A")
        ```

Note:
    Only public API return types belong in this module. Domain types
    (Component, Issue) stay in distrolog.changelog.models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from distrolog.changelog.models import Component, Issue


@dataclass(frozen=True)
class VersionsResult:
    """Component versions of one product release.

    Attributes:
        product: Product line name (e.g., "rke2").
        version: Release tag.
        components: One entry per requested component, in request order.
            A component that failed to resolve is present with an empty
            version.
        errors: Component name to error message for failed components.
    """

    product: str
    version: str
    components: list[Component]
    errors: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "product": self.product,
            "version": self.version,
            "components": [c.to_dict() for c in self.components],
            "errors": dict(self.errors),
        }


@dataclass(frozen=True)
class ChangelogResult:
    """Everything needed to write the changelog of one release.

    Attributes:
        product: Product line name.
        previous_milestone: Tag of the previous release.
        milestone: Tag of this release.
        commit_count: Number of commits between the two tags.
        components: Resolved components (see VersionsResult.components).
        issues: Correlated pull requests in commit order.
        errors: Component name to error message for failed components.
    """

    product: str
    previous_milestone: str
    milestone: str
    commit_count: int
    components: list[Component]
    issues: list[Issue]
    errors: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "product": self.product,
            "previous_milestone": self.previous_milestone,
            "milestone": self.milestone,
            "commit_count": self.commit_count,
            "components": [c.to_dict() for c in self.components],
            "issues": [i.to_dict() for i in self.issues],
            "errors": dict(self.errors),
        }
