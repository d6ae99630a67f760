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

"""Exception hierarchy for distrolog.

This module defines a custom exception hierarchy that allows library users
to distinguish between the different ways a changelog run can fail:

- ConfigError: Configuration file problems (YAML parse, invalid structure)
- NetworkError: Artifact retrieval or GitHub API failures
- ParseError: A module manifest (go.mod) that cannot be parsed
- NotFoundError: An expected pattern is absent from an artifact
- InvalidVersionError: Extracted text is not a usable semantic version
- MissingArgumentError: An empty milestone or previous milestone
- UnsupportedProductError: A product name outside the known product lines

All exceptions inherit from DistrologError, allowing users to catch every
distrolog error with a single except clause if needed.

Example:
    Treating a missing component as "not available":
        ```python
        from distrolog.exceptions import NotFoundError

        try:
            version = bundle.image("calico-node")
        except NotFoundError:
            version = "N/A"
        ```

    Catching all distrolog errors:
        ```python
        from distrolog.exceptions import DistrologError

        try:
            repo = make_repo(client, "k3s-io", "k3s", "v1.27.2+k3s1", "v1.27.3+k3s1")
        except DistrologError as e:
            print(f"distrolog error: {e}")
        ```
"""

from __future__ import annotations

__all__ = [
    "DistrologError",
    "ConfigError",
    "NetworkError",
    "ParseError",
    "NotFoundError",
    "InvalidVersionError",
    "MissingArgumentError",
    "UnsupportedProductError",
]


class DistrologError(Exception):
    """Base exception for all distrolog errors."""

    pass


class ConfigError(DistrologError):
    """Raised for configuration-related errors.

    This exception is raised when there are problems with:

    - A configuration file that does not exist
    - YAML parsing (syntax errors)
    - A top-level document that is not a mapping
    """

    pass


class NetworkError(DistrologError):
    """Raised for network-related errors.

    This exception is raised when there are problems with:

    - Artifact downloads (HTTP errors, connection timeouts)
    - GitHub API calls (compare, pull requests for a commit)

    The underlying requests exception is always chained as __cause__.
    """

    pass


class ParseError(DistrologError):
    """Raised when a module manifest cannot be parsed."""

    pass


class NotFoundError(DistrologError):
    """Raised when an artifact does not contain the requested entry.

    Attributes:
        key: The lookup key (chart name, image name, variable, module path).
        artifact: The artifact kind that was searched (e.g., "image list").

    Example:
        Inspecting a failed lookup:
            ```python
            try:
                bundle.build_version("VERSION_RUNC")
            except NotFoundError as e:
                print(e.key, e.artifact)  # VERSION_RUNC version script
            ```
    """

    def __init__(self, key: str, artifact: str) -> None:
        self.key = key
        self.artifact = artifact
        super().__init__(f"{key!r} not found in {artifact}")


class InvalidVersionError(DistrologError):
    """Raised when a version string is not a valid semantic version."""

    pass


class MissingArgumentError(DistrologError):
    """Raised when a required argument (milestone) is empty."""

    pass


class UnsupportedProductError(DistrologError):
    """Raised for product names outside the known product lines."""

    pass
