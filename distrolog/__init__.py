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

"""
distrolog: component versions and changelogs for k3s and RKE2 releases.

distrolog reads the build artifacts a release tag publishes (Dockerfile,
image list, version script, go.mod) to find the versions of the components
it bundles, and correlates the commits between two tags with their GitHub
pull requests to collect release notes.

Modules
-------
cli : module
    Command-line interface with argparse.
core : module
    High-level orchestration functions.
config : package
    YAML configuration loading and merging.
artifacts : package
    Artifact matchers, go.mod parser, and retrieval.
changelog : package
    Component resolvers, issue correlation, and the Repo aggregate.
github : package
    GitHub REST API client.
versioning : package
    Go-style semantic version helpers.
io : package
    HTTP retrieval.

Public API
----------
The primary interface is the CLI, but key functions are exported for
programmatic use:

    from distrolog.core import generate_changelog, resolve_versions
    from distrolog.changelog import make_repo
    from distrolog.artifacts import ArtifactBundle, fetch_bundle

For more details, see the individual module docstrings.

Project Information
-------------------
Author: Roger Cibrian
License: Apache-2.0
"""

__version__ = "0.1.0"
__author__ = "Roger Cibrian"
__license__ = "Apache-2.0"
__description__ = "distrolog - component versions and changelogs for k3s and RKE2"

# Re-export commonly used functions for convenience
from distrolog.artifacts import ArtifactBundle, ProductLine, fetch_bundle
from distrolog.changelog import Repo, make_repo
from distrolog.config import load_config
from distrolog.core import generate_changelog, resolve_versions

__all__ = [
    "__version__",
    "__author__",
    "__license__",
    "__description__",
    "ArtifactBundle",
    "ProductLine",
    "Repo",
    "fetch_bundle",
    "generate_changelog",
    "load_config",
    "make_repo",
    "resolve_versions",
]
