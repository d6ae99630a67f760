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

"""In-memory holder for the artifacts of one product release.

An ArtifactBundle keeps the raw bytes of every artifact retrieved for a
product/version pair and exposes one lookup method per text matcher. It is
populated once (see distrolog.artifacts.sources.fetch_bundle) and read-only
afterwards. The SQLite binding header is only supplied for k3s; an empty
artifact simply makes every lookup against it raise NotFoundError.

Example:
    Targeted lookups without a Repo:
        ```python
        from pathlib import Path
        from distrolog.artifacts import ArtifactBundle

        bundle = ArtifactBundle(image_list=Path("image-list.txt").read_bytes())
        bundle.image("klipper-helm")  # 'v0.8.0'
        ```
"""

from __future__ import annotations

from dataclasses import dataclass

from distrolog.artifacts import gomod, matchers
from distrolog.logging import get_global_logger


def _text(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class ArtifactBundle:
    """Raw artifact content for one product release.

    Attributes:
        dockerfile: Build descriptor (Dockerfile / Dockerfile.dapper).
        image_list: Image manifest (airgap image list / build-images script).
        mod_file: Go module manifest (go.mod).
        version_script: Shell build script (scripts/version.sh).
        sqlite_binding: SQLite binding header, empty for rke2.

    """

    dockerfile: bytes = b""
    image_list: bytes = b""
    mod_file: bytes = b""
    version_script: bytes = b""
    sqlite_binding: bytes = b""

    def dockerfile_chart(self, name: str) -> str:
        """Return the version of chart ``name`` bundled by the Dockerfile."""
        version = matchers.dockerfile_chart(_text(self.dockerfile), name)
        get_global_logger().debug("MATCH", f"chart {name!r} -> {version}")
        return version

    def dockerfile_layer(self, name: str) -> str:
        """Return the tag of the Dockerfile base image layer ``name``."""
        version = matchers.dockerfile_layer(_text(self.dockerfile), name)
        get_global_logger().debug("MATCH", f"layer {name!r} -> {version}")
        return version

    def go_dependency(self, name: str) -> str:
        """Return the go.mod version of the module matching ``name``.

        Raises:
            ParseError: If go.mod cannot be parsed.
            NotFoundError: If no module path contains ``name``.
        """
        version = matchers.go_dependency(gomod.parse(self.mod_file), name)
        get_global_logger().debug("MATCH", f"module {name!r} -> {version}")
        return version

    def image(self, name: str) -> str:
        """Return the tag of image ``name`` from the image list."""
        version = matchers.image(_text(self.image_list), name)
        get_global_logger().debug("MATCH", f"image {name!r} -> {version}")
        return version

    def build_version(self, variable: str) -> str:
        """Return the version assigned to ``variable`` in the version script."""
        version = matchers.build_version(_text(self.version_script), variable)
        get_global_logger().debug("MATCH", f"variable {variable!r} -> {version}")
        return version

    def sqlite_version(self) -> str:
        """Return the SQLite version from the binding header."""
        version = matchers.sqlite_version(_text(self.sqlite_binding))
        get_global_logger().debug("MATCH", f"SQLITE_VERSION -> {version}")
        return version
