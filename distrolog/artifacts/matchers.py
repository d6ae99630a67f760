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

"""Text matchers for release artifacts.

Each matcher is a pure function that takes the text of one artifact kind and
a lookup key and returns the version string it finds. No network calls or
file I/O happen here; ArtifactBundle feeds the decoded artifact text in.

Matching Rules:

- **dockerfile_chart**: lines naming ``/charts/<name>.yaml`` carry a
    ``CHART_VERSION="<version>-<qualifier>"`` assignment; the qualifier is
    dropped (``1.13.200-build1`` -> ``1.13.200``).
- **dockerfile_layer**: lines containing the key carry a
    ``FROM <image>:<tag>`` base image reference; the tag is returned up to
    the first character that is not a word character or a dot.
- **build_version**: lines containing the variable name carry a
    ``v<digits>.<digits>.<digits>`` token, optionally with a ``-k3s<n>``
    suffix.
- **image**: lines containing the image name carry ``<image>:<tag>``; the
    tag is returned up to the first character that is not a word character
    or a dot (build suffixes such as ``-build20230607`` are dropped).
- **sqlite_version**: the ``#define SQLITE_VERSION "<value>"`` macro.
- **go_dependency**: replace directives override require directives.

A line qualifies only when it contains the key AND the pattern matches it.
Lines that contain the key without a match are skipped. The first
qualifying line wins; conflicting later matches are not reported because
release artifacts declare each version once.

Example:
    ```python
    from distrolog.artifacts.matchers import image

    image("docker.io/rancher/klipper-helm:v0.8.0\\n", "klipper-helm")
    # 'v0.8.0'
    ```
"""

from __future__ import annotations

from collections.abc import Iterator
import re

from distrolog.artifacts.gomod import ModFile
from distrolog.exceptions import NotFoundError

__all__ = [
    "DOCKERFILE",
    "IMAGE_LIST",
    "MODULE_MANIFEST",
    "SQLITE_BINDING",
    "VERSION_SCRIPT",
    "build_version",
    "dockerfile_chart",
    "dockerfile_layer",
    "go_dependency",
    "image",
    "sqlite_version",
]

# Artifact kinds, used in NotFoundError messages
DOCKERFILE = "Dockerfile"
IMAGE_LIST = "image list"
MODULE_MANIFEST = "go.mod"
SQLITE_BINDING = "sqlite binding header"
VERSION_SCRIPT = "version script"

_BUILD_SCRIPT_RE = re.compile(r"(?P<version>v[\d.]+(-k3s.\w*)?)")
_CHART_RE = re.compile(r'CHART_VERSION="([\w.]*)-?\S*"')
_LAYER_RE = re.compile(r"FROM\s+[\w./-]+:([\w.]*)")
_IMAGE_RE = re.compile(r":([\w.]+)")
_SQLITE_RE = re.compile(r'define\s*.*SQLITE_VERSION\s*"(.+)"')


def _first_match(
    text: str, needle: str, pattern: re.Pattern[str]
) -> re.Match[str] | None:
    """Return the match on the first line containing needle that matches."""
    for line in _lines(text):
        if needle in line:
            m = pattern.search(line)
            if m:
                return m
    return None


def _lines(text: str) -> Iterator[str]:
    # splitlines() would also break on form feeds and other separators
    for line in text.split("\n"):
        yield line.rstrip("\r")


def dockerfile_chart(text: str, name: str) -> str:
    """Return the chart version bundled for chart ``name``.

    Raises:
        NotFoundError: If no line references ``/charts/<name>.yaml`` with a
            CHART_VERSION assignment.
    """
    m = _first_match(text, f"/charts/{name}.yaml", _CHART_RE)
    if m is None:
        raise NotFoundError(name, DOCKERFILE)
    return m.group(1)


def dockerfile_layer(text: str, name: str) -> str:
    """Return the tag of the ``FROM`` base image line containing ``name``.

    Raises:
        NotFoundError: If no ``FROM`` line contains ``name``.
    """
    m = _first_match(text, name, _LAYER_RE)
    if m is None:
        raise NotFoundError(name, DOCKERFILE)
    return m.group(1)


def build_version(text: str, variable: str) -> str:
    """Return the ``v1.2.3`` token assigned on a line mentioning ``variable``.

    Raises:
        NotFoundError: If no line mentioning ``variable`` carries a version.
    """
    m = _first_match(text, variable, _BUILD_SCRIPT_RE)
    if m is None:
        raise NotFoundError(variable, VERSION_SCRIPT)
    return m.group("version")


def image(text: str, name: str) -> str:
    """Return the tag of the image reference containing ``name``.

    Raises:
        NotFoundError: If no line containing ``name`` has a tag.
    """
    m = _first_match(text, name, _IMAGE_RE)
    if m is None:
        raise NotFoundError(name, IMAGE_LIST)
    return m.group(1)


def sqlite_version(text: str) -> str:
    """Return the value of the SQLITE_VERSION macro.

    Raises:
        NotFoundError: If the header does not define SQLITE_VERSION.
    """
    m = _SQLITE_RE.search(text)
    if m is None:
        raise NotFoundError("SQLITE_VERSION", SQLITE_BINDING)
    return m.group(1)


def go_dependency(mod_file: ModFile, name: str) -> str:
    """Return the version of the first module whose path contains ``name``.

    Replace directives are searched first (matching on the replaced path and
    returning the replacement's version), then require directives.

    Raises:
        NotFoundError: If no directive path contains ``name``.
    """
    for replace in mod_file.replace:
        if name in replace.old_path:
            return replace.new_version
    for require in mod_file.require:
        if name in require.path:
            return require.version
    raise NotFoundError(name, MODULE_MANIFEST)
