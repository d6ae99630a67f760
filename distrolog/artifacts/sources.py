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

"""Product lines and artifact locations for distrolog.

The two product lines publish the same kinds of artifacts at different
paths:

| kind            | k3s                            | rke2                  |
|-----------------|--------------------------------|-----------------------|
| dockerfile      | Dockerfile.dapper              | Dockerfile            |
| image list      | scripts/airgap/image-list.txt  | scripts/build-images  |
| version script  | scripts/version.sh             | scripts/version.sh    |
| module manifest | go.mod                         | go.mod                |

k3s additionally embeds SQLite through mattn/go-sqlite3; the binding header
is fetched at the go-sqlite3 version pinned in its go.mod.

Example:
    ```python
    from distrolog.artifacts.sources import ProductLine, fetch_bundle

    bundle = fetch_bundle(ProductLine.RKE2, "v1.27.3+rke2r1")
    bundle.dockerfile_chart("rke2-cilium")  # '1.13.200'
    ```
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum

from distrolog.artifacts import gomod, matchers
from distrolog.artifacts.bundle import ArtifactBundle
from distrolog.exceptions import NetworkError, UnsupportedProductError
from distrolog.io import DEFAULT_TIMEOUT, fetch_bytes
from distrolog.logging import get_global_logger

RAW_BASE_URL = "https://raw.githubusercontent.com"

Fetcher = Callable[[str], bytes]


class ProductLine(str, Enum):
    """The distribution product lines distrolog knows how to read."""

    K3S = "k3s"
    RKE2 = "rke2"

    @classmethod
    def from_name(cls, name: str) -> ProductLine:
        """Return the product line called ``name``.

        Raises:
            UnsupportedProductError: If ``name`` is not a known product line.
        """
        try:
            return cls(name)
        except ValueError as err:
            known = ", ".join(p.value for p in cls)
            raise UnsupportedProductError(
                f"unknown product {name!r} (expected one of: {known})"
            ) from err


# Artifact paths relative to RAW_BASE_URL; {version} is the release tag.
ARTIFACT_PATHS: dict[ProductLine, dict[str, str]] = {
    ProductLine.K3S: {
        "dockerfile": "k3s-io/k3s/{version}/Dockerfile.dapper",
        "image_list": "k3s-io/k3s/{version}/scripts/airgap/image-list.txt",
        "version_script": "k3s-io/k3s/{version}/scripts/version.sh",
        "mod_file": "k3s-io/k3s/{version}/go.mod",
    },
    ProductLine.RKE2: {
        "dockerfile": "rancher/rke2/{version}/Dockerfile",
        "image_list": "rancher/rke2/{version}/scripts/build-images",
        "version_script": "rancher/rke2/{version}/scripts/version.sh",
        "mod_file": "rancher/rke2/{version}/go.mod",
    },
}

SQLITE_BINDING_PATH = "mattn/go-sqlite3/{version}/sqlite3-binding.h"


def artifact_url(product: ProductLine, kind: str, version: str) -> str:
    """Return the raw URL of artifact ``kind`` for a product release."""
    return f"{RAW_BASE_URL}/" + ARTIFACT_PATHS[product][kind].format(version=version)


def _default_fetcher(timeout: float) -> Fetcher:
    def fetch(url: str) -> bytes:
        return fetch_bytes(url, timeout=timeout)

    return fetch


def _fetch(fetch: Fetcher, kind: str, url: str) -> bytes:
    try:
        data = fetch(url)
    except NetworkError as err:
        raise NetworkError(f"{kind}: {err}") from err
    get_global_logger().verbose("ARTIFACT", f"Fetched {kind} ({len(data)} bytes)")
    return data


def fetch_bundle(
    product: ProductLine,
    version: str,
    *,
    fetch: Fetcher | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> ArtifactBundle:
    """Retrieve every artifact of a product release.

    Artifacts are fetched sequentially; the first failure aborts the run.

    Args:
        product: Product line to read.
        version: Release tag (e.g., "v1.27.3+k3s1").
        fetch: Callable mapping a URL to its bytes. Defaults to
            fetch_bytes with ``timeout``.
        timeout: Per-request timeout for the default fetcher.

    Returns:
        The populated bundle.

    Raises:
        NetworkError: If any retrieval fails (message prefixed with the
            artifact kind).
        ParseError: If the k3s go.mod cannot be parsed.
        NotFoundError: If the k3s go.mod does not pin go-sqlite3.
    """
    fetch = fetch or _default_fetcher(timeout)
    logger = get_global_logger()
    logger.verbose("ARTIFACT", f"Fetching {product.value} {version} artifacts")

    files = {
        kind: _fetch(fetch, kind, artifact_url(product, kind, version))
        for kind in ("dockerfile", "image_list", "version_script", "mod_file")
    }

    sqlite_binding = b""
    if product is ProductLine.K3S:
        sqlite_ver = matchers.go_dependency(gomod.parse(files["mod_file"]), "go-sqlite3")
        logger.verbose("ARTIFACT", f"go-sqlite3 pinned at {sqlite_ver}")
        url = f"{RAW_BASE_URL}/" + SQLITE_BINDING_PATH.format(version=sqlite_ver)
        sqlite_binding = _fetch(fetch, "sqlite_binding", url)

    return ArtifactBundle(sqlite_binding=sqlite_binding, **files)
