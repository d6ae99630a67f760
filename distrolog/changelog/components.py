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

"""Component version resolvers for distrolog.

A resolver turns the artifacts of one release into a Component record for a
single logical dependency. The same dependency can live in different
artifacts depending on the product line; each resolver therefore carries a
lookup table keyed by ProductLine:

| component       | k3s                                | rke2                                 |
|-----------------|------------------------------------|--------------------------------------|
| calico          | -                                  | image ``calico-node``                |
| cilium          | -                                  | image ``cilium-cilium``              |
| containerd      | version script VERSION_CONTAINERD  | Dockerfile layer hardened-containerd |
| coredns         | image ``coredns``                  | image ``hardened-coredns``           |
| etcd            | go.mod ``etcd/api/v3``             | version script ETCD_VERSION          |
| flannel         | go.mod ``flannel``                 | -                                    |
| helm-controller | go.mod ``helm-controller``         | go.mod ``helm-controller``           |
| kine            | go.mod ``kine``                    | -                                    |
| runc            | version script VERSION_RUNC        | -                                    |
| sqlite          | SQLite binding header              | -                                    |

A product line without an entry yields an empty Component. Placeholder
components (ingress-nginx, traefik, ...) are registered but not read from
any artifact yet; they always yield an empty Component.

Resolvers live in a registry so callers can resolve by name and invoke
only the components they need. Each call fails independently.

Example:
    ```python
    from distrolog.artifacts import ArtifactBundle, ProductLine
    from distrolog.changelog.components import get_resolver

    etcd = get_resolver("etcd")(ProductLine.RKE2, bundle)
    print(etcd.version, etcd.url)
    ```
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from distrolog.artifacts.bundle import ArtifactBundle
from distrolog.artifacts.sources import ProductLine
from distrolog.changelog.models import Component
from distrolog.exceptions import ConfigError
from distrolog.versioning import major_minor, trim_periods

Resolver = Callable[[ProductLine, ArtifactBundle], Component]

# -------------------------------
# Lookup tables
# -------------------------------


@dataclass(frozen=True)
class Lookup:
    """Which ArtifactBundle method to call, and with which key.

    Attributes:
        method: Unbound ArtifactBundle method (e.g., ArtifactBundle.image).
        key: Lookup key, or None for methods without one (sqlite_version).

    """

    method: Callable[..., str]
    key: str | None = None

    def read(self, bundle: ArtifactBundle) -> str:
        if self.key is None:
            return self.method(bundle)
        return self.method(bundle, self.key)


def _table_resolver(
    name: str,
    lookups: dict[ProductLine, Lookup],
    url: Callable[[str], str],
) -> Resolver:
    """Build a resolver reading ``lookups[product]`` and templating ``url``."""

    def resolve(product: ProductLine, bundle: ArtifactBundle) -> Component:
        lookup = lookups.get(ProductLine.from_name(product))
        if lookup is None:
            return Component(name)
        version = lookup.read(bundle)
        return Component(name=name, version=version, url=url(version))

    resolve.__name__ = name.replace("-", "_")
    resolve.__doc__ = f"Resolve the {name} version for a product release."
    return resolve


def _placeholder(name: str) -> Resolver:
    """Build a resolver for a component that is not read from artifacts yet."""

    def resolve(product: ProductLine, bundle: ArtifactBundle) -> Component:
        ProductLine.from_name(product)
        return Component(name)

    resolve.__name__ = name.replace("-", "_")
    resolve.__doc__ = f"Placeholder for {name}; always returns an empty Component."
    return resolve


# -------------------------------
# Release-note URLs
# -------------------------------


def _github_release(repo: str) -> Callable[[str], str]:
    return lambda version: f"https://github.com/{repo}/releases/tag/{version}"


def calico_url(version: str) -> str:
    """Calico docs are organised by major.minor, anchored by the dotless version.

    Raises:
        InvalidVersionError: If version is not a valid semantic version.
    """
    return (
        "https://projectcalico.docs.tigera.io/archive/"
        f"{major_minor(version)}/release-notes/#{trim_periods(version)}"
    )


def coredns_url(version: str) -> str:
    # image lists carry coredns tags with and without the "v"
    return f"https://github.com/coredns/coredns/releases/tag/v{version.removeprefix('v')}"


def sqlite_url(version: str) -> str:
    return f"https://sqlite.org/releaselog/{version.replace('.', '_')}.html"


# -------------------------------
# Resolvers
# -------------------------------

calico = _table_resolver(
    "calico",
    {ProductLine.RKE2: Lookup(ArtifactBundle.image, "calico-node")},
    calico_url,
)

cilium = _table_resolver(
    "cilium",
    {ProductLine.RKE2: Lookup(ArtifactBundle.image, "cilium-cilium")},
    _github_release("cilium/cilium"),
)

containerd = _table_resolver(
    "containerd",
    {
        ProductLine.K3S: Lookup(ArtifactBundle.build_version, "VERSION_CONTAINERD"),
        ProductLine.RKE2: Lookup(ArtifactBundle.dockerfile_layer, "hardened-containerd"),
    },
    _github_release("k3s-io/containerd"),
)

coredns = _table_resolver(
    "coredns",
    {
        ProductLine.K3S: Lookup(ArtifactBundle.image, "coredns"),
        ProductLine.RKE2: Lookup(ArtifactBundle.image, "hardened-coredns"),
    },
    coredns_url,
)

etcd = _table_resolver(
    "etcd",
    {
        ProductLine.K3S: Lookup(ArtifactBundle.go_dependency, "etcd/api/v3"),
        ProductLine.RKE2: Lookup(ArtifactBundle.build_version, "ETCD_VERSION"),
    },
    _github_release("k3s-io/etcd"),
)

flannel = _table_resolver(
    "flannel",
    {ProductLine.K3S: Lookup(ArtifactBundle.go_dependency, "flannel")},
    _github_release("flannel-io/flannel"),
)

helm_controller = _table_resolver(
    "helm-controller",
    {
        ProductLine.K3S: Lookup(ArtifactBundle.go_dependency, "helm-controller"),
        ProductLine.RKE2: Lookup(ArtifactBundle.go_dependency, "helm-controller"),
    },
    _github_release("k3s-io/helm-controller"),
)

kine = _table_resolver(
    "kine",
    {ProductLine.K3S: Lookup(ArtifactBundle.go_dependency, "kine")},
    _github_release("k3s-io/kine"),
)

runc = _table_resolver(
    "runc",
    {ProductLine.K3S: Lookup(ArtifactBundle.build_version, "VERSION_RUNC")},
    _github_release("opencontainers/runc"),
)

sqlite = _table_resolver(
    "sqlite",
    {ProductLine.K3S: Lookup(ArtifactBundle.sqlite_version)},
    sqlite_url,
)

canal_calico = _placeholder("canal-calico")
ingress_nginx = _placeholder("ingress-nginx")
kubernetes = _placeholder("kubernetes")
local_path_provisioner = _placeholder("local-path-provisioner")
major_minor_component = _placeholder("major-minor")
metrics_server = _placeholder("metrics-server")
multus = _placeholder("multus")
traefik = _placeholder("traefik")


def cnis(product: ProductLine, bundle: ArtifactBundle) -> list[Component]:
    """Return the CNI plugins shipped by a release (not read from artifacts yet)."""
    ProductLine.from_name(product)
    return []


# -------------------------------
# Registry
# -------------------------------

_RESOLVER_REGISTRY: dict[str, Resolver] = {}


def register_resolver(name: str, resolver: Resolver) -> None:
    """Register a component resolver by name.

    Registering the same name twice overwrites the previous registration.

    Args:
        name: Component name (e.g., "containerd"), lowercase with dashes.
        resolver: Callable taking (product, bundle) and returning a
            Component.

    """
    _RESOLVER_REGISTRY[name] = resolver


def get_resolver(name: str) -> Resolver:
    """Return the resolver registered for component ``name``.

    Raises:
        ConfigError: If no resolver is registered under ``name``. The message
            lists the registered component names.
    """
    if name not in _RESOLVER_REGISTRY:
        available = ", ".join(_RESOLVER_REGISTRY)
        raise ConfigError(
            f"Unknown component: {name!r}. Available: {available or '(none)'}"
        )
    return _RESOLVER_REGISTRY[name]


def component_names() -> list[str]:
    """Return registered component names in registration order."""
    return list(_RESOLVER_REGISTRY)


for _resolver in (
    calico,
    canal_calico,
    cilium,
    containerd,
    coredns,
    etcd,
    flannel,
    helm_controller,
    ingress_nginx,
    kine,
    kubernetes,
    local_path_provisioner,
    major_minor_component,
    metrics_server,
    multus,
    runc,
    sqlite,
    traefik,
):
    register_resolver(_resolver.__name__.replace("_", "-"), _resolver)
