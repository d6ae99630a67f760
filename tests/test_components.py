"""
Tests for distrolog.changelog.components module.

Tests component resolution including:
- Resolver registry
- Per-product lookup tables
- Release-note URLs
- Placeholder components
- Failure propagation
"""

from __future__ import annotations

import pytest

from distrolog.artifacts import ArtifactBundle, ProductLine
from distrolog.changelog import components
from distrolog.changelog.components import (
    Lookup,
    calico_url,
    cnis,
    component_names,
    get_resolver,
    register_resolver,
)
from distrolog.changelog.models import Component
from distrolog.exceptions import (
    ConfigError,
    InvalidVersionError,
    NotFoundError,
    UnsupportedProductError,
)


class TestResolverRegistry:
    """Tests for resolver registration and lookup."""

    def test_known_components_registered(self):
        names = component_names()
        for name in ("calico", "cilium", "containerd", "etcd", "helm-controller", "sqlite"):
            assert name in names

    def test_unknown_component_raises(self):
        with pytest.raises(ConfigError, match="Unknown component"):
            get_resolver("nonexistent")

    def test_register_custom_resolver(self, monkeypatch):
        monkeypatch.setattr(
            components, "_RESOLVER_REGISTRY", dict(components._RESOLVER_REGISTRY)
        )

        def custom(product, bundle):
            return Component("custom-test", "v1.0.0")

        register_resolver("custom-test", custom)
        assert get_resolver("custom-test")(ProductLine.K3S, ArtifactBundle()).version == "v1.0.0"


class TestK3sComponents:
    """Tests for k3s component resolution against fixture artifacts."""

    def test_containerd(self, k3s_bundle):
        component = get_resolver("containerd")(ProductLine.K3S, k3s_bundle)
        assert component == Component(
            name="containerd",
            version="v1.7.1-k3s1",
            url="https://github.com/k3s-io/containerd/releases/tag/v1.7.1-k3s1",
        )

    def test_etcd_uses_replace_directive(self, k3s_bundle):
        component = get_resolver("etcd")(ProductLine.K3S, k3s_bundle)
        assert component.name == "etcd"
        assert component.version == "v3.5.7-k3s1"

    def test_go_module_components(self, k3s_bundle):
        assert get_resolver("flannel")(ProductLine.K3S, k3s_bundle).version == "v0.22.0"
        assert get_resolver("kine")(ProductLine.K3S, k3s_bundle).version == "v0.10.1"
        assert get_resolver("helm-controller")(ProductLine.K3S, k3s_bundle).version == "v0.15.2"

    def test_coredns_url_adds_v(self, k3s_bundle):
        component = get_resolver("coredns")(ProductLine.K3S, k3s_bundle)
        assert component.version == "1.10.1"
        assert component.url == "https://github.com/coredns/coredns/releases/tag/v1.10.1"

    def test_sqlite(self, k3s_bundle):
        component = get_resolver("sqlite")(ProductLine.K3S, k3s_bundle)
        assert component.version == "3.42.0"
        assert component.url == "https://sqlite.org/releaselog/3_42_0.html"

    def test_rke2_only_component_is_empty(self, k3s_bundle):
        """Test that calico is reported as not available for k3s."""
        component = get_resolver("calico")(ProductLine.K3S, k3s_bundle)
        assert component == Component("calico")
        assert not component.available


class TestRke2Components:
    """Tests for RKE2 component resolution against fixture artifacts."""

    def test_containerd_from_dockerfile_layer(self, rke2_bundle):
        assert get_resolver("containerd")(ProductLine.RKE2, rke2_bundle).version == "v1.7.1"

    def test_etcd_from_version_script(self, rke2_bundle):
        component = get_resolver("etcd")(ProductLine.RKE2, rke2_bundle)
        assert component.version == "v3.5.7-k3s1"
        assert component.url == "https://github.com/k3s-io/etcd/releases/tag/v3.5.7-k3s1"

    def test_calico_url(self, rke2_bundle):
        component = get_resolver("calico")(ProductLine.RKE2, rke2_bundle)
        assert component.version == "v3.25.1"
        assert component.url == (
            "https://projectcalico.docs.tigera.io/archive/v3.25/release-notes/#v3251"
        )

    def test_cilium(self, rke2_bundle):
        assert get_resolver("cilium")(ProductLine.RKE2, rke2_bundle).version == "v1.13.2"

    def test_k3s_only_component_is_empty(self, rke2_bundle):
        assert get_resolver("kine")(ProductLine.RKE2, rke2_bundle) == Component("kine")


class TestPlaceholders:
    """Tests for components that are not read from artifacts."""

    @pytest.mark.parametrize("name", ["traefik", "ingress-nginx", "multus", "major-minor"])
    def test_placeholder_is_empty(self, name, k3s_bundle):
        component = get_resolver(name)(ProductLine.K3S, k3s_bundle)
        assert component == Component(name)
        assert component.link == ""

    def test_placeholder_rejects_unknown_product(self):
        with pytest.raises(UnsupportedProductError):
            get_resolver("traefik")("rke1", ArtifactBundle())

    def test_cnis_empty(self, rke2_bundle):
        assert cnis(ProductLine.RKE2, rke2_bundle) == []


class TestFailures:
    """Tests for errors raised by resolvers."""

    def test_missing_artifact_entry_raises(self):
        with pytest.raises(NotFoundError) as exc_info:
            get_resolver("runc")(ProductLine.K3S, ArtifactBundle())
        assert exc_info.value.key == "VERSION_RUNC"

    def test_product_name_accepted(self, rke2_bundle):
        """Test that resolvers accept the product line's string name."""
        assert get_resolver("cilium")("rke2", rke2_bundle).version == "v1.13.2"

    def test_invalid_calico_version_raises(self):
        with pytest.raises(InvalidVersionError):
            calico_url("3.25.1")


class TestLookup:
    """Tests for lookup table entries."""

    def test_keyed_method(self, rke2_bundle):
        assert Lookup(ArtifactBundle.image, "cilium-cilium").read(rke2_bundle) == "v1.13.2"

    def test_method_without_key(self, k3s_bundle):
        assert Lookup(ArtifactBundle.sqlite_version).read(k3s_bundle) == "3.42.0"


class TestComponentModel:
    """Tests for the Component record."""

    def test_link(self):
        assert Component("etcd", "v3.5.7", "https://x/v3.5.7").link == "[v3.5.7](https://x/v3.5.7)"

    def test_link_without_url(self):
        assert Component("etcd", "v3.5.7").link == "v3.5.7"

    def test_to_dict(self):
        assert Component("etcd", "v3.5.7").to_dict() == {
            "name": "etcd",
            "version": "v3.5.7",
            "url": "",
            "fips_compliant": False,
        }
