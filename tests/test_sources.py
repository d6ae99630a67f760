"""
Tests for distrolog.artifacts.sources and distrolog.artifacts.bundle.

Tests artifact retrieval and bundle lookups including:
- Product line names
- Artifact URLs per product line
- Bundle population (including the k3s SQLite header)
- Retrieval failures
- Lookups against fixture artifacts
"""

from __future__ import annotations

import pytest

from conftest import K3S_VERSION, RKE2_VERSION, FakeFetcher
from distrolog.artifacts import ArtifactBundle, ProductLine, fetch_bundle
from distrolog.artifacts.sources import artifact_url
from distrolog.exceptions import NetworkError, NotFoundError, UnsupportedProductError


class TestProductLine:
    """Tests for ProductLine."""

    def test_from_name(self):
        assert ProductLine.from_name("k3s") is ProductLine.K3S
        assert ProductLine.from_name("rke2") is ProductLine.RKE2

    def test_unknown_name_raises(self):
        with pytest.raises(UnsupportedProductError, match="'rke1'"):
            ProductLine.from_name("rke1")

    def test_name_is_case_sensitive(self):
        with pytest.raises(UnsupportedProductError):
            ProductLine.from_name("K3S")


class TestArtifactUrl:
    """Tests for artifact_url."""

    def test_k3s_dockerfile(self):
        assert artifact_url(ProductLine.K3S, "dockerfile", "v1.27.3+k3s1") == (
            "https://raw.githubusercontent.com/k3s-io/k3s/v1.27.3+k3s1/Dockerfile.dapper"
        )

    def test_rke2_image_list(self):
        assert artifact_url(ProductLine.RKE2, "image_list", "v1.27.3+rke2r1") == (
            "https://raw.githubusercontent.com/rancher/rke2/v1.27.3+rke2r1/scripts/build-images"
        )


class TestFetchBundle:
    """Tests for fetch_bundle."""

    def test_rke2_bundle(self, fake_fetcher, fixtures_dir):
        bundle = fetch_bundle(ProductLine.RKE2, RKE2_VERSION, fetch=fake_fetcher)

        assert bundle.dockerfile == (fixtures_dir / "rke2" / "Dockerfile").read_bytes()
        assert bundle.mod_file == (fixtures_dir / "rke2" / "go.mod").read_bytes()
        assert bundle.sqlite_binding == b""
        assert len(fake_fetcher.requested) == 4

    def test_k3s_bundle_includes_sqlite_header(self, fake_fetcher):
        """Test that the binding header is fetched at the go-sqlite3 version."""
        bundle = fetch_bundle(ProductLine.K3S, K3S_VERSION, fetch=fake_fetcher)

        assert fake_fetcher.requested[-1] == (
            "https://raw.githubusercontent.com/mattn/go-sqlite3/v1.14.17/sqlite3-binding.h"
        )
        assert bundle.sqlite_version() == "3.42.0"

    def test_missing_artifact_raises(self, artifact_urls):
        """Test that the failing artifact kind is named in the error."""
        del artifact_urls[
            f"https://raw.githubusercontent.com/rancher/rke2/{RKE2_VERSION}/scripts/version.sh"
        ]
        fetch = FakeFetcher(artifact_urls)

        with pytest.raises(NetworkError, match="version_script") as exc_info:
            fetch_bundle(ProductLine.RKE2, RKE2_VERSION, fetch=fetch)
        assert isinstance(exc_info.value.__cause__, NetworkError)

    def test_first_failure_aborts(self):
        """Test that retrieval stops at the first failing artifact."""
        fetch = FakeFetcher({})

        with pytest.raises(NetworkError, match="dockerfile"):
            fetch_bundle(ProductLine.K3S, K3S_VERSION, fetch=fetch)
        assert len(fetch.requested) == 1


class TestBundleLookups:
    """Tests for ArtifactBundle lookups against fixture artifacts."""

    def test_k3s_lookups(self, k3s_bundle):
        assert k3s_bundle.image("klipper-helm") == "v0.8.0"
        assert k3s_bundle.image("coredns") == "1.10.1"
        assert k3s_bundle.build_version("VERSION_CONTAINERD") == "v1.7.1-k3s1"
        assert k3s_bundle.build_version("VERSION_RUNC") == "v1.1.7"
        assert k3s_bundle.go_dependency("etcd/api/v3") == "v3.5.7-k3s1"
        assert k3s_bundle.go_dependency("kine") == "v0.10.1"
        assert k3s_bundle.sqlite_version() == "3.42.0"

    def test_rke2_lookups(self, rke2_bundle):
        assert rke2_bundle.dockerfile_chart("rke2-cilium") == "1.13.200"
        assert rke2_bundle.dockerfile_chart("rke2-canal") == "v3.25.1"
        assert rke2_bundle.dockerfile_layer("hardened-containerd") == "v1.7.1"
        assert rke2_bundle.image("hardened-coredns") == "v1.10.1"
        assert rke2_bundle.image("calico-node") == "v3.25.1"
        assert rke2_bundle.build_version("ETCD_VERSION") == "v3.5.7-k3s1"
        assert rke2_bundle.go_dependency("helm-controller") == "v0.15.0"

    def test_empty_bundle_raises_not_found(self):
        bundle = ArtifactBundle()
        with pytest.raises(NotFoundError):
            bundle.image("klipper-helm")
        with pytest.raises(NotFoundError):
            bundle.sqlite_version()
