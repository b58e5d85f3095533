"""Shared test fixtures for cluster-onboard tests."""

from typing import Any
from unittest.mock import MagicMock, patch

import pytest

from cluster_onboard.exceptions import ResourceNotFoundError
from cluster_onboard.models import CertificateConfig, ClusterInstall, Onboard


class FakeCluster:
    """In-memory stand-in for Cluster serving canned resources."""

    def __init__(
        self,
        config_maps: dict[tuple[str, str], dict[str, str]] | None = None,
        image_streams: dict[str, list[dict[str, Any]]] | None = None,
    ) -> None:
        self.config_maps = config_maps or {}
        self.image_streams = image_streams or {}
        self.calls: list[str] = []

    def get_config_map_data(self, namespace: str, name: str) -> dict[str, str]:
        self.calls.append(f"configmap {namespace}/{name}")
        if (namespace, name) not in self.config_maps:
            raise ResourceNotFoundError(f"get {name} not found")
        return self.config_maps[(namespace, name)]

    def list_image_streams(self, namespace: str) -> list[dict[str, Any]]:
        self.calls.append(f"imagestreams {namespace}")
        return self.image_streams.get(namespace, [])


def image_stream(name: str, public_repository: str | None) -> dict[str, Any]:
    """Build an ImageStream object as returned by the custom objects API."""
    status: dict[str, Any] = {"dockerImageRepository": f"image-registry.openshift-image-registry.svc:5000/openshift/{name}"}
    if public_repository is not None:
        status["publicDockerImageRepository"] = public_repository
    return {
        "apiVersion": "image.openshift.io/v1",
        "kind": "ImageStream",
        "metadata": {"name": name, "namespace": "openshift"},
        "status": status,
    }


@pytest.fixture
def make_cluster_install(tmp_path):
    """Factory for ClusterInstall objects rooted in a temporary release repo."""

    def _make(
        cluster_name: str = "build99",
        osd: bool = False,
        hosted: bool = False,
        unmanaged: bool = False,
        certificate: CertificateConfig | None = None,
    ) -> ClusterInstall:
        return ClusterInstall(
            cluster_name=cluster_name,
            onboard=Onboard(
                release_repo=str(tmp_path / "release"),
                osd=osd,
                hosted=hosted,
                unmanaged=unmanaged,
                certificate=certificate or CertificateConfig(),
            ),
        )

    return _make


@pytest.fixture
def fake_cluster():
    """A cluster exposing an install config and public image streams."""
    return FakeCluster(
        config_maps={
            ("kube-system", "cluster-config-v1"): {
                "install-config": "apiVersion: v1\nbaseDomain: ci.devcluster.openshift.com\nmetadata:\n  name: build99\n",
            }
        },
        image_streams={
            "openshift": [
                image_stream("cli", None),
                image_stream("tools", "registry.build99.ci.openshift.org/openshift/tools"),
                image_stream("tests", "other.example.com/openshift/tests"),
            ]
        },
    )


@pytest.fixture
def mock_kube_contexts():
    """Mock kubernetes config contexts."""
    with patch("kubernetes.config.list_kube_config_contexts") as mock:
        mock.return_value = ([{"name": "test-context"}, {"name": "build99"}], {"name": "test-context"})
        yield mock


@pytest.fixture
def mock_kube_config():
    """Mock kubernetes config loading."""
    with patch("kubernetes.config.load_kube_config") as mock:
        yield mock


@pytest.fixture
def mock_core_v1_api():
    """Mock CoreV1Api for ConfigMap reads."""
    with patch("kubernetes.client.CoreV1Api") as mock:
        api_instance = MagicMock()
        mock.return_value = api_instance
        yield api_instance


@pytest.fixture
def mock_custom_objects_api():
    """Mock CustomObjectsApi for ImageStream listing."""
    with patch("kubernetes.client.CustomObjectsApi") as mock:
        api_instance = MagicMock()
        mock.return_value = api_instance
        yield api_instance


@pytest.fixture
def sample_cluster_install_yaml():
    """Sample cluster install file content."""
    return """clusterName: build99
onboard:
  releaseRepo: /tmp/release
  osd: false
  hosted: true
  certificate:
    baseDomains:
      build99: ci.example.com
    imageRegistryPublicHosts:
      build99: registry.build99.ci.openshift.org
    clusterIssuer:
      build99:
        apps-tls: cert-issuer-gcp
    projectLabel:
      build99:
        apps-tls:
          key: gcp-project
          value: openshift-ci-build-farm
"""
