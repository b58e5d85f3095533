"""cluster-onboard: tooling for onboarding OpenShift CI build clusters.

This package renders the manifests a build cluster needs into a release
repository checkout, and converts ci-operator step graphs to Graphviz.

Example usage:
    from cluster_onboard import CertificateStep, Cluster, load_cluster_install

    install = load_cluster_install("cluster-install.yaml")
    CertificateStep(install, kube_client=lambda: Cluster()).run()
"""

__version__ = "0.1.0"

from cluster_onboard.certificate import CertificateStep
from cluster_onboard.cluster import Cluster
from cluster_onboard.config import load_cluster_install
from cluster_onboard.exceptions import (
    BinaryNotFoundError,
    ClusterAPIError,
    ClusterConnectionError,
    ConfigError,
    MalformedDataError,
    ManifestValidationError,
    ManifestWriteError,
    NoMatchFoundError,
    OnboardError,
    RenderError,
    ResourceNotFoundError,
    SerializationError,
)
from cluster_onboard.graph import digraph_to_dot

__all__ = [
    # Version
    "__version__",
    # Steps and helpers
    "CertificateStep",
    "Cluster",
    "load_cluster_install",
    "digraph_to_dot",
    # Exceptions
    "OnboardError",
    "BinaryNotFoundError",
    "ClusterAPIError",
    "ClusterConnectionError",
    "ConfigError",
    "MalformedDataError",
    "ManifestValidationError",
    "ManifestWriteError",
    "NoMatchFoundError",
    "RenderError",
    "ResourceNotFoundError",
    "SerializationError",
]
