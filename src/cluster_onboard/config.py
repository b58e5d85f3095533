"""Loading of cluster install configuration files.

The configuration is a YAML document describing the cluster being onboarded,
for example::

    clusterName: build99
    onboard:
      releaseRepo: /path/to/openshift/release
      osd: false
      certificate:
        baseDomains:
          build99: ci.example.com
        clusterIssuer:
          build99:
            apps-tls: cert-issuer-gcp
        projectLabel:
          build99:
            apps-tls:
              key: gcp-project
              value: openshift-ci-build-farm
"""

from pathlib import Path
from typing import Any

import yaml
from icecream import ic

from cluster_onboard.exceptions import ConfigError
from cluster_onboard.models import CertificateConfig, ClusterInstall, Onboard, ProjectLabel


def _mapping(value: Any, where: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{where}' must be a mapping, got {type(value).__name__}")
    return value


def _string(value: Any, where: str) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"'{where}' must be a string, got {type(value).__name__}")
    return value


def _flag(value: Any, where: str) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ConfigError(f"'{where}' must be a boolean, got {type(value).__name__}")
    return value


def _string_map(value: Any, where: str) -> dict[str, str]:
    return {
        str(key): _string(item, f"{where}.{key}") for key, item in _mapping(value, where).items()
    }


def _parse_certificate_config(raw: dict[str, Any]) -> CertificateConfig:
    cluster_issuer = {
        str(cluster): _string_map(issuers, f"onboard.certificate.clusterIssuer.{cluster}")
        for cluster, issuers in _mapping(raw.get("clusterIssuer"), "onboard.certificate.clusterIssuer").items()
    }

    project_label: dict[str, dict[str, ProjectLabel]] = {}
    for cluster, labels in _mapping(raw.get("projectLabel"), "onboard.certificate.projectLabel").items():
        where = f"onboard.certificate.projectLabel.{cluster}"
        project_label[str(cluster)] = {}
        for certificate, label in _mapping(labels, where).items():
            label = _mapping(label, f"{where}.{certificate}")
            project_label[str(cluster)][str(certificate)] = ProjectLabel(
                key=_string(label.get("key"), f"{where}.{certificate}.key"),
                value=_string(label.get("value"), f"{where}.{certificate}.value"),
            )

    return CertificateConfig(
        base_domains=_string_map(raw.get("baseDomains"), "onboard.certificate.baseDomains"),
        image_registry_public_hosts=_string_map(
            raw.get("imageRegistryPublicHosts"), "onboard.certificate.imageRegistryPublicHosts"
        ),
        cluster_issuer=cluster_issuer,
        project_label=project_label,
    )


def parse_cluster_install(raw: Any, release_repo: str | None = None) -> ClusterInstall:
    """Build a ClusterInstall from an already decoded YAML document.

    Args:
        raw: The decoded document.
        release_repo: Optional release repository path overriding
                      'onboard.releaseRepo'.

    Returns:
        The parsed ClusterInstall.

    Raises:
        ConfigError: If required keys are missing or have the wrong type.

    """
    raw = _mapping(raw, "<root>")
    if not raw.get("clusterName"):
        raise ConfigError("'clusterName' is required")
    cluster_name = _string(raw["clusterName"], "clusterName")

    onboard = _mapping(raw.get("onboard"), "onboard")
    repo = release_repo if release_repo is not None else onboard.get("releaseRepo")
    if not repo:
        raise ConfigError("'onboard.releaseRepo' is required")

    return ClusterInstall(
        cluster_name=cluster_name,
        onboard=Onboard(
            release_repo=_string(repo, "onboard.releaseRepo"),
            osd=_flag(onboard.get("osd"), "onboard.osd"),
            hosted=_flag(onboard.get("hosted"), "onboard.hosted"),
            unmanaged=_flag(onboard.get("unmanaged"), "onboard.unmanaged"),
            certificate=_parse_certificate_config(_mapping(onboard.get("certificate"), "onboard.certificate")),
        ),
    )


def load_cluster_install(path: str | Path, release_repo: str | None = None) -> ClusterInstall:
    """Load a ClusterInstall from a YAML file.

    Args:
        path: Path to the cluster install file.
        release_repo: Optional release repository path overriding the one
                      in the file.

    Returns:
        The parsed ClusterInstall.

    Raises:
        ConfigError: If the file cannot be read, is not valid YAML or does
                     not describe a cluster install.

    """
    path = Path(path)
    try:
        with path.open() as stream:
            raw = yaml.safe_load(stream)
    except FileNotFoundError:
        raise ConfigError(f"Cluster install file '{path}' not found") from None
    except OSError as err:
        raise ConfigError(f"Cannot read cluster install file '{path}': {err}") from err
    except yaml.YAMLError as err:
        raise ConfigError(f"Invalid YAML in cluster install file '{path}': {err}") from err

    cluster_install = parse_cluster_install(raw, release_repo=release_repo)
    ic(cluster_install)
    return cluster_install
