"""Data models for cluster-onboard.

This module provides type-safe data structures for the application,
replacing loosely-typed dictionaries with proper Python data classes.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NamedTuple

from cluster_onboard.exceptions import ManifestValidationError

CERT_MANAGER_API_VERSION = "cert-manager.io/v1"

# Kubernetes DNS subdomain name validation (RFC 1123)
_DNS_SUBDOMAIN_MAX_LENGTH = 253
_DNS_SUBDOMAIN_PATTERN = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*$")
_DNS_LABEL_PATTERN = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$")
_LABEL_VALUE_PATTERN = re.compile(r"^(([A-Za-z0-9][-A-Za-z0-9_.]*)?[A-Za-z0-9])?$")
_LABEL_MAX_LENGTH = 63


def _validate_k8s_name(name: str, what: str) -> None:
    if not name:
        raise ManifestValidationError(f"{what} cannot be empty")
    if len(name) > _DNS_SUBDOMAIN_MAX_LENGTH:
        raise ManifestValidationError(f"{what} '{name}' must be {_DNS_SUBDOMAIN_MAX_LENGTH} characters or less")
    if not _DNS_SUBDOMAIN_PATTERN.match(name):
        raise ManifestValidationError(
            f"{what} '{name}' must consist of lowercase alphanumeric characters, '-' or '.', "
            "and must start and end with an alphanumeric character"
        )


def _validate_dns_name(dns_name: str) -> None:
    """Validate a certificate DNS name, allowing a single leading wildcard label."""
    host = dns_name[2:] if dns_name.startswith("*.") else dns_name
    # Registry hosts may carry a port, which cert-manager does not accept
    if ":" in host:
        raise ManifestValidationError(f"DNS name '{dns_name}' must not contain a port")
    _validate_k8s_name(host.lower(), "DNS name")


def _validate_label(key: str, value: str) -> None:
    prefix, _, name = key.rpartition("/")
    if prefix:
        _validate_k8s_name(prefix, "label key prefix")
    if not name or len(name) > _LABEL_MAX_LENGTH or not _LABEL_VALUE_PATTERN.match(name):
        raise ManifestValidationError(f"invalid label key '{key}'")
    if len(value) > _LABEL_MAX_LENGTH or not _LABEL_VALUE_PATTERN.match(value):
        raise ManifestValidationError(f"invalid label value '{value}' for key '{key}'")


class IssuerKind(str, Enum):
    """Issuer kinds a cert-manager Certificate may reference.

    Inherits from str to allow direct use in YAML output.
    """

    CLUSTER_ISSUER = "ClusterIssuer"
    ISSUER = "Issuer"


class ProjectLabel(NamedTuple):
    """A single label key/value pair attached to a certificate."""

    key: str
    value: str


class CertificateDefaults(NamedTuple):
    """Fixed settings of a generated certificate.

    Attributes:
        namespace: The namespace the Certificate is created in.
        secret_name: The secret cert-manager stores the key pair in.
        issuer: Cluster issuer used when no override is configured.
        label: Project label used when no override is configured.

    """

    namespace: str
    secret_name: str
    issuer: str
    label: ProjectLabel


@dataclass(frozen=True, slots=True)
class IssuerRef:
    """Reference from a Certificate to the issuer that signs it."""

    name: str
    kind: IssuerKind = IssuerKind.CLUSTER_ISSUER


@dataclass(frozen=True, slots=True)
class Certificate:
    """A cert-manager.io/v1 Certificate resource.

    Instances are validated on construction so malformed output is caught
    before anything is written.

    Attributes:
        name: Resource name, also used as its identity in override maps.
        namespace: Namespace of the resource.
        labels: Metadata labels.
        dns_names: DNS names requested for the certificate.
        issuer_ref: Issuer that signs the certificate.
        secret_name: Secret where the signed certificate is stored.

    """

    name: str
    namespace: str
    labels: dict[str, str]
    dns_names: list[str]
    issuer_ref: IssuerRef
    secret_name: str

    def __post_init__(self) -> None:
        _validate_k8s_name(self.name, "name")
        _validate_k8s_name(self.namespace, "namespace")
        _validate_k8s_name(self.secret_name, "secretName")
        _validate_k8s_name(self.issuer_ref.name, "issuerRef.name")
        if not isinstance(self.issuer_ref.kind, IssuerKind):
            raise ManifestValidationError(f"unsupported issuer kind '{self.issuer_ref.kind}'")
        if not self.dns_names:
            raise ManifestValidationError(f"certificate '{self.name}' must have at least one DNS name")
        for dns_name in self.dns_names:
            _validate_dns_name(dns_name)
        if len(self.labels) != 1:
            raise ManifestValidationError(
                f"certificate '{self.name}' must have exactly one label, got {len(self.labels)}"
            )
        for key, value in self.labels.items():
            _validate_label(key, value)

    def to_manifest(self) -> dict[str, Any]:
        """Return the resource as a plain document ready for serialization."""
        return {
            "apiVersion": CERT_MANAGER_API_VERSION,
            "kind": "Certificate",
            "metadata": {
                "labels": dict(self.labels),
                "name": self.name,
                "namespace": self.namespace,
            },
            "spec": {
                "dnsNames": list(self.dns_names),
                "issuerRef": {
                    "kind": self.issuer_ref.kind.value,
                    "name": self.issuer_ref.name,
                },
                "secretName": self.secret_name,
            },
        }


@dataclass(frozen=True, slots=True)
class CertificateConfig:
    """Per-cluster overrides for certificate generation.

    Every map is keyed by cluster name.

    Attributes:
        base_domains: Base domain override.
        image_registry_public_hosts: Image registry public host override.
        cluster_issuer: Issuer override, keyed by certificate name.
        project_label: Label override, keyed by certificate name.

    """

    base_domains: dict[str, str] = field(default_factory=dict)
    image_registry_public_hosts: dict[str, str] = field(default_factory=dict)
    cluster_issuer: dict[str, dict[str, str]] = field(default_factory=dict)
    project_label: dict[str, dict[str, ProjectLabel]] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Onboard:
    """Onboarding settings of a cluster."""

    release_repo: str
    osd: bool = False
    hosted: bool = False
    unmanaged: bool = False
    certificate: CertificateConfig = field(default_factory=CertificateConfig)


@dataclass(frozen=True, slots=True)
class ClusterInstall:
    """Configuration identifying a cluster being onboarded."""

    cluster_name: str
    onboard: Onboard
