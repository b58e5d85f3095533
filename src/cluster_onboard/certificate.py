"""Certificate onboarding step.

Generates the cert-manager Certificate manifests a build cluster needs: the
API server and default ingress certificates, and the certificate for the
public image registry route.
"""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import click
import yaml
from icecream import ic

from cluster_onboard import console
from cluster_onboard.cluster import Cluster, KubeClientGetter
from cluster_onboard.exceptions import (
    ClusterConnectionError,
    MalformedDataError,
    ManifestWriteError,
    NoMatchFoundError,
    OnboardError,
    ResourceNotFoundError,
)
from cluster_onboard.manifests import MANIFEST_FILE_MODE, certificate_manifest_path, marshal_multidoc, write_manifest
from cluster_onboard.models import Certificate, CertificateDefaults, ClusterInstall, IssuerRef, ProjectLabel
from cluster_onboard.reference import parse_image_reference

CLUSTER_CONFIG_NAMESPACE = "kube-system"
CLUSTER_CONFIG_NAME = "cluster-config-v1"
INSTALL_CONFIG_KEY = "install-config"
IMAGE_STREAM_NAMESPACE = "openshift"

APISERVER_TLS = "apiserver-tls"
APPS_TLS = "apps-tls"
REGISTRY_TLS = "registry-tls"

_CI_INFRA_PROJECT = "openshift-ci-infra"

CERTIFICATE_DEFAULTS: dict[str, CertificateDefaults] = {
    APISERVER_TLS: CertificateDefaults(
        namespace="openshift-config",
        secret_name="apiserver-tls",
        issuer="cert-issuer-aws",
        label=ProjectLabel("aws-project", _CI_INFRA_PROJECT),
    ),
    APPS_TLS: CertificateDefaults(
        namespace="openshift-ingress",
        secret_name="apps-tls",
        issuer="cert-issuer-aws",
        label=ProjectLabel("aws-project", _CI_INFRA_PROJECT),
    ),
    REGISTRY_TLS: CertificateDefaults(
        namespace="openshift-image-registry",
        secret_name="public-route-tls",
        issuer="cert-issuer",
        label=ProjectLabel("gcp-project", _CI_INFRA_PROJECT),
    ),
}

ManifestWriter = Callable[[Path, bytes, int], None]


class CertificateStep:
    """Render the certificate manifests of a cluster into the release repo.

    Attributes:
        cluster_install: The cluster being onboarded.
        kube_client: Provider of the cluster client, only called by run().
        write_manifest: Function writing (path, data, mode) to disk.

    """

    name = "certificate"

    def __init__(
        self,
        cluster_install: ClusterInstall,
        kube_client: KubeClientGetter,
        write_manifest: ManifestWriter = write_manifest,
    ) -> None:
        self.cluster_install = cluster_install
        self.kube_client = kube_client
        self.write_manifest = write_manifest

    @property
    def cluster_name(self) -> str:
        """The name of the cluster being onboarded."""
        return self.cluster_install.cluster_name

    @property
    def output_path(self) -> Path:
        """Where the certificate manifests are written."""
        return certificate_manifest_path(self.cluster_install.onboard.release_repo, self.cluster_name)

    def run(self) -> Path:
        """Generate the certificate manifests and write them to disk.

        Returns:
            The path the manifests were written to.

        Raises:
            OnboardError: On the first failing stage; the message is
                          prefixed with the stage name.

        """
        try:
            cluster = self.kube_client()
        except OnboardError as e:
            raise e.with_stage("kube client") from e
        except click.Abort:
            raise
        except Exception as e:
            raise ClusterConnectionError(f"kube client: {e}") from e

        try:
            base_domain = self.base_domain(cluster)
        except OnboardError as e:
            raise e.with_stage("base domain") from e

        try:
            host = self.image_registry_public_host(cluster)
        except OnboardError as e:
            raise e.with_stage("image registry public host") from e

        try:
            certificates = self.generate_certificates(base_domain, host)
        except OnboardError as e:
            raise e.with_stage("certificates") from e

        try:
            data = marshal_multidoc(cert.to_manifest() for cert in certificates)
        except OnboardError as e:
            raise e.with_stage("marshal") from e

        output_path = self.output_path
        try:
            self.write_manifest(output_path, data, MANIFEST_FILE_MODE)
        except OSError as e:
            raise ManifestWriteError(f"write template {output_path}: {e}") from e

        console.success(f"Certificates generated: {console.highlight(str(output_path))}")
        return output_path

    def base_domain(self, cluster: Cluster) -> str:
        """Resolve the base domain of the cluster.

        An override from the configuration wins; otherwise the domain is read
        from the installer's config stored in the cluster.

        Raises:
            ResourceNotFoundError: If the install config or its baseDomain is missing.
            MalformedDataError: If the install config is not valid YAML.

        """
        overrides = self.cluster_install.onboard.certificate.base_domains
        if self.cluster_name in overrides:
            console.info("Override base domain from config")
            return overrides[self.cluster_name]

        data = cluster.get_config_map_data(CLUSTER_CONFIG_NAMESPACE, CLUSTER_CONFIG_NAME)
        if INSTALL_CONFIG_KEY not in data:
            raise ResourceNotFoundError(f"{INSTALL_CONFIG_KEY} not found")

        try:
            install_config: Any = yaml.safe_load(data[INSTALL_CONFIG_KEY])
        except yaml.YAMLError as err:
            raise MalformedDataError(f"unmarshal install config: {err}") from err

        if not isinstance(install_config, dict):
            raise MalformedDataError("unmarshal install config: not a mapping")
        base_domain = install_config.get("baseDomain")
        if not base_domain:
            raise ResourceNotFoundError("baseDomain not found in install config")
        if not isinstance(base_domain, str):
            raise MalformedDataError("baseDomain in install config is not a string")
        ic(base_domain)
        return base_domain

    def image_registry_public_host(self, cluster: Cluster) -> str:
        """Resolve the public host of the cluster's image registry.

        An override from the configuration wins; otherwise the host is taken
        from the first ImageStream in the openshift namespace that exposes a
        public repository.

        Raises:
            MalformedDataError: If the public repository cannot be parsed.
            NoMatchFoundError: If no ImageStream exposes a public repository.

        """
        overrides = self.cluster_install.onboard.certificate.image_registry_public_hosts
        if self.cluster_name in overrides:
            console.info("Override image registry public host from config")
            return overrides[self.cluster_name]

        for image_stream in cluster.list_image_streams(IMAGE_STREAM_NAMESPACE):
            value = (image_stream.get("status") or {}).get("publicDockerImageRepository")
            if not value:
                continue
            try:
                ref = parse_image_reference(value)
            except MalformedDataError as err:
                raise MalformedDataError(f"parse docker image repository: {err}") from err
            if not ref.registry:
                raise MalformedDataError(f"parse docker image repository: no registry in {value!r}")
            ic(value, ref.registry)
            return ref.registry

        raise NoMatchFoundError("no public registry host could be located")

    def generate_certificates(self, base_domain: str, image_registry_host: str) -> list[Certificate]:
        """Build the certificates for the cluster, in output order.

        The API server and ingress certificates are only generated for
        clusters whose control plane is managed by us.
        """
        certificates: list[Certificate] = []

        skip_reason = self._skip_reason()
        if skip_reason is None:
            certificates.append(self._certificate(APISERVER_TLS, f"api.{self.cluster_name}.{base_domain}"))
            certificates.append(self._certificate(APPS_TLS, f"*.apps.{self.cluster_name}.{base_domain}"))
        else:
            console.info(f"Skipping {APISERVER_TLS} and {APPS_TLS}: cluster is {skip_reason}")

        certificates.append(self._certificate(REGISTRY_TLS, image_registry_host))
        return certificates

    def _skip_reason(self) -> str | None:
        onboard = self.cluster_install.onboard
        flags = {"OSD": onboard.osd, "Hosted": onboard.hosted, "Unmanaged": onboard.unmanaged}
        set_flags = [flag for flag, value in flags.items() if value]
        return ", ".join(set_flags) if set_flags else None

    def _certificate(self, name: str, dns_name: str) -> Certificate:
        defaults = CERTIFICATE_DEFAULTS[name]
        label = self.project_label_or_default(name, defaults.label)
        return Certificate(
            name=name,
            namespace=defaults.namespace,
            labels={label.key: label.value},
            dns_names=[dns_name],
            issuer_ref=IssuerRef(name=self.cluster_issuer_or_default(name, defaults.issuer)),
            secret_name=defaults.secret_name,
        )

    def cluster_issuer_or_default(self, certificate: str, default: str) -> str:
        """Return the issuer configured for a certificate of this cluster, or default."""
        issuers = self.cluster_install.onboard.certificate.cluster_issuer.get(self.cluster_name, {})
        return issuers.get(certificate, default)

    def project_label_or_default(self, certificate: str, default: ProjectLabel) -> ProjectLabel:
        """Return the label configured for a certificate of this cluster, or default."""
        labels = self.cluster_install.onboard.certificate.project_label.get(self.cluster_name, {})
        return labels.get(certificate, default)
