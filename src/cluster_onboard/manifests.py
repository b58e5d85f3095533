"""Manifest serialization and release repository paths."""

import os
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml

from cluster_onboard.exceptions import SerializationError

MANIFEST_FILE_MODE = 0o644


def build_cluster_manifest_path(release_repo: str | Path, cluster_name: str) -> Path:
    """Return the directory holding a build cluster's manifests in the release repo."""
    return Path(release_repo) / "clusters" / "build-clusters" / cluster_name


def certificate_manifest_path(release_repo: str | Path, cluster_name: str) -> Path:
    """Return the path of a build cluster's certificate manifest.

    Args:
        release_repo: Path to the release repository checkout.
        cluster_name: Name of the cluster.

    Returns:
        '<release_repo>/clusters/build-clusters/<cluster>/cert-manager/certificate.yaml'

    """
    return build_cluster_manifest_path(release_repo, cluster_name) / "cert-manager" / "certificate.yaml"


def marshal_multidoc(documents: Iterable[dict[str, Any]]) -> bytes:
    """Serialize documents as a multi-document YAML stream.

    Documents are separated by '---' and keys are sorted, so the same input
    always produces the same bytes.

    Raises:
        SerializationError: If a document cannot be represented as YAML.

    """
    try:
        text = yaml.safe_dump_all(list(documents), default_flow_style=False, sort_keys=True)
    except yaml.YAMLError as err:
        raise SerializationError(str(err)) from err
    return text.encode("utf-8")


def write_manifest(path: str | Path, data: bytes, mode: int = MANIFEST_FILE_MODE) -> None:
    """Write manifest bytes to path, creating parent directories.

    The file mode is applied even when the file already exists.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    os.chmod(path, mode)
