"""Kubernetes cluster interaction utilities.

This module provides the Cluster class, the thin read-only view of an
OpenShift cluster that onboarding steps query.
"""

from collections.abc import Callable
from typing import Any

import click
import questionary
from icecream import ic
from kubernetes import client, config
from kubernetes.client.exceptions import ApiException
from kubernetes.config.config_exception import ConfigException
from urllib3.exceptions import MaxRetryError

from cluster_onboard import console
from cluster_onboard.exceptions import ClusterAPIError, ClusterConnectionError, ResourceNotFoundError
from cluster_onboard.styles import POINTER, PROMPT_STYLE, QMARK

IMAGE_STREAM_GROUP = "image.openshift.io"
IMAGE_STREAM_VERSION = "v1"
IMAGE_STREAM_PLURAL = "imagestreams"

# A callable that returns a ready to use cluster, raising on failure
KubeClientGetter = Callable[[], "Cluster"]


def _api_error(err: ApiException, what: str) -> ClusterAPIError | ResourceNotFoundError:
    """Translate a Kubernetes API exception into an onboarding error."""
    if err.status == 404:
        return ResourceNotFoundError(f"{what} not found")
    return ClusterAPIError(f"{what}: {err.status} {err.reason}")


class Cluster:
    """Read-only access to the resources onboarding steps need.

    Attributes:
        context: The active Kubernetes context name.
        request_timeout: Timeout in seconds applied to every API call,
                         or None to wait indefinitely.

    """

    def __init__(
        self,
        *,
        select_context: bool = False,
        context: str | None = None,
        kubeconfig: str | None = None,
        request_timeout: float | None = None,
    ) -> None:
        """Initialize Cluster with context selection.

        Args:
            select_context: If True, prompt user to select a context.
            context: Explicit context name; takes precedence over the
                     current context when selection is disabled.
            kubeconfig: Path to a kubeconfig file, defaults to the
                        kubernetes client lookup rules.
            request_timeout: Timeout in seconds for each API call.

        Raises:
            ClusterConnectionError: If kubeconfig is invalid or missing.

        """
        self.kubeconfig = kubeconfig
        self.request_timeout = request_timeout
        self.context: str = self._set_context(select_context=select_context, context=context, kubeconfig=kubeconfig)
        try:
            config.load_kube_config(config_file=kubeconfig, context=self.context)
        except ConfigException as e:
            raise ClusterConnectionError(f"Cannot load context {self.context!r}: {e}") from e

    @staticmethod
    def _set_context(*, select_context: bool, context: str | None, kubeconfig: str | None) -> str:
        """Set the Kubernetes context to use.

        Returns:
            The selected, explicit or current context name.

        Raises:
            ClusterConnectionError: If kubeconfig is invalid or missing.
            click.Abort: If user cancels context selection.

        """
        try:
            contexts, current_context = config.list_kube_config_contexts(config_file=kubeconfig)
        except ConfigException as e:
            raise ClusterConnectionError(f"Invalid or missing kubeconfig: {e}") from e
        if select_context:
            context_names: list[str] = [ctx["name"] for ctx in contexts]
            context = questionary.select(
                "Select context to work with",
                choices=context_names,
                style=PROMPT_STYLE,
                pointer=POINTER,
                qmark=QMARK,
            ).ask()
            if context is None:
                console.warning("Context selection cancelled.")
                raise click.Abort()
        elif context is None:
            if not current_context:
                raise ClusterConnectionError("No current context set in kubeconfig")
            context = str(current_context["name"])
        console.action(f"Working with {console.highlight(context)} cluster")
        return context

    def _call(self, what: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        if self.request_timeout is not None:
            kwargs["_request_timeout"] = self.request_timeout
        try:
            return fn(*args, **kwargs)
        except ApiException as e:
            raise _api_error(e, what) from e
        except MaxRetryError as e:
            raise ClusterConnectionError(f"Failed to connect to the Kubernetes cluster: {e.reason}") from e

    def get_config_map_data(self, namespace: str, name: str) -> dict[str, str]:
        """Read the data section of a ConfigMap.

        Args:
            namespace: Namespace of the ConfigMap.
            name: Name of the ConfigMap.

        Returns:
            The ConfigMap data, empty when the ConfigMap has none.

        Raises:
            ResourceNotFoundError: If the ConfigMap does not exist.
            ClusterAPIError: If the API rejects the request.
            ClusterConnectionError: If the cluster is unreachable.

        """
        with console.spinner(f"Reading ConfigMap {namespace}/{name}..."):
            cm = self._call(
                f"get {name}",
                client.CoreV1Api().read_namespaced_config_map,
                name=name,
                namespace=namespace,
            )
        data = dict(cm.data or {})
        ic(sorted(data))
        return data

    def list_image_streams(self, namespace: str) -> list[dict[str, Any]]:
        """List the ImageStreams of a namespace.

        Args:
            namespace: Namespace to list ImageStreams in.

        Returns:
            The ImageStream objects as plain dictionaries.

        Raises:
            ClusterAPIError: If the API rejects the request.
            ClusterConnectionError: If the cluster is unreachable.

        """
        with console.spinner(f"Listing image streams in {namespace}..."):
            res = self._call(
                "image streams",
                client.CustomObjectsApi().list_namespaced_custom_object,
                group=IMAGE_STREAM_GROUP,
                version=IMAGE_STREAM_VERSION,
                namespace=namespace,
                plural=IMAGE_STREAM_PLURAL,
            )
        items: list[dict[str, Any]] = res.get("items") or []
        ic(len(items))
        return items

    def __repr__(self) -> str:
        """Return a detailed string representation for debugging."""
        return f"Cluster(context={self.context!r}, kubeconfig={self.kubeconfig!r})"
