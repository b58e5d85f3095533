"""Custom exceptions for cluster-onboard.

This module defines the exception hierarchy used throughout the application
to provide meaningful error messages and proper error handling.
"""


class OnboardError(Exception):
    """Base exception for all cluster-onboard errors.

    All custom exceptions in this package inherit from this class,
    allowing callers to catch all onboarding errors with a single
    except clause if desired.
    """

    def with_stage(self, stage: str) -> "OnboardError":
        """Return an error of the same kind prefixed with the failing stage.

        Args:
            stage: Short name of the stage that failed (e.g. 'base domain').

        Returns:
            A new exception instance with the message '<stage>: <message>'.

        """
        return type(self)(f"{stage}: {self}")


class ClusterConnectionError(OnboardError):
    """Raised when a client for the Kubernetes cluster cannot be obtained.

    This can occur when:
    - The kubeconfig is invalid or missing
    - The cluster is unreachable
    - Authentication fails
    """


class ClusterAPIError(OnboardError):
    """Raised when the Kubernetes API rejects a request for a reason other than not-found."""


class ResourceNotFoundError(OnboardError):
    """Raised when a resource or a field inside it is missing.

    This typically means:
    - The cluster-config-v1 ConfigMap does not exist
    - The ConfigMap has no install-config key
    - The install config does not declare a baseDomain
    """


class MalformedDataError(OnboardError):
    """Raised when data read from the cluster cannot be parsed."""


class ManifestValidationError(MalformedDataError):
    """Raised when a manifest does not match the target resource schema."""


class NoMatchFoundError(OnboardError):
    """Raised when a lookup over a list of resources finds no candidate."""


class SerializationError(OnboardError):
    """Raised when manifests cannot be serialized to YAML."""


class ManifestWriteError(OnboardError):
    """Raised when the rendered manifests cannot be written to disk."""


class ConfigError(OnboardError):
    """Raised when the cluster install configuration is invalid.

    This can occur when:
    - The file does not exist
    - The file is not valid YAML
    - Required keys are missing or have the wrong type
    """


class BinaryNotFoundError(OnboardError):
    """Raised when a required binary (dot) is not found on PATH."""


class RenderError(OnboardError):
    """Raised when the Graphviz renderer exits with an error."""
