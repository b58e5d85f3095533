"""Parsing of container image references.

A reference has the shape ``[registry/][namespace/]name[:tag][@digest]``,
for example ``registry.ci.openshift.org/openshift/cli:latest``. The first
path component is only treated as a registry when it looks like a host: it
contains a '.' or a ':' or is exactly 'localhost'.
"""

import re
from typing import NamedTuple

from cluster_onboard.exceptions import MalformedDataError

_NAME_MAX_LENGTH = 255

_DOMAIN_COMPONENT = r"(?:[a-zA-Z0-9]|[a-zA-Z0-9][a-zA-Z0-9-]*[a-zA-Z0-9])"
_DOMAIN = rf"{_DOMAIN_COMPONENT}(?:\.{_DOMAIN_COMPONENT})*(?::[0-9]+)?"
_PATH_COMPONENT = r"[a-z0-9]+(?:(?:[._]|__|-+)[a-z0-9]+)*"
_TAG = r"[\w][\w.-]{0,127}"
_DIGEST = r"[A-Za-z][A-Za-z0-9]*(?:[-_+.][A-Za-z][A-Za-z0-9]*)*:[0-9a-fA-F]{32,}"

_REFERENCE_PATTERN = re.compile(
    rf"^(?P<name>(?:{_DOMAIN}/)?{_PATH_COMPONENT}(?:/{_PATH_COMPONENT})*)"
    rf"(?::(?P<tag>{_TAG}))?"
    rf"(?:@(?P<digest>{_DIGEST}))?$"
)


class ImageReference(NamedTuple):
    """The components of a parsed image reference.

    Attributes:
        registry: Registry host, possibly with a port. Empty when the
                  reference does not name one.
        namespace: Repository namespace, possibly nested ('a/b').
        name: Repository name.
        tag: Tag, empty when absent.
        digest: Digest, empty when absent.

    """

    registry: str
    namespace: str
    name: str
    tag: str = ""
    digest: str = ""


def _is_registry(component: str) -> bool:
    return "." in component or ":" in component or component == "localhost"


def parse_image_reference(value: str) -> ImageReference:
    """Parse an image reference into its components.

    Args:
        value: The reference string.

    Returns:
        The parsed ImageReference.

    Raises:
        MalformedDataError: If the value is not a valid image reference.

    """
    match = _REFERENCE_PATTERN.match(value)
    if match is None:
        raise MalformedDataError(f"invalid reference format: {value!r}")

    name = match.group("name")
    if len(name) > _NAME_MAX_LENGTH:
        raise MalformedDataError(f"repository name must not be more than {_NAME_MAX_LENGTH} characters")

    parts = name.split("/")
    registry = ""
    if len(parts) > 1 and _is_registry(parts[0]):
        registry = parts.pop(0)
    elif any(c.isupper() for c in parts[0]):
        raise MalformedDataError(f"repository name must be lowercase: {value!r}")

    return ImageReference(
        registry=registry,
        namespace="/".join(parts[:-1]),
        name=parts[-1],
        tag=match.group("tag") or "",
        digest=match.group("digest") or "",
    )
