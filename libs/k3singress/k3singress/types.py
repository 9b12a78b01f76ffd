"""
Type definitions for K3s Ingress.

Manifests are handled as plain, schema-less mappings. The only field ever
inspected is the ``kind`` discriminator.
"""

import os
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .errors import UsageError

# A decoded manifest: key order is the insertion order of the source document.
Document = Dict[str, Any]
DocumentSet = List[Document]

INGRESS_KIND = "Ingress"

DEFAULT_CONVERTER_BINARY = "ingress2gateway"
CONVERTER_BINARY_ENV = "INGRESS2GATEWAY_BIN"
CONVERTER_TIMEOUT_ENV = "INGRESS2GATEWAY_TIMEOUT"


def classify(document: Mapping[str, Any]) -> Optional[str]:
    """
    Read the ``kind`` discriminator of a manifest.

    Returns:
        The kind, or None when the field is missing or not a string
    """
    kind = document.get("kind")
    if isinstance(kind, str):
        return kind
    return None


def is_kind(document: Mapping[str, Any], kind: str) -> bool:
    """Check whether a manifest has the given kind."""
    return classify(document) == kind


def is_ingress(document: Mapping[str, Any]) -> bool:
    return is_kind(document, INGRESS_KIND)


def has_any(documents: Sequence[Mapping[str, Any]], kind: str) -> bool:
    """Check whether any manifest in the set has the given kind."""
    return any(is_kind(doc, kind) for doc in documents)


def has_provider_selector(args: Sequence[str]) -> bool:
    """Check for ``--providers=<name>`` or ``--providers <name>`` in converter args."""
    for arg in args:
        if arg.startswith("--providers=") or arg == "--providers":
            return True
    return False


@dataclass
class ConverterSettings:
    """How to invoke the external ingress2gateway converter."""
    binary: str = DEFAULT_CONVERTER_BINARY
    timeout: Optional[float] = None  # seconds, None waits forever

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ConverterSettings":
        """
        Build settings from environment variables.

        Args:
            environ: Environment mapping (default: os.environ)

        Returns:
            ConverterSettings object

        Raises:
            UsageError: If the timeout variable is not a positive number
        """
        if environ is None:
            environ = os.environ

        binary = environ.get(CONVERTER_BINARY_ENV) or DEFAULT_CONVERTER_BINARY

        timeout = None
        raw_timeout = environ.get(CONVERTER_TIMEOUT_ENV)
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                raise UsageError(
                    f"{CONVERTER_TIMEOUT_ENV} must be a number of seconds, got {raw_timeout!r}"
                )
            if timeout <= 0:
                raise UsageError(f"{CONVERTER_TIMEOUT_ENV} must be positive, got {raw_timeout!r}")

        return cls(binary=binary, timeout=timeout)


@dataclass
class PipelineResult:
    """Summary of one pipeline run."""
    input_count: int = 0
    ingress_count: int = 0
    converted_count: int = 0
    output_count: int = 0
    converter_invoked: bool = False
