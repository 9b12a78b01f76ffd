"""
K3s Ingress - Convert Kubernetes Ingress resources to Gateway API resources.

This tool filters a rendered manifest stream: Ingress resources are handed
to ingress2gateway and replaced by its output, everything else passes
through unchanged and in order.
"""

__version__ = "0.1.0"

from .errors import (
    K3sIngressError,
    DecodeError,
    EncodeError,
    UsageError,
    DelegateError,
    StagingError,
    DelegateExecutionError,
    ConverterOutputError,
)
from .types import (
    Document,
    DocumentSet,
    INGRESS_KIND,
    ConverterSettings,
    PipelineResult,
    classify,
    is_kind,
    is_ingress,
    has_any,
    has_provider_selector,
)
from .codec import (
    load_documents,
    dump_documents,
    dumps_documents,
)
from .converter import (
    Converter,
    Ingress2GatewayConverter,
    staged_manifests,
)
from .pipeline import (
    build_final_manifests,
    run_pipeline,
)

__all__ = [
    # Errors
    "K3sIngressError",
    "DecodeError",
    "EncodeError",
    "UsageError",
    "DelegateError",
    "StagingError",
    "DelegateExecutionError",
    "ConverterOutputError",
    # Types
    "Document",
    "DocumentSet",
    "INGRESS_KIND",
    "ConverterSettings",
    "PipelineResult",
    "classify",
    "is_kind",
    "is_ingress",
    "has_any",
    "has_provider_selector",
    # Codec
    "load_documents",
    "dump_documents",
    "dumps_documents",
    # Converter
    "Converter",
    "Ingress2GatewayConverter",
    "staged_manifests",
    # Pipeline
    "build_final_manifests",
    "run_pipeline",
]
