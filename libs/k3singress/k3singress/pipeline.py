"""
Manifest pipeline for K3s Ingress.

Reads a manifest stream, hands it to a converter when it contains Ingress
resources, and writes the original non-Ingress manifests followed by the
converted ones.
"""

import logging
from typing import IO, Sequence

from .codec import Source, dump_documents, load_documents
from .converter import Converter
from .types import INGRESS_KIND, Document, DocumentSet, PipelineResult, has_any, is_ingress

logger = logging.getLogger(__name__)


def strip_ingresses(documents: Sequence[Document]) -> DocumentSet:
    """Return the manifests that are not Ingress resources, in order."""
    return [doc for doc in documents if not is_ingress(doc)]


def build_final_manifests(
    original: Sequence[Document],
    converted: Sequence[Document],
) -> DocumentSet:
    """
    Build the final manifest set.

    Original Ingress resources are dropped, every other original manifest is
    kept, and the converted manifests are appended.
    """
    return strip_ingresses(original) + list(converted)


def run_pipeline(
    source: Source,
    sink: IO[str],
    converter: Converter,
    converter_args: Sequence[str],
) -> PipelineResult:
    """
    Run the full read, convert and write cycle.

    Args:
        source: Input manifest stream
        sink: Output text stream
        converter: Converter for Ingress resources
        converter_args: Arguments forwarded to the converter

    Returns:
        PipelineResult summary

    Raises:
        DecodeError: If the input is malformed
        DelegateError: If conversion fails
        EncodeError: If the output cannot be written
    """
    original = load_documents(source)
    result = PipelineResult(input_count=len(original))

    # Nothing in, nothing out.
    if not original:
        return result

    if not has_any(original, INGRESS_KIND):
        logger.warning("no Ingress resources found in input")
        dump_documents(original, sink)
        result.output_count = len(original)
        return result

    result.ingress_count = sum(1 for doc in original if is_ingress(doc))
    logger.debug(
        "Converting %d manifests (%d Ingress)",
        result.input_count,
        result.ingress_count,
    )

    converted = converter.convert(original, converter_args)
    result.converter_invoked = True
    result.converted_count = len(converted)

    final = build_final_manifests(original, converted)
    dump_documents(final, sink)
    result.output_count = len(final)
    return result
