"""
Multi-document manifest codec.

Decodes YAML or JSON manifest streams into plain dicts and encodes them
back to multi-document YAML.
"""

import json
from typing import IO, Any, Iterable, Iterator, List, Sequence, Union

import yaml

from .errors import DecodeError, EncodeError
from .types import Document, DocumentSet

DOCUMENT_SEPARATOR = "---\n"

Source = Union[str, bytes, IO[str], IO[bytes]]


def _read_text(source: Source) -> str:
    try:
        if hasattr(source, "read"):
            source = source.read()
        if isinstance(source, bytes):
            source = source.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(f"failed to decode manifest: {e}") from e
    return source


def _is_json_stream(text: str) -> bool:
    # Same sniffing rule as the Kubernetes YAML-or-JSON decoder.
    return text.lstrip().startswith("{")


def _load_json_values(text: str) -> List[Any]:
    decoder = json.JSONDecoder()
    values = []
    pos = 0
    end = len(text)
    while True:
        while pos < end and text[pos].isspace():
            pos += 1
        if pos >= end:
            return values
        value, pos = decoder.raw_decode(text, pos)
        values.append(value)


def _iter_yaml_documents(text: str) -> Iterator[Any]:
    try:
        for value in yaml.safe_load_all(text):
            yield value
    except yaml.YAMLError as e:
        raise DecodeError(f"failed to decode manifest: {e}") from e


def load_documents(source: Source) -> DocumentSet:
    """
    Decode a multi-document manifest stream.

    Blank documents, bare separators and empty mappings are skipped. Any
    malformed segment fails the whole decode.

    A stream starting with ``{`` is first read as concatenated JSON values;
    if that fails it is read as YAML, which also accepts JSON documents
    mixed with block-style ones.

    Args:
        source: YAML/JSON text, bytes or a readable stream

    Returns:
        Manifests in stream order

    Raises:
        DecodeError: If a segment is malformed or is not a mapping
    """
    text = _read_text(source)
    values: Iterable[Any]
    if _is_json_stream(text):
        try:
            values = _load_json_values(text)
        except json.JSONDecodeError:
            values = _iter_yaml_documents(text)
    else:
        values = _iter_yaml_documents(text)

    documents: List[Document] = []
    for index, value in enumerate(values):
        if value is None:
            continue
        if not isinstance(value, dict):
            raise DecodeError(
                f"failed to decode manifest: document {index} is a "
                f"{type(value).__name__}, expected a mapping"
            )
        if not value:
            continue
        documents.append(value)
    return documents


def dump_documents(documents: Sequence[Document], stream: IO[str]) -> None:
    """
    Write manifests to a stream as multi-document YAML.

    A separator is written before every document except the first. Anything
    already written when a document fails to serialize stays written.

    Raises:
        EncodeError: If a manifest cannot be serialized
    """
    for i, document in enumerate(documents):
        data = dump_document(document)
        try:
            if i > 0:
                stream.write(DOCUMENT_SEPARATOR)
            stream.write(data)
        except OSError as e:
            raise EncodeError(f"failed to write YAML object: {e}") from e


def dump_document(document: Document) -> str:
    """Serialize a single manifest to block-style YAML."""
    try:
        return yaml.safe_dump(
            document,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )
    except yaml.YAMLError as e:
        raise EncodeError(f"failed to marshal object to YAML: {e}") from e


def dumps_documents(documents: Sequence[Document]) -> str:
    """Encode manifests to a multi-document YAML string."""
    return DOCUMENT_SEPARATOR.join(dump_document(doc) for doc in documents)
