"""
Delegation of Ingress conversion to the external ingress2gateway tool.

The full manifest set is staged to a temporary file, handed to
``ingress2gateway print --input-file <file>`` and the tool's stdout is
decoded back into manifests.
"""

import logging
import os
import subprocess
import tempfile
from contextlib import contextmanager
from typing import Iterator, List, Optional, Protocol, Sequence, Union

from .codec import dump_documents, load_documents
from .errors import (
    ConverterOutputError,
    DecodeError,
    DelegateExecutionError,
    EncodeError,
    StagingError,
)
from .types import ConverterSettings, Document, DocumentSet

logger = logging.getLogger(__name__)

PRINT_COMMAND = "print"
STAGING_PREFIX = "k3singress-"
STAGING_SUFFIX = ".yaml"


class Converter(Protocol):
    """Anything that turns a manifest set into converted Gateway API manifests."""

    def convert(self, documents: Sequence[Document], args: Sequence[str]) -> DocumentSet: ...


@contextmanager
def staged_manifests(documents: Sequence[Document]) -> Iterator[str]:
    """
    Write manifests to a uniquely named temporary file.

    Yields the file path. The file is closed before the path is yielded and
    removed when the block exits, however it exits.

    Raises:
        StagingError: If the file cannot be created, written or closed
    """
    try:
        handle = tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            prefix=STAGING_PREFIX,
            suffix=STAGING_SUFFIX,
            delete=False,
        )
    except OSError as e:
        raise StagingError(f"failed to create temp file: {e}") from e

    path = handle.name
    try:
        try:
            dump_documents(documents, handle)
        except EncodeError as e:
            raise StagingError(f"failed to write manifests to temp file: {e}") from e
        finally:
            try:
                handle.close()
            except OSError as e:
                raise StagingError(f"failed to close temp file: {e}") from e

        logger.debug("Staged %d manifests in %s", len(documents), path)
        yield path
    finally:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass


def normalize_args(args: Sequence[str]) -> List[str]:
    """Drop a leading ``print`` token; the converter is always called with print."""
    args = list(args)
    if args and args[0] == PRINT_COMMAND:
        return args[1:]
    return args


def build_command(binary: str, input_file: str, args: Sequence[str]) -> List[str]:
    """
    Build the converter command line.

    Output format is not forced; the tool defaults to YAML and callers may
    override it through ``args``.
    """
    return [binary, PRINT_COMMAND, "--input-file", input_file] + normalize_args(args)


class Ingress2GatewayConverter:
    """Runs ingress2gateway as a subprocess."""

    def __init__(self, settings: Optional[ConverterSettings] = None):
        self.settings = settings or ConverterSettings()

    def convert(self, documents: Sequence[Document], args: Sequence[str]) -> DocumentSet:
        """
        Convert a manifest set with ingress2gateway.

        The whole original set is passed so the tool can see provider
        specific resources alongside the Ingresses.

        Args:
            documents: Original manifests
            args: Extra arguments forwarded to ``ingress2gateway print``

        Returns:
            Converted manifests from the tool's stdout

        Raises:
            StagingError: If the manifests cannot be staged
            DelegateExecutionError: If the tool fails to start, times out or exits non-zero
            ConverterOutputError: If the tool's output cannot be decoded
        """
        if not documents:
            return []

        with staged_manifests(documents) as input_file:
            command = build_command(self.settings.binary, input_file, args)
            stdout = self._run(command)

        try:
            converted = load_documents(stdout)
        except DecodeError as e:
            raise ConverterOutputError(f"failed to parse ingress2gateway output: {e}") from e

        logger.debug("ingress2gateway returned %d manifests", len(converted))
        return converted

    def _run(self, command: List[str]) -> bytes:
        logger.debug("Running %s", " ".join(command))
        try:
            result = subprocess.run(
                command,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                timeout=self.settings.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise DelegateExecutionError(
                f"ingress2gateway failed: timed out after {self.settings.timeout}s",
                command=command,
                stderr=_decode_stderr(e.stderr),
            ) from e
        except OSError as e:
            raise DelegateExecutionError(
                f"ingress2gateway failed: {e}",
                command=command,
            ) from e

        if result.returncode != 0:
            raise DelegateExecutionError(
                f"ingress2gateway failed: exit status {result.returncode}",
                command=command,
                returncode=result.returncode,
                stderr=_decode_stderr(result.stderr),
            )

        return result.stdout


def _decode_stderr(stderr: Union[bytes, str, None]) -> str:
    if not stderr:
        return ""
    if isinstance(stderr, bytes):
        return stderr.decode("utf-8", errors="replace")
    return stderr
