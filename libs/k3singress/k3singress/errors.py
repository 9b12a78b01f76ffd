"""
Exceptions raised by k3singress.

Every failure in the manifest pipeline is fatal to the current run and is
surfaced to the CLI, which reports it as a single line on stderr.
"""

from typing import List, Optional


class K3sIngressError(Exception):
    """Base exception for all k3singress errors."""


class DecodeError(K3sIngressError):
    """A manifest segment is not valid YAML/JSON or is not a mapping."""


class EncodeError(K3sIngressError):
    """A manifest could not be serialized to YAML."""


class UsageError(K3sIngressError):
    """Invalid invocation: missing provider selector, bad input path, bad settings."""


class DelegateError(K3sIngressError):
    """The external converter could not produce a converted manifest set."""


class StagingError(DelegateError):
    """The temporary manifest file could not be created, written or closed."""


class DelegateExecutionError(DelegateError):
    """The converter failed to start, timed out or exited non-zero."""

    def __init__(
        self,
        message: str,
        command: Optional[List[str]] = None,
        returncode: Optional[int] = None,
        stderr: str = "",
    ):
        self.command = command or []
        self.returncode = returncode
        self.stderr = stderr
        if stderr:
            message = f"{message}\nstderr:\n{stderr}"
        super().__init__(message)


class ConverterOutputError(DelegateError, DecodeError):
    """The converter's stdout is not a valid manifest stream."""
