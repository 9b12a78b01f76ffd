"""
CLI for k3singress - Convert Kubernetes Ingress to Gateway API resources.

Reads rendered manifests (Helm, kustomize, kubectl), converts Ingress
resources with ingress2gateway and writes the transformed manifests to
stdout. All arguments not recognised here are forwarded to ingress2gateway.
"""

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from . import __version__
from .converter import Converter, Ingress2GatewayConverter
from .errors import K3sIngressError, UsageError
from .pipeline import run_pipeline
from .types import ConverterSettings, has_provider_selector

logger = logging.getLogger("k3singress")

LOG_FORMAT = "k3singress: %(levelname)s: %(message)s"

EPILOG = """\
Examples:
  # As Helm post-renderer (reads from stdin)
  helm template myapp ./chart | k3singress --providers=ingress-nginx

  # From a file
  k3singress --input-file=manifests.yaml --providers=ingress-nginx

  # With kubectl apply
  kubectl apply -k . --dry-run=client -o yaml | k3singress --providers=ingress-nginx | kubectl apply -f -

All arguments after flags are passed directly to ingress2gateway.
Provider is mandatory (e.g., --providers=ingress-nginx).
The ingress2gateway binary can be overridden with INGRESS2GATEWAY_BIN.
"""


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="k3singress",
        usage="%(prog)s [flags] [ingress2gateway-args...]",
        description="Convert Kubernetes Ingress to Gateway API resources using ingress2gateway",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
    )
    parser.add_argument(
        "--input-file",
        default=None,
        help="Path to input manifest file (default: read from stdin)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging on stderr",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def create_converter() -> Converter:
    """Create the ingress2gateway converter from environment settings."""
    return Ingress2GatewayConverter(ConverterSettings.from_env())


def validate_converter_args(args: Sequence[str]) -> None:
    """
    Check forwarded ingress2gateway arguments.

    Raises:
        UsageError: If no provider is selected
    """
    if not has_provider_selector(args):
        raise UsageError(
            "--providers flag is required for ingress2gateway "
            "(e.g., --providers=ingress-nginx)"
        )


def run(input_file: Optional[str], converter_args: List[str]) -> None:
    """Validate arguments, then run the pipeline from input to stdout."""
    validate_converter_args(converter_args)
    converter = create_converter()

    if input_file:
        try:
            source = open(input_file, encoding="utf-8")
        except OSError as e:
            raise UsageError(f"failed to open input file {input_file}: {e}") from e
    else:
        source = sys.stdin

    input_source = input_file or "stdin"
    try:
        result = run_pipeline(source, sys.stdout, converter, converter_args)
    finally:
        if input_file:
            source.close()

    if result.input_count == 0 and input_file:
        logger.warning("no objects found in %s", input_file)

    logger.debug(
        "Read %d manifests from %s, wrote %d (%d Ingress replaced by %d converted)",
        result.input_count,
        input_source,
        result.output_count,
        result.ingress_count,
        result.converted_count,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args, converter_args = parser.parse_known_args(argv)
    configure_logging(args.verbose)

    try:
        run(args.input_file, converter_args)
    except K3sIngressError as e:
        logger.error("%s", e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
