"""
Command-line entry point for ipbatch.

Reads a single address or a ``.txt`` file of addresses, looks every address
up concurrently, and prints or saves the results as JSON or CSV.
"""

import argparse
import logging
import os
import sys
from typing import List, Optional
from rich.console import Console
from .batch import BatchOrchestrator, RichProgressReporter
from .client import LookupClient
from .config import config, PROGRAM_NAME
from .credentials import CredentialStore, resolve_credential
from .debug import debug_logger
from .errors import ArgumentError, InputError, IPBatchError
from .formatter import SUPPORTED_FORMATS, parse_formats, select_renderer, write_output
from .validator import InputValidator

logger = logging.getLogger(__name__)

USAGE = f"Usage: {PROGRAM_NAME} <ipaddress|ips.txt> [--out=filename.txt --format=json,csv --no-color]"


class CLIArgumentParser(argparse.ArgumentParser):
    """Argument parser that raises instead of exiting on bad input."""

    def error(self, message):
        raise ArgumentError(message)


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid worker count: {value}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"worker count must be at least 1: {value}")
    return number


def build_parser() -> CLIArgumentParser:
    """Build the command-line parser."""
    parser = CLIArgumentParser(
        prog=PROGRAM_NAME,
        description='Batch IP geolocation lookups via the IPinfo API',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
        epilog="""
Environment Variables:
  IPINFO_TOKEN                 - Access token (overrides the saved one)
  IPBATCH_REQUEST_TIMEOUT=10   - Per-request timeout in seconds
  IPBATCH_MAX_WORKERS=5        - Default cap on concurrent lookups
  IPBATCH_DEBUG=true           - Enable debug mode with diagnostic output
  IPBATCH_DEBUG_LEVEL=basic    - Debug verbosity: basic, detailed, verbose

Examples:
  ipbatch 8.8.8.8                          # Look up a single address
  ipbatch ips.txt --out=results.csv -f csv # One address per line, save as CSV
  ipbatch ips.txt -w 5                     # At most 5 lookups in flight
"""
    )

    parser.add_argument('input', nargs='?', help='IP address, or a .txt file with one address per line')
    parser.add_argument('extra', nargs='*', help=argparse.SUPPRESS)
    parser.add_argument('-o', '--out', default=None, metavar='FILE',
                        help='Write output to FILE (overwritten) instead of the terminal')
    parser.add_argument('-f', '--format', default=None, metavar='LIST',
                        help='Comma-separated output formats: json, csv (default: json)')
    parser.add_argument('-n', '--no-color', action='store_true',
                        help='Disable colorized terminal output')
    parser.add_argument('-w', '--workers', type=_positive_int, default=None,
                        help='Maximum concurrent lookups (default: one per address)')
    parser.add_argument('--debug', action='store_true',
                        help='Enable debug mode with low-level diagnostic output')

    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Raises:
        ArgumentError: If the arguments are malformed
    """
    args = build_parser().parse_intermixed_args(argv)
    args.formats = parse_formats(args.format)
    return args


def configure_logging():
    """Send library warnings to stderr; everything in debug mode."""
    level = logging.DEBUG if config.is_debug_mode() else logging.WARNING
    logging.basicConfig(level=level, format='%(levelname)s %(name)s: %(message)s')


def run(args: argparse.Namespace, console: Console, store: Optional[CredentialStore] = None) -> int:
    """
    Execute a lookup run for parsed arguments.

    Returns:
        Process exit code

    Raises:
        InputError: If the input yields no addresses
        LookupFailedError: If any lookup in the batch fails
        OSError: If the input file cannot be read or the output file written
    """
    if args.extra:
        logger.warning(f"Ignoring extra arguments: {' '.join(args.extra)}")

    unknown = [fmt for fmt in args.formats if fmt not in SUPPORTED_FORMATS]
    if unknown:
        logger.warning(f"Ignoring unsupported format(s): {', '.join(unknown)}")

    token = resolve_credential(store or CredentialStore())
    debug_logger.log_config_info(token)

    addresses = InputValidator().load_addresses(args.input)
    if not addresses:
        raise InputError('No IP addresses found in the input file')

    orchestrator = BatchOrchestrator(
        LookupClient(token=token),
        reporter=RichProgressReporter(console),
        max_workers=args.workers or config.get_max_workers(),
    )
    results = orchestrator.run(addresses)

    if not results:
        logger.info("No results returned, nothing to write")
        return 0

    renderer = select_renderer(args.out, args.formats, no_color=args.no_color)
    write_output(results, args.formats, renderer)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line entry point. Returns the process exit code."""
    try:
        args = parse_args(argv)
    except ArgumentError as e:
        print(USAGE, file=sys.stderr)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.debug:
        os.environ['IPBATCH_DEBUG'] = 'true'

    configure_logging()
    console = Console(stderr=True, no_color=args.no_color)

    if not args.input:
        console.print('No input provided.', style='red', highlight=False, markup=False, soft_wrap=True)
        return 1

    try:
        return run(args, console)
    except InputError as e:
        console.print(str(e), style='red', highlight=False, markup=False, soft_wrap=True)
        return 1
    except (IPBatchError, OSError) as e:
        console.print(f"Error: {e}", style='red', highlight=False, markup=False, soft_wrap=True)
        return 1
    except KeyboardInterrupt:
        console.print('\nOperation cancelled by user.', style='red', highlight=False, markup=False, soft_wrap=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
