#!/usr/bin/env python3
"""
Reservoir sampling of very large newline-delimited files

Stores a pool of byte offsets to the start of each line instead of the
lines themselves, then re-reads only the selected lines.
"""

import argparse
import logging
import os
import sys

from offset_sampler import __version__
from offset_sampler.config import (
    AS_SAMPLED,
    BACKEND_BUFFERED,
    BACKEND_HYBRID,
    BACKEND_MMAP,
    LINE_LENGTH_VALUE,
    PRESERVE_ORDER,
    WITH_REPLACEMENT,
    WITHOUT_REPLACEMENT,
    SamplerConfig,
)
from offset_sampler.errors import ReservoirSampleError
from offset_sampler.sampler import run_sample


EXIT_SUCCESS = 0
EXIT_FAILURE = 1

logger = logging.getLogger("reservoir_sample")


# ============================================================================
# ARGUMENT PARSING
# ============================================================================

class UsageParser(argparse.ArgumentParser):
    """ArgumentParser that prints the full usage on stderr and exits 1"""

    def error(self, message):
        self.print_help(sys.stderr)
        self.exit(EXIT_FAILURE, f"\nError: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = UsageParser(
        prog="reservoir-sample",
        description=(
            "Performs reservoir sampling (http://dx.doi.org/10.1145/3147.3165) on "
            "very large input files that are delimited by newline characters. "
            "Memory use is reduced by storing a pool of byte offsets to the start "
            "of each line, instead of the line elements themselves."
        ),
        epilog=f"reservoir-sample version: {__version__}",
    )

    parser.add_argument('-k', '--sample-size', type=int, default=None,
                        help='Number of samples to retrieve (positive integer; '
                             'omit to shuffle the whole file)')

    replacement = parser.add_mutually_exclusive_group()
    replacement.add_argument('-o', '--sample-without-replacement', dest='replacement',
                             action='store_const', const=WITHOUT_REPLACEMENT,
                             help='Sample without replacement (default)')
    replacement.add_argument('-r', '--sample-with-replacement', dest='replacement',
                             action='store_const', const=WITH_REPLACEMENT,
                             help='Sample with replacement (not yet supported)')

    order = parser.add_mutually_exclusive_group()
    order.add_argument('-s', '--shuffle', dest='order',
                       action='store_const', const=AS_SAMPLED,
                       help='Print the sample in reservoir order (default)')
    order.add_argument('-p', '--preserve-order', dest='order',
                       action='store_const', const=PRESERVE_ORDER,
                       help='Print the sample in original file order')

    backend = parser.add_mutually_exclusive_group()
    backend.add_argument('-m', '--mmap', dest='backend',
                         action='store_const', const=BACKEND_MMAP,
                         help='Use memory mapping for the input file (default)')
    backend.add_argument('-c', '--cstdio', '--buffered', dest='backend',
                         action='store_const', const=BACKEND_BUFFERED,
                         help='Use buffered I/O for the input file')
    backend.add_argument('-y', '--hybrid', dest='backend',
                         action='store_const', const=BACKEND_HYBRID,
                         help='Scan with buffered I/O, print via memory mapping')

    parser.add_argument('--seed', type=int, default=None,
                        help='Seed for the random generator (default: current time)')
    parser.add_argument('--max-line-length', type=int, default=LINE_LENGTH_VALUE,
                        help='Lines longer than this many bytes are truncated')
    parser.add_argument('--progress', action='store_true',
                        help='Show a progress bar while scanning')
    parser.add_argument('--verbose', action='store_true',
                        help='Log run configuration and a summary to stderr')
    parser.add_argument('--debug', action='store_true',
                        help='Log per-line sampling decisions to stderr')
    parser.add_argument('--log-file', type=str, default='',
                        help='Also write log messages to this file')
    parser.add_argument('--version', action='version',
                        version=f'%(prog)s {__version__}')

    parser.add_argument('files', nargs='*', metavar='newline-delimited-file')

    parser.set_defaults(
        replacement=WITHOUT_REPLACEMENT,
        order=AS_SAMPLED,
        backend=BACKEND_MMAP,
    )
    return parser


def setup_logging(args):
    if args.debug:
        level = logging.DEBUG
    elif args.verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    handlers = [logging.StreamHandler(sys.stderr)]
    if args.log_file:
        handlers.append(logging.FileHandler(args.log_file, mode="w", encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(message)s",
        handlers=handlers,
        force=True
    )
    logging.captureWarnings(True)


# ============================================================================
# MAIN
# ============================================================================

def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if len(args.files) != 1:
        parser.error(f"Expected exactly one input file, got {len(args.files)}")
    if args.sample_size is not None and args.sample_size <= 0:
        parser.error(f"Sample size must be a positive integer, got {args.sample_size}")

    try:
        setup_logging(args)
    except OSError as e:
        parser.error(f"Could not open log file {args.log_file}: {e.strerror}")

    logger.info("=" * 70)
    logger.info("RESERVOIR SAMPLE CONFIGURATION")
    logger.info("=" * 70)
    for arg, value in vars(args).items():
        logger.info(f"{arg}: {value}")
    logger.info("=" * 70)

    out = sys.stdout.buffer
    try:
        config = SamplerConfig.create(
            args.files[0],
            sample_size=args.sample_size,
            replacement=args.replacement,
            order=args.order,
            backend=args.backend,
            max_line_length=args.max_line_length,
            seed=args.seed,
            progress=args.progress,
        )
        written = run_sample(config, out)
        out.flush()
    except ReservoirSampleError as e:
        logger.error(f"Error: {e}")
        return EXIT_FAILURE
    except BrokenPipeError:
        # downstream reader went away, e.g. piping into head
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
        return EXIT_FAILURE

    logger.info(f"✓ Wrote {written} lines from {config.input_path}")
    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
