"""CLI argument parsing and scan dispatch."""

from __future__ import annotations

from dupescan.config import create_config_interactive
from dupescan.config import load_config
from dupescan.config import merge_config_into_args
from dupescan.errors import ScanError
from dupescan.finder import find_duplicates
from dupescan.logging import configure_logging
from dupescan.report import format_size
from dupescan.report import render_json
from dupescan.report import render_text

import argparse
import logging
import pathlib
import sys


logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="dupescan",
        description="Find duplicate files in a directory tree by content.",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Show debug output")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only show warnings and errors")
    parser.add_argument(
        "--configure", action="store_true",
        help="Interactively create or update the config file",
    )

    parser.add_argument("root", type=pathlib.Path, nargs="?", help="Directory to scan")
    parser.add_argument(
        "--exclude", action="append", default=None, metavar="PATTERN",
        help="Glob pattern to exclude files (e.g., '*.tmp'). Repeatable.",
    )
    parser.add_argument(
        "--exclude-dir", action="append", default=None, metavar="PATTERN",
        help="Glob pattern to exclude directories (e.g., 'node_modules'). Repeatable.",
    )
    parser.add_argument(
        "--skip-hidden", action="store_true", default=None,
        help="Skip files and directories whose name starts with '.'",
    )
    parser.add_argument(
        "--chunk-size", type=_positive_int, default=None, metavar="BYTES",
        help="Read chunk size used while hashing (default: 65536)",
    )
    parser.add_argument(
        "--no-progress", dest="progress", action="store_false", default=None,
        help="Disable the progress bar",
    )
    parser.add_argument(
        "--format", choices=["text", "json"], default=None,
        help="Output format (default: text)",
    )
    return parser


def cmd_scan(args: argparse.Namespace) -> None:
    """Scan a directory and report duplicate groups."""
    logger.info(f"Scanning {args.root} ...")
    try:
        report = find_duplicates(
            args.root,
            exclude=args.exclude,
            exclude_dir=args.exclude_dir,
            skip_hidden=args.skip_hidden,
            chunk_size=args.chunk_size,
            progress=args.progress,
        )
    except ScanError as exc:
        logger.error(str(exc))
        sys.exit(1)

    # The report itself goes to stdout at every verbosity
    if args.format == "json":
        print(render_json(report))
    else:
        for line in render_text(report):
            print(line)

    stats = report.stats
    logger.info(
        f"Scanned {report.files_scanned} file(s), hashed {stats.files_hashed} "
        f"({format_size(stats.bytes_hashed)})."
    )
    if report.failures:
        logger.warning(f"{len(report.failures)} file(s) could not be hashed and were skipped.")

    if not report.groups:
        logger.info("No duplicates found.")
        return
    logger.info(
        f"Found {len(report.groups)} duplicate group(s), "
        f"{format_size(report.wasted_bytes)} in redundant copies."
    )


def main() -> None:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args()
    configure_logging(verbose=args.verbose, quiet=args.quiet)

    if args.configure:
        create_config_interactive()
        return

    if args.root is None:
        parser.print_help()
        return

    merge_config_into_args(args, load_config())
    cmd_scan(args)


if __name__ == "__main__":
    main()
