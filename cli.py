"""Command-line interface for dark blob filtering."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from batch import process_batch
from config import DEFAULT_OUTPUT_DIR, load_filter_settings
from reporting import ConsoleReporter

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Find small round dark marks in images and write inverted masks of them."
    )
    parser.add_argument(
        "-i",
        "--images",
        type=Path,
        nargs="*",
        default=[],
        help="List of files or directories to process.",
    )
    parser.add_argument(
        "-o",
        "--out-dir",
        type=Path,
        default=Path(DEFAULT_OUTPUT_DIR),
        help="Output directory.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Optional JSON file overriding seed_threshold, expansion_threshold, "
        "min_pixels, max_pixels and radius_tolerance.",
    )
    parser.add_argument(
        "--seed-threshold",
        type=int,
        default=None,
        help="Maximum intensity (0-255) that may start a blob.",
    )
    parser.add_argument(
        "--expansion-threshold",
        type=int,
        default=None,
        help="Maximum intensity (0-255) that may join a blob already started.",
    )
    parser.add_argument(
        "--min-pixels",
        type=int,
        default=None,
        help="Smallest accepted blob, in pixels.",
    )
    parser.add_argument(
        "--max-pixels",
        type=int,
        default=None,
        help="Largest accepted blob, in pixels.",
    )
    parser.add_argument(
        "--radius-tolerance",
        type=float,
        default=None,
        help="Multiplier on the expected radius a blob pixel may lie from the centroid.",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of worker threads (default: CPU count).",
    )
    parser.add_argument(
        "--fail-on-error",
        action="store_true",
        help="Exit with status 1 when any file fails.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr (-v) or every per-file failure (-vv).",
    )

    args = parser.parse_args(argv)

    if args.workers is not None and args.workers < 1:
        parser.error("--workers must be >= 1")

    return args


def configure_logging(verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    args = parse_args(argv)
    configure_logging(args.verbose)

    try:
        settings = load_filter_settings(args.config).replace(
            seed_threshold=args.seed_threshold,
            expansion_threshold=args.expansion_threshold,
            min_pixels=args.min_pixels,
            max_pixels=args.max_pixels,
            radius_tolerance=args.radius_tolerance,
        )
    except (FileNotFoundError, ValueError) as exc:
        print(f"Failed to load settings: {exc}", file=sys.stderr)
        return 1

    reporter = ConsoleReporter()
    summary = process_batch(
        inputs=args.images,
        output_dir=args.out_dir,
        settings=settings,
        max_workers=args.workers,
        reporter=reporter,
    )
    reporter.summary(summary)

    if args.fail_on_error and summary.failed:
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
