"""
Command-Line Interface (CLI) setup for the AVIF batch converter.

This module uses Python's `argparse` to define and parse the command-line
arguments that control the application's behavior.
"""
import argparse
from typing import Optional, Sequence

from .config.common import DEFAULT_LOG_LEVEL, DEFAULT_WORKERS, LOG_LEVELS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Batch-convert images to AVIF with avifenc.")
    parser.add_argument(
        "--input", type=str, default=".", help="Directory to scan for image files."
    )
    parser.add_argument(
        "--format", type=str, default="",
        help="Image format to convert (e.g., jpg, jpeg, png, heic).",
    )
    parser.add_argument(
        "--prefix", type=str, default="", help="Optional prefix for output filenames."
    )
    parser.add_argument(
        "--output", type=str, default="", help="Output directory (default: same as input)."
    )
    parser.add_argument(
        "--workers", type=int, default=DEFAULT_WORKERS, help="Number of parallel conversion workers."
    )
    parser.add_argument(
        "--list", action="store_true", help="Only list available file types without converting."
    )
    parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be converted without actual conversion."
    )
    parser.add_argument(
        "--keep-name", action="store_true", help="Keep original filename (only change extension)."
    )
    parser.add_argument(
        "--log-level", type=str, default=DEFAULT_LOG_LEVEL, choices=LOG_LEVELS,
        help="Set the logging level."
    )
    parser.add_argument(
        "--summary-yaml", type=str, default=None,
        help="Write the final tally and failures as YAML to this path."
    )
    return parser


def get_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parses command-line arguments.

    Args:
        argv: Arguments to parse. Defaults to `sys.argv[1:]`.

    Returns:
        argparse.Namespace: The parsed arguments. `workers` is raised to 1
                            if a non-positive value was given.
    """
    args = build_parser().parse_args(argv)
    if args.workers <= 0:
        args.workers = 1
    return args
