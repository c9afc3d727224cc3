#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Main CLI entry point for the Media Optimizer.
"""

import argparse
import logging
import sys

from .config import FIT_POLICIES, MODES, MAX_WORKERS, MIN_WORKERS, load_settings
from .commands.run import RunCommand
from .errors import MediaOptimizerError
from .jsonio import enable_json_logging, success, error

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INTERRUPTED = 130


def setup_logging(verbose: bool, quiet: bool = False):
    """Configure logging for the CLI tool."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    logging.debug("Verbose logging enabled (DEBUG level).")


def create_parser():
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="media-optimizer",
        description="Shrink a tree of images in place, into a copy, or restore the originals.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""Examples:
  # Optimize ./images in place, keeping originals under ./backup
  %(prog)s overwrite --min-size 800 --workers 4

  # Write optimized copies to ./optimized, only files changed in the last day
  %(prog)s copy --max-age 24

  # Put the backed-up originals back
  %(prog)s restore

Every option can also be set with the matching environment variable
(MODE, EXTENSIONS, MIN_SIZE, MAX_AGE, QUALITY, MAX_WIDTH, MAX_HEIGHT, FIT,
FORMAT, CONCURRENCY, QUIET, OWNER). Command line values win.
        """
    )
    parser.add_argument("mode", nargs="?", choices=MODES,
                        help="Operating mode (default: $MODE or overwrite)")

    dirs = parser.add_argument_group("directories")
    dirs.add_argument("--images", dest="images_dir",
                      help="Source image tree (default: ./images)")
    dirs.add_argument("--backup", dest="backup_dir",
                      help="Backup tree for overwrite/restore (default: ./backup)")
    dirs.add_argument("--output", dest="output_dir",
                      help="Output tree for copy mode (default: ./optimized)")

    selection = parser.add_argument_group("file selection")
    selection.add_argument("--extensions",
                           help="Comma-separated, case-sensitive extensions (default: common image types)")
    selection.add_argument("--min-size", type=float,
                           help="Skip files smaller than this many KB, 0 disables (default: 800)")
    selection.add_argument("--max-age", type=float,
                           help="Skip files last modified more than this many hours ago")

    transform = parser.add_argument_group("transform")
    transform.add_argument("--quality", type=int, help="Encoder quality 1-100 (default: 80)")
    transform.add_argument("--max-width", type=int, help="Maximum width in pixels (default: 2200)")
    transform.add_argument("--max-height", type=int, help="Maximum height in pixels (default: 2400)")
    transform.add_argument("--fit", choices=FIT_POLICIES, help="Resize fit policy (default: inside)")
    transform.add_argument("--format", help="Output format override for copy mode, e.g. webp (default: keep)")

    run = parser.add_argument_group("run")
    run.add_argument("--workers", type=int,
                     help=f"Concurrent transactions, {MIN_WORKERS}-{MAX_WORKERS} (default: CPU count)")
    run.add_argument("--owner", help="user[:group] to chown written directories to after the run")
    run.add_argument("--quiet", "-q", action="store_true", help="Only print the final totals")
    run.add_argument("--progress", action="store_true", help="Show a progress bar")
    run.add_argument("--verbose", "-v", action="store_true",
                     help="Enable verbose (DEBUG) output")
    run.add_argument("--json", action="store_true",
                     help="Output results as JSON instead of human-readable text")
    return parser


def main(argv=None, transformer=None):
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.json:
        enable_json_logging()
    else:
        setup_logging(args.verbose, args.quiet)

    logging.debug("Parsed arguments: %s", args)
    mode = args.mode

    try:
        settings = load_settings(
            mode=args.mode,
            images_dir=args.images_dir,
            backup_dir=args.backup_dir,
            output_dir=args.output_dir,
            extensions=args.extensions,
            min_size=args.min_size,
            max_age=args.max_age,
            quality=args.quality,
            max_width=args.max_width,
            max_height=args.max_height,
            fit=args.fit,
            format=args.format,
            workers=args.workers,
            owner=args.owner,
            quiet=args.quiet or None,
            progress=args.progress,
        )
        mode = settings.mode
        if settings.quiet and not args.verbose and not args.json:
            logging.getLogger().setLevel(logging.WARNING)

        result = RunCommand(settings, transformer).execute(as_json=args.json)
        code = EXIT_INTERRUPTED if result.cancelled else EXIT_OK
        if args.json:
            return success(mode, result.to_dict(), code=code)
        return code

    except MediaOptimizerError as e:
        if args.json:
            return error(mode, str(e), code=EXIT_ERROR)
        logging.error("%s", e)
        return EXIT_ERROR
    except KeyboardInterrupt:
        if args.json:
            return error(mode, "Operation interrupted by user", code=EXIT_INTERRUPTED)
        logging.warning("Operation interrupted by user.")
        return EXIT_INTERRUPTED
    except Exception as e:
        if args.json:
            debug_info = {"exception_type": type(e).__name__} if args.verbose else None
            return error(mode, str(e), debug=debug_info, code=EXIT_ERROR)
        logging.error("Error occurred: %s", e, exc_info=args.verbose)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
