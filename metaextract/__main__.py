#!/usr/bin/env python3
"""metaextract - metadata extraction for images, documents and ZIP archives.

This is the main CLI entry point for metaextract. It extracts EXIF, YAML,
JSON and XML metadata from the given files (and from the entries of ZIP
archives) and optionally saves the combined records as a JSON document.

Usage:
    python -m metaextract photo.jpg settings.yaml bundle.zip
    python -m metaextract --files photo.jpg,settings.yaml --output metadata.json
    python -m metaextract bundle.zip --type json
"""

import sys
import logging
import argparse
from pathlib import Path
from typing import List, Optional

from ._version import __version__
from .archive import ArchiveWalker
from .config import ConfigManager
from .config.manager import ConfigError
from .extraction import MetadataExtractor
from .extraction.decoders import EXIF_ENGINES
from .output import OutputError, print_metadata, save_metadata
from .processing import KIND_FILTERS, MetadataAggregator


def setup_logging(
    log_file: str,
    level: str = "INFO",
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    verbose: bool = False,
    quiet: bool = False
) -> None:
    """Configure logging for the application.

    Diagnostics are appended to ``log_file``. The console only shows
    warnings and errors unless ``verbose`` is set.

    Args:
        log_file: Path of the log file (opened in append mode)
        level: Log level for the file handler
        log_format: Format string for the file handler
        verbose: If True, log DEBUG to both file and console
        quiet: If True, only show errors on the console

    Raises:
        ConfigError: If the log file cannot be opened
    """
    file_level = logging.DEBUG if verbose else getattr(logging, level.upper(), logging.INFO)
    console_level = logging.DEBUG if verbose else logging.WARNING
    if quiet:
        console_level = logging.ERROR

    log_path = Path(log_file).expanduser()
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to open log file {log_path}: {e}") from e

    file_handler.setLevel(file_level)
    file_handler.setFormatter(logging.Formatter(log_format))

    # Console handler with simpler format
    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter('%(levelname)s - %(name)s - %(message)s'))

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(min(file_level, console_level))
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog="metaextract",
        description="metaextract - extract EXIF, YAML, JSON and XML metadata",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Print metadata of individual files
  python -m metaextract photo.jpg settings.yaml

  # Include the entries of a ZIP archive and save everything
  python -m metaextract photo.jpg bundle.zip --output metadata.json

  # Comma-separated list of inputs
  python -m metaextract --files photo.jpg,data.json

  # Only JSON documents
  python -m metaextract bundle.zip data.json --type json
"""
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"metaextract {__version__}"
    )

    # Inputs
    parser.add_argument(
        "paths",
        nargs="*",
        metavar="PATH",
        help="Files or ZIP archives to extract metadata from"
    )
    parser.add_argument(
        "--files",
        metavar="LIST",
        help="Comma-separated list of filenames to extract metadata from"
    )

    # Extraction options
    parser.add_argument(
        "--type",
        dest="kind_filter",
        choices=KIND_FILTERS,
        help="Type of metadata to extract (default: all)"
    )
    parser.add_argument(
        "--exif-engine",
        choices=EXIF_ENGINES,
        help="Library used to read EXIF tags (default: pillow)"
    )

    # Output
    parser.add_argument(
        "--output", "-o",
        metavar="PATH",
        help="Output file to save metadata as JSON (optional)"
    )
    parser.add_argument(
        "--log",
        metavar="PATH",
        help="Log file to append diagnostics to (default: app.log)"
    )

    # Configuration
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Path to config file (default: ~/.metaextract/config.yaml)"
    )

    # Output control
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose debug logging"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Do not print extracted metadata"
    )

    return parser.parse_args(argv)


def collect_input_paths(args: argparse.Namespace) -> List[str]:
    """Combine positional paths and the --files list.

    Raises:
        ConfigError: If no input path was given
    """
    paths = list(args.paths)
    if args.files:
        paths.extend(name.strip() for name in args.files.split(",") if name.strip())

    if not paths:
        raise ConfigError("Please specify at least one filename (positional or --files)")

    return paths


def apply_overrides(config: ConfigManager, args: argparse.Namespace) -> None:
    """Apply command-line options on top of the loaded configuration."""
    if args.kind_filter:
        config.set("extraction.type", args.kind_filter)
    if args.exif_engine:
        config.set("extraction.exif_engine", args.exif_engine)
    if args.output:
        config.set("output.file", args.output)
    if args.log:
        config.set("logging.file", args.log)
    config.validate()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for metaextract CLI.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    args = parse_arguments(argv)
    logger = logging.getLogger(__name__)

    try:
        config = ConfigManager.load(config_path=args.config)
        apply_overrides(config, args)
        paths = collect_input_paths(args)

        setup_logging(
            config.get("logging.file", "app.log"),
            level=config.get("logging.level", "INFO"),
            log_format=config.get(
                "logging.format",
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            ),
            verbose=args.verbose,
            quiet=args.quiet
        )

        kind_filter = config.get("extraction.type", "all")
        extractor = MetadataExtractor.from_config(config)
        aggregator = MetadataAggregator(
            kind_filter=kind_filter,
            extractor=extractor,
            walker=ArchiveWalker.from_config(config, extractor=extractor),
            on_record=None if args.quiet else print_metadata
        )

        result = aggregator.collect(paths)

        output_file = config.get("output.file")
        if output_file:
            saved = save_metadata(
                result.records,
                output_file,
                indent=config.get("output.indent", 2)
            )
            if not args.quiet:
                print(f"All metadata saved to {saved}")

        logger.info("Process completed successfully")
        return 0

    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        print(f"✗ Configuration Error: {e}", file=sys.stderr)
        return 2

    except OutputError as e:
        logger.error(f"Error saving metadata to file: {e}")
        print(f"✗ Output Error: {e}", file=sys.stderr)
        return 3

    except KeyboardInterrupt:
        print("\nProcessing interrupted by user", file=sys.stderr)
        return 130

    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        print(f"✗ Unexpected Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        else:
            print("Run with --verbose for detailed error information", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
