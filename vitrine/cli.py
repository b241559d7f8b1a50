"""Command-line interface for vitrine."""

import sys
import logging
import argparse
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

from vitrine import __version__
from vitrine.config.loader import load_config, ConfigError
from vitrine.config.validator import validate_config, ValidationError
from vitrine.errors import FatalBuildError
from vitrine.workflow.pipeline import CatalogBuilder


def create_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser."""
    parser = argparse.ArgumentParser(
        prog='vitrine',
        description='Static catalog builder for in-browser retro games',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Build the "all" database using ./vitrine.yaml
  vitrine

  # Build the favorites database in Spanish
  vitrine --database favorites --language es

  # Open documents on the preview section, navigation hidden
  vitrine --default-section preview --full-screen

  # Use custom config file and source tree
  vitrine --config /path/to/vitrine.yaml --source /path/to/content
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parser.add_argument(
        '--config',
        type=Path,
        metavar='PATH',
        help='Path to vitrine.yaml (default: ./vitrine.yaml)'
    )

    parser.add_argument(
        '--database',
        metavar='NAME',
        help='Catalog database folder under databases/ (e.g. all, favorites). Overrides config.'
    )

    parser.add_argument(
        '--language',
        metavar='CODE',
        help='Document language (e.g. en, ar). Overrides config.'
    )

    parser.add_argument(
        '--app-name',
        metavar='NAME',
        help='Application name. Overrides config.'
    )

    parser.add_argument(
        '--default-section',
        metavar='SECTION',
        help='Section shown on load (e.g. emulator, preview, info). Overrides config.'
    )

    parser.add_argument(
        '--full-screen',
        action='store_true',
        help='Start documents in full-screen view. Overrides config.'
    )

    parser.add_argument(
        '--source',
        type=Path,
        metavar='PATH',
        help='Source tree root. Overrides config.'
    )

    parser.add_argument(
        '--output',
        type=Path,
        metavar='PATH',
        help='Output directory. Overrides config.'
    )

    return parser


def _setup_logging(config: dict) -> None:
    """
    Setup logging configuration from config.

    Args:
        config: Configuration dictionary
    """
    logging_config = config.get('logging', {})

    # Get log level
    level_str = (logging_config.get('level') or 'INFO').upper()
    level = getattr(logging, level_str, logging.INFO)

    handlers = []

    if logging_config.get('console', True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        formatter = logging.Formatter('%(levelname)s: %(message)s')
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    # File handler (if configured)
    log_file = logging_config.get('file')
    if log_file:
        try:
            log_path = Path(log_file)
            # Create parent directory if it doesn't exist
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(level)
            formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
            file_handler.setFormatter(formatter)
            handlers.append(file_handler)
        except OSError as e:
            print(f"Error: Could not create log file '{log_file}': {e}", file=sys.stderr)
            sys.exit(1)

    # Configure root logger
    logging.basicConfig(
        level=level,
        handlers=handlers,
        force=True  # Override any existing configuration
    )

    # Suppress PIL/Pillow debug logging (verbose chunk parsing messages)
    pil_logger = logging.getLogger('PIL')
    pil_logger.setLevel(logging.INFO)


def apply_overrides(config: dict, args: argparse.Namespace) -> dict:
    """
    Apply command-line overrides to a loaded configuration.

    Args:
        config: Configuration dictionary (modified in place)
        args: Parsed arguments

    Returns:
        The configuration
    """
    app = config.setdefault('app', {})
    paths = config.setdefault('paths', {})

    if args.database:
        app['database'] = args.database

    if args.language:
        app['language'] = args.language

    if args.app_name:
        app['name'] = args.app_name

    if args.default_section:
        app['default_section'] = args.default_section

    if args.full_screen:
        app['full_screen'] = True

    if args.source:
        paths['source'] = str(args.source)

    if args.output:
        paths['output'] = str(args.output)

    return config


def main(argv: Optional[list] = None) -> int:
    """
    Main entry point for vitrine CLI.

    Args:
        argv: Command-line arguments (default: sys.argv)

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    # Load and validate configuration
    try:
        config = apply_overrides(load_config(args.config), args)
        validate_config(config)
    except (ConfigError, ValidationError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    _setup_logging(config)

    try:
        CatalogBuilder(config).run()
    except KeyboardInterrupt:
        print("\n\nBuild interrupted by user.", file=sys.stderr)
        return 130
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1
    except FatalBuildError as e:
        logger.error(f"Build aborted: {e}")
        print(f"\nFatal error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
