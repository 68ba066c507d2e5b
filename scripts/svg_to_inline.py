#!/usr/bin/env python3
"""Convert class-based SVG styles to inline styles (optionally for React Native)."""

import argparse
import logging
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from svg_inline.convert import (
    convert_svg_file,
    format_conversion_report,
    parse_convert_config_file,
    ConvertOptions,
)

logger = logging.getLogger("svg_inline")


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        description="Convert class-based styles in an SVG file to inline styles.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Write icon-inline.svg next to the input
  %(prog)s icon.svg

  # Capitalize tags for react-native-svg, writing icon-rn.svg
  %(prog)s icon.svg --react-native

  # Explicit output path and config file
  %(prog)s icon.svg out/icon.svg --config convert.yaml
""",
    )
    parser.add_argument("svg_file", type=Path, nargs="?", help="Path to SVG file to convert")
    parser.add_argument(
        "output", type=Path, nargs="?", help="Output SVG file (default: derived from input)"
    )
    parser.add_argument(
        "--react-native",
        action="store_true",
        help="Convert SVG to React Native format (capitalize element names)",
    )
    parser.add_argument("--config", "-c", type=Path, help="Path to YAML config file")
    parser.add_argument(
        "--no-fallback",
        action="store_true",
        help="Fail instead of using the regex fallback for unparsable SVG",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Convert and print the report without writing output",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    verbosity.add_argument("--quiet", "-q", action="store_true", help="Warnings only")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Exit code:
        - 0: Success
        - 1: Usage, config or I/O error
        - 2: Conversion failed
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")

    if args.svg_file is None:
        parser.print_usage(sys.stderr)
        print("Error: missing input SVG path", file=sys.stderr)
        return 1

    # Validate input files exist
    if not args.svg_file.exists():
        print(f"Error: SVG file not found: {args.svg_file}", file=sys.stderr)
        return 1

    # Parse config file
    options = ConvertOptions()
    if args.config is not None:
        if not args.config.exists():
            print(f"Error: Config file not found: {args.config}", file=sys.stderr)
            return 1
        try:
            options = parse_convert_config_file(args.config)
        except Exception as e:
            print(f"Error: Failed to parse config file: {e}", file=sys.stderr)
            return 1

    if args.react_native:
        options.react_native = True
    if args.no_fallback:
        options.fallback = False

    try:
        report = convert_svg_file(
            args.svg_file, args.output, options=options, dry_run=args.dry_run
        )
    except OSError as e:
        print(f"Error: Failed to read SVG: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.error("Error converting SVG: %s", e)
        return 2

    print(format_conversion_report(report))
    return 0


if __name__ == "__main__":
    sys.exit(main())
