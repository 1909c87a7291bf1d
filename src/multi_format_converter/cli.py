"""
Command-line interface for the multi-format converter.

This module handles CLI argument parsing, logging configuration,
and mapping conversion errors to exit codes.
"""

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from multi_format_converter.config_models import Format
from multi_format_converter.exceptions import ConversionError
from multi_format_converter.orchestrator import convert_file

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

FORMAT_CHOICES = [fmt.value for fmt in Format] + ["yml"]


def _format_arg(value: str) -> Format:
    value = value.lower()
    return Format.YAML if value == "yml" else Format(value)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="multiformat-converter",
        description="Convert structured data between JSON, CSV, XML and YAML",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # JSON array of objects to CSV
  multiformat-converter --from json --to csv --input users.json --output users.csv

  # Semicolon separated CSV to XML with a custom root element
  multiformat-converter --from csv --to xml --input rows.csv --output rows.xml --delimiter ';' --root users

  # XML to YAML
  multiformat-converter --from xml --to yaml --input feed.xml --output feed.yaml
        """
    )
    parser.add_argument("--from", dest="source", required=True, type=_format_arg,
                        metavar="{json,csv,xml,yaml}", help="Source format")
    parser.add_argument("--to", dest="target", required=True, type=_format_arg,
                        metavar="{json,csv,xml,yaml}", help="Target format")
    parser.add_argument("--input", required=True, type=Path, help="Input file")
    parser.add_argument("--output", required=True, type=Path, help="Output file")
    parser.add_argument("--delimiter", default=",", help="CSV delimiter (default: ',')")
    parser.add_argument("--root", default="root", help="Root element name for XML output (default: root)")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point.

    Returns:
        Exit code: 0 = success, 1 = error
    """
    args = build_parser().parse_args(argv)
    logging.getLogger().setLevel(args.log_level)

    if args.source is args.target:
        logger.error(f"Source and target format are both '{args.source.value}', nothing to convert")
        return 1

    try:
        result = convert_file(
            args.input,
            args.output,
            source=args.source,
            target=args.target,
            delimiter=args.delimiter,
            root_tag=args.root,
        )
    except ValidationError as e:
        logger.error(f"Invalid options: {e}")
        return 1
    except ConversionError as e:
        logger.error(f"Conversion failed ({e.kind.value}): {e}")
        return 1
    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Validation error: {e}")
        return 1
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        return 1

    if result.lossy:
        logger.warning(f"Output is lossy: nested values flattened in {', '.join(result.flattened_fields)}")
    logger.info(f"Output Location: {result.dest_path.resolve()}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
