#!/usr/bin/env python3
"""
CLI script parsing a VATSIM snapshot file.

Prints the number of clients and servers found together with the
diagnostic log of the parser. Optionally converts the snapshot to the
legacy format.

Usage:
    # Legacy data.txt
    python scripts/parse_data_file.py --format legacy --input vatsim-data.txt

    # JSON v3 (plain or gzip compressed)
    python scripts/parse_data_file.py --format json --input vatsim-data.json.gz

    # Machine-readable summary
    python scripts/parse_data_file.py --format json --input vatsim-data.json --json

    # Convert JSON to legacy format
    python scripts/parse_data_file.py --format json --input vatsim-data.json --write-legacy data.txt
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from vatsim_dataformats.config import LOG_FORMAT, get_settings
from vatsim_dataformats.export import LegacyDataFileWriter
from vatsim_dataformats.parser import DataFile, DataFileFormat, get_parser
from vatsim_dataformats.privacyfilter import shorten_log_line_content

logger = logging.getLogger(__name__)

FORMATS = {
    "legacy": DataFileFormat.LEGACY,
    "json": DataFileFormat.JSON3,
}


def build_summary(data_file: DataFile) -> dict:
    """Summarize a parsed snapshot."""
    metadata = data_file.metadata
    return {
        "version": metadata.version_format,
        "timestamp": metadata.timestamp.isoformat() if metadata.timestamp else None,
        "connected_clients": metadata.number_of_connected_clients,
        "online_clients": len(data_file.online_clients),
        "prefiled_clients": len(data_file.prefiled_clients),
        "fsd_servers": len(data_file.fsd_servers),
        "voice_servers": len(data_file.voice_servers),
        "log_entries": len(data_file.parser_log_entries),
        "rejected": len(data_file.rejected_log_entries()),
    }


def print_summary(data_file: DataFile) -> None:
    summary = build_summary(data_file)

    print("\n" + "=" * 60)
    print("SNAPSHOT SUMMARY")
    print("=" * 60)
    for key, value in summary.items():
        print(f"  {key.replace('_', ' ').capitalize():<20} {value}")

    if data_file.parser_log_entries:
        print("\nDiagnostic log:")
        for entry in data_file.parser_log_entries:
            print(f"  - {entry}")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Parse a VATSIM snapshot file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Legacy data.txt
  python scripts/parse_data_file.py --format legacy --input vatsim-data.txt

  # JSON v3 with summary as JSON
  python scripts/parse_data_file.py --format json --input vatsim-data.json --json

  # Convert to legacy format
  python scripts/parse_data_file.py --format json --input vatsim-data.json --write-legacy data.txt
        """,
    )

    parser.add_argument(
        "--format",
        "-f",
        choices=sorted(FORMATS),
        required=True,
        help="Format of the input file",
    )
    parser.add_argument(
        "--input",
        "-i",
        type=Path,
        required=True,
        help="Input file (gzip compression is detected automatically)",
    )
    parser.add_argument(
        "--encoding",
        type=str,
        help="Input encoding: auto, utf-8 or iso-8859-1 (default: from settings)",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--max-log-line-length",
        type=int,
        help="Shorten line content of log entries (default: from settings, 0 = unlimited)",
    )
    parser.add_argument(
        "--write-legacy",
        type=Path,
        help="Write the parsed snapshot to this file in legacy format",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print summary and log as JSON",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()

    settings = get_settings(args.config)
    errors = settings.validate()
    if errors:
        parser.error("Invalid settings: " + "; ".join(errors))

    log_level = logging.DEBUG if args.verbose else getattr(logging, settings.log_level.upper())
    logging.basicConfig(level=log_level, format=LOG_FORMAT)

    encoding = args.encoding or settings.input_encoding
    max_log_line_length = (
        args.max_log_line_length
        if args.max_log_line_length is not None
        else settings.max_log_line_length
    )
    if max_log_line_length < 0:
        parser.error("--max-log-line-length must not be negative")

    try:
        data_file = get_parser(FORMATS[args.format]).parse_file(args.input, encoding=encoding)
    except FileNotFoundError as e:
        logger.error(str(e))
        return 1

    if max_log_line_length > 0:
        data_file = shorten_log_line_content(data_file, max_log_line_length)

    if args.write_legacy:
        written = LegacyDataFileWriter().write_file(data_file, args.write_legacy)
        logger.info(f"Wrote {written} bytes to {args.write_legacy}")

    if args.json:
        output = build_summary(data_file)
        output["log"] = [
            {
                "section": entry.section,
                "line_rejected": entry.is_line_rejected,
                "message": entry.message,
                "line": entry.line_content,
            }
            for entry in data_file.parser_log_entries
        ]
        print(json.dumps(output, indent=2))
    else:
        print_summary(data_file)

    return 0 if not data_file.rejected_log_entries() else 2


if __name__ == "__main__":
    sys.exit(main())
