#!/usr/bin/env python3
"""
CLI script removing personal information from legacy snapshot files.

Features are taken from the configuration (YAML file or environment
variables) and can be enabled additionally on the command line.

Usage:
    # Remove real names and substitute observer callsigns
    python scripts/filter_data_file.py --input vatsim-data.txt --output filtered.txt \\
        --remove-real-name --substitute-observer-prefix

    # Remove remarks mentioning streams
    python scripts/filter_data_file.py --input vatsim-data.txt --output filtered.txt \\
        --remarks-trigger twitch --remarks-trigger youtube

    # Use a configuration file
    python scripts/filter_data_file.py --input vatsim-data.txt --output filtered.txt \\
        --config vatsim-dataformats.yaml
"""

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from vatsim_dataformats.config import LOG_FORMAT, get_settings
from vatsim_dataformats.exceptions import FilterAbortedError, UnconfiguredError, ValidationError
from vatsim_dataformats.privacyfilter import DataFileFilter
from vatsim_dataformats.utils import read_data_file

logger = logging.getLogger(__name__)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Privacy filter for legacy VATSIM snapshot files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Remove real names
  python scripts/filter_data_file.py -i vatsim-data.txt -o filtered.txt --remove-real-name

  # Remove all flight plan remarks
  python scripts/filter_data_file.py -i vatsim-data.txt -o filtered.txt --remarks-remove-all

  # Remove remarks containing search phrases
  python scripts/filter_data_file.py -i vatsim-data.txt -o filtered.txt --remarks-trigger twitch
        """,
    )

    parser.add_argument(
        "--input",
        "-i",
        type=Path,
        required=True,
        help="Legacy snapshot file to filter",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        required=True,
        help="File to write the filtered snapshot to",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--remove-real-name",
        action="store_true",
        help="Remove real names (and home bases)",
    )
    parser.add_argument(
        "--substitute-observer-prefix",
        action="store_true",
        help="Replace observer callsigns by XX_OBS",
    )
    parser.add_argument(
        "--remarks-remove-all",
        action="store_true",
        help="Remove all flight plan remarks except VFPS marker and communication flag",
    )
    parser.add_argument(
        "--remarks-trigger",
        action="append",
        default=[],
        metavar="TEXT",
        help="Remove flight plan remarks only if they contain TEXT (repeatable)",
    )
    parser.add_argument(
        "--report",
        action="store_true",
        help="Print the filter report as JSON",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()

    settings = get_settings(args.config)
    log_level = logging.DEBUG if args.verbose else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=log_level, format=LOG_FORMAT)

    configuration = settings.privacy_filter
    configuration = dataclasses.replace(
        configuration,
        remove_real_name_and_homebase=(
            configuration.remove_real_name_and_homebase or args.remove_real_name
        ),
        substitute_observer_prefix=(
            configuration.substitute_observer_prefix or args.substitute_observer_prefix
        ),
        flight_plan_remarks_remove_all=(
            configuration.flight_plan_remarks_remove_all or args.remarks_remove_all
        ),
        flight_plan_remarks_remove_all_if_containing=(
            configuration.flight_plan_remarks_remove_all_if_containing + args.remarks_trigger
        ),
    )

    errors = configuration.validate()
    if errors:
        parser.error("Invalid filter configuration: " + "; ".join(errors))

    try:
        data_file_filter = DataFileFilter(configuration)
    except UnconfiguredError:
        parser.error("No filter feature enabled, nothing to do")

    try:
        text = read_data_file(args.input, encoding=settings.input_encoding)
    except FileNotFoundError as e:
        logger.error(str(e))
        return 1

    try:
        filtered = data_file_filter.filter(text)
    except (FilterAbortedError, ValidationError) as e:
        logger.error(f"Filtering aborted: {e}")
        return 1

    with open(args.output, "wb") as f:
        f.write(filtered.encode(settings.output_encoding, errors="replace"))

    report = data_file_filter.last_report
    if args.report:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print(
            f"Filtered {report.lines_processed} lines: {report.lines_modified} modified, "
            f"{report.lines_removed} removed, {report.lines_restored} restored, "
            f"{len(report.issues)} issues"
        )

    return 0


if __name__ == "__main__":
    sys.exit(main())
