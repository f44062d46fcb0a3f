"""
Parser for the GENERAL section of legacy snapshot files.
"""

import logging
import re
from datetime import timedelta
from typing import Iterable, Optional

from ...exceptions import ParseError
from ..base import DataFileMetaData
from ..helpers import parse_compact_timestamp, parse_int, parse_to_instant_utc
from ..log import ParserLog
from ..timestamps import reconcile_update_timestamps

logger = logging.getLogger(__name__)

_PATTERN_KEY_VALUE = re.compile(r"([^=]+) = (.+)")

KEY_VERSION = "VERSION"
KEY_RELOAD = "RELOAD"
KEY_ATIS_ALLOW_MIN = "ATIS ALLOW MIN"
KEY_CONNECTED_CLIENTS = "CONNECTED CLIENTS"
KEY_UNIQUE_USERS = "UNIQUE USERS"
KEY_UPDATE = "UPDATE"
KEY_UPDATE_TIMESTAMP = "UPDATE_TIMESTAMP"


def _parse_minutes(value: str) -> timedelta:
    """Intervals are given in minutes and may be fractional ("0.25")."""
    try:
        minutes = float(value)
    except ValueError:
        raise ParseError(f"invalid interval in minutes: \"{value}\"")
    return timedelta(seconds=round(minutes * 60))


class GeneralSectionParser:
    """
    Parses "KEY = VALUE" lines of the GENERAL section to DataFileMetaData.

    Unknown keys and unparseable values are logged as rejected lines; the
    remaining keys are still used.
    """

    def parse(
        self, lines: Optional[Iterable[str]], log: ParserLog, section_name: str
    ) -> DataFileMetaData:
        """
        Parse all lines of the section.

        Args:
            lines: Content lines of the section, None if the section is absent
            log: Parser log to record issues to
            section_name: Name of the section used for log entries

        Returns:
            Parsed metadata; fields stay None if not available
        """
        lines = list(lines) if lines is not None else []
        if not lines:
            log.add_entry(section_name, None, True, "meta data is missing or empty")
            return DataFileMetaData()

        values: dict = {}
        custom_timestamp = None
        iso_timestamp = None

        for line in lines:
            match = _PATTERN_KEY_VALUE.fullmatch(line)
            if not match:
                log.add_entry(
                    section_name, line, True, "line does not match expected KEY = VALUE syntax"
                )
                continue

            key, value = match.group(1), match.group(2)
            try:
                if key == KEY_VERSION:
                    values["version_format"] = parse_int(value)
                elif key == KEY_RELOAD:
                    values["minimum_data_file_retrieval_interval"] = _parse_minutes(value)
                elif key == KEY_ATIS_ALLOW_MIN:
                    values["minimum_atis_retrieval_interval"] = _parse_minutes(value)
                elif key == KEY_CONNECTED_CLIENTS:
                    values["number_of_connected_clients"] = parse_int(value)
                elif key == KEY_UNIQUE_USERS:
                    values["number_of_unique_connected_users"] = parse_int(value)
                elif key == KEY_UPDATE:
                    custom_timestamp = parse_compact_timestamp(value)
                elif key == KEY_UPDATE_TIMESTAMP:
                    iso_timestamp = parse_to_instant_utc(value)
                else:
                    log.add_entry(
                        section_name, line, True, f"key {key} is unknown and could not be parsed"
                    )
            except ValueError as e:
                logger.debug(f"Failed to parse general section line {line!r}: {e}")
                log.add_entry(section_name, line, True, str(e), e)

        values["timestamp"] = reconcile_update_timestamps(
            custom_timestamp,
            iso_timestamp,
            log,
            section_name,
            None,
            KEY_UPDATE,
            KEY_UPDATE_TIMESTAMP,
        )

        return DataFileMetaData(**values)
