"""
Parser for online transceivers files (transceivers-data.json).

Format:
    [
        {
            "callsign": "EDDT_TWR",
            "transceivers": [
                {
                    "id": 0,
                    "frequency": 118500000,
                    "latDeg": 52.5597,
                    "lonDeg": 13.2877,
                    "heightMslM": 50.0,
                    "heightAglM": 15.0
                }
            ]
        }
    ]

Stations and transceivers are read with skip-on-error semantics: a
malformed item is logged and omitted while all other items are kept.
Missing values of a transceiver are logged but keep the transceiver.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

from ...utils.charset import decode_data_file
from ...utils.file_utils import read_data_file
from ..log import ParserLog
from ..transceivers import OnlineTransceiver, OnlineTransceiverStation, OnlineTransceiversFile
from .helpers import JsonObjectReader, process_array_skip_on_error, process_mandatory

logger = logging.getLogger(__name__)

SECTION_NAME_ROOT = "root"
SECTION_NAME_STATION = "station"

KEY_CALLSIGN = "callsign"
KEY_TRANSCEIVERS = "transceivers"

KEY_ID = "id"
KEY_FREQUENCY = "frequency"
KEY_LATITUDE = "latDeg"
KEY_LONGITUDE = "lonDeg"
KEY_ALTITUDE_METERS = "heightMslM"
KEY_HEIGHT_METERS = "heightAglM"


class OnlineTransceiverJsonProcessor:
    """Converts transceiver objects of one station."""

    def deserialize_multiple(self, array: list, section: str, log: ParserLog) -> list[OnlineTransceiver]:
        return process_array_skip_on_error(
            array, dict, section, log, lambda x: self.deserialize_single(x, section, log)
        )

    def deserialize_single(self, obj: dict, section: str, log: ParserLog) -> OnlineTransceiver:
        reader = JsonObjectReader(obj, section, log)

        values: dict[str, Any] = {
            "transceiver_id": reader.mandatory(KEY_ID, int),
            "frequency_hertz": reader.mandatory(KEY_FREQUENCY, int),
            "latitude": reader.mandatory(KEY_LATITUDE, float),
            "longitude": reader.mandatory(KEY_LONGITUDE, float),
            "altitude_meters": reader.mandatory(KEY_ALTITUDE_METERS, float),
            "height_meters": reader.mandatory(KEY_HEIGHT_METERS, float),
        }

        return OnlineTransceiver(**{key: value for key, value in values.items() if value is not None})


class OnlineTransceiverStationJsonProcessor:
    """Converts station objects including their transceivers."""

    def __init__(self, transceiver_processor: Optional[OnlineTransceiverJsonProcessor] = None):
        self.transceiver_processor = transceiver_processor or OnlineTransceiverJsonProcessor()

    def deserialize_multiple(self, array: list, log: ParserLog) -> list[OnlineTransceiverStation]:
        return process_array_skip_on_error(
            array, dict, SECTION_NAME_STATION, log, lambda x: self.deserialize_single(x, log)
        )

    def deserialize_single(self, obj: dict, log: ParserLog) -> OnlineTransceiverStation:
        reader = JsonObjectReader(obj, SECTION_NAME_STATION, log)

        callsign = reader.mandatory(KEY_CALLSIGN, str) or ""

        # log entries of transceivers point to the station they belong to
        location = f"{SECTION_NAME_STATION} {callsign}"
        transceivers = process_mandatory(
            obj,
            KEY_TRANSCEIVERS,
            list,
            location,
            log,
            lambda x: self.transceiver_processor.deserialize_multiple(x, location, log),
        )

        return OnlineTransceiverStation(callsign=callsign, transceivers=tuple(transceivers or ()))


class OnlineTransceiversFileParser:
    """
    Parser for online transceivers files.

    A document that cannot be decoded or whose root is not an array yields
    an empty result carrying a single rejected log entry.

    Usage:
        parser = OnlineTransceiversFileParser()
        transceivers_file = parser.parse_file("transceivers-data.json")
        for station in transceivers_file.stations:
            print(station.callsign, len(station.transceivers))
    """

    def __init__(self, station_processor: Optional[OnlineTransceiverStationJsonProcessor] = None):
        self.station_processor = station_processor or OnlineTransceiverStationJsonProcessor()

    def parse(self, content: str) -> OnlineTransceiversFile:
        log = ParserLog()

        try:
            root = json.loads(content)
        except ValueError as e:
            logger.warning(f"Failed to parse JSON format on root level: {e}")
            log.add_entry(SECTION_NAME_ROOT, None, True, "Failed to parse JSON format on root level", e)
            return OnlineTransceiversFile(parser_log_entries=log.entries)

        if not isinstance(root, list):
            logger.warning("Failed to parse JSON format on root level: not an array")
            log.add_entry(SECTION_NAME_ROOT, None, True, "Failed to parse JSON format on root level")
            return OnlineTransceiversFile(parser_log_entries=log.entries)

        stations = self.station_processor.deserialize_multiple(root, log)

        logger.info(
            f"Transceivers parsing complete: {len(stations)} stations, "
            f"{len(log.rejected())} rejected entries"
        )

        return OnlineTransceiversFile(stations=tuple(stations), parser_log_entries=log.entries)

    def parse_bytes(self, data: bytes, encoding: str = "auto") -> OnlineTransceiversFile:
        return self.parse(decode_data_file(data, encoding))

    def parse_file(self, file_path: Union[str, Path], encoding: str = "auto") -> OnlineTransceiversFile:
        """
        Read and parse a transceivers file (plain or gzip compressed).

        Raises:
            FileNotFoundError: If the file does not exist
        """
        return self.parse(read_data_file(file_path, encoding))


def parse_online_transceivers_file(content: str) -> OnlineTransceiversFile:
    """
    Parse a complete online transceivers file.

    Convenience function creating a new OnlineTransceiversFileParser.
    """
    return OnlineTransceiversFileParser().parse(content)
