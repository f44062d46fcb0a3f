"""
Parser for complete JSON v3 snapshot files.

JSON v3 format (abbreviated):
    {
        "general": {"version": 3, "update": "20210101120000", ...},
        "pilots": [...],
        "controllers": [...],
        "atis": [...],
        "servers": [...],
        "prefiles": [...],
        "facilities": [{"id": 0, "short": "OBS", "long": "Observer"}, ...],
        "ratings": [...],
        "pilot_ratings": [{"id": 0, "short_name": "NEW", "long_name": "..."}, ...],
        "military_ratings": [...]
    }
"""

import json
import logging

from ..base import DataFile, DataFileMetaData, DataFileParser
from ..log import ParserLog
from ..registry import ParserRegistry
from ..types import ClientType, ControllerRating, DataFileFormat, FacilityType, MilitaryRating, PilotRating
from .clients import (
    ControllerAtisJsonProcessor,
    FlightPlanJsonProcessor,
    PilotJsonProcessor,
    PrefileJsonProcessor,
)
from .general import GeneralSectionJsonProcessor
from .helpers import process_mandatory, process_optional
from .id_name_mapping import LONG_KEYS, SHORT_KEYS, IdNameMappingProcessor
from .servers import FSDServerJsonProcessor

logger = logging.getLogger(__name__)

SECTION_NAME_ROOT = "root"

KEY_GENERAL = "general"
KEY_SERVERS = "servers"
KEY_FACILITIES = "facilities"
KEY_RATINGS = "ratings"
KEY_PILOT_RATINGS = "pilot_ratings"
KEY_MILITARY_RATINGS = "military_ratings"
KEY_ATIS = "atis"
KEY_CONTROLLERS = "controllers"
KEY_PILOTS = "pilots"
KEY_PREFILES = "prefiles"


@ParserRegistry.register(DataFileFormat.JSON3)
class JsonDataFileParser(DataFileParser):
    """
    Parser for JSON v3 snapshots.

    Root-level sections are read in dependency order: mapping tables are
    resolved before the client sections referencing them. A document that
    cannot be decoded yields an empty DataFile carrying a single rejected
    log entry.

    Usage:
        parser = JsonDataFileParser()
        data_file = parser.parse(text)
    """

    data_file_format = DataFileFormat.JSON3

    def parse(self, content: str) -> DataFile:
        log = ParserLog()

        try:
            root = json.loads(content)
        except ValueError as e:
            logger.warning(f"Failed to parse JSON format on root level: {e}")
            log.add_entry(SECTION_NAME_ROOT, None, True, "Failed to parse JSON format on root level", e)
            return DataFile(parser_log_entries=log.entries)

        if not isinstance(root, dict):
            logger.warning("Failed to parse JSON format on root level: not an object")
            log.add_entry(
                SECTION_NAME_ROOT,
                None,
                True,
                "Failed to parse JSON format on root level",
            )
            return DataFile(parser_log_entries=log.entries)

        return self._parse_root(root, log)

    def _parse_root(self, root: dict, log: ParserLog) -> DataFile:
        metadata = process_mandatory(
            root,
            KEY_GENERAL,
            dict,
            SECTION_NAME_ROOT,
            log,
            lambda x: GeneralSectionJsonProcessor().deserialize(x, log),
        )

        fsd_servers = process_mandatory(
            root,
            KEY_SERVERS,
            list,
            SECTION_NAME_ROOT,
            log,
            lambda x: FSDServerJsonProcessor().deserialize_multiple(x, log),
        )

        short_key_mapping = IdNameMappingProcessor(SHORT_KEYS)
        long_key_mapping = IdNameMappingProcessor(LONG_KEYS)

        facility_type_by_json_id = process_mandatory(
            root,
            KEY_FACILITIES,
            list,
            SECTION_NAME_ROOT,
            log,
            lambda x: short_key_mapping.deserialize_mapping(
                x, FacilityType.resolve_short_name, list(FacilityType), KEY_FACILITIES, log
            ),
        )
        controller_rating_by_json_id = process_mandatory(
            root,
            KEY_RATINGS,
            list,
            SECTION_NAME_ROOT,
            log,
            lambda x: short_key_mapping.deserialize_mapping(
                x, ControllerRating.resolve_short_name, list(ControllerRating), KEY_RATINGS, log
            ),
        )
        pilot_rating_by_json_id = process_mandatory(
            root,
            KEY_PILOT_RATINGS,
            list,
            SECTION_NAME_ROOT,
            log,
            lambda x: long_key_mapping.deserialize_mapping(
                x, PilotRating.resolve_short_name, list(PilotRating), KEY_PILOT_RATINGS, log
            ),
        )
        military_rating_by_json_id = process_optional(
            root,
            KEY_MILITARY_RATINGS,
            list,
            SECTION_NAME_ROOT,
            log,
            lambda x: long_key_mapping.deserialize_mapping(
                x, MilitaryRating.resolve_short_name, list(MilitaryRating), KEY_MILITARY_RATINGS, log
            ),
        )

        flight_plan_processor = FlightPlanJsonProcessor()
        atis_processor = ControllerAtisJsonProcessor(
            ClientType.ATIS, facility_type_by_json_id or {}, controller_rating_by_json_id or {}
        )
        controller_processor = ControllerAtisJsonProcessor(
            ClientType.ATC_CONNECTED, facility_type_by_json_id or {}, controller_rating_by_json_id or {}
        )
        pilot_processor = PilotJsonProcessor(
            flight_plan_processor, pilot_rating_by_json_id or {}, military_rating_by_json_id
        )
        prefile_processor = PrefileJsonProcessor(flight_plan_processor)

        clients = []
        for key, processor in (
            (KEY_ATIS, atis_processor),
            (KEY_CONTROLLERS, controller_processor),
            (KEY_PILOTS, pilot_processor),
            (KEY_PREFILES, prefile_processor),
        ):
            section_clients = process_mandatory(
                root,
                key,
                list,
                SECTION_NAME_ROOT,
                log,
                lambda x, processor=processor: processor.deserialize_multiple(x, log),
            )
            clients.extend(section_clients or [])

        fsd_servers = fsd_servers or []
        logger.info(
            f"JSON parsing complete: {len(clients)} clients, {len(fsd_servers)} servers, "
            f"{len(log.rejected())} rejected entries"
        )

        return DataFile(
            metadata=metadata or DataFileMetaData(),
            clients=tuple(clients),
            fsd_servers=tuple(fsd_servers),
            voice_servers=(),
            parser_log_entries=log.entries,
        )


def parse_json_data_file(content: str) -> DataFile:
    """
    Parse a complete JSON v3 snapshot.

    Convenience function creating a new JsonDataFileParser.
    """
    return JsonDataFileParser().parse(content)
