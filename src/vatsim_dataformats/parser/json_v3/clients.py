"""
Processors for client records of JSON snapshots.

Each section holds an array of objects; a single object failing to
convert is logged and skipped while the remaining objects are kept.
Individual fields failing to convert are logged and left at their
defaults. Flight plans are the exception: they are applied all or
nothing so a client never carries half of a flight plan.
"""

import logging
import re
from typing import Any, Optional

from ...exceptions import ParseError
from ..base import Client
from ..helpers import (
    parse_direct_concatenated_duration,
    parse_frequency_kilohertz,
    parse_int,
    parse_to_instant_utc,
)
from ..log import ParserLog
from ..types import ClientType, ControllerRating, FacilityType, MilitaryRating, PilotRating
from .helpers import JsonObjectReader, process_array_fail_whole_on_error, process_array_skip_on_error

logger = logging.getLogger(__name__)

SECTION_NAME_PILOTS = "pilots"
SECTION_NAME_PREFILES = "prefiles"
SECTION_NAME_CONTROLLERS = "controllers"
SECTION_NAME_ATIS = "atis"

CONTROLLER_MESSAGE_LINE_SEPARATOR = "\n"

_PATTERN_UNSIGNED_INTEGER = re.compile(r"^\+?\d+$")


def parse_unsigned_int(s: str) -> int:
    """
    Parse an unsigned decimal integer given as a string.

    Raises:
        ParseError: If the string is not an unsigned integer
    """
    if not _PATTERN_UNSIGNED_INTEGER.match(s):
        raise ParseError(f"not an unsigned integer: \"{s}\"")
    return int(s)


def limit_heading(heading: int) -> int:
    """
    Normalize a heading to 0..359.

    Raises:
        ParseError: If the heading is neither 360 nor within 0..359
    """
    if heading == 360:
        return 0
    if 0 <= heading <= 359:
        return heading
    raise ParseError(f"heading is out of range: {heading}")


def parse_json_frequency(s: str) -> int:
    """
    Convert a JSON frequency ("118.500") to kHz.

    Raises:
        ParseError: If the frequency has no decimal point or is malformed
    """
    if "." not in s:
        raise ParseError(f"Frequency cannot be converted: \"{s}\"")
    return parse_frequency_kilohertz(s)


def _describe(section: str, vatsim_id: Optional[int], callsign: Optional[str]) -> str:
    return f"{section} {vatsim_id} {callsign}"


def _lookup(mapping: dict[int, Any]):
    return lambda json_id: mapping.get(json_id)


# =============================================================================
# Flight plans
# =============================================================================


class FlightPlanJsonProcessor:
    """Converts flight plan objects to Client fields."""

    def deserialize(self, obj: dict, location: str, log: ParserLog) -> Optional[dict[str, Any]]:
        """
        Read a flight plan.

        Args:
            obj: Decoded flight plan object
            location: Description of the owning client, used as log section
            log: Parser log

        Returns:
            Client field values, or None if any mandatory field failed
        """
        reader = JsonObjectReader(obj, location, log)

        values = {
            "raw_flight_plan_type": reader.mandatory("flight_rules", str),
            "aircraft_type": reader.mandatory("aircraft", str),
            "aircraft_type_faa": reader.optional("aircraft_faa", str),
            "aircraft_type_short": reader.optional("aircraft_short", str),
            "filed_departure_airport_code": reader.mandatory("departure", str),
            "filed_destination_airport_code": reader.mandatory("arrival", str),
            "filed_alternate_airport_code": reader.mandatory("alternate", str),
            "filed_true_air_speed": reader.mandatory("cruise_tas", str, parse_unsigned_int),
            "raw_filed_altitude": reader.mandatory("altitude", str),
            "raw_departure_time_planned": reader.mandatory("deptime", str, parse_int),
            "filed_time_enroute": reader.mandatory(
                "enroute_time", str, lambda x: parse_direct_concatenated_duration(x, True)
            ),
            "filed_time_fuel": reader.mandatory(
                "fuel_time", str, lambda x: parse_direct_concatenated_duration(x, True)
            ),
            "flight_plan_remarks": reader.mandatory("remarks", str),
            "filed_route": reader.mandatory("route", str),
        }

        if reader.has_failed:
            log.add_entry(
                location,
                None,
                True,
                "flight plan could not be read completely and has been discarded",
            )
            return None

        return {key: value for key, value in values.items() if value is not None}


# =============================================================================
# Pilots and prefiles
# =============================================================================


class PilotJsonProcessor:
    """Converts connected pilot objects to Client records."""

    def __init__(
        self,
        flight_plan_processor: FlightPlanJsonProcessor,
        pilot_rating_by_json_id: dict[int, PilotRating],
        military_rating_by_json_id: Optional[dict[int, MilitaryRating]] = None,
    ):
        self.flight_plan_processor = flight_plan_processor
        self.pilot_rating_by_json_id = pilot_rating_by_json_id
        self.military_rating_by_json_id = military_rating_by_json_id or {}

    def deserialize_multiple(self, array: list, log: ParserLog) -> list[Client]:
        return process_array_skip_on_error(
            array, dict, SECTION_NAME_PILOTS, log, lambda x: self.deserialize_single(x, log)
        )

    def deserialize_single(self, obj: dict, log: ParserLog) -> Client:
        reader = JsonObjectReader(obj, SECTION_NAME_PILOTS, log)

        values: dict[str, Any] = {
            "raw_client_type": ClientType.PILOT_CONNECTED,
            "effective_client_type": ClientType.PILOT_CONNECTED,
            "vatsim_id": reader.mandatory("cid", int),
            "callsign": reader.mandatory("callsign", str),
            "real_name": reader.mandatory("name", str),
            "pilot_rating": reader.mandatory("pilot_rating", int, _lookup(self.pilot_rating_by_json_id)),
            "military_rating": reader.optional(
                "military_rating", int, _lookup(self.military_rating_by_json_id)
            ),
            "server_id": reader.mandatory("server", str),
            "latitude": reader.mandatory("latitude", float),
            "longitude": reader.mandatory("longitude", float),
            "altitude_feet": reader.mandatory("altitude", int),
            "ground_speed": reader.mandatory("groundspeed", int),
            "transponder_code_decimal": reader.mandatory("transponder", str, parse_unsigned_int),
            "heading": reader.mandatory("heading", int, limit_heading),
            "qnh_inch_mercury": reader.mandatory("qnh_i_hg", float),
            "qnh_hectopascal": reader.mandatory("qnh_mb", int),
            "logon_time": reader.mandatory("logon_time", str, parse_to_instant_utc),
            "last_updated": reader.mandatory("last_updated", str, parse_to_instant_utc),
        }

        location = _describe(SECTION_NAME_PILOTS, values["vatsim_id"], values["callsign"])
        flight_plan = reader.optional(
            "flight_plan", dict, lambda x: self.flight_plan_processor.deserialize(x, location, log)
        )
        if flight_plan:
            values.update(flight_plan)

        return Client(**{key: value for key, value in values.items() if value is not None})


class PrefileJsonProcessor:
    """Converts prefiled flight plan objects to Client records."""

    def __init__(self, flight_plan_processor: FlightPlanJsonProcessor):
        self.flight_plan_processor = flight_plan_processor

    def deserialize_multiple(self, array: list, log: ParserLog) -> list[Client]:
        return process_array_skip_on_error(
            array, dict, SECTION_NAME_PREFILES, log, lambda x: self.deserialize_single(x, log)
        )

    def deserialize_single(self, obj: dict, log: ParserLog) -> Client:
        reader = JsonObjectReader(obj, SECTION_NAME_PREFILES, log)

        values: dict[str, Any] = {
            "raw_client_type": ClientType.PILOT_PREFILED,
            "effective_client_type": ClientType.PILOT_PREFILED,
            "vatsim_id": reader.mandatory("cid", int),
            "callsign": reader.mandatory("callsign", str),
            "real_name": reader.mandatory("name", str),
            "last_updated": reader.mandatory("last_updated", str, parse_to_instant_utc),
        }

        location = _describe(SECTION_NAME_PREFILES, values["vatsim_id"], values["callsign"])
        flight_plan = reader.mandatory(
            "flight_plan", dict, lambda x: self.flight_plan_processor.deserialize(x, location, log)
        )
        if flight_plan:
            values.update(flight_plan)

        return Client(**{key: value for key, value in values.items() if value is not None})


# =============================================================================
# Controllers and ATIS
# =============================================================================


class ControllerAtisJsonProcessor:
    """
    Converts controller or ATIS objects to Client records.

    Both sections share the same structure; only ATIS stations carry an
    ATIS designator ("atis_code").
    """

    def __init__(
        self,
        client_type: ClientType,
        facility_type_by_json_id: dict[int, FacilityType],
        controller_rating_by_json_id: dict[int, ControllerRating],
    ):
        if client_type is ClientType.ATC_CONNECTED:
            self.section_name = SECTION_NAME_CONTROLLERS
        elif client_type is ClientType.ATIS:
            self.section_name = SECTION_NAME_ATIS
        else:
            raise ValueError(f"Unsupported client type: {client_type}")

        self.client_type = client_type
        self.facility_type_by_json_id = facility_type_by_json_id
        self.controller_rating_by_json_id = controller_rating_by_json_id

    def deserialize_multiple(self, array: list, log: ParserLog) -> list[Client]:
        return process_array_skip_on_error(
            array, dict, self.section_name, log, lambda x: self.deserialize_single(x, log)
        )

    def deserialize_single(self, obj: dict, log: ParserLog) -> Client:
        reader = JsonObjectReader(obj, self.section_name, log)

        values: dict[str, Any] = {
            "raw_client_type": self.client_type,
            "effective_client_type": self.client_type,
            "vatsim_id": reader.mandatory("cid", int),
            "real_name": reader.mandatory("name", str),
            "callsign": reader.mandatory("callsign", str),
            "served_frequency_kilohertz": reader.mandatory("frequency", str, parse_json_frequency),
            "facility_type": reader.mandatory("facility", int, _lookup(self.facility_type_by_json_id)),
            "controller_rating": reader.mandatory(
                "rating", int, _lookup(self.controller_rating_by_json_id)
            ),
            "server_id": reader.mandatory("server", str),
            "visual_range": reader.mandatory("visual_range", int),
            "last_updated": reader.mandatory("last_updated", str, parse_to_instant_utc),
            "logon_time": reader.mandatory("logon_time", str, parse_to_instant_utc),
        }

        # text_atis is null rather than an empty array if there is no message
        values["controller_message"] = (
            reader.optional("text_atis", list, lambda x: self._join_lines(x, log)) or ""
        )

        if self.client_type is ClientType.ATIS:
            values["atis_designator"] = reader.optional("atis_code", str)

        return Client(**{key: value for key, value in values.items() if value is not None})

    def _join_lines(self, array: list, log: ParserLog) -> Optional[str]:
        lines = process_array_fail_whole_on_error(array, str, self.section_name, log, lambda x: x)
        if lines is None:
            return None
        return CONTROLLER_MESSAGE_LINE_SEPARATOR.join(lines)
