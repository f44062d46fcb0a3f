"""
Parser for client lines of the CLIENTS and PREFILE sections.

Both sections share the same colon-delimited syntax of 41 positional
fields, each terminated by a colon:

    callsign:cid:realname:clienttype:frequency:latitude:longitude:altitude:
    groundspeed:planned_aircraft:planned_tascruise:planned_depairport:
    planned_altitude:planned_destairport:server:protrevision:rating:
    transponder:facilitytype:visualrange:planned_revision:planned_flighttype:
    planned_deptime:planned_actdeptime:planned_hrsenroute:planned_minenroute:
    planned_hrsfuel:planned_minfuel:planned_altairport:planned_remarks:
    planned_route:planned_depairport_lat:planned_depairport_lon:
    planned_destairport_lat:planned_destairport_lon:atis_message:
    time_last_atis_received:time_logon:heading:QNH_iHg:QNH_Mb:

Which fields may be populated depends on the client type. Lines violating
those rules are rejected as a whole by raising ParseError.
"""

import logging
import math
import re
from datetime import datetime
from typing import Optional

from ...exceptions import ParseError
from ..base import Client
from ..helpers import (
    is_zero_or_empty,
    parse_duration,
    parse_compact_timestamp,
    parse_float,
    parse_frequency_kilohertz,
    parse_int,
    parse_int_with_default,
)
from ..types import ClientType, ControllerRating, FacilityType

logger = logging.getLogger(__name__)

_TIMESTAMP = r"\d{14}"
_FLOAT_UNSIGNED = r"\d+(?:\.\d+|)(?:[eE][\-+]?\d+|)"
_GEO_COORDINATE = r"\-?" + _FLOAT_UNSIGNED

# (group name, sub-pattern) in column order
_FIELDS = [
    ("callsign", r"[^:]+"),
    ("cid", r"\d+|"),
    ("realname", r"[^:]*"),
    ("clienttype", r"PILOT|ATC|"),
    ("frequency", _FLOAT_UNSIGNED + "|"),
    ("latitude", _GEO_COORDINATE + "|"),
    ("longitude", _GEO_COORDINATE + "|"),
    ("altitude", r"\-?\d+|"),
    ("groundspeed", r"\d+|"),
    ("planned_aircraft", r"[^:]*"),
    ("planned_tascruise", r"\d+|"),
    ("planned_depairport", r"[^:]*"),
    ("planned_altitude", r"[^:]*"),
    ("planned_destairport", r"[^:]*"),
    ("server", r"[^:]*"),
    ("protrevision", r"\d+|"),
    ("rating", r"\d+|"),
    ("transponder", r"\d*"),
    ("facilitytype", r"\d+|"),
    ("visualrange", r"\d+|"),
    ("planned_revision", r"\d+|"),
    ("planned_flighttype", r"[^:]*"),
    ("planned_deptime", r"\d+|"),
    ("planned_actdeptime", r"\d+|"),
    ("planned_hrsenroute", r"\-?\d+|"),
    ("planned_minenroute", r"\-?\d+|"),
    ("planned_hrsfuel", r"\-?\d+|"),
    ("planned_minfuel", r"\-?\d+|"),
    ("planned_altairport", r"[^:]*"),
    ("planned_remarks", r"[^:]*"),
    ("planned_route", r"[^:]*"),
    ("planned_depairport_lat", _GEO_COORDINATE + "|"),
    ("planned_depairport_lon", _GEO_COORDINATE + "|"),
    ("planned_destairport_lat", _GEO_COORDINATE + "|"),
    ("planned_destairport_lon", _GEO_COORDINATE + "|"),
    # ATIS messages have been seen containing colons
    ("atis_message", r".*"),
    ("time_last_atis_received", _TIMESTAMP + "|"),
    ("time_logon", _TIMESTAMP + "|"),
    ("heading", r"\d+|"),
    ("qnh_ihg", r"\-?" + _FLOAT_UNSIGNED + "|"),
    ("qnh_mb", r"\-?\d+|"),
]

FIELD_NAMES = [name for name, _ in _FIELDS]

_PATTERN_LINE = re.compile("".join(f"(?P<{name}>{pattern}):" for name, pattern in _FIELDS))

CLIENT_TYPE_ATC = "ATC"
CLIENT_TYPE_PILOT = "PILOT"

DEFAULT_ALTITUDE = 0
DUMMY_TIMESTAMP = "00010101000000"

CONTROLLER_MESSAGE_LINEBREAK = "^\xa7"
LINEBREAK = "\n"


class ClientParser:
    """
    Parses a single client line to a Client.

    One parser instance is configured for either the CLIENTS or the
    PREFILE section since rules differ between both.

    Usage:
        parser = ClientParser(is_parsing_prefile_section=False)
        client = parser.parse(line)
    """

    def __init__(self, is_parsing_prefile_section: bool = False):
        self.is_parsing_prefile_section = is_parsing_prefile_section

    @property
    def section_description(self) -> str:
        return "preflight" if self.is_parsing_prefile_section else "online client"

    def parse(self, line: str) -> Client:
        """
        Parse a line which is neither empty nor a comment.

        Args:
            line: Line to parse

        Returns:
            Parsed client

        Raises:
            ParseError: If the line does not match the syntax or violates
                any rule for its client type
        """
        match = _PATTERN_LINE.fullmatch(line)
        if not match:
            raise ParseError(f"unparseable line, does not match expected syntax: \"{line}\"")

        try:
            return self._parse_fields(match.groupdict())
        except ValueError as e:
            logger.debug(f"Failed to parse {self.section_description} line: {e}")
            raise ParseError(
                f"unparseable line in {self.section_description} section, "
                f"error while parsing individual fields: \"{line}\""
            ) from e

    def _parse_fields(self, fields: dict[str, str]) -> Client:
        raw_client_type = self._parse_raw_client_type(fields["clienttype"])
        effective_client_type = self._guess_client_type(fields, raw_client_type)
        if effective_client_type is None:
            raise ParseError(
                f"client type \"{fields['clienttype']}\" is missing or unknown and could not be guessed"
            )

        is_raw_online = raw_client_type is not None and raw_client_type.is_online
        is_online = effective_client_type.is_online
        has_changed_online_state_by_guessing = is_raw_online != is_online

        is_atc = effective_client_type is ClientType.ATC_CONNECTED
        is_prefiling = effective_client_type is ClientType.PILOT_PREFILED
        is_connected_pilot = effective_client_type is ClientType.PILOT_CONNECTED

        last_atis_received = self._parse_full_timestamp(
            fields["time_last_atis_received"], not is_prefiling
        )
        if not is_atc:
            last_atis_received = None

        logon_time = self._parse_full_timestamp(fields["time_logon"], is_online)
        if is_online and logon_time is None:
            raise ParseError("expected logon time not to be None")

        return Client(
            callsign=fields["callsign"],
            vatsim_id=parse_int_with_default(fields["cid"], -1),
            real_name=fields["realname"],
            raw_client_type=raw_client_type,
            effective_client_type=effective_client_type,
            served_frequency_kilohertz=self._parse_served_frequency(
                fields["frequency"], is_atc, is_prefiling
            ),
            latitude=self._parse_online_geo_coordinate(fields["latitude"], is_online),
            longitude=self._parse_online_geo_coordinate(fields["longitude"], is_online),
            altitude_feet=self._parse_online_altitude(fields["altitude"], is_online),
            ground_speed=self._parse_ground_speed(fields["groundspeed"], effective_client_type),
            aircraft_type=fields["planned_aircraft"],
            filed_true_air_speed=parse_int_with_default(fields["planned_tascruise"], 0),
            filed_departure_airport_code=fields["planned_depairport"],
            raw_filed_altitude=fields["planned_altitude"],
            filed_destination_airport_code=fields["planned_destairport"],
            server_id=self._filter_server_id(
                fields["server"], is_online, has_changed_online_state_by_guessing
            ),
            protocol_version=self._parse_online_protocol_version(fields["protrevision"], is_online),
            controller_rating=self._parse_controller_rating(fields["rating"], effective_client_type),
            transponder_code_decimal=self._parse_transponder(
                fields["transponder"], effective_client_type
            ),
            facility_type=self._parse_facility_type(fields["facilitytype"], raw_client_type),
            visual_range=self._parse_visual_range(fields["visualrange"], raw_client_type),
            flight_plan_revision=self._parse_flight_plan_revision(
                fields["planned_revision"], is_prefiling
            ),
            raw_flight_plan_type=fields["planned_flighttype"],
            raw_departure_time_planned=parse_int_with_default(fields["planned_deptime"], -1),
            raw_departure_time_actual=parse_int_with_default(fields["planned_actdeptime"], -1),
            filed_time_enroute=parse_duration(
                fields["planned_hrsenroute"], fields["planned_minenroute"], is_prefiling
            ),
            filed_time_fuel=parse_duration(
                fields["planned_hrsfuel"], fields["planned_minfuel"], is_prefiling
            ),
            filed_alternate_airport_code=fields["planned_altairport"],
            flight_plan_remarks=fields["planned_remarks"],
            filed_route=fields["planned_route"],
            departure_airport_latitude=parse_float(fields["planned_depairport_lat"]),
            departure_airport_longitude=parse_float(fields["planned_depairport_lon"]),
            destination_airport_latitude=parse_float(fields["planned_destairport_lat"]),
            destination_airport_longitude=parse_float(fields["planned_destairport_lon"]),
            controller_message=self._decode_controller_message(fields["atis_message"], is_atc),
            controller_message_last_updated=last_atis_received,
            logon_time=logon_time,
            heading=self._parse_heading(fields["heading"], is_connected_pilot),
            qnh_inch_mercury=self._parse_qnh_inch_mercury(fields["qnh_ihg"], is_connected_pilot),
            qnh_hectopascal=(
                parse_int_with_default(fields["qnh_mb"], -1) if is_connected_pilot else -1
            ),
        )

    # =========================================================================
    # Client type
    # =========================================================================

    def _parse_raw_client_type(self, s: str) -> Optional[ClientType]:
        if self.is_parsing_prefile_section:
            if s:
                raise ParseError(f"prefiled flight plans must not declare a client type but found \"{s}\"")
            return ClientType.PILOT_PREFILED

        if s == CLIENT_TYPE_PILOT:
            return ClientType.PILOT_CONNECTED
        if s == CLIENT_TYPE_ATC:
            return ClientType.ATC_CONNECTED
        return None

    def _guess_client_type(
        self, fields: dict[str, str], raw_client_type: Optional[ClientType]
    ) -> Optional[ClientType]:
        """Online clients filling any pilot-only field are connected pilots."""
        if not self.is_parsing_prefile_section:
            has_filled_pilot_field = not all(
                is_zero_or_empty(fields[name])
                for name in ("heading", "groundspeed", "qnh_ihg", "qnh_mb", "transponder")
            )
            if has_filled_pilot_field:
                return ClientType.PILOT_CONNECTED

        return raw_client_type

    # =========================================================================
    # Individual fields
    # =========================================================================

    def _parse_served_frequency(self, s: str, is_atc: bool, is_prefiling: bool) -> int:
        if s == "":
            return -1

        if is_prefiling:
            if s == "0":
                return -1
            raise ParseError(f"prefiled flight plans must not indicate a frequency but found \"{s}\"")

        frequency_kilohertz = parse_frequency_kilohertz(s)
        if frequency_kilohertz <= 0:
            raise ParseError(f"served frequency is given as \"{s}\" which does not make any sense")

        is_served_frequency = frequency_kilohertz < Client.FREQUENCY_KILOHERTZ_PLACEHOLDER_MINIMUM
        if is_served_frequency and not is_atc:
            raise ParseError(
                f"serving a frequency is not allowed but still encountered \"{s}\" as being served by client"
            )

        return frequency_kilohertz

    def _parse_online_geo_coordinate(self, s: str, is_online: bool) -> float:
        if is_online:
            return parse_float(s)
        if is_zero_or_empty(s):
            return math.nan
        raise ParseError("client is not online but still provides a geo coordinate (latitude/longitude)")

    def _parse_online_altitude(self, s: str, is_online: bool) -> int:
        altitude = parse_int_with_default(s, DEFAULT_ALTITUDE)
        if not is_online and altitude != DEFAULT_ALTITUDE:
            raise ParseError(
                f"client is not online (prefiled flight plan?) but still defines altitude \"{s}\""
            )
        return altitude

    def _parse_ground_speed(self, s: str, client_type: ClientType) -> int:
        ground_speed = parse_int_with_default(s, -1)
        if client_type is ClientType.PILOT_CONNECTED:
            return ground_speed
        if ground_speed > 0:
            raise ParseError(
                f"{client_type.name} must not have a ground speed greater zero (was: \"{s}\")"
            )
        return -1

    def _filter_server_id(
        self, server_id: str, is_online: bool, has_changed_online_state_by_guessing: bool
    ) -> Optional[str]:
        has_no_server_id = server_id == ""

        availability_matches_online_state = is_online != has_no_server_id
        if not availability_matches_online_state and not has_changed_online_state_by_guessing:
            raise ParseError(
                f"client is {'' if is_online else 'not '}online but has "
                f"{'no' if has_no_server_id else 'a'} server ID assigned: \"{server_id}\""
            )

        if not is_online or has_no_server_id:
            return None
        return server_id

    def _parse_online_protocol_version(self, s: str, is_online: bool) -> int:
        if not is_online:
            if not is_zero_or_empty(s):
                raise ParseError(f"client is not online but indicates a non-zero protocol revision: \"{s}\"")
            return -1
        return parse_int_with_default(s, -1)

    def _parse_controller_rating(
        self, s: str, client_type: ClientType
    ) -> Optional[ControllerRating]:
        if client_type is ClientType.PILOT_PREFILED:
            if not is_zero_or_empty(s):
                raise ParseError(
                    f"prefiled flight plans are not expected to indicate any controller rating "
                    f"but rating is \"{s}\""
                )
            return None

        rating = ControllerRating.resolve_status_file_id(parse_int(s))
        if client_type is ClientType.PILOT_CONNECTED and rating is not ControllerRating.OBS:
            raise ParseError(
                f"connected pilots are not expected to indicate any controller rating except "
                f"observer/pilot but actual rating is \"{s}\""
            )
        return rating

    def _parse_transponder(self, s: str, client_type: ClientType) -> int:
        if s == "":
            return -1
        if client_type is not ClientType.PILOT_CONNECTED and s != "0":
            raise ParseError(
                f"Only connected pilots are allowed to list a transponder code but code was: \"{s}\""
            )
        return parse_int(s)

    def _parse_facility_type(
        self, s: str, raw_client_type: Optional[ClientType]
    ) -> Optional[FacilityType]:
        if raw_client_type is ClientType.ATC_CONNECTED:
            return FacilityType.resolve_status_file_id(parse_int(s)) if s else None
        if is_zero_or_empty(s):
            return None
        raise ParseError(f"Only ATC stations are allowed to list a facility type but type was: \"{s}\"")

    def _parse_visual_range(self, s: str, raw_client_type: Optional[ClientType]) -> int:
        if raw_client_type is ClientType.ATC_CONNECTED:
            return parse_int(s) if s else -1
        if raw_client_type is ClientType.PILOT_CONNECTED or is_zero_or_empty(s):
            return -1
        raise ParseError(f"Prefilings are not allowed to indicate a visual range; found: \"{s}\"")

    def _parse_flight_plan_revision(self, s: str, is_prefiling: bool) -> int:
        if s == "":
            if is_prefiling:
                raise ParseError("flight plan was prefiled but is missing revision")
            return -1
        return parse_int(s)

    def _decode_controller_message(self, s: str, is_allowed: bool) -> str:
        if s and not is_allowed:
            raise ParseError(f"controller message is not allowed but was: \"{s}\"")
        return s.replace(CONTROLLER_MESSAGE_LINEBREAK, LINEBREAK)

    def _parse_full_timestamp(self, s: str, is_allowed: bool) -> Optional[datetime]:
        if s == "" or s == DUMMY_TIMESTAMP:
            return None
        if not is_allowed:
            raise ParseError(f"timestamp is not allowed but was \"{s}\"")
        return parse_compact_timestamp(s)

    def _parse_heading(self, s: str, is_connected_pilot: bool) -> int:
        if s == "":
            return -1
        if not (is_connected_pilot or s == "0"):
            raise ParseError("heading is only allowed to be set by connected pilots")

        heading = parse_int(s)
        if heading == 360:
            return 0
        if heading > 359:
            raise ParseError(f"heading is out of range: \"{s}\"")
        return heading

    def _parse_qnh_inch_mercury(self, s: str, is_connected_pilot: bool) -> float:
        if is_connected_pilot:
            return parse_float(s)
        if not is_zero_or_empty(s):
            raise ParseError(f"expected QNH Inch Mercury to be unavailable but was \"{s}\"")
        return math.nan
