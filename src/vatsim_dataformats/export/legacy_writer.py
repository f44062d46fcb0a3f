"""
Writer producing legacy (data.txt) snapshot files from a DataFile.

The output mimics the last published revision of the legacy format so
that consumers which never migrated to JSON can be fed from JSON
snapshots. Information the legacy format cannot represent (ATIS
designators, pilot ratings, aircraft type variants, voice servers) is
dropped.
"""

import io
import logging
import math
from datetime import datetime, timedelta
from pathlib import Path
from typing import BinaryIO, Optional, Union

from ..parser.base import Client, DataFile, FSDServer
from ..parser.helpers import (
    format_compact_timestamp,
    format_frequency_kilohertz,
    is_zero_or_empty,
)
from ..parser.legacy.client import CONTROLLER_MESSAGE_LINEBREAK, FIELD_NAMES
from ..parser.legacy.data_file import (
    SECTION_NAME_CLIENTS,
    SECTION_NAME_GENERAL,
    SECTION_NAME_PREFILE,
    SECTION_NAME_SERVERS,
)
from ..parser.types import ClientType, ControllerRating, FacilityType

logger = logging.getLogger(__name__)

ENCODING = "iso-8859-1"
LINE_END = "\n"
SEPARATOR = ":"

FORMAT_VERSION = 8

# Unavailable values are written empty since ClientParser reads empty
# fields back as unavailable. Zero is only written where the parser
# rejects anything else for the client type.
UNAVAILABLE = ""
NOT_APPLICABLE = "0"

# prefilings without revision are not accepted by the parser
DEFAULT_PREFILE_FLIGHT_PLAN_REVISION = "0"

PILOT_ONLY_FIELD_INDICES = (
    FIELD_NAMES.index("heading"),
    FIELD_NAMES.index("groundspeed"),
    FIELD_NAMES.index("qnh_ihg"),
    FIELD_NAMES.index("qnh_mb"),
    FIELD_NAMES.index("transponder"),
)
CLIENT_TYPE_FIELD_INDEX = FIELD_NAMES.index("clienttype")

# Whitespace is part of the header as last published.
HEADER = (
    "; !CLIENTS section -         "
    "callsign:cid:realname:clienttype:frequency:latitude:longitude:altitude:groundspeed:"
    "planned_aircraft:planned_tascruise:planned_depairport:planned_altitude:planned_destairport:"
    "server:protrevision:rating:transponder:facilitytype:visualrange:"
    "planned_revision:planned_flighttype:planned_deptime:planned_actdeptime:"
    "planned_hrsenroute:planned_minenroute:"
    "planned_hrsfuel:planned_minfuel:planned_altairport:planned_remarks:planned_route:"
    "planned_depairport_lat:planned_depairport_lon:planned_destairport_lat:planned_destairport_lon:"
    "atis_message:time_last_atis_received:time_logon:heading:QNH_iHg:QNH_Mb:"
)

_CLIENT_TYPE_CODES = {
    ClientType.PILOT_CONNECTED: "PILOT",
    ClientType.ATC_CONNECTED: "ATC",
    ClientType.ATIS: "ATC",
    ClientType.PILOT_PREFILED: "",
}


# =============================================================================
# Field encoding
# =============================================================================


def sanitize(s: Optional[str]) -> str:
    """Make text safe to be written to a single field."""
    if s is None:
        return ""
    return s.replace(SEPARATOR, " ").replace("\r", " ").replace("\n", " ")


def default_if_negative(value: int, default: str = UNAVAILABLE) -> str:
    if value < 0:
        return default
    return str(value)


def _format_decimal(value: float, decimals: int) -> str:
    """Format with fixed decimals unless that would alter the value."""
    text = f"{value:.{decimals}f}"
    if float(text) == value:
        return text
    return repr(value)


def encode_coordinate(coordinate: float) -> str:
    if math.isnan(coordinate):
        return UNAVAILABLE
    return _format_decimal(coordinate, 5)


def encode_airport_coordinate(coordinate: float) -> str:
    """Shortest representation, integral values without fraction."""
    if math.isnan(coordinate):
        return UNAVAILABLE
    if coordinate.is_integer():
        return str(int(coordinate))
    return repr(coordinate)


def encode_frequency(frequency_kilohertz: int) -> str:
    if frequency_kilohertz < 0:
        return UNAVAILABLE
    return format_frequency_kilohertz(frequency_kilohertz)


def encode_facility_type(facility_type: Optional[FacilityType]) -> str:
    if facility_type is None:
        return UNAVAILABLE
    return str(facility_type.legacy_id)


def encode_qnh_inch_mercury(qnh: float) -> str:
    if math.isnan(qnh):
        return UNAVAILABLE
    return _format_decimal(qnh, 2)


def _total_minutes(duration: timedelta) -> int:
    return math.trunc(duration.total_seconds() / 60)


def encode_hours(duration: Optional[timedelta]) -> str:
    """Full hours of a duration, truncated towards zero."""
    if duration is None:
        return ""
    return str(math.trunc(_total_minutes(duration) / 60))


def encode_minutes(duration: Optional[timedelta]) -> str:
    """Remaining minutes of a duration, carrying the sign of the duration."""
    if duration is None:
        return ""
    total_minutes = _total_minutes(duration)
    return str(total_minutes - math.trunc(total_minutes / 60) * 60)


def encode_timestamp(timestamp: Optional[datetime]) -> str:
    if timestamp is None:
        return ""
    return format_compact_timestamp(timestamp)


def client_type_of(client: Client) -> Optional[ClientType]:
    """Raw client type, falling back to the effective type."""
    return client.raw_client_type or client.effective_client_type


def encode_client_type(client_type: Optional[ClientType]) -> str:
    try:
        return _CLIENT_TYPE_CODES[client_type]
    except KeyError:
        raise ValueError(f"unsupported client type: {client_type}")


# =============================================================================
# Writer
# =============================================================================


class LegacyDataFileWriter:
    """
    Serializes DataFile objects to the legacy format.

    Sections are written in the order GENERAL, CLIENTS, SERVERS, PREFILE.
    Fields unavailable on the model are written empty (or zero where the
    client type forbids other values), so the result is accepted by
    LegacyDataFileParser and parses back to equal clients.

    Usage:
        writer = LegacyDataFileWriter()
        with open("vatsim-data.txt", "wb") as f:
            writer.write(data_file, f)
    """

    def serialize(self, data_file: DataFile) -> bytes:
        """
        Serialize to ISO-8859-1 encoded bytes.

        Characters not representable in ISO-8859-1 are replaced by "?".

        Raises:
            ValueError: If a client has no usable client type
        """
        buffer = io.StringIO()
        buffer.write(HEADER + LINE_END)

        self._write_general_section(data_file, buffer)

        self._write_section_start(SECTION_NAME_CLIENTS, buffer)
        for client in data_file.clients:
            if client_type_of(client) is not ClientType.PILOT_PREFILED:
                buffer.write(self.encode_client(client) + LINE_END)

        self._write_section_start(SECTION_NAME_SERVERS, buffer)
        for server in data_file.fsd_servers:
            buffer.write(self.encode_fsd_server(server) + LINE_END)

        self._write_section_start(SECTION_NAME_PREFILE, buffer)
        for client in data_file.clients:
            if client_type_of(client) is ClientType.PILOT_PREFILED:
                buffer.write(self.encode_client(client) + LINE_END)

        return buffer.getvalue().encode(ENCODING, errors="replace")

    def write(self, data_file: DataFile, stream: BinaryIO) -> int:
        """
        Serialize into a binary stream.

        Returns:
            Number of bytes written
        """
        data = self.serialize(data_file)
        stream.write(data)
        stream.flush()
        logger.debug(f"Wrote {len(data)} bytes of legacy data file")
        return len(data)

    def write_file(self, data_file: DataFile, file_path: Union[str, Path]) -> int:
        with open(file_path, "wb") as f:
            return self.write(data_file, f)

    def _write_section_start(self, section_name: str, buffer: io.StringIO) -> None:
        buffer.write(";" + LINE_END)
        buffer.write(";" + LINE_END)
        buffer.write(f"!{section_name}:" + LINE_END)

    def _write_general_section(self, data_file: DataFile, buffer: io.StringIO) -> None:
        metadata = data_file.metadata

        buffer.write(f"!{SECTION_NAME_GENERAL}:" + LINE_END)
        buffer.write(f"VERSION = {FORMAT_VERSION}" + LINE_END)

        # unavailable values are left out instead of writing invalid lines
        interval = metadata.minimum_data_file_retrieval_interval
        if interval is not None:
            reload_minutes = math.ceil(interval.total_seconds() / 60)
            buffer.write(f"RELOAD = {reload_minutes}" + LINE_END)

        if metadata.timestamp is not None:
            buffer.write(f"UPDATE = {format_compact_timestamp(metadata.timestamp)}" + LINE_END)

        if metadata.number_of_connected_clients is not None:
            buffer.write(f"CONNECTED CLIENTS = {metadata.number_of_connected_clients}" + LINE_END)

        if metadata.number_of_unique_connected_users is not None:
            buffer.write(f"UNIQUE USERS = {metadata.number_of_unique_connected_users}" + LINE_END)

    def encode_client(self, client: Client) -> str:
        """
        Encode a single client to a line without line end.

        Values which are unavailable on the client are written as empty
        fields, so parsing the line again restores them as unavailable.

        Raises:
            ValueError: If the client has no usable client type
        """
        client_type = client_type_of(client)
        if client_type is None:
            raise ValueError(f"unsupported client type: {client_type}")

        is_online = client_type.is_online
        is_atc = client_type.is_atc
        is_connected_pilot = client.effective_client_type is ClientType.PILOT_CONNECTED

        controller_message_timestamp = client.controller_message_last_updated
        if controller_message_timestamp is None and client.controller_message:
            controller_message_timestamp = client.last_updated
        if not is_atc:
            controller_message_timestamp = None

        # prefilings must not indicate protocol or rating to be parseable again
        if is_online:
            protocol_version = default_if_negative(client.protocol_version)
            controller_rating = str((client.controller_rating or ControllerRating.OBS).legacy_id)
        else:
            protocol_version = UNAVAILABLE
            controller_rating = UNAVAILABLE

        # facility and visual range are only read from ATC lines
        if is_atc:
            facility_type = encode_facility_type(client.facility_type)
            visual_range = default_if_negative(client.visual_range)
        else:
            facility_type = NOT_APPLICABLE
            visual_range = NOT_APPLICABLE

        if is_online:
            flight_plan_revision = default_if_negative(client.flight_plan_revision)
        else:
            flight_plan_revision = default_if_negative(
                client.flight_plan_revision, DEFAULT_PREFILE_FLIGHT_PLAN_REVISION
            )

        # QNH is only read from connected pilots, everyone else has to provide zero
        if is_connected_pilot:
            qnh_inch_mercury = encode_qnh_inch_mercury(client.qnh_inch_mercury)
            qnh_hectopascal = default_if_negative(client.qnh_hectopascal)
        else:
            qnh_inch_mercury = NOT_APPLICABLE
            qnh_hectopascal = NOT_APPLICABLE

        fields = [
            sanitize(client.callsign),
            str(client.vatsim_id),
            sanitize(client.real_name),
            encode_client_type(client_type),
            encode_frequency(client.served_frequency_kilohertz),
            encode_coordinate(client.latitude),
            encode_coordinate(client.longitude),
            str(client.altitude_feet),
            default_if_negative(client.ground_speed),
            sanitize(client.aircraft_type),
            str(client.filed_true_air_speed),
            sanitize(client.filed_departure_airport_code),
            sanitize(client.raw_filed_altitude),
            sanitize(client.filed_destination_airport_code),
            sanitize(client.server_id),
            protocol_version,
            controller_rating,
            default_if_negative(client.transponder_code_decimal),
            facility_type,
            visual_range,
            flight_plan_revision,
            sanitize(client.raw_flight_plan_type),
            default_if_negative(client.raw_departure_time_planned),
            default_if_negative(client.raw_departure_time_actual),
            encode_hours(client.filed_time_enroute),
            encode_minutes(client.filed_time_enroute),
            encode_hours(client.filed_time_fuel),
            encode_minutes(client.filed_time_fuel),
            sanitize(client.filed_alternate_airport_code),
            sanitize(client.flight_plan_remarks),
            sanitize(client.filed_route),
            encode_airport_coordinate(client.departure_airport_latitude),
            encode_airport_coordinate(client.departure_airport_longitude),
            encode_airport_coordinate(client.destination_airport_latitude),
            encode_airport_coordinate(client.destination_airport_longitude),
            sanitize(client.controller_message.replace("\n", CONTROLLER_MESSAGE_LINEBREAK)),
            encode_timestamp(controller_message_timestamp),
            encode_timestamp(client.logon_time if is_online else None),
            default_if_negative(client.heading),
            qnh_inch_mercury,
            qnh_hectopascal,
        ]

        if self._is_client_type_guessed_again(client, fields):
            fields[CLIENT_TYPE_FIELD_INDEX] = UNAVAILABLE

        return SEPARATOR.join(fields) + SEPARATOR

    def _is_client_type_guessed_again(self, client: Client, fields: list[str]) -> bool:
        """
        Check if a pilot whose type had been guessed is recognized again
        without declaring a client type.
        """
        if client.raw_client_type is not None:
            return False
        if client.effective_client_type is not ClientType.PILOT_CONNECTED:
            return False
        return not all(is_zero_or_empty(fields[index]) for index in PILOT_ONLY_FIELD_INDICES)

    def encode_fsd_server(self, server: FSDServer) -> str:
        """Encode a single FSD server to a line without line end."""
        fields = [
            sanitize(server.server_id),
            sanitize(server.address),
            sanitize(server.location),
            sanitize(server.name),
            "1" if server.is_client_connection_allowed else "0",
        ]
        return SEPARATOR.join(fields) + SEPARATOR


def serialize_legacy_data_file(data_file: DataFile) -> bytes:
    """Convenience function serializing with a new LegacyDataFileWriter."""
    return LegacyDataFileWriter().serialize(data_file)
