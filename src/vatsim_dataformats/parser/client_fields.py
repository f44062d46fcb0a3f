"""
Identity tokens for Client fields.

Privacy filters declare the fields they are permitted to change by these
tokens instead of by attribute name strings, so a typo cannot silently
widen or narrow what verification accepts.
"""

import dataclasses
from enum import Enum
from typing import Any

from .base import Client


class ClientField(Enum):
    """One token per Client attribute; the value is the attribute name."""

    CALLSIGN = "callsign"
    VATSIM_ID = "vatsim_id"
    REAL_NAME = "real_name"
    RAW_CLIENT_TYPE = "raw_client_type"
    EFFECTIVE_CLIENT_TYPE = "effective_client_type"
    SERVED_FREQUENCY_KILOHERTZ = "served_frequency_kilohertz"
    LATITUDE = "latitude"
    LONGITUDE = "longitude"
    ALTITUDE_FEET = "altitude_feet"
    GROUND_SPEED = "ground_speed"
    AIRCRAFT_TYPE = "aircraft_type"
    AIRCRAFT_TYPE_FAA = "aircraft_type_faa"
    AIRCRAFT_TYPE_SHORT = "aircraft_type_short"
    FILED_TRUE_AIR_SPEED = "filed_true_air_speed"
    FILED_DEPARTURE_AIRPORT_CODE = "filed_departure_airport_code"
    RAW_FILED_ALTITUDE = "raw_filed_altitude"
    FILED_DESTINATION_AIRPORT_CODE = "filed_destination_airport_code"
    SERVER_ID = "server_id"
    PROTOCOL_VERSION = "protocol_version"
    CONTROLLER_RATING = "controller_rating"
    PILOT_RATING = "pilot_rating"
    MILITARY_RATING = "military_rating"
    TRANSPONDER_CODE_DECIMAL = "transponder_code_decimal"
    FACILITY_TYPE = "facility_type"
    VISUAL_RANGE = "visual_range"
    FLIGHT_PLAN_REVISION = "flight_plan_revision"
    RAW_FLIGHT_PLAN_TYPE = "raw_flight_plan_type"
    RAW_DEPARTURE_TIME_PLANNED = "raw_departure_time_planned"
    RAW_DEPARTURE_TIME_ACTUAL = "raw_departure_time_actual"
    FILED_TIME_ENROUTE = "filed_time_enroute"
    FILED_TIME_FUEL = "filed_time_fuel"
    FILED_ALTERNATE_AIRPORT_CODE = "filed_alternate_airport_code"
    FLIGHT_PLAN_REMARKS = "flight_plan_remarks"
    FILED_ROUTE = "filed_route"
    DEPARTURE_AIRPORT_LATITUDE = "departure_airport_latitude"
    DEPARTURE_AIRPORT_LONGITUDE = "departure_airport_longitude"
    DESTINATION_AIRPORT_LATITUDE = "destination_airport_latitude"
    DESTINATION_AIRPORT_LONGITUDE = "destination_airport_longitude"
    CONTROLLER_MESSAGE = "controller_message"
    CONTROLLER_MESSAGE_LAST_UPDATED = "controller_message_last_updated"
    ATIS_DESIGNATOR = "atis_designator"
    LOGON_TIME = "logon_time"
    LAST_UPDATED = "last_updated"
    HEADING = "heading"
    QNH_INCH_MERCURY = "qnh_inch_mercury"
    QNH_HECTOPASCAL = "qnh_hectopascal"

    @property
    def attribute_name(self) -> str:
        return self.value

    def get_from(self, client: Client) -> Any:
        """Read this field's value from a client."""
        return getattr(client, self.value)

    @classmethod
    def all_fields(cls) -> frozenset["ClientField"]:
        return frozenset(cls)


def _check_complete() -> None:
    attribute_names = {f.name for f in dataclasses.fields(Client)}
    token_names = {token.value for token in ClientField}
    if attribute_names != token_names:
        raise RuntimeError(
            f"ClientField tokens out of sync with Client: "
            f"{sorted(attribute_names.symmetric_difference(token_names))}"
        )


_check_complete()
