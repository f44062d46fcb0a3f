"""
Pytest configuration and shared fixtures for unit tests.

Client lines are assembled from field dictionaries so individual tests
only need to state the columns they are interested in.
"""

import copy
import json
from typing import Callable

import pytest

from vatsim_dataformats.parser.legacy.client import FIELD_NAMES

# Connected pilot, all values survive writing and parsing again
PILOT_FIELDS = {
    "callsign": "DLH123",
    "cid": "1234567",
    "realname": "Jane Doe EDDF",
    "clienttype": "PILOT",
    "frequency": "",
    "latitude": "50.03330",
    "longitude": "8.57050",
    "altitude": "35000",
    "groundspeed": "450",
    "planned_aircraft": "B738",
    "planned_tascruise": "450",
    "planned_depairport": "EDDF",
    "planned_altitude": "FL350",
    "planned_destairport": "EGLL",
    "server": "GERMANY",
    "protrevision": "100",
    "rating": "1",
    "transponder": "2000",
    "facilitytype": "0",
    "visualrange": "0",
    "planned_revision": "1",
    "planned_flighttype": "I",
    "planned_deptime": "1200",
    "planned_actdeptime": "1205",
    "planned_hrsenroute": "1",
    "planned_minenroute": "30",
    "planned_hrsfuel": "3",
    "planned_minfuel": "0",
    "planned_altairport": "EDDK",
    "planned_remarks": "PBN/A1B1 /V/",
    "planned_route": "MARUN UL607 KONAN",
    "planned_depairport_lat": "0",
    "planned_depairport_lon": "0",
    "planned_destairport_lat": "0",
    "planned_destairport_lon": "0",
    "atis_message": "",
    "time_last_atis_received": "",
    "time_logon": "20180101150000",
    "heading": "270",
    "qnh_ihg": "29.92",
    "qnh_mb": "1013",
}

# Tower station with a two-line controller message
ATC_FIELDS = {
    "callsign": "EDDT_TWR",
    "cid": "123456",
    "realname": "John Doe",
    "clienttype": "ATC",
    "frequency": "118.500",
    "latitude": "52.55970",
    "longitude": "13.28770",
    "altitude": "0",
    "groundspeed": "",
    "planned_aircraft": "",
    "planned_tascruise": "0",
    "planned_depairport": "",
    "planned_altitude": "",
    "planned_destairport": "",
    "server": "GERMANY",
    "protrevision": "100",
    "rating": "5",
    "transponder": "0",
    "facilitytype": "4",
    "visualrange": "50",
    "planned_revision": "0",
    "planned_flighttype": "",
    "planned_deptime": "",
    "planned_actdeptime": "",
    "planned_hrsenroute": "",
    "planned_minenroute": "",
    "planned_hrsfuel": "",
    "planned_minfuel": "",
    "planned_altairport": "",
    "planned_remarks": "",
    "planned_route": "",
    "planned_depairport_lat": "0",
    "planned_depairport_lon": "0",
    "planned_destairport_lat": "0",
    "planned_destairport_lon": "0",
    "atis_message": "$ voice.example.com/eddt_twr^\xa7Berlin Tower",
    "time_last_atis_received": "20180101153000",
    "time_logon": "20180101140000",
    "heading": "0",
    "qnh_ihg": "0",
    "qnh_mb": "0",
}

# Prefiled flight plan of a client not yet connected
PREFILE_FIELDS = {
    "callsign": "AAL100",
    "cid": "7654321",
    "realname": "Max Mustermann KJFK",
    "clienttype": "",
    "frequency": "",
    "latitude": "",
    "longitude": "",
    "altitude": "0",
    "groundspeed": "",
    "planned_aircraft": "B77W",
    "planned_tascruise": "480",
    "planned_depairport": "KJFK",
    "planned_altitude": "FL360",
    "planned_destairport": "EGLL",
    "server": "",
    "protrevision": "",
    "rating": "",
    "transponder": "0",
    "facilitytype": "0",
    "visualrange": "0",
    "planned_revision": "1",
    "planned_flighttype": "I",
    "planned_deptime": "2300",
    "planned_actdeptime": "",
    "planned_hrsenroute": "7",
    "planned_minenroute": "5",
    "planned_hrsfuel": "9",
    "planned_minfuel": "0",
    "planned_altairport": "EGKK",
    "planned_remarks": "/V/",
    "planned_route": "DCT MERIT",
    "planned_depairport_lat": "0",
    "planned_depairport_lon": "0",
    "planned_destairport_lat": "0",
    "planned_destairport_lon": "0",
    "atis_message": "",
    "time_last_atis_received": "",
    "time_logon": "",
    "heading": "0",
    "qnh_ihg": "0",
    "qnh_mb": "0",
}

FIELDS_BY_KIND = {
    "pilot": PILOT_FIELDS,
    "atc": ATC_FIELDS,
    "prefile": PREFILE_FIELDS,
}


def build_line(fields: dict[str, str]) -> str:
    """Join field values in column order, terminating every column."""
    return "".join(fields[name] + ":" for name in FIELD_NAMES)


@pytest.fixture
def client_line() -> Callable[..., str]:
    """
    Factory building a legacy client line.

    Usage:
        line = client_line("pilot", planned_remarks="+VFPS+/V/")
    """

    def _build(kind: str, **overrides: str) -> str:
        fields = dict(FIELDS_BY_KIND[kind])
        unknown = set(overrides) - set(fields)
        if unknown:
            raise KeyError(f"unknown client fields: {sorted(unknown)}")
        fields.update(overrides)
        return build_line(fields)

    return _build


@pytest.fixture
def legacy_data_file_text(client_line) -> str:
    """Complete legacy snapshot with one client of each kind."""
    return "\n".join(
        [
            "; Created for unit tests",
            ";",
            "!GENERAL:",
            "VERSION = 8",
            "RELOAD = 1",
            "UPDATE = 20180101160000",
            "UPDATE_TIMESTAMP = 2018-01-01T16:00:00Z",
            "ATIS ALLOW MIN = 5",
            "CONNECTED CLIENTS = 2",
            "UNIQUE USERS = 2",
            ";",
            ";",
            "!CLIENTS:",
            client_line("atc"),
            client_line("pilot"),
            ";",
            ";",
            "!SERVERS:",
            "GERMANY:127.0.0.1:Frankfurt:Germany Server:1:",
            "SWEDEN:192.0.2.10:Stockholm:Sweden Server:0:",
            ";",
            ";",
            "!VOICE SERVERS:",
            "voice.example.com:Frankfurt:Voice Germany:1:R:",
            ";",
            ";",
            "!PREFILE:",
            client_line("prefile"),
            ";",
            ";   END",
            "",
        ]
    )


# =============================================================================
# JSON v3
# =============================================================================

FLIGHT_PLAN = {
    "flight_rules": "I",
    "aircraft": "B738/M-SDE2E3FGHIJ1RWY/LB1",
    "aircraft_faa": "H/B738/L",
    "aircraft_short": "B738",
    "departure": "EDDF",
    "arrival": "EGLL",
    "alternate": "EDDK",
    "cruise_tas": "450",
    "altitude": "35000",
    "deptime": "1200",
    "enroute_time": "0130",
    "fuel_time": "0300",
    "remarks": "PBN/A1B1 /V/",
    "route": "MARUN UL607 KONAN",
    "revision_id": 1,
    "assigned_transponder": "2000",
}

JSON_DATA_FILE = {
    "general": {
        "version": 3,
        "reload": 1,
        "update": "20210101120000",
        "update_timestamp": "2021-01-01T12:00:00.1234567Z",
        "connected_clients": 3,
        "unique_users": 3,
    },
    "pilots": [
        {
            "cid": 1234567,
            "name": "Jane Doe",
            "callsign": "DLH123",
            "server": "GERMANY",
            "pilot_rating": 1,
            "military_rating": 0,
            "latitude": 50.0333,
            "longitude": 8.5705,
            "altitude": 35000,
            "groundspeed": 450,
            "transponder": "2000",
            "heading": 270,
            "qnh_i_hg": 29.92,
            "qnh_mb": 1013,
            "flight_plan": FLIGHT_PLAN,
            "logon_time": "2021-01-01T10:00:00.000000Z",
            "last_updated": "2021-01-01T11:59:58Z",
        }
    ],
    "controllers": [
        {
            "cid": 123456,
            "name": "John Doe",
            "callsign": "EDDT_TWR",
            "frequency": "118.500",
            "facility": 4,
            "rating": 5,
            "server": "GERMANY",
            "visual_range": 50,
            "text_atis": ["Berlin Tower", "no ATIS available"],
            "last_updated": "2021-01-01T11:59:30Z",
            "logon_time": "2021-01-01T09:00:00Z",
        }
    ],
    "atis": [
        {
            "cid": 234567,
            "name": "Erika Mustermann",
            "callsign": "EDDT_ATIS",
            "frequency": "123.125",
            "facility": 4,
            "rating": 3,
            "server": "GERMANY",
            "visual_range": 0,
            "atis_code": "B",
            "text_atis": ["BERLIN TEGEL INFORMATION B", "RUNWAY 26R IN USE"],
            "last_updated": "2021-01-01T11:59:45Z",
            "logon_time": "2021-01-01T08:30:00Z",
        }
    ],
    "servers": [
        {
            "ident": "GERMANY",
            "hostname_or_ip": "127.0.0.1",
            "location": "Frankfurt",
            "name": "Germany Server",
            "clients_connection_allowed": 1,
            "client_connections_allowed": True,
            "is_sweatbox": False,
        }
    ],
    "prefiles": [
        {
            "cid": 7654321,
            "name": "Max Mustermann",
            "callsign": "AAL100",
            "flight_plan": dict(
                FLIGHT_PLAN,
                departure="KJFK",
                alternate="EGKK",
                enroute_time="0705",
                fuel_time="0900",
                remarks="/V/",
                route="DCT MERIT",
            ),
            "last_updated": "2021-01-01T11:00:00Z",
        }
    ],
    "facilities": [
        {"id": index, "short": short, "long": short}
        for index, short in enumerate(["OBS", "FSS", "DEL", "GND", "TWR", "APP", "CTR"])
    ],
    "ratings": [
        {"id": index, "short": short, "long": short}
        for index, short in enumerate(
            ["OBS", "S1", "S2", "S3", "C1", "C2", "C3", "I1", "I2", "I3", "SUP", "ADM"], start=1
        )
    ],
    "pilot_ratings": [
        {"id": 0, "short_name": "NEW", "long_name": "Basic Member"},
        {"id": 1, "short_name": "PPL", "long_name": "Private Pilot License"},
        {"id": 3, "short_name": "IR", "long_name": "Instrument Rating"},
        {"id": 7, "short_name": "CMEL", "long_name": "Commercial Multi-Engine License"},
        {"id": 15, "short_name": "ATPL", "long_name": "Airline Transport Pilot License"},
    ],
    "military_ratings": [
        {"id": 0, "short_name": "M0", "long_name": "No Military Rating"},
        {"id": 1, "short_name": "M1", "long_name": "Military Pilot License"},
        {"id": 3, "short_name": "M2", "long_name": "Military Instrument Rating"},
        {"id": 7, "short_name": "M3", "long_name": "Military Multi-Engine Rating"},
        {"id": 15, "short_name": "M4", "long_name": "Military Mission Ready Pilot"},
    ],
}


@pytest.fixture
def json_document() -> dict:
    """Deep copy of a complete JSON v3 snapshot, safe to modify."""
    return copy.deepcopy(JSON_DATA_FILE)


@pytest.fixture
def json_text(json_document) -> str:
    return json.dumps(json_document)
