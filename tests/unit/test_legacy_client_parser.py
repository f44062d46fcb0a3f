"""
Unit tests for parsing client lines of the legacy format.

Tests cover:
- Connected pilots, ATC stations and prefiled flight plans
- Guessing the client type from pilot-only fields
- Rules rejecting contradicting field combinations
"""

import math
from datetime import datetime, timedelta, timezone

import pytest

from vatsim_dataformats.exceptions import ParseError
from vatsim_dataformats.parser import ClientType, ControllerRating, FacilityType
from vatsim_dataformats.parser.legacy import ClientParser


@pytest.fixture
def online_parser() -> ClientParser:
    return ClientParser(is_parsing_prefile_section=False)


@pytest.fixture
def prefile_parser() -> ClientParser:
    return ClientParser(is_parsing_prefile_section=True)


class TestConnectedPilot:
    """Tests for PILOT lines of the CLIENTS section."""

    def test_all_fields(self, online_parser, client_line) -> None:
        client = online_parser.parse(client_line("pilot"))

        assert client.callsign == "DLH123"
        assert client.vatsim_id == 1234567
        assert client.real_name == "Jane Doe EDDF"
        assert client.raw_client_type is ClientType.PILOT_CONNECTED
        assert client.effective_client_type is ClientType.PILOT_CONNECTED
        assert client.served_frequency_kilohertz == -1
        assert client.latitude == pytest.approx(50.0333)
        assert client.longitude == pytest.approx(8.5705)
        assert client.altitude_feet == 35000
        assert client.ground_speed == 450
        assert client.aircraft_type == "B738"
        assert client.filed_true_air_speed == 450
        assert client.filed_departure_airport_code == "EDDF"
        assert client.raw_filed_altitude == "FL350"
        assert client.filed_destination_airport_code == "EGLL"
        assert client.server_id == "GERMANY"
        assert client.protocol_version == 100
        assert client.controller_rating is ControllerRating.OBS
        assert client.transponder_code_decimal == 2000
        assert client.facility_type is None
        assert client.visual_range == -1
        assert client.flight_plan_revision == 1
        assert client.raw_flight_plan_type == "I"
        assert client.raw_departure_time_planned == 1200
        assert client.raw_departure_time_actual == 1205
        assert client.filed_time_enroute == timedelta(hours=1, minutes=30)
        assert client.filed_time_fuel == timedelta(hours=3)
        assert client.filed_alternate_airport_code == "EDDK"
        assert client.flight_plan_remarks == "PBN/A1B1 /V/"
        assert client.filed_route == "MARUN UL607 KONAN"
        assert client.controller_message == ""
        assert client.controller_message_last_updated is None
        assert client.logon_time == datetime(2018, 1, 1, 15, 0, tzinfo=timezone.utc)
        assert client.heading == 270
        assert client.qnh_inch_mercury == pytest.approx(29.92)
        assert client.qnh_hectopascal == 1013

    def test_heading_360_is_zero(self, online_parser, client_line) -> None:
        assert online_parser.parse(client_line("pilot", heading="360")).heading == 0

    def test_heading_out_of_range(self, online_parser, client_line) -> None:
        with pytest.raises(ParseError):
            online_parser.parse(client_line("pilot", heading="361"))

    def test_pilots_must_not_have_controller_rating(self, online_parser, client_line) -> None:
        with pytest.raises(ParseError):
            online_parser.parse(client_line("pilot", rating="5"))

    def test_rating_is_mandatory_for_pilots(self, online_parser, client_line) -> None:
        with pytest.raises(ParseError):
            online_parser.parse(client_line("pilot", rating=""))

    def test_pilots_must_not_serve_frequencies(self, online_parser, client_line) -> None:
        with pytest.raises(ParseError):
            online_parser.parse(client_line("pilot", frequency="118.500"))

    def test_placeholder_frequency_is_allowed(self, online_parser, client_line) -> None:
        client = online_parser.parse(client_line("pilot", frequency="199.998"))

        assert client.served_frequency_kilohertz == 199998
        assert not client.is_serving_frequency

    def test_online_pilot_requires_server(self, online_parser, client_line) -> None:
        with pytest.raises(ParseError):
            online_parser.parse(client_line("pilot", server=""))

    def test_online_pilot_requires_logon_time(self, online_parser, client_line) -> None:
        with pytest.raises(ParseError):
            online_parser.parse(client_line("pilot", time_logon=""))

    def test_pilots_must_not_send_controller_messages(self, online_parser, client_line) -> None:
        with pytest.raises(ParseError):
            online_parser.parse(client_line("pilot", atis_message="hello"))

    def test_last_atis_received_is_dropped(self, online_parser, client_line) -> None:
        client = online_parser.parse(client_line("pilot", time_last_atis_received="20180101150000"))
        assert client.controller_message_last_updated is None

    def test_negative_durations_are_normalized(self, online_parser, client_line) -> None:
        client = online_parser.parse(
            client_line("pilot", planned_hrsenroute="-1", planned_minenroute="30")
        )
        assert client.filed_time_enroute == timedelta(minutes=-90)

    def test_negative_altitude(self, online_parser, client_line) -> None:
        assert online_parser.parse(client_line("pilot", altitude="-12")).altitude_feet == -12


class TestAtc:
    """Tests for ATC lines of the CLIENTS section."""

    def test_all_fields(self, online_parser, client_line) -> None:
        client = online_parser.parse(client_line("atc"))

        assert client.callsign == "EDDT_TWR"
        assert client.vatsim_id == 123456
        assert client.raw_client_type is ClientType.ATC_CONNECTED
        assert client.effective_client_type is ClientType.ATC_CONNECTED
        assert client.served_frequency_kilohertz == 118500
        assert client.is_serving_frequency
        assert client.controller_rating is ControllerRating.C1
        assert client.facility_type is FacilityType.TOWER
        assert client.visual_range == 50
        assert client.ground_speed == -1
        assert client.heading == 0
        assert math.isnan(client.qnh_inch_mercury)
        assert client.qnh_hectopascal == -1
        assert client.controller_message == "$ voice.example.com/eddt_twr\nBerlin Tower"
        assert client.controller_message_last_updated == datetime(
            2018, 1, 1, 15, 30, tzinfo=timezone.utc
        )
        assert client.logon_time == datetime(2018, 1, 1, 14, 0, tzinfo=timezone.utc)

    def test_published_example(self, online_parser) -> None:
        """Line as seen in published files with placeholder coordinates."""
        line = (
            "EDDT_TWR:123456:realname:ATC:118.500:12.34567:12.34567:0:::0::::SERVER1:100:3::4:50:"
            ":::::::::::::::atis message:20180101160000:20180101150000::::"
        )

        client = online_parser.parse(line)

        assert client.callsign == "EDDT_TWR"
        assert client.effective_client_type is ClientType.ATC_CONNECTED
        assert client.served_frequency_kilohertz == 118500
        assert client.controller_rating is ControllerRating.S2
        assert client.transponder_code_decimal == -1
        assert client.facility_type is FacilityType.TOWER
        assert client.controller_message == "atis message"
        assert client.server_id == "SERVER1"

    def test_controller_message_may_contain_colons(self, online_parser, client_line) -> None:
        client = online_parser.parse(client_line("atc", atis_message="contact 12:30 UTC"))
        assert client.controller_message == "contact 12:30 UTC"

    def test_atc_must_not_squawk(self, online_parser, client_line) -> None:
        """A transponder code on an ATC line makes the client a pilot by guessing."""
        with pytest.raises(ParseError):
            online_parser.parse(client_line("atc", transponder="2000"))

    def test_zero_frequency_is_rejected(self, online_parser, client_line) -> None:
        with pytest.raises(ParseError):
            online_parser.parse(client_line("atc", frequency="0"))

    def test_unknown_rating_is_rejected(self, online_parser, client_line) -> None:
        with pytest.raises(ParseError):
            online_parser.parse(client_line("atc", rating="13"))


class TestClientTypeGuessing:
    """Tests for online clients without a declared client type."""

    def test_missing_type_with_pilot_fields_is_pilot(self, online_parser, client_line) -> None:
        client = online_parser.parse(client_line("pilot", clienttype=""))

        assert client.raw_client_type is None
        assert client.effective_client_type is ClientType.PILOT_CONNECTED

    def test_missing_type_without_pilot_fields_fails(self, online_parser, client_line) -> None:
        with pytest.raises(ParseError):
            online_parser.parse(client_line("atc", clienttype=""))

    def test_guessed_pilot_may_lack_server(self, online_parser, client_line) -> None:
        """Guessing changed the online state, so a missing server is tolerated."""
        client = online_parser.parse(client_line("pilot", clienttype="", server=""))
        assert client.server_id is None


class TestPrefile:
    """Tests for lines of the PREFILE section."""

    def test_all_fields(self, prefile_parser, client_line) -> None:
        client = prefile_parser.parse(client_line("prefile"))

        assert client.callsign == "AAL100"
        assert client.vatsim_id == 7654321
        assert client.raw_client_type is ClientType.PILOT_PREFILED
        assert client.effective_client_type is ClientType.PILOT_PREFILED
        assert client.served_frequency_kilohertz == -1
        assert math.isnan(client.latitude)
        assert client.altitude_feet == 0
        assert client.server_id is None
        assert client.protocol_version == -1
        assert client.controller_rating is None
        assert client.flight_plan_revision == 1
        assert client.filed_time_enroute == timedelta(hours=7, minutes=5)
        assert client.filed_time_fuel == timedelta(hours=9)
        assert client.logon_time is None

    def test_declared_client_type_is_rejected(self, prefile_parser, client_line) -> None:
        with pytest.raises(ParseError):
            prefile_parser.parse(client_line("prefile", clienttype="PILOT"))

    def test_revision_is_mandatory(self, prefile_parser, client_line) -> None:
        with pytest.raises(ParseError):
            prefile_parser.parse(client_line("prefile", planned_revision=""))

    @pytest.mark.parametrize("frequency", ["", "0"])
    def test_frequency_placeholders(self, prefile_parser, client_line, frequency: str) -> None:
        client = prefile_parser.parse(client_line("prefile", frequency=frequency))
        assert client.served_frequency_kilohertz == -1

    def test_frequency_is_rejected(self, prefile_parser, client_line) -> None:
        with pytest.raises(ParseError):
            prefile_parser.parse(client_line("prefile", frequency="199.998"))

    @pytest.mark.parametrize(
        "field,value",
        [
            ("latitude", "50.1"),
            ("altitude", "1000"),
            ("server", "GERMANY"),
            ("protrevision", "100"),
            ("rating", "1"),
            ("transponder", "2000"),
            ("facilitytype", "4"),
            ("visualrange", "50"),
            ("time_logon", "20180101150000"),
            ("time_last_atis_received", "20180101150000"),
            ("heading", "90"),
            ("qnh_ihg", "29.92"),
        ],
    )
    def test_online_only_fields_are_rejected(
        self, prefile_parser, client_line, field: str, value: str
    ) -> None:
        with pytest.raises(ParseError):
            prefile_parser.parse(client_line("prefile", **{field: value}))

    def test_mandatory_durations(self, prefile_parser, client_line) -> None:
        with pytest.raises(ParseError):
            prefile_parser.parse(
                client_line("prefile", planned_hrsenroute="", planned_minenroute="")
            )

    def test_dummy_timestamp_is_ignored(self, prefile_parser, client_line) -> None:
        client = prefile_parser.parse(client_line("prefile", time_logon="00010101000000"))
        assert client.logon_time is None


class TestSyntax:
    """Tests for lines not matching the expected syntax."""

    def test_too_few_columns(self, online_parser) -> None:
        with pytest.raises(ParseError, match="does not match expected syntax"):
            online_parser.parse("DLH123:1234567:Jane Doe:PILOT:")

    def test_non_numeric_cid(self, online_parser, client_line) -> None:
        with pytest.raises(ParseError):
            online_parser.parse(client_line("pilot", cid="ABC"))

    def test_field_errors_are_chained(self, online_parser, client_line) -> None:
        with pytest.raises(ParseError) as exc_info:
            online_parser.parse(client_line("pilot", heading="400"))

        assert "error while parsing individual fields" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, ParseError)
