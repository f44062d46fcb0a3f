"""
Unit tests for privacy filters and their configuration.

Tests cover:
- Line filters and the verification of their outcomes
- Filter chain construction
- Error handling strategies and configuration loading
"""

import pytest

from vatsim_dataformats.exceptions import FilterAbortedError, UnconfiguredError, ValidationError
from vatsim_dataformats.parser.client_fields import ClientField
from vatsim_dataformats.parser.legacy import ClientParser
from vatsim_dataformats.privacyfilter import (
    IGNORE_ERROR,
    KEEP_ORIGINAL_CONTENT,
    REMOVE_LINE,
    THROW_EXCEPTION,
    DataFileFilterConfiguration,
    FlightPlanRemarksRemoveAllFilter,
    RemoveRealNameAndHomebaseFilter,
    SubstituteObserverPrefixFilter,
    VerifiableClientFilterFactory,
    list_strategy_names,
    strategy_by_name,
)


def _observer_line(client_line, callsign: str) -> str:
    return client_line(
        "atc",
        callsign=callsign,
        frequency="199.998",
        rating="1",
        facilitytype="0",
        atis_message="",
        time_last_atis_received="",
    )


# =============================================================================
# Filters
# =============================================================================


class TestRemoveRealNameAndHomebaseFilter:
    """Tests for blanking real names."""

    @pytest.fixture
    def client_filter(self) -> RemoveRealNameAndHomebaseFilter:
        return RemoveRealNameAndHomebaseFilter()

    @pytest.mark.parametrize("kind", ["pilot", "atc", "prefile"])
    def test_blanks_only_real_name(self, client_filter, client_line, kind: str) -> None:
        line = client_line(kind)

        filtered = client_filter.apply(line)

        assert filtered == client_line(kind, realname="")

    def test_line_breaks_are_kept(self, client_filter, client_line) -> None:
        line = client_line("pilot") + "\r\n"
        assert client_filter.apply(line).endswith(":29.92:1013:\r\n")

    def test_line_with_too_few_fields_is_unchanged(self, client_filter) -> None:
        assert client_filter.apply("BROKEN:line") == "BROKEN:line"

    def test_callable(self, client_filter) -> None:
        assert client_filter("A:1:name:rest") == "A:1::rest"

    def test_verification(self, client_filter) -> None:
        assert client_filter.verify_affected_field(ClientField.REAL_NAME, "Jane Doe", "")
        assert not client_filter.verify_affected_field(ClientField.REAL_NAME, "Jane Doe", "Jane")

    def test_unhandled_field(self, client_filter) -> None:
        with pytest.raises(ValueError, match="CALLSIGN"):
            client_filter.verify_affected_field(ClientField.CALLSIGN, "A", "B")

    def test_affected_fields(self, client_filter) -> None:
        assert client_filter.affected_fields == frozenset({ClientField.REAL_NAME})


class TestSubstituteObserverPrefixFilter:
    """Tests for replacing observer callsigns."""

    @pytest.fixture
    def client_filter(self) -> SubstituteObserverPrefixFilter:
        return SubstituteObserverPrefixFilter()

    def test_observer_callsign_is_replaced(self, client_filter, client_line) -> None:
        filtered = client_filter.apply(_observer_line(client_line, "JD_OBS"))
        assert filtered == _observer_line(client_line, "XX_OBS")

    def test_replacement_is_stable(self, client_filter, client_line) -> None:
        filtered = client_filter.apply(_observer_line(client_line, "JD_OBS"))
        assert client_filter.apply(filtered) == filtered

    @pytest.mark.parametrize("callsign", ["EDDT_TWR", "OBS_EDDT", "DLH_OBS1"])
    def test_other_callsigns_are_unchanged(self, client_filter, client_line, callsign: str) -> None:
        line = client_line("atc", callsign=callsign)
        assert client_filter.apply(line) == line

    def test_suffix_in_later_field_is_ignored(self, client_filter, client_line) -> None:
        line = client_line("pilot", planned_remarks="CALL JD_OBS")
        assert client_filter.apply(line) == line

    @pytest.mark.parametrize(
        "original,filtered,expected",
        [
            ("JD_OBS", "XX_OBS", True),
            ("JD_OBS", "JD_OBS", False),
            ("EDDT_TWR", "EDDT_TWR", True),
            ("EDDT_TWR", "XX_OBS", False),
            (None, "", True),
        ],
    )
    def test_verification(self, client_filter, original, filtered, expected: bool) -> None:
        assert client_filter.verify_affected_field(ClientField.CALLSIGN, original, filtered) is expected


class TestFlightPlanRemarksRemoveAllFilter:
    """Tests for removing flight plan remarks."""

    @pytest.mark.parametrize(
        "remarks,expected",
        [
            ("SOME COMMENT /v/", "/V/"),
            ("PBN/A1B1 /R/ /V/", "/V/"),
            ("/T/ RMK/ONLY TEXT /R/", "/R/"),
            ("+VFPS+/V/PBN/A1B1", "+VFPS+/V/"),
            ("+VFPS+ NOTHING ELSE", "+VFPS+"),
            ("NO FLAGS AT ALL", ""),
            ("+vfps+/V/", "/V/"),
        ],
    )
    def test_expected_remarks(self, remarks: str, expected: str) -> None:
        assert FlightPlanRemarksRemoveAllFilter().expected_remarks(remarks) == expected

    def test_unconditional_filtering(self, client_line) -> None:
        client_filter = FlightPlanRemarksRemoveAllFilter()

        filtered = client_filter.apply(client_line("pilot", planned_remarks="PBN/A1B1 /V/ CALL ME"))

        assert filtered == client_line("pilot", planned_remarks="/V/")
        assert client_filter.is_unconditional

    def test_empty_remarks_are_unchanged(self, client_line) -> None:
        line = client_line("atc")
        assert FlightPlanRemarksRemoveAllFilter().apply(line) == line

    def test_triggers_are_case_insensitive(self, client_line) -> None:
        client_filter = FlightPlanRemarksRemoveAllFilter(["stream"])

        filtered = client_filter.apply(client_line("pilot", planned_remarks="/V/ LIVE ON STREAM.EXAMPLE"))

        assert filtered == client_line("pilot", planned_remarks="/V/")
        assert not client_filter.is_unconditional

    def test_without_matching_trigger_line_is_unchanged(self, client_line) -> None:
        line = client_line("pilot")
        assert FlightPlanRemarksRemoveAllFilter(["STREAM", "TWITCH"]).apply(line) == line

    def test_trigger_special_characters_are_literal(self, client_line) -> None:
        line = client_line("pilot", planned_remarks="PBN/A1B1 /V/")
        assert FlightPlanRemarksRemoveAllFilter(["A.B"]).apply(line) == line

    @pytest.mark.parametrize("triggers", [[""], ["  "], ["OK", None]])
    def test_invalid_triggers(self, triggers) -> None:
        with pytest.raises(ValidationError) as exc_info:
            FlightPlanRemarksRemoveAllFilter(triggers)
        assert exc_info.value.field == "triggers"

    def test_short_line_is_unchanged(self) -> None:
        assert FlightPlanRemarksRemoveAllFilter().apply("A:B:C") == "A:B:C"

    def test_filtered_line_parses(self, client_line) -> None:
        line = FlightPlanRemarksRemoveAllFilter().apply(client_line("pilot"))
        assert ClientParser().parse(line).flight_plan_remarks == "/V/"

    @pytest.mark.parametrize(
        "triggers,original,filtered,expected",
        [
            (None, "PBN/A1B1 /V/", "/V/", True),
            (None, "PBN/A1B1 /V/", "", False),
            (None, "", "", True),
            (None, None, "", True),
            (["STREAM"], "PBN/A1B1 /V/", "PBN/A1B1 /V/", True),
            (["STREAM"], "PBN/A1B1 /V/", "/V/", False),
            (["STREAM"], "STREAM /T/", "/T/", True),
        ],
    )
    def test_verification(self, triggers, original, filtered, expected: bool) -> None:
        client_filter = FlightPlanRemarksRemoveAllFilter(triggers)
        assert (
            client_filter.verify_affected_field(ClientField.FLIGHT_PLAN_REMARKS, original, filtered)
            is expected
        )


# =============================================================================
# Factory
# =============================================================================


class TestVerifiableClientFilterFactory:
    """Tests for building filter chains."""

    @pytest.fixture
    def factory(self) -> VerifiableClientFilterFactory:
        return VerifiableClientFilterFactory()

    def test_order(self, factory) -> None:
        configuration = DataFileFilterConfiguration(
            flight_plan_remarks_remove_all=True,
            remove_real_name_and_homebase=True,
            substitute_observer_prefix=True,
        )

        filters = factory.build_from_configuration(configuration)

        assert [type(f) for f in filters] == [
            RemoveRealNameAndHomebaseFilter,
            SubstituteObserverPrefixFilter,
            FlightPlanRemarksRemoveAllFilter,
        ]

    def test_unconditional_removal_takes_precedence(self, factory) -> None:
        configuration = DataFileFilterConfiguration(
            flight_plan_remarks_remove_all=True,
            flight_plan_remarks_remove_all_if_containing=["STREAM"],
        )

        filters = factory.build_from_configuration(configuration)

        assert len(filters) == 1
        assert filters[0].is_unconditional

    def test_triggers(self, factory) -> None:
        configuration = DataFileFilterConfiguration(
            flight_plan_remarks_remove_all_if_containing=["STREAM"]
        )

        filters = factory.build_from_configuration(configuration)

        assert filters[0].triggers == ("STREAM",)

    def test_none_configuration(self, factory) -> None:
        with pytest.raises(ValueError):
            factory.build_from_configuration(None)

    def test_nothing_enabled(self, factory) -> None:
        with pytest.raises(UnconfiguredError):
            factory.build_from_configuration(DataFileFilterConfiguration())


# =============================================================================
# Configuration
# =============================================================================


class TestDataFileFilterConfiguration:
    """Tests for DataFileFilterConfiguration."""

    def test_defaults(self) -> None:
        configuration = DataFileFilterConfiguration()

        assert not configuration.is_any_feature_enabled
        assert configuration.unwanted_modification_strategy is THROW_EXCEPTION
        assert configuration.incomplete_filtering_strategy is THROW_EXCEPTION
        assert configuration.unstable_result_strategy is THROW_EXCEPTION
        assert configuration.validate() == []

    def test_none_triggers(self) -> None:
        with pytest.raises(ValidationError):
            DataFileFilterConfiguration(flight_plan_remarks_remove_all_if_containing=None)

    def test_triggers_enable_feature(self) -> None:
        configuration = DataFileFilterConfiguration(
            flight_plan_remarks_remove_all_if_containing=("STREAM",)
        )

        assert configuration.is_any_feature_enabled
        assert configuration.flight_plan_remarks_remove_all_if_containing == ["STREAM"]

    def test_validate_reports_blank_triggers(self) -> None:
        configuration = DataFileFilterConfiguration(flight_plan_remarks_remove_all_if_containing=[" "])

        errors = configuration.validate()

        assert len(errors) == 1
        assert "remarks trigger" in errors[0]

    def test_from_dict(self) -> None:
        configuration = DataFileFilterConfiguration.from_dict(
            {
                "remove_real_name_and_homebase": True,
                "flight_plan_remarks_remove_all_if_containing": "STREAM",
                "incomplete_filtering_strategy": "remove_line",
                "unstable_result_strategy": "keep_original",
            }
        )

        assert configuration.remove_real_name_and_homebase
        assert not configuration.substitute_observer_prefix
        assert configuration.flight_plan_remarks_remove_all_if_containing == ["STREAM"]
        assert configuration.incomplete_filtering_strategy is REMOVE_LINE
        assert configuration.unstable_result_strategy is KEEP_ORIGINAL_CONTENT
        assert configuration.unwanted_modification_strategy is THROW_EXCEPTION

    def test_from_dict_unknown_strategy(self) -> None:
        with pytest.raises(ValidationError):
            DataFileFilterConfiguration.from_dict({"unwanted_modification_strategy": "retry"})

    def test_to_dict_round_trip(self) -> None:
        configuration = DataFileFilterConfiguration(
            substitute_observer_prefix=True,
            unwanted_modification_strategy=IGNORE_ERROR,
        )

        assert DataFileFilterConfiguration.from_dict(configuration.to_dict()) == configuration


# =============================================================================
# Strategies
# =============================================================================


class TestErrorHandlingStrategies:
    """Tests for the built-in error handling strategies."""

    FIELDS = frozenset({ClientField.REAL_NAME, ClientField.CALLSIGN})

    def test_keep_original(self) -> None:
        assert KEEP_ORIGINAL_CONTENT.handle_error("original", "filtered", self.FIELDS) == "original"

    def test_remove_line(self) -> None:
        assert REMOVE_LINE.handle_error("original", "filtered", self.FIELDS) is None

    def test_ignore_error(self) -> None:
        assert IGNORE_ERROR.handle_error("original", "filtered", self.FIELDS) == "filtered"

    def test_throw(self) -> None:
        with pytest.raises(FilterAbortedError) as exc_info:
            THROW_EXCEPTION.handle_error("original", "filtered", self.FIELDS)

        assert "CALLSIGN, REAL_NAME" in str(exc_info.value)
        assert set(exc_info.value.affected_fields) == self.FIELDS

    def test_lookup_by_name(self) -> None:
        for name in list_strategy_names():
            assert strategy_by_name(name).name == name

    def test_names(self) -> None:
        assert list_strategy_names() == ["ignore_error", "keep_original", "remove_line", "throw"]

    def test_unknown_name(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            strategy_by_name("retry")
        assert exc_info.value.value == "retry"

    def test_repr(self) -> None:
        assert repr(REMOVE_LINE) == "RemoveLineStrategy()"
