"""
Privacy filters operating on raw legacy client lines.

Filters work on the unparsed line so that everything they do not touch
is reproduced byte by byte. Because they are based on regular
expressions and field splitting they may under- or over-match; every
filter therefore declares the fields it is allowed to change and is able
to tell whether a change of such a field is one of its legal outcomes.
DataFileFilter uses both to verify each filter step.
"""

import re
from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional

from ..exceptions import ValidationError
from ..parser.client_fields import ClientField

FIELD_SEPARATOR = ":"

# 0-based position of planned_remarks in client lines
REMARKS_FIELD_INDEX = 29


class VerifiableClientFilter(ABC):
    """Base class for filters whose results can be verified per field."""

    @abstractmethod
    def apply(self, line: str) -> str:
        """Filter a single client line."""
        pass

    @property
    @abstractmethod
    def affected_fields(self) -> frozenset[ClientField]:
        """Fields this filter is permitted to change."""
        pass

    @abstractmethod
    def verify_affected_field(self, field: ClientField, original: Any, filtered: Any) -> bool:
        """
        Check whether a field changed in a legal way.

        Args:
            field: One of affected_fields
            original: Parsed value before filtering
            filtered: Parsed value after filtering

        Returns:
            True if the filtered value is a legal outcome for the original

        Raises:
            ValueError: If the field is not handled by this filter
        """
        pass

    def __call__(self, line: str) -> str:
        return self.apply(line)

    def _unhandled_field(self, field: ClientField) -> ValueError:
        return ValueError(f"attempted to verify an unhandled field: {field.name}")


class RemoveRealNameAndHomebaseFilter(VerifiableClientFilter):
    """Blanks the real name field which may also contain a home base."""

    _PATTERN = re.compile(r"([^:]*:[^:]*:)[^:]*(:.*)", re.DOTALL)

    @property
    def affected_fields(self) -> frozenset[ClientField]:
        return frozenset({ClientField.REAL_NAME})

    def apply(self, line: str) -> str:
        match = self._PATTERN.fullmatch(line)
        if not match:
            return line
        return match.group(1) + match.group(2)

    def verify_affected_field(self, field, original, filtered) -> bool:
        if field is not ClientField.REAL_NAME:
            raise self._unhandled_field(field)
        return not filtered


class SubstituteObserverPrefixFilter(VerifiableClientFilter):
    """
    Replaces observer callsigns by a generic one.

    Observer callsigns are often derived from personal initials, e.g.
    "JD_OBS" becomes "XX_OBS".
    """

    OBSERVER_SUFFIX = "_OBS"
    OBSERVER_REPLACEMENT = "XX_OBS"

    _PATTERN = re.compile(r"[^:]*" + re.escape(OBSERVER_SUFFIX) + r"(:.*)", re.DOTALL)

    @property
    def affected_fields(self) -> frozenset[ClientField]:
        return frozenset({ClientField.CALLSIGN})

    def apply(self, line: str) -> str:
        match = self._PATTERN.fullmatch(line)
        if not match:
            return line
        return self.OBSERVER_REPLACEMENT + match.group(1)

    def verify_affected_field(self, field, original, filtered) -> bool:
        if field is not ClientField.CALLSIGN:
            raise self._unhandled_field(field)

        original = original or ""
        if not original.endswith(self.OBSERVER_SUFFIX):
            return filtered == original
        return filtered == self.OBSERVER_REPLACEMENT


class FlightPlanRemarksRemoveAllFilter(VerifiableClientFilter):
    """
    Removes flight plan remarks except for markers needed by ATC.

    A leading VFPS marker and the strongest communication flag (voice over
    receive-only over text) are kept; all other content is removed.
    Without triggers, all non-blank remarks are filtered. With triggers,
    only remarks containing any of them (case-insensitive) are filtered.
    """

    VFPS_PREFIX = "+VFPS+"
    COMMUNICATION_FLAG_VOICE = "/V/"
    COMMUNICATION_FLAG_RECEIVE_ONLY = "/R/"
    COMMUNICATION_FLAG_TEXT = "/T/"

    # precedence from highest to lowest
    COMMUNICATION_FLAGS = (
        COMMUNICATION_FLAG_VOICE,
        COMMUNICATION_FLAG_RECEIVE_ONLY,
        COMMUNICATION_FLAG_TEXT,
    )

    def __init__(self, triggers: Optional[Iterable[str]] = None):
        triggers = list(triggers) if triggers is not None else []
        self.triggers = tuple(triggers)

        if not triggers:
            self._trigger_pattern = None
            return

        if any(trigger is None or not trigger.strip() for trigger in triggers):
            raise ValidationError(
                "Triggers contain invalid search phrases (None or white-space only)",
                field="triggers",
            )

        self._trigger_pattern = re.compile(
            "|".join(re.escape(trigger) for trigger in triggers), re.IGNORECASE
        )

    @property
    def affected_fields(self) -> frozenset[ClientField]:
        return frozenset({ClientField.FLIGHT_PLAN_REMARKS})

    @property
    def is_unconditional(self) -> bool:
        return self._trigger_pattern is None

    def is_condition_met(self, remarks: Optional[str]) -> bool:
        if self._trigger_pattern is None:
            return bool(remarks and remarks.strip())
        return remarks is not None and self._trigger_pattern.search(remarks) is not None

    def expected_remarks(self, original: str) -> str:
        """Return what remains of filtered remarks."""
        prefix = self.VFPS_PREFIX if original.startswith(self.VFPS_PREFIX) else ""

        original_upper = original.upper()
        flag = next((f for f in self.COMMUNICATION_FLAGS if f in original_upper), "")

        return prefix + flag

    def apply(self, line: str) -> str:
        fields = line.split(FIELD_SEPARATOR)
        if len(fields) <= REMARKS_FIELD_INDEX:
            return line

        remarks = fields[REMARKS_FIELD_INDEX]
        if not self.is_condition_met(remarks):
            return line

        fields[REMARKS_FIELD_INDEX] = self.expected_remarks(remarks)
        return FIELD_SEPARATOR.join(fields)

    def verify_affected_field(self, field, original, filtered) -> bool:
        if field is not ClientField.FLIGHT_PLAN_REMARKS:
            raise self._unhandled_field(field)

        original = original or ""
        filtered = filtered or ""

        if not self.is_condition_met(original):
            return filtered == original

        return filtered == self.expected_remarks(original)
