"""
Enumerated value types shared by all parsers.

Ratings and facility types are published with different identifiers by
the two wire formats: the legacy format uses fixed numeric ids while the
JSON format ships id-to-name mapping tables which are resolved through
the short names defined here.
"""

from enum import Enum
from typing import Optional

from ..exceptions import ParseError


class DataFileFormat(str, Enum):
    """Wire formats a snapshot can be published in."""

    LEGACY = "legacy"
    JSON3 = "json3"


class ClientType(str, Enum):
    """
    Role of a client record.

    The legacy format only distinguishes pilots and ATC, ATIS stations are
    only identified as such by the JSON format.
    """

    PILOT_CONNECTED = "pilot_connected"
    PILOT_PREFILED = "pilot_prefiled"
    ATC_CONNECTED = "atc_connected"
    ATIS = "atis"

    @property
    def is_online(self) -> bool:
        """True for all types describing a client connected to the network."""
        return self is not ClientType.PILOT_PREFILED

    @property
    def is_atc(self) -> bool:
        """True for controller stations including ATIS."""
        return self in (ClientType.ATC_CONNECTED, ClientType.ATIS)


class ControllerRating(Enum):
    """Controller ratings with their legacy status file ids."""

    OBS = 1
    S1 = 2
    S2 = 3
    S3 = 4
    C1 = 5
    C2 = 6
    C3 = 7
    I1 = 8
    I2 = 9
    I3 = 10
    SUP = 11
    ADM = 12

    @property
    def legacy_id(self) -> int:
        return self.value

    @property
    def short_name(self) -> str:
        return self.name

    @classmethod
    def resolve_status_file_id(cls, status_file_id: int) -> "ControllerRating":
        """
        Resolve a legacy status file id.

        Raises:
            ParseError: If the id is unknown
        """
        try:
            return cls(status_file_id)
        except ValueError:
            raise ParseError(f"unknown controller rating ID {status_file_id}")

    @classmethod
    def resolve_short_name(cls, short_name: str) -> Optional["ControllerRating"]:
        return cls.__members__.get(short_name)


class FacilityType(Enum):
    """Facility types served by ATC stations."""

    OBSERVER = (0, "OBS")
    FSS = (1, "FSS")
    DELIVERY = (2, "DEL")
    GROUND = (3, "GND")
    TOWER = (4, "TWR")
    APPROACH_DEPARTURE = (5, "APP")
    CENTER = (6, "CTR")

    def __init__(self, status_file_id: int, short_name: str):
        self.status_file_id = status_file_id
        self.short_name = short_name

    @property
    def legacy_id(self) -> int:
        return self.status_file_id

    @classmethod
    def resolve_status_file_id(cls, status_file_id: int) -> "FacilityType":
        """
        Resolve a legacy status file id.

        Raises:
            ParseError: If the id is unknown
        """
        for facility_type in cls:
            if facility_type.status_file_id == status_file_id:
                return facility_type
        raise ParseError(f"unknown facility type ID {status_file_id}")

    @classmethod
    def resolve_short_name(cls, short_name: str) -> Optional["FacilityType"]:
        for facility_type in cls:
            if facility_type.short_name == short_name:
                return facility_type
        return None


class PilotRating(Enum):
    """Pilot ratings as listed by the JSON format."""

    UNRATED = "NEW"
    PPL = "PPL"
    IR = "IR"
    CMEL = "CMEL"
    ATPL = "ATPL"

    @property
    def short_name(self) -> str:
        return self.value

    @classmethod
    def resolve_short_name(cls, short_name: str) -> Optional["PilotRating"]:
        try:
            return cls(short_name)
        except ValueError:
            return None


class MilitaryRating(Enum):
    """Military pilot ratings as listed by the JSON format."""

    M0 = "M0"
    M1 = "M1"
    M2 = "M2"
    M3 = "M3"
    M4 = "M4"

    @property
    def short_name(self) -> str:
        return self.value

    @classmethod
    def resolve_short_name(cls, short_name: str) -> Optional["MilitaryRating"]:
        try:
            return cls(short_name)
        except ValueError:
            return None
