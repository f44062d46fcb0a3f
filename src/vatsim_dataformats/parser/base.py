"""
Abstract base class and data models for snapshot parsers.

Provides the records shared by all wire formats (Client, FSDServer,
VoiceServer, DataFileMetaData, DataFile) and the DataFileParser
interface every format-specific parser implements.
"""

import dataclasses
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional, Union

from ..exceptions import ParseError
from ..utils.charset import decode_data_file
from ..utils.file_utils import read_data_file
from .helpers import values_equal
from .log import ParserLogEntry
from .types import (
    ClientType,
    ControllerRating,
    DataFileFormat,
    FacilityType,
    MilitaryRating,
    PilotRating,
)


@dataclass(frozen=True, eq=False)
class Client:
    """
    A single client record: connected pilot, ATC station, ATIS or prefiling.

    Which fields carry information depends on the effective client type.
    Fields not applicable to a type hold their sentinel value:

        -1            integer fields that are unknown or not applicable
                      (frequency, ground speed, transponder, heading, ...)
        0             altitude and filed true air speed
        NaN           coordinates and QNH in inches of mercury
        None          optional strings, timestamps, durations and enums
        ""            controller message

    The raw client type is the type declared by the source while the
    effective type may have been resolved from other fields for ambiguous
    legacy input.

    Construction fails with ParseError if controller-only data is given for
    a non-ATC record or an ATIS designator for a non-ATIS record.
    """

    FREQUENCY_KILOHERTZ_PLACEHOLDER_MINIMUM = 199000

    callsign: Optional[str] = None
    vatsim_id: int = -1
    real_name: Optional[str] = None
    raw_client_type: Optional[ClientType] = None
    effective_client_type: Optional[ClientType] = None
    served_frequency_kilohertz: int = -1
    latitude: float = math.nan
    longitude: float = math.nan
    altitude_feet: int = 0
    ground_speed: int = -1

    # Flight plan
    aircraft_type: Optional[str] = None
    aircraft_type_faa: Optional[str] = None
    aircraft_type_short: Optional[str] = None
    filed_true_air_speed: int = 0
    filed_departure_airport_code: Optional[str] = None
    raw_filed_altitude: Optional[str] = None
    filed_destination_airport_code: Optional[str] = None

    server_id: Optional[str] = None
    protocol_version: int = -1
    controller_rating: Optional[ControllerRating] = None
    pilot_rating: Optional[PilotRating] = None
    military_rating: Optional[MilitaryRating] = None
    transponder_code_decimal: int = -1
    facility_type: Optional[FacilityType] = None
    visual_range: int = -1

    flight_plan_revision: int = -1
    raw_flight_plan_type: Optional[str] = None
    raw_departure_time_planned: int = -1
    raw_departure_time_actual: int = -1
    filed_time_enroute: Optional[timedelta] = None
    filed_time_fuel: Optional[timedelta] = None
    filed_alternate_airport_code: Optional[str] = None
    flight_plan_remarks: Optional[str] = None
    filed_route: Optional[str] = None

    # Never seen populated, always 0 in the wild
    departure_airport_latitude: float = math.nan
    departure_airport_longitude: float = math.nan
    destination_airport_latitude: float = math.nan
    destination_airport_longitude: float = math.nan

    # ATC and ATIS only
    controller_message: str = ""
    controller_message_last_updated: Optional[datetime] = None
    atis_designator: Optional[str] = None

    logon_time: Optional[datetime] = None
    last_updated: Optional[datetime] = None
    heading: int = -1
    qnh_inch_mercury: float = math.nan
    qnh_hectopascal: int = -1

    def __post_init__(self):
        is_atc = self.effective_client_type is not None and self.effective_client_type.is_atc
        if self.controller_message and not is_atc:
            raise ParseError(
                f"controller message is only allowed for ATC and ATIS but client type is "
                f"{self._effective_type_name()}"
            )
        if self.atis_designator is not None and self.effective_client_type is not ClientType.ATIS:
            raise ParseError(
                f"ATIS designator is only allowed for ATIS but client type is "
                f"{self._effective_type_name()}"
            )

    def _effective_type_name(self) -> str:
        if self.effective_client_type is None:
            return "unknown"
        return self.effective_client_type.name

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Client):
            return NotImplemented
        return all(
            values_equal(getattr(self, f.name), getattr(other, f.name))
            for f in dataclasses.fields(self)
        )

    __hash__ = None

    @property
    def is_serving_frequency(self) -> bool:
        """True if a real frequency (not a placeholder) is being served."""
        return 0 < self.served_frequency_kilohertz < self.FREQUENCY_KILOHERTZ_PLACEHOLDER_MINIMUM


@dataclass(frozen=True)
class FSDServer:
    """An FSD server clients can connect to."""

    server_id: str
    address: str
    location: str
    name: str
    is_client_connection_allowed: bool = True
    is_sweatbox: bool = False


@dataclass(frozen=True)
class VoiceServer:
    """A voice server (legacy format only)."""

    address: str
    location: str
    name: str
    is_client_connection_allowed: bool = True
    raw_server_type: Optional[str] = None


@dataclass(frozen=True)
class DataFileMetaData:
    """
    Snapshot level information.

    All fields are optional. Absent information is represented by None and
    is never guessed.
    """

    version_format: Optional[int] = None
    timestamp: Optional[datetime] = None
    minimum_data_file_retrieval_interval: Optional[timedelta] = None
    minimum_atis_retrieval_interval: Optional[timedelta] = None
    number_of_connected_clients: Optional[int] = None
    number_of_unique_connected_users: Optional[int] = None


@dataclass(frozen=True)
class DataFile:
    """
    Result of parsing one snapshot.

    Attributes:
        metadata: Snapshot level information
        clients: Online clients and prefilings in input order
        fsd_servers: FSD servers in input order
        voice_servers: Voice servers in input order (always empty for JSON)
        parser_log_entries: Every deviation found while parsing
    """

    metadata: DataFileMetaData = field(default_factory=DataFileMetaData)
    clients: tuple[Client, ...] = ()
    fsd_servers: tuple[FSDServer, ...] = ()
    voice_servers: tuple[VoiceServer, ...] = ()
    parser_log_entries: tuple[ParserLogEntry, ...] = ()

    @property
    def online_clients(self) -> list[Client]:
        return [
            client
            for client in self.clients
            if client.effective_client_type is not None and client.effective_client_type.is_online
        ]

    @property
    def prefiled_clients(self) -> list[Client]:
        return [
            client
            for client in self.clients
            if client.effective_client_type is ClientType.PILOT_PREFILED
        ]

    def rejected_log_entries(self) -> list[ParserLogEntry]:
        """Return log entries of units that were dropped from the result."""
        return [entry for entry in self.parser_log_entries if entry.is_line_rejected]


class DataFileParser(ABC):
    """
    Abstract base class for snapshot parsers.

    Implementations parse one complete snapshot per call and never raise
    for input quality issues; deviations are reported through the parser
    log of the returned DataFile. Instances hold no state between calls.
    """

    data_file_format: DataFileFormat

    @abstractmethod
    def parse(self, content: str) -> DataFile:
        """
        Parse a complete snapshot.

        Args:
            content: Decoded snapshot content

        Returns:
            Parsed DataFile including the diagnostic log
        """
        pass

    def parse_bytes(self, data: bytes, encoding: str = "auto") -> DataFile:
        """
        Decode and parse raw snapshot bytes.

        Args:
            data: Raw snapshot content
            encoding: "auto" to detect UTF-8/ISO-8859-1 or an explicit codec

        Returns:
            Parsed DataFile
        """
        return self.parse(decode_data_file(data, encoding))

    def parse_file(self, file_path: Union[str, Path], encoding: str = "auto") -> DataFile:
        """
        Read and parse a snapshot file (plain or gzip compressed).

        Raises:
            FileNotFoundError: If the file does not exist
        """
        return self.parse(read_data_file(file_path, encoding))
