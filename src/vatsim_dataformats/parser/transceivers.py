"""
Data models for online transceivers files.

The transceivers file is published next to the network status snapshot
and lists the radio transceivers of every station currently connected
to the voice network. Stations are identified by callsign only.
"""

import dataclasses
import math
from dataclasses import dataclass
from typing import Optional

from .helpers import values_equal
from .log import ParserLogEntry


@dataclass(frozen=True, eq=False)
class OnlineTransceiver:
    """
    A single radio transceiver of a station.

    Unavailable integers are None, unavailable measurements are NaN.

    Attributes:
        transceiver_id: Index of the transceiver within its station
        frequency_hertz: Tuned frequency in Hz
        latitude: Position in degrees
        longitude: Position in degrees
        altitude_meters: Altitude above mean sea level
        height_meters: Height above ground level
    """

    transceiver_id: Optional[int] = None
    frequency_hertz: Optional[int] = None
    latitude: float = math.nan
    longitude: float = math.nan
    altitude_meters: float = math.nan
    height_meters: float = math.nan

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OnlineTransceiver):
            return NotImplemented
        return all(
            values_equal(getattr(self, f.name), getattr(other, f.name))
            for f in dataclasses.fields(self)
        )

    __hash__ = None

    @property
    def frequency_kilohertz(self) -> int:
        """Frequency in kHz as used by Client, -1 if unavailable."""
        if self.frequency_hertz is None:
            return -1
        return self.frequency_hertz // 1000


@dataclass(frozen=True)
class OnlineTransceiverStation:
    """All transceivers of a single callsign."""

    callsign: str = ""
    transceivers: tuple[OnlineTransceiver, ...] = ()


@dataclass(frozen=True)
class OnlineTransceiversFile:
    """
    Result of parsing one online transceivers file.

    Attributes:
        stations: Stations in input order
        parser_log_entries: Every deviation found while parsing
    """

    stations: tuple[OnlineTransceiverStation, ...] = ()
    parser_log_entries: tuple[ParserLogEntry, ...] = ()

    def stations_by_callsign(self) -> dict[str, OnlineTransceiverStation]:
        """Index stations by callsign; later duplicates replace earlier ones."""
        return {station.callsign: station for station in self.stations}

    def rejected_log_entries(self) -> list[ParserLogEntry]:
        """Return log entries of units that were dropped from the result."""
        return [entry for entry in self.parser_log_entries if entry.is_line_rejected]
