"""
Parsers, writer and privacy filter for VATSIM network status snapshots.

Usage:
    from vatsim_dataformats import DataFileFormat, get_parser

    data_file = get_parser(DataFileFormat.LEGACY).parse_file("vatsim-data.txt")
    print(len(data_file.online_clients), "clients online")
"""

from .exceptions import (
    DataFormatError,
    FilterAbortedError,
    ParseError,
    UnconfiguredError,
    UnsupportedFormatError,
    ValidationError,
)
from .export import LegacyDataFileWriter
from .parser import (
    Client,
    ClientField,
    ClientType,
    ControllerRating,
    DataFile,
    DataFileFormat,
    DataFileMetaData,
    DataFileParser,
    FacilityType,
    FSDServer,
    JsonDataFileParser,
    LegacyDataFileParser,
    OnlineTransceiversFileParser,
    MilitaryRating,
    ParserLogEntry,
    PilotRating,
    VoiceServer,
    get_parser,
    list_formats,
)
from .privacyfilter import DataFileFilter, DataFileFilterConfiguration

__version__ = "0.1.0"

__all__ = [
    # Data model
    "DataFile",
    "DataFileMetaData",
    "Client",
    "ClientField",
    "FSDServer",
    "VoiceServer",
    "ParserLogEntry",
    # Value types
    "DataFileFormat",
    "ClientType",
    "ControllerRating",
    "FacilityType",
    "PilotRating",
    "MilitaryRating",
    # Parsers
    "DataFileParser",
    "LegacyDataFileParser",
    "JsonDataFileParser",
    "OnlineTransceiversFileParser",
    "get_parser",
    "list_formats",
    # Export
    "LegacyDataFileWriter",
    # Privacy filter
    "DataFileFilter",
    "DataFileFilterConfiguration",
    # Exceptions
    "DataFormatError",
    "ParseError",
    "ValidationError",
    "UnsupportedFormatError",
    "UnconfiguredError",
    "FilterAbortedError",
]
