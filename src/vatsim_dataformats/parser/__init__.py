"""
Parsers for VATSIM network status snapshots.

Provides a unified interface for parsing both the legacy colon-delimited
format (data.txt) and the JSON v3 format into the same data model.

Usage:
    from vatsim_dataformats.parser import DataFileFormat, get_parser

    parser = get_parser(DataFileFormat.JSON3)
    data_file = parser.parse_file("vatsim-data.json")

    for client in data_file.online_clients:
        print(client.callsign, client.effective_client_type)

    for entry in data_file.rejected_log_entries():
        print(entry)
"""

from .base import Client, DataFile, DataFileMetaData, DataFileParser, FSDServer, VoiceServer
from .client_fields import ClientField
from .log import ParserLog, ParserLogEntry
from .registry import ParserRegistry, get_parser, list_formats
from .transceivers import OnlineTransceiver, OnlineTransceiversFile, OnlineTransceiverStation
from .types import ClientType, ControllerRating, DataFileFormat, FacilityType, MilitaryRating, PilotRating

# Import parsers to trigger registration
from .legacy import LegacyDataFileParser, parse_legacy_data_file  # noqa: E402
from .json_v3 import (  # noqa: E402
    JsonDataFileParser,
    OnlineTransceiversFileParser,
    parse_json_data_file,
    parse_online_transceivers_file,
)

__all__ = [
    # Base classes and data models
    "DataFileParser",
    "DataFile",
    "DataFileMetaData",
    "Client",
    "ClientField",
    "FSDServer",
    "VoiceServer",
    "OnlineTransceiversFile",
    "OnlineTransceiverStation",
    "OnlineTransceiver",
    # Value types
    "DataFileFormat",
    "ClientType",
    "ControllerRating",
    "FacilityType",
    "PilotRating",
    "MilitaryRating",
    # Diagnostic log
    "ParserLog",
    "ParserLogEntry",
    # Registry functions
    "ParserRegistry",
    "get_parser",
    "list_formats",
    # Parsers
    "LegacyDataFileParser",
    "JsonDataFileParser",
    "parse_legacy_data_file",
    "parse_json_data_file",
    "OnlineTransceiversFileParser",
    "parse_online_transceivers_file",
]
