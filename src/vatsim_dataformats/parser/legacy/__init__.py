"""
Parsers for the legacy colon-delimited snapshot format (data.txt).

Usage:
    from vatsim_dataformats.parser.legacy import LegacyDataFileParser

    data_file = LegacyDataFileParser().parse(text)
"""

from .client import ClientParser
from .data_file import (
    HIGHEST_SUPPORTED_FORMAT_VERSION,
    LOWEST_SUPPORTED_FORMAT_VERSION,
    SECTION_NAME_CLIENTS,
    SECTION_NAME_GENERAL,
    SECTION_NAME_PREFILE,
    SECTION_NAME_SERVERS,
    SECTION_NAME_VOICE_SERVERS,
    LegacyDataFileParser,
    parse_legacy_data_file,
    read_relevant_lines_by_section,
)
from .general import GeneralSectionParser
from .section_processor import DataFileSectionLineProcessor
from .servers import FSDServerParser, VoiceServerParser

__all__ = [
    # Complete files
    "LegacyDataFileParser",
    "parse_legacy_data_file",
    "read_relevant_lines_by_section",
    "LOWEST_SUPPORTED_FORMAT_VERSION",
    "HIGHEST_SUPPORTED_FORMAT_VERSION",
    # Sections
    "SECTION_NAME_GENERAL",
    "SECTION_NAME_CLIENTS",
    "SECTION_NAME_PREFILE",
    "SECTION_NAME_SERVERS",
    "SECTION_NAME_VOICE_SERVERS",
    "DataFileSectionLineProcessor",
    # Record parsers
    "GeneralSectionParser",
    "ClientParser",
    "FSDServerParser",
    "VoiceServerParser",
]
