"""
Parser for complete legacy (data.txt) snapshot files.

Legacy format:
    ; comment
    !GENERAL:
    VERSION = 8
    RELOAD = 1
    UPDATE = 20180101160000
    !CLIENTS:
    EDDT_TWR:123456:realname:ATC:118.500:...
    !SERVERS:
    SERVER1:127.0.0.1:Somewhere:Server 1:1:
    !PREFILE:
    ABC123:123456:realname::::::...
"""

import logging
import re
from typing import Callable, Optional, TypeVar

from ..base import DataFile, DataFileParser
from ..log import ParserLog
from ..registry import ParserRegistry
from ..types import DataFileFormat
from .client import ClientParser
from .general import GeneralSectionParser
from .servers import FSDServerParser, VoiceServerParser

logger = logging.getLogger(__name__)

T = TypeVar("T")

PATTERN_SECTION_HEAD = re.compile(r"!([^:]+):")
_PATTERN_LINE_BREAK = re.compile(r"\r\n|\r|\n")

COMMENT_PREFIX = ";"

SECTION_NAME_GENERAL = "GENERAL"
SECTION_NAME_CLIENTS = "CLIENTS"
SECTION_NAME_PREFILE = "PREFILE"
SECTION_NAME_SERVERS = "SERVERS"
SECTION_NAME_VOICE_SERVERS = "VOICE SERVERS"

LOWEST_SUPPORTED_FORMAT_VERSION = 8
HIGHEST_SUPPORTED_FORMAT_VERSION = 9
SUPPORTED_FORMAT_VERSIONS = f"{LOWEST_SUPPORTED_FORMAT_VERSION}..{HIGHEST_SUPPORTED_FORMAT_VERSION}"


def split_lines(text: str) -> list[str]:
    """Split text at CR, LF and CRLF only (unlike str.splitlines)."""
    lines = _PATTERN_LINE_BREAK.split(text)
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def read_relevant_lines_by_section(text: str, log: ParserLog) -> dict[str, list[str]]:
    """
    Group all data lines by the section they appear in.

    Comments and blank lines are skipped. Section names are kept as found,
    so lines of sections not supported by the parser are collected but
    never looked at. Data found before the first section header is logged
    and discarded.

    Args:
        text: Complete file content
        log: Parser log to record discarded data to

    Returns:
        Lines per section name; only sections present in the input are keys
    """
    lines_by_section: dict[str, list[str]] = {}
    current_section_lines: Optional[list[str]] = None

    for line in split_lines(text):
        if line.startswith(COMMENT_PREFIX) or not line.strip():
            continue

        match = PATTERN_SECTION_HEAD.fullmatch(line)
        if match:
            current_section_lines = lines_by_section.setdefault(match.group(1), [])
            continue

        if current_section_lines is None:
            log.add_entry(None, line, True, "data outside a supported section")
            continue

        current_section_lines.append(line)

    return lines_by_section


@ParserRegistry.register(DataFileFormat.LEGACY)
class LegacyDataFileParser(DataFileParser):
    """
    Parser for the legacy colon-delimited snapshot format.

    Every line is parsed independently; a line failing to parse is recorded
    as a rejected log entry and left out of the result while all other
    lines are still processed.

    Usage:
        parser = LegacyDataFileParser()
        data_file = parser.parse(text)
        for entry in data_file.parser_log_entries:
            print(entry)
    """

    data_file_format = DataFileFormat.LEGACY

    def create_general_section_parser(self) -> GeneralSectionParser:
        return GeneralSectionParser()

    def create_client_parser(self, is_parsing_prefile_section: bool) -> ClientParser:
        return ClientParser(is_parsing_prefile_section=is_parsing_prefile_section)

    def create_fsd_server_parser(self) -> FSDServerParser:
        return FSDServerParser()

    def create_voice_server_parser(self) -> VoiceServerParser:
        return VoiceServerParser()

    def is_format_version_supported(self, version: Optional[int]) -> bool:
        return (
            version is not None
            and LOWEST_SUPPORTED_FORMAT_VERSION <= version <= HIGHEST_SUPPORTED_FORMAT_VERSION
        )

    def parse(self, content: str) -> DataFile:
        """
        Parse a complete legacy snapshot.

        Args:
            content: Decoded file content

        Returns:
            DataFile with clients of the CLIENTS section followed by those
            of the PREFILE section
        """
        log = ParserLog()
        lines_by_section = read_relevant_lines_by_section(content, log)

        metadata = self.create_general_section_parser().parse(
            lines_by_section.get(SECTION_NAME_GENERAL), log, SECTION_NAME_GENERAL
        )
        self._verify_format_version(metadata.version_format, log)

        online_clients = self._parse_section(
            lines_by_section,
            SECTION_NAME_CLIENTS,
            self.create_client_parser(is_parsing_prefile_section=False).parse,
            log,
        )
        prefiled_clients = self._parse_section(
            lines_by_section,
            SECTION_NAME_PREFILE,
            self.create_client_parser(is_parsing_prefile_section=True).parse,
            log,
        )
        fsd_servers = self._parse_section(
            lines_by_section, SECTION_NAME_SERVERS, self.create_fsd_server_parser().parse, log
        )
        voice_servers = self._parse_section(
            lines_by_section,
            SECTION_NAME_VOICE_SERVERS,
            self.create_voice_server_parser().parse,
            log,
        )

        logger.info(
            f"Legacy parsing complete: {len(online_clients) + len(prefiled_clients)} clients, "
            f"{len(fsd_servers)} servers, {len(log.rejected())} rejected lines"
        )

        return DataFile(
            metadata=metadata,
            clients=tuple(online_clients + prefiled_clients),
            fsd_servers=tuple(fsd_servers),
            voice_servers=tuple(voice_servers),
            parser_log_entries=log.entries,
        )

    def _parse_section(
        self,
        lines_by_section: dict[str, list[str]],
        section_name: str,
        parse_line: Callable[[str], T],
        log: ParserLog,
    ) -> list[T]:
        """Parse all lines of a section, logging and skipping failed lines."""
        results = []
        for line in lines_by_section.get(section_name, []):
            try:
                results.append(parse_line(line))
            except ValueError as e:
                logger.debug(f"Rejected line in section {section_name}: {e}")
                log.add_entry(section_name, line, True, str(e), e)
        return results

    def _verify_format_version(self, version: Optional[int], log: ParserLog) -> None:
        if version is None:
            message = "unable to verify data format version, version is unavailable"
        elif not self.is_format_version_supported(version):
            message = (
                f"metadata reports unsupported format version {version} "
                f"(supported: {SUPPORTED_FORMAT_VERSIONS})"
            )
        else:
            return

        logger.warning(message)
        log.add_entry(SECTION_NAME_GENERAL, None, False, message)


def parse_legacy_data_file(content: str) -> DataFile:
    """
    Parse a complete legacy snapshot.

    Convenience function creating a new LegacyDataFileParser.
    """
    return LegacyDataFileParser().parse(content)
