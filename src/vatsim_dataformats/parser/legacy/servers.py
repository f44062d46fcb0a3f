"""
Parsers for the SERVERS and VOICE SERVERS sections of legacy files.
"""

import re

from ...exceptions import ParseError
from ..base import FSDServer, VoiceServer

_PATTERN_FSD_SERVER = re.compile(r"([^:]+):([^:]+):([^:]+):([^:]+):([01]):")
_PATTERN_VOICE_SERVER = re.compile(r"([^:]+):([^:]+):([^:]+):([01]):(?:([^:]*):)?")


class FSDServerParser:
    """Parses "ident:hostname:location:name:clients_allowed:" lines."""

    def parse(self, line: str) -> FSDServer:
        """
        Parse a single line.

        Raises:
            ParseError: If the line does not match the expected syntax
        """
        match = _PATTERN_FSD_SERVER.fullmatch(line)
        if not match:
            raise ParseError(f"unparseable line, does not match expected syntax: \"{line}\"")

        return FSDServer(
            server_id=match.group(1),
            address=match.group(2),
            location=match.group(3),
            name=match.group(4),
            is_client_connection_allowed=(match.group(5) == "1"),
        )


class VoiceServerParser:
    """
    Parses "hostname:location:name:clients_allowed:type:" lines.

    The type column including its trailing colon may be missing.
    """

    def parse(self, line: str) -> VoiceServer:
        """
        Parse a single line.

        Raises:
            ParseError: If the line does not match the expected syntax
        """
        match = _PATTERN_VOICE_SERVER.fullmatch(line)
        if not match:
            raise ParseError(f"unparseable line, does not match expected syntax: \"{line}\"")

        return VoiceServer(
            address=match.group(1),
            location=match.group(2),
            name=match.group(3),
            is_client_connection_allowed=(match.group(4) == "1"),
            raw_server_type=match.group(5),
        )
