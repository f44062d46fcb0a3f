"""
Processor for the "servers" section of JSON snapshots.
"""

import logging

from ...exceptions import ParseError
from ..base import FSDServer
from ..log import ParserLog
from .helpers import JsonObjectReader, get_optional, process_array_skip_on_error

logger = logging.getLogger(__name__)

SECTION_NAME = "servers"

KEY_ID = "ident"
KEY_NAME = "name"
KEY_ADDRESS = "hostname_or_ip"
KEY_LOCATION = "location"
KEY_SWEATBOX = "is_sweatbox"
# legacy field holding an integer of unclear meaning
KEY_CLIENT_CONNECTION_ALLOWED_INTEGER = "clients_connection_allowed"
# newer field holding an actual boolean
KEY_CLIENT_CONNECTION_ALLOWED_BOOLEAN = "client_connections_allowed"


def parse_client_connection_allowed_integer(value: int) -> bool:
    if value == 0:
        return False
    if value == 1:
        return True

    logger.warning(
        f"Unknown value {value} for {KEY_CLIENT_CONNECTION_ALLOWED_INTEGER}, "
        f"assuming connections are allowed."
    )
    return True


class FSDServerJsonProcessor:
    """Converts server objects to FSDServer records."""

    def deserialize_multiple(self, array: list, log: ParserLog) -> list[FSDServer]:
        return process_array_skip_on_error(
            array, dict, SECTION_NAME, log, lambda x: self.deserialize_single(x, log)
        )

    def deserialize_single(self, obj: dict, log: ParserLog) -> FSDServer:
        """
        Convert a single server object.

        The boolean connection flag is trusted over the legacy integer if
        both are present; disagreement is noted in the log.

        Raises:
            ParseError: If any of the identifying fields is unavailable
        """
        reader = JsonObjectReader(obj, SECTION_NAME, log)

        server_id = reader.mandatory(KEY_ID, str)
        name = reader.mandatory(KEY_NAME, str)
        address = reader.mandatory(KEY_ADDRESS, str)
        location = reader.mandatory(KEY_LOCATION, str)
        is_sweatbox = reader.optional(KEY_SWEATBOX, bool)

        is_client_connection_allowed = reader.mandatory(
            KEY_CLIENT_CONNECTION_ALLOWED_INTEGER, int, parse_client_connection_allowed_integer
        )

        boolean_allowed = get_optional(
            obj, KEY_CLIENT_CONNECTION_ALLOWED_BOOLEAN, bool, SECTION_NAME, log
        )
        if boolean_allowed is not None:
            if is_client_connection_allowed is not None and boolean_allowed != is_client_connection_allowed:
                log.add_entry(
                    SECTION_NAME,
                    f"content at {KEY_CLIENT_CONNECTION_ALLOWED_BOOLEAN}",
                    False,
                    f"server \"{server_id}\" has a different boolean indication for allowed client "
                    f"connections than legacy integer value suggests; trusting the boolean",
                )
            is_client_connection_allowed = boolean_allowed

        if None in (server_id, name, address, location):
            raise ParseError(f"server \"{server_id}\" is missing identifying information")

        return FSDServer(
            server_id=server_id,
            address=address,
            location=location,
            name=name,
            is_client_connection_allowed=(
                True if is_client_connection_allowed is None else is_client_connection_allowed
            ),
            is_sweatbox=bool(is_sweatbox),
        )
