"""
JSON v3 snapshot parsing.

Usage:
    from vatsim_dataformats.parser.json_v3 import JsonDataFileParser, parse_online_transceivers_file

    data_file = JsonDataFileParser().parse(text)
    transceivers_file = parse_online_transceivers_file(transceivers_text)
"""

from .clients import (
    ControllerAtisJsonProcessor,
    FlightPlanJsonProcessor,
    PilotJsonProcessor,
    PrefileJsonProcessor,
    limit_heading,
    parse_json_frequency,
    parse_unsigned_int,
)
from .data_file import JsonDataFileParser, parse_json_data_file
from .general import GeneralSectionJsonProcessor
from .helpers import (
    JsonObjectReader,
    get_mandatory,
    get_optional,
    process_array_fail_whole_on_error,
    process_array_skip_on_error,
    process_mandatory,
    process_optional,
)
from .id_name_mapping import LONG_KEYS, SHORT_KEYS, IdNameMappingKeys, IdNameMappingProcessor
from .online_transceivers import (
    OnlineTransceiverJsonProcessor,
    OnlineTransceiversFileParser,
    OnlineTransceiverStationJsonProcessor,
    parse_online_transceivers_file,
)
from .servers import FSDServerJsonProcessor, parse_client_connection_allowed_integer

__all__ = [
    # Parser
    "JsonDataFileParser",
    "parse_json_data_file",
    "OnlineTransceiversFileParser",
    "parse_online_transceivers_file",
    # Section processors
    "GeneralSectionJsonProcessor",
    "FSDServerJsonProcessor",
    "IdNameMappingProcessor",
    "IdNameMappingKeys",
    "SHORT_KEYS",
    "LONG_KEYS",
    "FlightPlanJsonProcessor",
    "PilotJsonProcessor",
    "PrefileJsonProcessor",
    "ControllerAtisJsonProcessor",
    "OnlineTransceiverStationJsonProcessor",
    "OnlineTransceiverJsonProcessor",
    # Field conversion
    "limit_heading",
    "parse_json_frequency",
    "parse_unsigned_int",
    "parse_client_connection_allowed_integer",
    # Extraction primitives
    "JsonObjectReader",
    "get_mandatory",
    "get_optional",
    "process_mandatory",
    "process_optional",
    "process_array_skip_on_error",
    "process_array_fail_whole_on_error",
]
