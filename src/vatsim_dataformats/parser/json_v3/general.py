"""
Processor for the "general" section of JSON snapshots.
"""

import json
from datetime import timedelta

from ..base import DataFileMetaData
from ..helpers import parse_compact_timestamp, parse_to_instant_utc
from ..log import ParserLog
from ..timestamps import reconcile_update_timestamps
from .helpers import identity, process_mandatory

SECTION_NAME = "general"

KEY_CONNECTED_CLIENTS = "connected_clients"
KEY_RELOAD = "reload"
KEY_UNIQUE_USERS = "unique_users"
KEY_UPDATE = "update"
KEY_UPDATE_TIMESTAMP = "update_timestamp"
KEY_VERSION = "version"


class GeneralSectionJsonProcessor:
    """Converts the "general" object to DataFileMetaData."""

    def deserialize(self, general: dict, log: ParserLog) -> DataFileMetaData:
        values: dict = {}

        values["number_of_connected_clients"] = process_mandatory(
            general, KEY_CONNECTED_CLIENTS, int, SECTION_NAME, log, identity
        )
        values["minimum_data_file_retrieval_interval"] = process_mandatory(
            general, KEY_RELOAD, int, SECTION_NAME, log, lambda x: timedelta(minutes=x)
        )
        values["number_of_unique_connected_users"] = process_mandatory(
            general, KEY_UNIQUE_USERS, int, SECTION_NAME, log, identity
        )

        custom_timestamp = process_mandatory(
            general, KEY_UPDATE, str, SECTION_NAME, log, parse_compact_timestamp
        )
        iso_timestamp = process_mandatory(
            general, KEY_UPDATE_TIMESTAMP, str, SECTION_NAME, log, parse_to_instant_utc
        )
        values["timestamp"] = reconcile_update_timestamps(
            custom_timestamp,
            iso_timestamp,
            log,
            SECTION_NAME,
            json.dumps(general, sort_keys=True),
            KEY_UPDATE,
            KEY_UPDATE_TIMESTAMP,
        )

        values["version_format"] = process_mandatory(
            general, KEY_VERSION, int, SECTION_NAME, log, identity
        )

        return DataFileMetaData(**values)
