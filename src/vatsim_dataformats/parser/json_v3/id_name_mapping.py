"""
Resolution of the id-to-name mapping tables published with JSON snapshots.

JSON snapshots do not reference ratings and facility types by fixed ids.
Instead, tables like

    "facilities": [{"id": 0, "short": "OBS", "long": "Observer"}, ...]

define which numeric id stands for which value in the current snapshot.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, TypeVar

from ..log import ParserLog
from .helpers import JsonObjectReader, process_array_skip_on_error

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class IdNameMappingKeys:
    """Names of the keys used by a mapping table."""

    id: str = "id"
    short_name: str = "short"
    long_name: str = "long"


SHORT_KEYS = IdNameMappingKeys()
LONG_KEYS = IdNameMappingKeys(short_name="short_name", long_name="long_name")


@dataclass(frozen=True)
class _MappingEntry:
    id: int
    short_name: str
    long_name: Optional[str]

    def __str__(self) -> str:
        return f"MappingEntry[id={self.id}, short_name={self.short_name}, long_name={self.long_name}]"


class IdNameMappingProcessor:
    """
    Reads a mapping table and resolves it to values.

    Log entries are recorded if:
        - an individual table entry cannot be read
        - a short name cannot be resolved (entry is skipped)
        - multiple entries use the same id (last entry wins)
        - an expected value has not been mapped at all
    """

    def __init__(self, keys: IdNameMappingKeys = SHORT_KEYS):
        self.keys = keys

    def deserialize_mapping(
        self,
        array: list,
        resolve_short_name: Callable[[str], Optional[T]],
        expected_values: Iterable[T],
        section: str,
        log: ParserLog,
    ) -> dict[int, T]:
        """
        Resolve a mapping table.

        Args:
            array: Decoded JSON array of mapping objects
            resolve_short_name: Lookup returning None for unknown names
            expected_values: All values that should be mapped
            section: Section name for log entries
            log: Parser log

        Returns:
            Resolved values by their JSON id
        """
        mapping: dict[int, T] = {}

        entries = process_array_skip_on_error(
            array, dict, section, log, lambda x: self._deserialize_entry(x, section, log)
        )
        for entry in entries:
            resolved = resolve_short_name(entry.short_name)
            if resolved is None:
                log.add_entry(
                    section,
                    str(entry),
                    True,
                    f"JSON object with short name {entry.short_name} could not be resolved",
                )
                continue

            previous = mapping.get(entry.id)
            mapping[entry.id] = resolved
            if previous is not None:
                log.add_entry(
                    section,
                    str(entry),
                    False,
                    f"JSON object with short name {entry.short_name} has same ID {entry.id} "
                    f"as previous resolved value {previous}; previous entry has been overwritten",
                )

        mapped_values = list(mapping.values())
        for expected in expected_values:
            if expected not in mapped_values:
                log.add_entry(
                    section,
                    "check for completion",
                    False,
                    f"missing mapping for expected value {expected}, value will not be used",
                )

        logger.debug(f"Resolved {len(mapping)} of {len(array)} mappings for {section}")
        return mapping

    def _deserialize_entry(self, obj: dict, section: str, log: ParserLog) -> Optional[_MappingEntry]:
        reader = JsonObjectReader(obj, section, log)
        entry_id = reader.mandatory(self.keys.id, int)
        short_name = reader.mandatory(self.keys.short_name, str)
        long_name = reader.optional(self.keys.long_name, str)

        if entry_id is None or short_name is None:
            return None

        return _MappingEntry(entry_id, short_name, long_name)
