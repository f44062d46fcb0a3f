"""
Diagnostic log for parser runs.

Every deviation found in the input is recorded as a ParserLogEntry. The
log is scoped to one parse invocation and only ever appended to.
"""

from dataclasses import dataclass
from typing import Iterator, Optional


@dataclass(frozen=True)
class ParserLogEntry:
    """
    A single issue found while parsing.

    Attributes:
        section: Section or location the issue was found in
        line_content: Line (or rendered object) the issue relates to
        is_line_rejected: True if the unit was dropped from the result,
            False if it was kept, possibly with a substitute value
        message: Human readable description, mandatory
        cause: Exception that caused the entry (optional)
    """

    section: Optional[str]
    line_content: Optional[str]
    is_line_rejected: bool
    message: str
    cause: Optional[BaseException] = None

    def __post_init__(self):
        if self.message is None:
            raise ValueError("message must not be None")

    def __str__(self) -> str:
        return (
            f"{self.message} [section: {self.section}, "
            f"line rejected: {str(self.is_line_rejected).lower()}, "
            f"exception: {self.cause!r}, line: {self.line_content}]"
        )


class ParserLog:
    """
    Append-only collector of ParserLogEntry records.

    One instance belongs to exactly one parse invocation and must not be
    shared between concurrently parsed snapshots.
    """

    def __init__(self):
        self._entries: list[ParserLogEntry] = []

    def add(self, entry: ParserLogEntry) -> None:
        """Append an entry to the log."""
        self._entries.append(entry)

    def add_entry(
        self,
        section: Optional[str],
        line_content: Optional[str],
        is_line_rejected: bool,
        message: str,
        cause: Optional[BaseException] = None,
    ) -> ParserLogEntry:
        """Create and append an entry in one step."""
        entry = ParserLogEntry(section, line_content, is_line_rejected, message, cause)
        self.add(entry)
        return entry

    @property
    def entries(self) -> tuple[ParserLogEntry, ...]:
        return tuple(self._entries)

    def rejected(self) -> list[ParserLogEntry]:
        """Return all entries which caused a unit to be dropped."""
        return [entry for entry in self._entries if entry.is_line_rejected]

    def __iter__(self) -> Iterator[ParserLogEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
