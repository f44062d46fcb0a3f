"""
Line-wise modification of legacy snapshot files by section.

Unlike the parser this keeps every byte of the input that is not
explicitly replaced: comments, blank lines, unknown sections and the
original line separators are reproduced as found.
"""

import re
from dataclasses import dataclass
from typing import Callable, Optional

from .data_file import COMMENT_PREFIX, PATTERN_SECTION_HEAD

_PATTERN_CONTENT_SPLIT = re.compile(r"([^\r\n]*)([\r\n]*)")
_PATTERN_SINGLE_LINE_BREAK = re.compile(r"^(?:\r\n|\r|\n)")


def _is_blank(content: Optional[str]) -> bool:
    return content is None or not content.strip()


@dataclass
class _ContentLine:
    content: Optional[str]
    separator: str

    def apply(self, function: Callable[[str], Optional[str]]) -> None:
        if _is_blank(self.content):
            return

        result = function(self.content)
        if result is None:
            # removed lines take their own line break with them
            self.content = None
            self.separator = _PATTERN_SINGLE_LINE_BREAK.sub("", self.separator, count=1)
        else:
            self.content = result


class DataFileSectionLineProcessor:
    """
    Applies functions to all content lines of a legacy file section.

    Lines are assigned to sections exactly like LegacyDataFileParser does:
    section headers are matched case-sensitively, while comments and blank
    or whitespace-only lines never belong to a section's content.

    Usage:
        processor = DataFileSectionLineProcessor(text)
        processor.apply("CLIENTS", str.upper).apply("PREFILE", str.upper)
        output = processor.result_as_string()
    """

    def __init__(self, text: str):
        self._lines: list[_ContentLine] = []
        self._lines_by_section: dict[str, list[_ContentLine]] = {}

        section_name = None
        for match in _PATTERN_CONTENT_SPLIT.finditer(text):
            content, separator = match.group(1), match.group(2)

            # end of input yields a completely blank match
            if not content and not separator:
                continue

            line = _ContentLine(content, separator)
            self._lines.append(line)

            if _is_blank(content) or content.startswith(COMMENT_PREFIX):
                continue

            section_match = PATTERN_SECTION_HEAD.fullmatch(content)
            if section_match:
                section_name = section_match.group(1)
                continue

            if section_name is None:
                continue

            self._lines_by_section.setdefault(section_name, []).append(line)

    def apply(
        self, section_name: str, function: Callable[[str], Optional[str]]
    ) -> "DataFileSectionLineProcessor":
        """
        Apply a function to every content line of a section.

        Args:
            section_name: Name of the section as it appears in the header
            function: Receives the line content and returns the replacement;
                returning None removes the line including its line break

        Returns:
            self for method chaining

        Raises:
            ValueError: If the section name is None or empty
        """
        if section_name is None:
            raise ValueError("section name must not be None")
        if not section_name:
            raise ValueError("section name must not be empty")
        if function is None:
            raise ValueError("function must not be None")

        for line in self._lines_by_section.get(section_name, []):
            line.apply(function)

        return self

    def result_as_string(self) -> str:
        """Reassemble the (possibly modified) file content."""
        parts = []
        for line in self._lines:
            if line.content is not None:
                parts.append(line.content)
            parts.append(line.separator)
        return "".join(parts)
