"""
Shortening of diagnostic log content.

Log entries carry the complete offending line which may hold exactly
the personal information a privacy filter removes. Shortening the
content limits what is kept when parser logs are stored or shared.
"""

import dataclasses

from ..exceptions import ValidationError
from ..parser.base import DataFile


def shorten_line_content(line_content, max_length: int):
    if line_content is None or len(line_content) <= max_length:
        return line_content
    return line_content[:max_length]


def shorten_log_line_content(data_file: DataFile, max_length: int) -> DataFile:
    """
    Return a copy of a DataFile with shortened log line content.

    Args:
        data_file: DataFile to copy
        max_length: Maximum number of characters kept per entry

    Returns:
        New DataFile; everything except log entry line content is shared

    Raises:
        ValidationError: If max_length is negative
    """
    if max_length < 0:
        raise ValidationError("maximum length must not be negative", field="max_length", value=max_length)

    entries = tuple(
        dataclasses.replace(entry, line_content=shorten_line_content(entry.line_content, max_length))
        for entry in data_file.parser_log_entries
    )
    return dataclasses.replace(data_file, parser_log_entries=entries)
