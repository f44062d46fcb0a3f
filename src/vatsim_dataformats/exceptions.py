"""
Custom exceptions for the data format library.

Provides specialized exception classes for handling the error conditions
that can occur while parsing, writing and privacy-filtering VATSIM
network snapshots.
"""

from typing import Iterable, Optional


class DataFormatError(Exception):
    """
    Base exception for all data format errors.

    All other library exceptions inherit from this class,
    allowing for broad exception catching when needed.
    """

    pass


class ParseError(DataFormatError, ValueError):
    """
    Raised when a single unit of input cannot be parsed.

    A unit is one line of the legacy format, one object of the JSON
    format or one individual value. The error is caught at the boundary
    of the enclosing section or array and recorded in the diagnostic log,
    so it never aborts a complete parse.

    Attributes:
        message: Detailed error message
        section: Name of the section the unit belongs to (optional)
        line_content: The content of the problematic unit (optional)
    """

    def __init__(
        self,
        message: str,
        section: Optional[str] = None,
        line_content: Optional[str] = None,
    ):
        self.message = message
        self.section = section
        self.line_content = line_content
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with section and line context."""
        if self.section and self.line_content:
            content = (
                self.line_content[:100] + "..."
                if len(self.line_content) > 100
                else self.line_content
            )
            return f"{self.message} (section {self.section}: {content!r})"
        elif self.section:
            return f"{self.message} (section {self.section})"
        return self.message


class ValidationError(DataFormatError):
    """
    Raised when configuration or argument validation fails.

    Attributes:
        field: The field name that failed validation (optional)
        value: The invalid value (optional)
        message: Detailed error message
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: object | None = None,
    ):
        self.field = field
        self.value = value
        self.message = message
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with field and value context."""
        if self.field and self.value is not None:
            return f"{self.message} (field='{self.field}', value={self.value!r})"
        elif self.field:
            return f"{self.message} (field='{self.field}')"
        return self.message


class UnsupportedFormatError(DataFormatError):
    """
    Raised when no parser is registered for a data file format.

    Attributes:
        format_name: The name of the requested format
        available_formats: List of registered format names
    """

    def __init__(
        self,
        format_name: str,
        available_formats: list[str] | None = None,
    ):
        self.format_name = format_name
        self.available_formats = available_formats or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with available formats."""
        if self.available_formats:
            available = ", ".join(sorted(self.available_formats))
            return (
                f"No parser for format: '{self.format_name}'. "
                f"Available formats: {available}"
            )
        return f"No parser for format: '{self.format_name}'. No parsers registered."


class UnconfiguredError(DataFormatError):
    """Raised when a filter chain is requested without any enabled feature."""

    pass


class FilterAbortedError(DataFormatError):
    """
    Raised by an error handling strategy to abort privacy filtering.

    Attributes:
        message: Detailed error message
        affected_fields: Client fields the failed filter step affected
    """

    def __init__(self, message: str, affected_fields: Iterable = ()):
        self.message = message
        self.affected_fields = tuple(affected_fields)
        super().__init__(message)
