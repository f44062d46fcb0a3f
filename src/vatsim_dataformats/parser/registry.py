"""
Parser registry for snapshot formats.

Provides registration and lookup of DataFileParser implementations by
DataFileFormat.
"""

import logging
from typing import Type, Union

from ..exceptions import UnsupportedFormatError
from .base import DataFileParser
from .types import DataFileFormat

logger = logging.getLogger(__name__)


class ParserRegistry:
    """
    Registry for snapshot parsers.

    Usage:
        # Register using decorator
        @ParserRegistry.register(DataFileFormat.LEGACY)
        class LegacyDataFileParser(DataFileParser):
            ...

        # Get a fresh parser instance
        parser = ParserRegistry.get_parser(DataFileFormat.LEGACY)

        # List all formats
        formats = ParserRegistry.list_formats()
    """

    _parsers: dict[DataFileFormat, Type[DataFileParser]] = {}

    @classmethod
    def register(cls, data_file_format: DataFileFormat):
        """
        Decorator to register a parser class.

        Args:
            data_file_format: Format the parser handles

        Returns:
            Decorator function
        """

        def decorator(parser_class: Type[DataFileParser]) -> Type[DataFileParser]:
            cls.register_parser(data_file_format, parser_class)
            return parser_class

        return decorator

    @classmethod
    def register_parser(
        cls, data_file_format: DataFileFormat, parser_class: Type[DataFileParser]
    ) -> None:
        """
        Register a parser class for a format.

        Raises:
            TypeError: If parser_class doesn't inherit from DataFileParser
        """
        if not issubclass(parser_class, DataFileParser):
            raise TypeError(
                f"Parser class must inherit from DataFileParser, "
                f"got {parser_class.__name__}"
            )

        data_file_format = DataFileFormat(data_file_format)

        if data_file_format in cls._parsers:
            logger.warning(
                f"Overwriting existing parser for format '{data_file_format.value}'"
            )

        cls._parsers[data_file_format] = parser_class
        logger.debug(f"Registered data file parser: {data_file_format.value}")

    @classmethod
    def get_parser(cls, data_file_format: Union[DataFileFormat, str]) -> DataFileParser:
        """
        Get a new parser instance for a format.

        Args:
            data_file_format: Format enum member or its value ("legacy", "json3")

        Returns:
            Instantiated parser

        Raises:
            UnsupportedFormatError: If no parser is registered for the format
        """
        return cls.get_parser_class(data_file_format)()

    @classmethod
    def get_parser_class(
        cls, data_file_format: Union[DataFileFormat, str]
    ) -> Type[DataFileParser]:
        """
        Get the parser class for a format (without instantiation).

        Raises:
            UnsupportedFormatError: If no parser is registered for the format
        """
        try:
            resolved = DataFileFormat(data_file_format)
        except ValueError:
            resolved = None

        if resolved is None or resolved not in cls._parsers:
            name = getattr(data_file_format, "value", data_file_format)
            raise UnsupportedFormatError(
                format_name=str(name),
                available_formats=cls.list_formats(),
            )

        return cls._parsers[resolved]

    @classmethod
    def list_formats(cls) -> list[str]:
        """List the values of all registered formats, sorted."""
        return sorted(data_file_format.value for data_file_format in cls._parsers)

    @classmethod
    def is_format_registered(cls, data_file_format: Union[DataFileFormat, str]) -> bool:
        try:
            return DataFileFormat(data_file_format) in cls._parsers
        except ValueError:
            return False


# =============================================================================
# Convenience Functions
# =============================================================================


def get_parser(data_file_format: Union[DataFileFormat, str]) -> DataFileParser:
    """
    Get a new parser instance for a format.

    Convenience function wrapping ParserRegistry.get_parser().

    Raises:
        UnsupportedFormatError: If no parser is registered for the format
    """
    return ParserRegistry.get_parser(data_file_format)


def list_formats() -> list[str]:
    """List all registered format values."""
    return ParserRegistry.list_formats()
