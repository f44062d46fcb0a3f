"""
Error handling strategies for the privacy filter pipeline.

A strategy decides what becomes of a line whose filtered version failed
verification. It receives the original line, the filtered line and the
client fields found to be in error and returns:

    - the line to output instead, or
    - None to remove the line from the output,

or raises FilterAbortedError to abort filtering of the whole file.
"""

from abc import ABC, abstractmethod
from typing import Collection, Optional

from ..exceptions import FilterAbortedError, ValidationError
from ..parser.client_fields import ClientField


class ErrorHandlingStrategy(ABC):
    """Decides the output for a line that failed verification."""

    name: str = ""

    @abstractmethod
    def handle_error(
        self,
        original_line: str,
        filtered_line: str,
        affected_fields: Collection[ClientField],
    ) -> Optional[str]:
        """
        Handle a verification failure.

        Args:
            original_line: Line before the filter step
            filtered_line: Line after the filter step
            affected_fields: Fields found in error

        Returns:
            Replacement line, or None to remove the line

        Raises:
            FilterAbortedError: If filtering should be aborted entirely
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class KeepOriginalContentStrategy(ErrorHandlingStrategy):
    """Outputs the unfiltered line."""

    name = "keep_original"

    def handle_error(self, original_line, filtered_line, affected_fields):
        return original_line


class RemoveLineStrategy(ErrorHandlingStrategy):
    """Removes the line from the output."""

    name = "remove_line"

    def handle_error(self, original_line, filtered_line, affected_fields):
        return None


class IgnoreErrorStrategy(ErrorHandlingStrategy):
    """Outputs the filtered line despite the error."""

    name = "ignore_error"

    def handle_error(self, original_line, filtered_line, affected_fields):
        return filtered_line


class ThrowExceptionStrategy(ErrorHandlingStrategy):
    """Aborts filtering of the whole file."""

    name = "throw"

    def handle_error(self, original_line, filtered_line, affected_fields):
        field_names = ", ".join(sorted(field.name for field in affected_fields))
        raise FilterAbortedError(
            f"Filtering failed on client fields: {field_names}", affected_fields
        )


KEEP_ORIGINAL_CONTENT = KeepOriginalContentStrategy()
REMOVE_LINE = RemoveLineStrategy()
IGNORE_ERROR = IgnoreErrorStrategy()
THROW_EXCEPTION = ThrowExceptionStrategy()

_STRATEGIES_BY_NAME = {
    strategy.name: strategy
    for strategy in (KEEP_ORIGINAL_CONTENT, REMOVE_LINE, IGNORE_ERROR, THROW_EXCEPTION)
}


def strategy_by_name(name: str) -> ErrorHandlingStrategy:
    """
    Look up a built-in strategy by its configuration name.

    Raises:
        ValidationError: If no strategy of that name exists
    """
    try:
        return _STRATEGIES_BY_NAME[name]
    except KeyError:
        raise ValidationError(
            f"Unknown error handling strategy, available: {', '.join(sorted(_STRATEGIES_BY_NAME))}",
            field="strategy",
            value=name,
        )


def list_strategy_names() -> list[str]:
    return sorted(_STRATEGIES_BY_NAME)
