"""
Field extraction primitives for the JSON format.

Every primitive either returns the requested value or records a log entry
and returns None ("absent"). Transformation functions passed to the
process_* variants may raise any exception; failures are converted into
log entries so a single malformed value never aborts processing of the
enclosing object.

Two array policies are available:
    - skip on error: failed items are logged and omitted, all other items
      are still returned
    - fail whole array on error: a single failed item discards the whole
      array and one summary entry is logged
"""

import logging
from typing import Any, Callable, Optional, TypeVar

from ..log import ParserLog

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")

# JSON type names used in log messages
_TYPE_NAMES = {
    str: "string",
    int: "integer",
    float: "number",
    bool: "boolean",
    list: "array",
    dict: "object",
}


def type_name(value_or_type: Any) -> str:
    """Return the JSON name of a Python type or of a value's type."""
    if value_or_type is None:
        return "null"
    if not isinstance(value_or_type, type):
        value_or_type = type(value_or_type)
    return _TYPE_NAMES.get(value_or_type, value_or_type.__name__)


def is_of_type(value: Any, expected_type: type) -> bool:
    """
    Check a decoded JSON value against an expected type.

    Booleans are not accepted as numbers and integers are accepted where
    floating point numbers are expected.
    """
    if isinstance(value, bool):
        return expected_type is bool
    if expected_type is float:
        return isinstance(value, (int, float))
    return isinstance(value, expected_type)


def _cast(
    value: Any, expected_type: type, section: str, location: str, log: ParserLog
) -> Optional[Any]:
    if not is_of_type(value, expected_type):
        log.add_entry(
            section,
            f"content at {location}",
            True,
            f"value for {location} is {type_name(value)}, expected {type_name(expected_type)}",
        )
        return None
    if expected_type is float:
        return float(value)
    return value


def _apply_safely(
    value: T,
    function: Callable[[T], U],
    section: str,
    location: str,
    log: ParserLog,
) -> tuple[bool, Optional[U]]:
    """Apply a function, converting any exception into a log entry."""
    try:
        return True, function(value)
    except Exception as e:
        logger.debug(f"Processing data for {location} in {section} failed: {e!r}")
        log.add_entry(
            section,
            f"content at {location}",
            True,
            f"processing data for {location} failed with {e!r}",
            e,
        )
        return False, None


# =============================================================================
# Object keys
# =============================================================================


def get_mandatory(
    obj: dict, key: str, expected_type: type, section: str, log: ParserLog
) -> Optional[Any]:
    """
    Get a mandatory value from a JSON object.

    Missing keys and null values are logged as rejected; so are values of
    an unexpected type.

    Returns:
        The value or None if unavailable
    """
    value = obj.get(key)
    if value is None:
        log.add_entry(section, f"content at key {key}", True, f"key {key} is undefined")
        return None
    return _cast(value, expected_type, section, f"key {key}", log)


def get_optional(
    obj: dict, key: str, expected_type: type, section: str, log: ParserLog
) -> Optional[Any]:
    """
    Get an optional value from a JSON object.

    A missing key or null value is not logged; a value of an unexpected
    type is.
    """
    value = obj.get(key)
    if value is None:
        return None
    return _cast(value, expected_type, section, f"key {key}", log)


def process_mandatory(
    obj: dict,
    key: str,
    expected_type: type,
    section: str,
    log: ParserLog,
    function: Callable[[Any], U],
) -> Optional[U]:
    """Get a mandatory value and transform it, logging any failure."""
    value = get_mandatory(obj, key, expected_type, section, log)
    if value is None:
        return None
    _, result = _apply_safely(value, function, section, f"key {key}", log)
    return result


def process_optional(
    obj: dict,
    key: str,
    expected_type: type,
    section: str,
    log: ParserLog,
    function: Callable[[Any], U],
) -> Optional[U]:
    """Get an optional value and transform it, logging any failure."""
    value = get_optional(obj, key, expected_type, section, log)
    if value is None:
        return None
    _, result = _apply_safely(value, function, section, f"key {key}", log)
    return result


# =============================================================================
# Arrays
# =============================================================================


def process_array_skip_on_error(
    array: list,
    item_type: type,
    section: str,
    log: ParserLog,
    function: Callable[[Any], U],
) -> list[U]:
    """
    Transform all items of an array, omitting items that fail.

    Args:
        array: Decoded JSON array
        item_type: Expected type of every item
        section: Section name for log entries
        log: Parser log
        function: Transformation applied to each item

    Returns:
        Results of all successfully processed items in array order
    """
    results = []
    for index, item in enumerate(array):
        location = f"index {index}"
        value = _cast(item, item_type, section, location, log)
        if value is None:
            continue

        success, result = _apply_safely(value, function, section, location, log)
        if success and result is not None:
            results.append(result)

    return results


def process_array_fail_whole_on_error(
    array: list,
    item_type: type,
    section: str,
    log: ParserLog,
    function: Callable[[Any], U],
) -> Optional[list[U]]:
    """
    Transform all items of an array, discarding everything on any failure.

    Returns:
        Results of all items in array order, or None if any item failed
    """
    results = []
    for index, item in enumerate(array):
        location = f"index {index}"
        value = _cast(item, item_type, section, location, log)
        if value is None:
            log.add_entry(
                section,
                location,
                True,
                "single item cast has failed, whole array will be discarded",
            )
            return None

        success, result = _apply_safely(value, function, section, location, log)
        if not success:
            log.add_entry(
                section,
                location,
                True,
                "single item function application has failed, whole array will be discarded",
            )
            return None

        results.append(result)

    return results


# =============================================================================
# Object reader
# =============================================================================


def identity(value: T) -> T:
    """Default transformation returning values unchanged."""
    return value


class JsonObjectReader:
    """
    Reads keys of a single JSON object while tracking failures.

    The reader allows deciding afterwards whether a partially readable
    object should be kept (field-level granularity) or discarded as a whole.

    Usage:
        reader = JsonObjectReader(obj, "pilots", log)
        cid = reader.mandatory("cid", int)
        heading = reader.mandatory("heading", int, limit_heading)
        if reader.has_failed:
            ...
    """

    def __init__(self, obj: dict, section: str, log: ParserLog):
        self.obj = obj
        self.section = section
        self.log = log
        self._failures = 0

    @property
    def has_failed(self) -> bool:
        """True if any mandatory key was unavailable or any value failed."""
        return self._failures > 0

    def mandatory(
        self,
        key: str,
        expected_type: type,
        function: Callable[[Any], U] = identity,
    ) -> Optional[U]:
        """Read and transform a mandatory key; None if unavailable."""
        before = len(self.log)
        result = process_mandatory(self.obj, key, expected_type, self.section, self.log, function)
        if len(self.log) > before:
            self._failures += 1
        return result

    def optional(
        self,
        key: str,
        expected_type: type,
        function: Callable[[Any], U] = identity,
    ) -> Optional[U]:
        """Read and transform an optional key; None if absent or failed."""
        before = len(self.log)
        result = process_optional(self.obj, key, expected_type, self.section, self.log, function)
        if len(self.log) > before:
            self._failures += 1
        return result
