"""
Value parsing helpers shared by the legacy and JSON parsers.

All helpers raise ParseError (a ValueError) on malformed input so callers
can convert failures into diagnostic log entries at unit boundaries.
"""

import math
import re
from datetime import datetime, timedelta, timezone
from typing import Optional

from ..exceptions import ParseError

# Timestamp format used by the legacy format and the JSON "update" key
COMPACT_TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"

_PATTERN_INTEGER = re.compile(r"^[+-]?\d+$")
_PATTERN_FREQUENCY = re.compile(r"^(\d+)(?:\.(\d*))?$")


def values_equal(a: object, b: object) -> bool:
    """Compare two field values, treating NaN as equal to NaN."""
    if isinstance(a, float) and isinstance(b, float):
        if math.isnan(a) and math.isnan(b):
            return True
    return a == b


def is_zero_or_empty(s: str) -> bool:
    return s == "" or s == "0"


def parse_int(s: str) -> int:
    """
    Parse a decimal integer strictly.

    Unlike int() this does not accept surrounding whitespace or
    underscores.

    Raises:
        ParseError: If the string is not a plain decimal integer
    """
    if not _PATTERN_INTEGER.match(s):
        raise ParseError(f"not an integer: \"{s}\"")
    return int(s)


def parse_int_with_default(s: str, default: int) -> int:
    """Parse an integer, returning default if the string is not one."""
    if not _PATTERN_INTEGER.match(s):
        return default
    return int(s)


def parse_float(s: str) -> float:
    """Parse a floating point number; empty strings yield NaN."""
    if s == "":
        return math.nan
    try:
        return float(s)
    except ValueError:
        raise ParseError(f"not a number: \"{s}\"")


def parse_duration(
    hours_string: str, minutes_string: str, is_mandatory: bool
) -> Optional[timedelta]:
    """
    Parse a duration given as separate hours and minutes.

    Users are able to enter negative values. Signs are normalized so that
    hours and minutes always point in the same direction, otherwise a mix
    like "-1" hours and "30" minutes would result in a plausible looking
    positive duration.

    Args:
        hours_string: Hours, may be empty
        minutes_string: Minutes, may be empty
        is_mandatory: If True, both parts being empty is an error

    Returns:
        Parsed duration or None if both parts are empty

    Raises:
        ParseError: If only one part is empty, a mandatory duration is
            missing or a part is not numeric
    """
    empty_hours = hours_string == ""
    empty_minutes = minutes_string == ""

    if empty_hours != empty_minutes:
        raise ParseError(
            f"either hours (\"{hours_string}\") or minutes (\"{minutes_string}\") "
            "was empty but not the other; such inconsistency is not allowed"
        )

    if empty_hours and empty_minutes:
        if is_mandatory:
            raise ParseError("hours and minutes are mandatory but both strings were empty")
        return None

    hours = parse_int(hours_string)
    minutes = parse_int(minutes_string)

    if hours < 0 and minutes > 0:
        minutes = -minutes
    elif hours > 0 and minutes < 0:
        hours = -hours

    return timedelta(minutes=hours * 60 + minutes)


def parse_direct_concatenated_duration(s: str, is_mandatory: bool) -> Optional[timedelta]:
    """
    Parse a duration given as concatenated hours and minutes ("0130").

    Raises:
        ParseError: If the string is not numeric or a mandatory value is missing
    """
    if s == "":
        return parse_duration("", "", is_mandatory)

    as_int = parse_int(s)
    sign = -1 if as_int < 0 else 1
    as_int = abs(as_int)

    hours_string = str(sign * (as_int // 100))
    minutes_string = str(sign * (as_int % 100))
    return parse_duration(hours_string, minutes_string, is_mandatory)


def parse_compact_timestamp(s: str) -> datetime:
    """
    Parse a "yyyyMMddHHmmss" timestamp as UTC.

    Raises:
        ParseError: If the timestamp is malformed
    """
    try:
        parsed = datetime.strptime(s, COMPACT_TIMESTAMP_FORMAT)
    except ValueError as e:
        raise ParseError(f"invalid timestamp \"{s}\": {e}") from e
    return parsed.replace(tzinfo=timezone.utc)


def format_compact_timestamp(value: datetime) -> str:
    """Format a datetime as "yyyyMMddHHmmss" in UTC."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime(COMPACT_TIMESTAMP_FORMAT)


def parse_to_instant_utc(s: str) -> datetime:
    """
    Parse an ISO-8601 timestamp to an aware UTC datetime.

    Timestamps without zone information are treated as UTC. Fractional
    seconds of any precision are accepted and truncated to microseconds.

    Raises:
        ParseError: If the timestamp cannot be parsed
    """
    if not isinstance(s, str) or not s:
        raise ParseError(f"invalid ISO timestamp: {s!r}")

    normalized = s.strip()
    if normalized.endswith(("Z", "z")):
        normalized = normalized[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError:
        # more than 6 fractional digits are only accepted by newer interpreters
        from dateutil import parser

        try:
            parsed = parser.isoparse(normalized)
        except ValueError as e:
            raise ParseError(f"invalid ISO timestamp \"{s}\": {e}") from e

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_frequency_kilohertz(s: str) -> int:
    """
    Convert a frequency given in MHz ("118.500") to integer kHz.

    The MHz and kHz parts are taken from both sides of the decimal point
    instead of parsing a float, so no rounding can occur. A missing kHz
    part and kHz parts with less than three digits are right-padded with
    zeros ("118.5" is 118500 kHz).

    Raises:
        ParseError: If the value is not a plain decimal number or has
            precision below one kilohertz
    """
    match = _PATTERN_FREQUENCY.match(s)
    if not match:
        raise ParseError(f"Frequency cannot be converted: \"{s}\"")

    megahertz = int(match.group(1))
    kilohertz_digits = (match.group(2) or "").ljust(3, "0")
    if kilohertz_digits[3:].strip("0"):
        raise ParseError(f"Frequency exceeds kilohertz precision: \"{s}\"")

    return megahertz * 1000 + int(kilohertz_digits[:3])


def format_frequency_kilohertz(frequency_kilohertz: int) -> str:
    """Format an integer kHz frequency as MHz with three decimals."""
    return f"{frequency_kilohertz // 1000}.{frequency_kilohertz % 1000:03d}"
