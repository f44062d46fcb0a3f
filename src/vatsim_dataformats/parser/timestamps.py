"""
Reconciliation of the two snapshot update timestamps.

Snapshots may state their generation time twice: in the compact custom
format ("yyyyMMddHHmmss") and as ISO-8601. The ISO timestamp is trusted
whenever it is available.
"""

from datetime import datetime, timedelta
from typing import Optional

from .log import ParserLog

TIMESTAMP_DIFFERENCE_WARNING_THRESHOLD = timedelta(seconds=1)


def reconcile_update_timestamps(
    custom_timestamp: Optional[datetime],
    iso_timestamp: Optional[datetime],
    log: ParserLog,
    section: str,
    line_content: Optional[str],
    custom_key: str,
    iso_key: str,
) -> Optional[datetime]:
    """
    Pick the trusted snapshot timestamp and log any deviation.

    Args:
        custom_timestamp: Parsed custom-format timestamp, None if unavailable
        iso_timestamp: Parsed ISO timestamp, None if unavailable
        log: Parser log to record deviations to
        section: Section name for log entries
        line_content: Content to attach to log entries
        custom_key: Name of the custom-format key, used in messages
        iso_key: Name of the ISO key, used in messages

    Returns:
        ISO timestamp if available, else the custom-format timestamp, else None
    """
    if custom_timestamp is None and iso_timestamp is not None:
        log.add_entry(
            section,
            line_content,
            False,
            f"custom-format update timestamp ({custom_key}) is missing, using ISO timestamp",
        )
        return iso_timestamp

    if custom_timestamp is not None and iso_timestamp is None:
        log.add_entry(
            section,
            line_content,
            False,
            f"ISO update timestamp ({iso_key}) is missing, using custom-format timestamp",
        )
        return custom_timestamp

    if custom_timestamp is None and iso_timestamp is None:
        log.add_entry(
            section,
            line_content,
            True,
            f"update timestamps ({custom_key} and {iso_key}) are both missing, "
            "unable to tell what time the data file was generated at",
        )
        return None

    difference = abs(iso_timestamp - custom_timestamp)
    if difference > TIMESTAMP_DIFFERENCE_WARNING_THRESHOLD:
        log.add_entry(
            section,
            line_content,
            False,
            f"update timestamps are inconsistent (custom-format {custom_key} = "
            f"{custom_timestamp.isoformat()}, ISO format {iso_key} = "
            f"{iso_timestamp.isoformat()}), will continue with ISO timestamp",
        )

    return iso_timestamp
