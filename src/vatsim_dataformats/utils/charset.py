"""
Character set detection for snapshot files.

Legacy files were historically published in ISO-8859-1 while newer files
use UTF-8. Both are accepted; the encoding is detected from the content
unless explicitly configured.
"""

import logging

logger = logging.getLogger(__name__)

AUTO_DETECT = "auto"
FALLBACK_ENCODING = "iso-8859-1"


def is_compatible_with_utf8(data: bytes) -> bool:
    """
    Check if the given bytes can be decoded as UTF-8.

    Plain ASCII is compatible with UTF-8 as well as with ISO-8859-1, so
    this only tells that decoding as UTF-8 would not fail.
    """
    try:
        data.decode("utf-8")
    except UnicodeDecodeError:
        return False
    return True


def decode_data_file(data: bytes, encoding: str = AUTO_DETECT) -> str:
    """
    Decode raw snapshot content.

    Args:
        data: Raw bytes
        encoding: "auto" to use UTF-8 if possible and ISO-8859-1 otherwise,
            or the name of a codec to force

    Returns:
        Decoded text
    """
    if encoding.lower() != AUTO_DETECT:
        return data.decode(encoding)

    if is_compatible_with_utf8(data):
        return data.decode("utf-8")

    logger.debug(f"Content is not valid UTF-8, decoding as {FALLBACK_ENCODING}")
    return data.decode(FALLBACK_ENCODING)
