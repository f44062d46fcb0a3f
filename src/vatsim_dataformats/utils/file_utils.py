"""
Shared file utilities.

Snapshots are frequently archived gzip compressed, so reading detects
compression by file extension and magic bytes.
"""

import gzip
from pathlib import Path
from typing import Union

from .charset import AUTO_DETECT, decode_data_file

GZIP_MAGIC_BYTES = b"\x1f\x8b"


def read_data_file_bytes(file_path: Union[str, Path]) -> bytes:
    """
    Read a file, automatically decompressing gzip content.

    Gzip detection is performed by:
    1. Checking for .gz file extension
    2. Checking for gzip magic bytes (0x1f 0x8b) even without .gz extension

    Args:
        file_path: Path to the file

    Returns:
        Raw (decompressed) file content

    Raises:
        FileNotFoundError: If file doesn't exist
        gzip.BadGzipFile: If file has .gz extension but is not valid gzip
    """
    path = Path(file_path)

    if not path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    if path.suffix.lower() == ".gz":
        with gzip.open(path, "rb") as f:
            return f.read()

    with open(path, "rb") as f:
        data = f.read()
    if data[:2] == GZIP_MAGIC_BYTES:
        return gzip.decompress(data)

    return data


def read_data_file(file_path: Union[str, Path], encoding: str = AUTO_DETECT) -> str:
    """
    Read and decode a snapshot file.

    Args:
        file_path: Path to the file
        encoding: "auto" for UTF-8/ISO-8859-1 detection or a codec name

    Returns:
        Decoded file content
    """
    return decode_data_file(read_data_file_bytes(file_path), encoding)
