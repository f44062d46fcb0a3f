"""Utility functions for reading snapshot files."""

from .charset import decode_data_file, is_compatible_with_utf8
from .file_utils import read_data_file, read_data_file_bytes

__all__ = [
    # Character sets
    "decode_data_file",
    "is_compatible_with_utf8",
    # Files
    "read_data_file",
    "read_data_file_bytes",
]
