"""
Export of DataFile objects to other formats.

Usage:
    from vatsim_dataformats.export import LegacyDataFileWriter

    data = LegacyDataFileWriter().serialize(data_file)
"""

from .legacy_writer import LegacyDataFileWriter, serialize_legacy_data_file

__all__ = [
    "LegacyDataFileWriter",
    "serialize_legacy_data_file",
]
