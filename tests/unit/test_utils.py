"""
Unit tests for reading and decoding snapshot files.
"""

import gzip
from pathlib import Path

import pytest

from vatsim_dataformats.utils import (
    decode_data_file,
    is_compatible_with_utf8,
    read_data_file,
    read_data_file_bytes,
)

LATIN_1_CONTENT = "J\xfcrgen M\xfcller".encode("iso-8859-1")
UTF_8_CONTENT = "J\xfcrgen M\xfcller".encode("utf-8")


class TestCharset:
    """Tests for character set detection."""

    def test_utf8_compatibility(self) -> None:
        assert is_compatible_with_utf8(UTF_8_CONTENT)
        assert is_compatible_with_utf8(b"plain ascii")
        assert not is_compatible_with_utf8(LATIN_1_CONTENT)

    @pytest.mark.parametrize("data", [UTF_8_CONTENT, LATIN_1_CONTENT])
    def test_auto_detection(self, data: bytes) -> None:
        assert decode_data_file(data) == "J\xfcrgen M\xfcller"

    def test_forced_encoding(self) -> None:
        assert decode_data_file(UTF_8_CONTENT, "iso-8859-1") == "J\xc3\xbcrgen M\xc3\xbcller"

    def test_auto_is_case_insensitive(self) -> None:
        assert decode_data_file(LATIN_1_CONTENT, "AUTO") == "J\xfcrgen M\xfcller"

    def test_forced_encoding_fails(self) -> None:
        with pytest.raises(UnicodeDecodeError):
            decode_data_file(LATIN_1_CONTENT, "utf-8")


class TestReadDataFile:
    """Tests for reading files from disk."""

    def test_plain_file(self, tmp_path: Path) -> None:
        path = tmp_path / "vatsim-data.txt"
        path.write_bytes(LATIN_1_CONTENT)

        assert read_data_file_bytes(path) == LATIN_1_CONTENT
        assert read_data_file(path) == "J\xfcrgen M\xfcller"

    def test_gzip_by_extension(self, tmp_path: Path) -> None:
        path = tmp_path / "vatsim-data.txt.gz"
        path.write_bytes(gzip.compress(UTF_8_CONTENT))

        assert read_data_file(str(path)) == "J\xfcrgen M\xfcller"

    def test_gzip_by_magic_bytes(self, tmp_path: Path) -> None:
        path = tmp_path / "vatsim-data.txt"
        path.write_bytes(gzip.compress(UTF_8_CONTENT))

        assert read_data_file_bytes(path) == UTF_8_CONTENT

    def test_invalid_gzip(self, tmp_path: Path) -> None:
        path = tmp_path / "vatsim-data.txt.gz"
        path.write_bytes(b"not compressed")

        with pytest.raises(gzip.BadGzipFile):
            read_data_file_bytes(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="File not found"):
            read_data_file(tmp_path / "missing.txt")

    def test_forced_encoding(self, tmp_path: Path) -> None:
        path = tmp_path / "vatsim-data.txt"
        path.write_bytes(UTF_8_CONTENT)

        assert read_data_file(path, encoding="iso-8859-1") == "J\xc3\xbcrgen M\xc3\xbcller"
