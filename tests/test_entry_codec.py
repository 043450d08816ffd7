"""Tests for DirectoryEntry encoding, decoding and listing order."""

import os
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from common import entry_codec
from common.types import DirectoryEntry, DirectoryEntryType


def make_entry(name, entry_type=DirectoryEntryType.File, size=0):
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return DirectoryEntry(name=name, type=entry_type, size=size, ctime=now, mtime=now)


class TestEncode:
    """Tests for building entries from stat results."""

    def test_file(self, tmp_path):
        path = tmp_path / "b.txt"
        path.write_text("hello")

        entry = entry_codec.encode(os.stat(path), "b.txt")

        assert entry.name == "b.txt"
        assert entry.type == DirectoryEntryType.File
        assert entry.size == 5
        assert entry.mtime.tzinfo == timezone.utc

    def test_directory(self, tmp_path):
        entry = entry_codec.encode(os.stat(tmp_path), "dir")
        assert entry.type == DirectoryEntryType.Directory
        assert entry.is_directory

    def test_encode_path_defaults_name_to_last_segment(self, tmp_path):
        path = tmp_path / "sub"
        path.mkdir()
        entry = entry_codec.encode_path(str(path) + os.sep, os.stat(path))
        assert entry.name == "sub"

    def test_encode_path_explicit_name(self, tmp_path):
        entry = entry_codec.encode_path(str(tmp_path), os.stat(tmp_path), name="")
        assert entry.name == ""

    def test_undecodable_name_is_replaced(self, tmp_path):
        name = os.fsdecode(b"bad\xffname.txt")

        entry = entry_codec.encode(os.stat(tmp_path), name)

        assert entry.name == "bad\ufffdname.txt"
        entry.name.encode("utf-8")

    def test_missing_name_stays_missing(self, tmp_path):
        entry = entry_codec.encode(os.stat(tmp_path), None)
        assert entry.name is None
        assert "name" not in entry_codec.to_wire(entry)


class TestWireFormat:
    """Tests for the JSON representation."""

    def test_to_wire(self):
        entry = DirectoryEntry(
            name="a.txt",
            type=DirectoryEntryType.File,
            size=3,
            ctime=datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc),
            mtime=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        )

        assert entry_codec.to_wire(entry) == {
            "name": "a.txt",
            "type": 2,
            "size": 3,
            "ctime": "2024-01-02T03:04:05.678Z",
            "mtime": "2024-01-02T03:04:05.000Z",
        }

    def test_to_wire_omits_missing_name(self):
        wire = entry_codec.to_wire(make_entry(None))
        assert "name" not in wire

    def test_decode_normalizes_to_utc(self):
        entry = entry_codec.decode({
            "name": "x",
            "type": 1,
            "size": 0,
            "ctime": "2024-01-01T02:00:00.000+02:00",
            "mtime": "2024-01-01T00:00:00Z",
        })

        assert entry.type == DirectoryEntryType.Directory
        assert entry.ctime == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert entry.mtime == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_decode_rejects_negative_size(self):
        with pytest.raises(ValidationError):
            entry_codec.decode({"type": 2, "size": -1, "ctime": "2024-01-01T00:00:00Z", "mtime": "2024-01-01T00:00:00Z"})

    def test_decode_rejects_bad_timestamp(self):
        with pytest.raises(ValueError):
            entry_codec.decode({"type": 2, "size": 1, "ctime": "yesterday", "mtime": "2024-01-01T00:00:00Z"})

    def test_round_trip(self, tmp_path):
        path = tmp_path / "data.bin"
        path.write_bytes(b"\x00" * 42)
        metadata = os.stat(path)

        entry = entry_codec.decode(entry_codec.to_wire(entry_codec.encode(metadata, "data.bin")))

        assert entry.name == "data.bin"
        assert entry.size == 42
        assert entry.type == DirectoryEntryType.File
        expected = datetime.fromtimestamp(metadata.st_mtime, tz=timezone.utc)
        assert abs((entry.mtime - expected).total_seconds()) < 0.001


class TestListingOrder:
    """Tests for the directories-first, case-insensitive ordering."""

    def test_directories_before_files(self):
        entries = [make_entry("b.txt"), make_entry("A", DirectoryEntryType.Directory)]
        assert [e.name for e in entry_codec.sort_entries(entries)] == ["A", "b.txt"]

    def test_case_insensitive_within_group(self):
        entries = [
            make_entry("zeta.txt"),
            make_entry("Beta", DirectoryEntryType.Directory),
            make_entry("Alpha.txt"),
            make_entry("alpha", DirectoryEntryType.Directory),
            make_entry("beta.txt"),
        ]
        assert [e.name for e in entry_codec.sort_entries(entries)] == [
            "alpha", "Beta", "Alpha.txt", "beta.txt", "zeta.txt",
        ]

    def test_sort_is_stable_for_equal_keys(self):
        first, second = make_entry("Same.txt", size=1), make_entry("same.txt", size=2)
        assert entry_codec.sort_entries([first, second]) == [first, second]
