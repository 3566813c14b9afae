"""Unit tests for utility functions."""

from datetime import date, datetime, timezone

import pytest

from backbrace.models import FileEntry
from backbrace.utils import (
    dated_dump_name,
    format_size,
    join_key,
    normalize_path,
    strip_prefix,
    to_timestamp,
)


class TestNormalizePath:
    """Tests for normalize_path function."""

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("a.txt", "a.txt"),
            ("/a.txt", "a.txt"),
            ("docs/a.txt", "docs/a.txt"),
            ("docs\\a.txt", "docs/a.txt"),
            ("docs//a.txt/", "docs/a.txt"),
            ("", ""),
            ("/", ""),
        ],
    )
    def test_normalize(self, path, expected):
        assert normalize_path(path) == expected


class TestKeys:
    """Tests for key prefix helpers."""

    def test_join_key(self):
        assert join_key("files", "a.txt") == "files/a.txt"
        assert join_key("files/", "/docs/a.txt") == "files/docs/a.txt"
        assert join_key("", "a.txt") == "a.txt"
        assert join_key("files", "") == "files"

    def test_strip_prefix(self):
        assert strip_prefix("files", "files/a.txt") == "a.txt"
        assert strip_prefix("files", "files/docs/") == "docs"
        assert strip_prefix("files", "files") == ""
        assert strip_prefix("", "a.txt") == "a.txt"

    def test_strip_prefix_outside(self):
        assert strip_prefix("files", "db/a.sql") is None
        assert strip_prefix("files", "filesystem/a.txt") is None


class TestFormatSize:
    """Tests for format_size function."""

    def test_sizes(self):
        assert format_size(256) == "256 B"
        assert format_size(1536) == "1.5 KB"
        assert format_size(5 * 1024 * 1024) == "5.0 MB"
        assert format_size(3 * 1024 * 1024 * 1024) == "3.0 GB"


class TestTimestamps:
    """Tests for timestamp helpers."""

    def test_to_timestamp(self):
        value = datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert to_timestamp(value) == 1704067200.0

    def test_to_timestamp_none(self):
        assert to_timestamp(None) == 0.0

    def test_dated_dump_name(self):
        assert dated_dump_name("shop", date(2024, 3, 9)) == "shop_2024-03-09.sql"


class TestFileEntry:
    """Tests for the FileEntry model."""

    def test_defaults(self):
        entry = FileEntry("a.txt")
        assert entry.is_directory is False
        assert entry.modified_time == 0.0
        assert entry.size == 0

    def test_immutable(self):
        entry = FileEntry("a.txt")
        with pytest.raises(AttributeError):
            entry.path = "b.txt"
