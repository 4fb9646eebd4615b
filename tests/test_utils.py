"""Unit tests for utility functions."""

import random

import pytest

from pydbxsync.utils import (
    format_size,
    format_timestamp,
    normalize_remote_path,
    parse_timestamp,
)


class TestFormatTimestamp:
    """Tests for format_timestamp."""

    def test_epoch(self):
        """Zero is the Unix epoch."""
        assert format_timestamp(0) == "1970-01-01T00:00:00Z"

    def test_known_value(self):
        """Known timestamp from the API documentation."""
        assert format_timestamp(1431445838) == "2015-05-12T15:50:38Z"

    def test_before_epoch(self):
        """Negative values are before 1970."""
        assert format_timestamp(-1) == "1969-12-31T23:59:59Z"

    def test_small_years_are_zero_padded(self):
        """Years below 1000 still have four digits."""
        assert format_timestamp(-60000000000).startswith("0068-")


class TestParseTimestamp:
    """Tests for parse_timestamp."""

    def test_epoch(self):
        """The epoch parses to zero."""
        assert parse_timestamp("1970-01-01T00:00:00Z") == 0

    def test_known_value(self):
        """Known timestamp from the API documentation."""
        assert parse_timestamp("2015-05-12T15:50:38Z") == 1431445838

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "2015-05-12 15:50:38Z",
            "2015-05-12T15:50:38",
            "2015-05-12T15:50:38.123Z",
            "2015-05-12T15:50:38+00:00",
            "2015-13-12T15:50:38Z",
            "not a timestamp",
        ],
    )
    def test_invalid_values_raise(self, value):
        """Anything but YYYY-MM-DDTHH:MM:SSZ is rejected."""
        with pytest.raises(ValueError):
            parse_timestamp(value)

    def test_none_raises(self):
        """None is not a timestamp."""
        with pytest.raises(ValueError):
            parse_timestamp(None)  # type: ignore[arg-type]


class TestTimestampRoundTrip:
    """Round-trip tests between integer and string timestamps."""

    def test_random_epoch_seconds_round_trip(self):
        """decode(encode(x)) == x for random epoch seconds."""
        rng = random.Random(42)
        for _ in range(1000):
            value = rng.randint(0, 253402300799)  # up to 9999-12-31T23:59:59Z
            assert parse_timestamp(format_timestamp(value)) == value

    def test_string_round_trip(self):
        """encode(decode(s)) == s for valid strings."""
        for value in [
            "1970-01-01T00:00:00Z",
            "2000-02-29T12:00:00Z",
            "2038-01-19T03:14:08Z",
            "9999-12-31T23:59:59Z",
        ]:
            assert format_timestamp(parse_timestamp(value)) == value


class TestNormalizeRemotePath:
    """Tests for normalize_remote_path."""

    def test_adds_leading_slash(self):
        assert normalize_remote_path("docs/a.txt") == "/docs/a.txt"

    def test_removes_trailing_and_duplicate_slashes(self):
        assert normalize_remote_path("//docs//a.txt/") == "/docs/a.txt"

    def test_backslashes(self):
        assert normalize_remote_path("docs\\a.txt") == "/docs/a.txt"


class TestFormatSize:
    """Tests for format_size."""

    def test_bytes(self):
        assert format_size(256) == "256 B"

    def test_kilobytes(self):
        assert format_size(1536) == "1.5 KB"

    def test_megabytes(self):
        assert format_size(5 * 1024 * 1024) == "5.0 MB"

    def test_gigabytes(self):
        assert format_size(2 * 1024 * 1024 * 1024) == "2.0 GB"
