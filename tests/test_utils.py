"""Tests for utility functions."""

from datetime import datetime, timedelta, timezone

import pytest

from monzo_client.errors import InvalidArgumentError, ResponseDecodeError
from monzo_client.utils import (
    format_timestamp,
    parse_optional_timestamp,
    parse_timestamp,
    require,
    require_mapping,
)


class TestFormatTimestamp:
    """Tests for format_timestamp function."""

    def test_utc(self) -> None:
        """Test formatting an aware UTC datetime."""
        value = datetime(2015, 4, 5, 18, 1, 32, tzinfo=timezone.utc)
        assert format_timestamp(value) == "2015-04-05T18:01:32Z"

    def test_naive_is_utc(self) -> None:
        """Test naive datetimes are treated as UTC."""
        assert format_timestamp(datetime(2015, 12, 25, 18, 1, 32)) == "2015-12-25T18:01:32Z"

    def test_converts_offset_to_utc(self) -> None:
        """Test aware datetimes in other zones are converted."""
        value = datetime(2015, 4, 5, 19, 1, 32, tzinfo=timezone(timedelta(hours=1)))
        assert format_timestamp(value) == "2015-04-05T18:01:32Z"

    def test_drops_microseconds(self) -> None:
        """Test sub-second precision is dropped."""
        value = datetime(2015, 4, 5, 18, 1, 32, 999999, tzinfo=timezone.utc)
        assert format_timestamp(value) == "2015-04-05T18:01:32Z"


class TestParseTimestamp:
    """Tests for parse_timestamp function."""

    def test_zulu(self) -> None:
        """Test the Z suffix."""
        assert parse_timestamp("2015-11-13T12:17:42Z") == datetime(
            2015, 11, 13, 12, 17, 42, tzinfo=timezone.utc
        )

    def test_milliseconds(self) -> None:
        """Test fractional seconds."""
        assert parse_timestamp("2015-08-22T12:20:18.409Z") == datetime(
            2015, 8, 22, 12, 20, 18, 409000, tzinfo=timezone.utc
        )

    def test_short_and_long_fractions(self) -> None:
        """Test fractions of one, two and nine digits."""
        assert parse_timestamp("2021-03-01T11:17:35.7Z") == datetime(
            2021, 3, 1, 11, 17, 35, 700000, tzinfo=timezone.utc
        )
        assert parse_timestamp("2021-03-01T11:17:35.25+00:00") == datetime(
            2021, 3, 1, 11, 17, 35, 250000, tzinfo=timezone.utc
        )
        assert parse_timestamp("2021-03-01T11:17:35.123456789Z") == datetime(
            2021, 3, 1, 11, 17, 35, 123456, tzinfo=timezone.utc
        )

    def test_offset(self) -> None:
        """Test an explicit offset is converted to UTC."""
        assert parse_timestamp("2015-08-22T13:20:18+01:00") == datetime(
            2015, 8, 22, 12, 20, 18, tzinfo=timezone.utc
        )

    def test_round_trip_with_format(self) -> None:
        """Test parsing what format_timestamp produces."""
        value = datetime(2016, 2, 29, 23, 59, 59, tzinfo=timezone.utc)
        assert parse_timestamp(format_timestamp(value)) == value

    def test_invalid(self) -> None:
        """Test invalid values raise ResponseDecodeError."""
        with pytest.raises(ResponseDecodeError):
            parse_timestamp("not a date")
        with pytest.raises(ResponseDecodeError):
            parse_timestamp("")
        with pytest.raises(ResponseDecodeError):
            parse_timestamp(1447416000)

    def test_optional(self) -> None:
        """Test None passes through parse_optional_timestamp."""
        assert parse_optional_timestamp(None) is None
        assert parse_optional_timestamp("2015-11-13T12:17:42Z") is not None


class TestRequire:
    """Tests for argument validation helpers."""

    def test_returns_value(self) -> None:
        """Test a present value is returned."""
        assert require("account_id", "acc_1") == "acc_1"

    def test_none(self) -> None:
        """Test None is rejected with the argument name."""
        with pytest.raises(InvalidArgumentError) as exc_info:
            require("account_id", None)
        assert exc_info.value.argument == "account_id"
        assert "account_id" in str(exc_info.value)

    def test_blank(self) -> None:
        """Test empty and whitespace strings are rejected."""
        with pytest.raises(InvalidArgumentError):
            require("account_id", "")
        with pytest.raises(InvalidArgumentError):
            require("account_id", "   ")

    def test_is_value_error(self) -> None:
        """Test InvalidArgumentError can be caught as ValueError."""
        with pytest.raises(ValueError):
            require("account_id", None)

    def test_mapping(self) -> None:
        """Test mappings may be empty but not None."""
        assert require_mapping("metadata", {}) == {}
        with pytest.raises(InvalidArgumentError):
            require_mapping("metadata", None)
