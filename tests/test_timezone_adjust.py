"""
Unit tests for capture time reinterpretation.
"""

from datetime import datetime, timedelta, timezone

import pytest

from coercion import UTC_MARKER, parse_timestamp
from exif_types import ImageData
from timezone_adjust import TimezoneAdjuster, format_utc_offset, is_zoneless, localize


def fixed_clock(*args):
    return lambda: datetime(*args, tzinfo=timezone.utc)


class TestFormatOffset:
    """Tests for +HHMM formatting."""

    @pytest.mark.parametrize("offset,expected", [
        (timedelta(hours=2), "+0200"),
        (timedelta(hours=-7), "-0700"),
        (timedelta(hours=5, minutes=30), "+0530"),
        (timedelta(hours=-3, minutes=-30), "-0330"),
        (timedelta(0), "+0000"),
    ])
    def test_format(self, offset, expected):
        assert format_utc_offset(offset) == expected


class TestLocalize:
    """Tests for relabel versus conversion."""

    def setup_method(self):
        self.rome = TimezoneAdjuster().resolve("Europe/Rome")

    def test_zoneless_value_is_relabelled(self):
        original = datetime(2019, 5, 1, 10, 20, 30, 123000)
        adjusted = localize(original, self.rome)

        assert adjusted.replace(tzinfo=None) == original
        assert adjusted.tzinfo.key == "Europe/Rome"

    def test_utc_marked_value_is_relabelled(self):
        adjusted = localize(parse_timestamp("2019:05:01 10:00:00.000Z"), self.rome)
        assert (adjusted.hour, adjusted.minute) == (10, 0)
        assert adjusted.tzinfo.key == "Europe/Rome"

    def test_zoned_value_is_converted(self):
        original = datetime(2019, 5, 1, 10, 0, tzinfo=timezone(timedelta(hours=-7)))
        adjusted = localize(original, self.rome)

        assert adjusted == original
        assert adjusted.hour == 19
        assert adjusted.tzinfo.key == "Europe/Rome"

    def test_explicit_zero_offset_is_converted(self):
        original = parse_timestamp("2021:07:04 14:30:15+0000")
        adjusted = localize(original, self.rome)

        assert adjusted == original
        assert (adjusted.hour, adjusted.minute) == (16, 30)
        assert adjusted.tzinfo.key == "Europe/Rome"

    def test_is_zoneless(self):
        assert is_zoneless(datetime(2020, 1, 1))
        assert is_zoneless(datetime(2020, 1, 1, tzinfo=UTC_MARKER))
        assert not is_zoneless(datetime(2020, 1, 1, tzinfo=timezone.utc))
        assert not is_zoneless(datetime(2020, 1, 1, tzinfo=timezone(timedelta(hours=1))))


class TestTimezoneAdjuster:
    """Tests for adjusting a whole record."""

    def test_adjust_record(self):
        image_data = ImageData(
            gps_time_zone="Europe/Rome",
            date_time_original=datetime(2019, 5, 1, 10, 20, 30, 500),
            date_time_digitized=datetime(2019, 5, 1, 8, 0, tzinfo=timezone(timedelta(hours=-4))),
        )
        TimezoneAdjuster(clock=fixed_clock(2024, 1, 15, 12)).adjust(image_data)

        assert image_data.has_time_offset
        assert image_data.time_offset == "+0100"
        original = image_data.date_time_original
        assert (original.year, original.month, original.day) == (2019, 5, 1)
        assert (original.hour, original.minute, original.second, original.microsecond) == (10, 20, 30, 500)
        assert original.tzinfo.key == "Europe/Rome"
        assert image_data.date_time_digitized.hour == 14
        assert image_data.date_time is None

    def test_offset_follows_the_clock_not_the_photo(self):
        image_data = ImageData(gps_time_zone="Europe/Rome", date_time_original=datetime(2019, 1, 10, 9, 0))
        TimezoneAdjuster(clock=fixed_clock(2024, 7, 15, 12)).adjust(image_data)
        assert image_data.time_offset == "+0200"

    @pytest.mark.parametrize("zone,expected", [
        ("America/New_York", "-0500"),
        ("Asia/Kolkata", "+0530"),
        ("UTC", "+0000"),
    ])
    def test_offsets(self, zone, expected):
        image_data = ImageData(gps_time_zone=zone)
        TimezoneAdjuster(clock=fixed_clock(2024, 1, 15, 12)).adjust(image_data)
        assert image_data.time_offset == expected

    def test_unknown_zone(self, caplog):
        original = datetime(2019, 5, 1, 10, 0)
        image_data = ImageData(gps_time_zone="Mars/Olympus_Mons", date_time_original=original)
        TimezoneAdjuster().adjust(image_data)

        assert image_data.gps_time_zone == "Mars/Olympus_Mons"
        assert not image_data.has_time_offset
        assert image_data.time_offset == ""
        assert image_data.date_time_original == original
        assert "Failed to load timezone" in caplog.text

    def test_no_zone_is_a_no_op(self):
        image_data = ImageData(date_time=datetime(2019, 5, 1, 10, 0))
        TimezoneAdjuster().adjust(image_data)
        assert image_data.date_time.tzinfo is None
        assert not image_data.has_time_offset

    def test_to_local(self):
        local = TimezoneAdjuster().to_local(datetime(2021, 7, 4, 12, 30, 15, tzinfo=timezone.utc), "Europe/Paris")
        assert local.hour == 14
        assert local.tzinfo.key == "Europe/Paris"
