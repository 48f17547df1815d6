"""
Unit tests for time and dict helpers.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from core.dict_utils import deep_merge
from core.time_utils import end_of_day, now_utc, start_of_day, to_utc


class TestToUtc:

    def test_naive_is_read_as_local(self):
        dt = datetime(2024, 6, 1, 9, 0)

        result = to_utc(dt)

        assert result.tzinfo == timezone.utc
        assert result == dt.astimezone()

    def test_aware_keeps_its_instant(self):
        aware = datetime(2024, 6, 1, 9, 0, tzinfo=timezone(timedelta(hours=5)))

        assert to_utc(aware) == datetime(2024, 6, 1, 4, 0, tzinfo=timezone.utc)

    def test_iso_string_with_z(self):
        assert to_utc("2024-06-01T09:00:00Z") == datetime(2024, 6, 1, 9, 0, tzinfo=timezone.utc)

    def test_iso_string_without_zone(self):
        assert to_utc("2024-06-01T09:00:00") == datetime(2024, 6, 1, 9, 0).astimezone()

    def test_none_passes_through(self):
        assert to_utc(None) is None

    def test_rejects_other_types(self):
        with pytest.raises(ValueError):
            to_utc(12345)

    def test_rejects_bad_strings(self):
        with pytest.raises(ValueError):
            to_utc("next tuesday")


class TestDayBounds:

    def test_bounds_for_date(self):
        assert start_of_day(date(2024, 6, 1)) == datetime(2024, 6, 1, 0, 0, 0).astimezone()
        assert end_of_day(date(2024, 6, 1)) == datetime(2024, 6, 1, 23, 59, 59, 999999).astimezone()

    def test_bounds_are_utc(self):
        assert start_of_day(date(2024, 6, 1)).tzinfo == timezone.utc

    def test_bounds_for_datetime(self):
        dt = datetime(2024, 6, 1, 15, 30)

        assert start_of_day(dt) == datetime(2024, 6, 1).astimezone()
        assert end_of_day(dt) - start_of_day(dt) == timedelta(days=1) - timedelta(microseconds=1)

    def test_fall_back_day_is_25_hours(self, new_york_tz):
        day = date(2024, 11, 3)

        assert start_of_day(day) == datetime(2024, 11, 3, 4, 0, tzinfo=timezone.utc)
        assert end_of_day(day) - start_of_day(day) == timedelta(hours=25) - timedelta(microseconds=1)

    def test_now_utc_is_aware(self):
        assert now_utc().utcoffset() == timedelta(0)


class TestDeepMerge:

    def test_nested_keys_are_merged(self):
        target = {"a": 1, "flags": {"x": True, "y": True}}

        result = deep_merge(target, {"flags": {"y": False}, "b": 2})

        assert result == {"a": 1, "b": 2, "flags": {"x": True, "y": False}}

    def test_inputs_are_not_mutated(self):
        target = {"flags": {"x": True}}
        source = {"flags": {"x": False}}

        deep_merge(target, source)

        assert target == {"flags": {"x": True}}
        assert source == {"flags": {"x": False}}

    def test_non_dict_overwrites(self):
        assert deep_merge({"flags": {"x": True}}, {"flags": None}) == {"flags": None}
