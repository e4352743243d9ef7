"""
Tests for the interval module.

Tests cover:
- describe_interval / interval_to_seconds / interval_to_ms parsing
- round_interval ladder boundaries
- calculate_interval with resolution and lower bound
- seconds_to_hms and ms_range_to_time_string labels
"""

import pytest
from datetime import datetime, timedelta
import pytz

from rangekit.ranges.exceptions import InvalidIntervalError, InvalidResolutionError
from rangekit.ranges.interval import (
    INTERVAL_LADDER,
    MAX_INTERVAL_MS,
    calculate_interval,
    describe_interval,
    interval_to_ms,
    interval_to_seconds,
    ms_range_to_time_string,
    round_interval,
    seconds_to_hms,
)
from rangekit.ranges.models import IntervalSpec, RawTimeRange, TimeRange


T0 = datetime(2024, 3, 15, 12, 0, 0, tzinfo=pytz.utc)
LADDER_STEPS = {step for _, step in INTERVAL_LADDER} | {MAX_INTERVAL_MS}


def make_range(span: timedelta) -> TimeRange:
    end = T0 + span
    return TimeRange(start=T0, end=end, raw=RawTimeRange(start=T0, end=end))


class TestDescribeInterval:
    """Test duration string parsing"""

    def test_minutes(self):
        assert describe_interval("5m") == IntervalSpec(sec=60, type="m", count=5)

    def test_milliseconds_take_precedence_over_minutes(self):
        """Test that "ms" is not read as minutes followed by "s" """
        assert describe_interval("250ms") == IntervalSpec(sec=0.001, type="ms", count=250)

    def test_unitless_number_is_seconds(self):
        assert describe_interval("30") == IntervalSpec(sec=1, type="s", count=30)

    def test_month_and_minute_are_case_sensitive(self):
        """Test that 2M (months) and 2m (minutes) differ by a factor of 43200"""
        months = describe_interval("2M")
        minutes = describe_interval("2m")

        assert months.type == "M"
        assert minutes.type == "m"
        assert interval_to_seconds("2M") / interval_to_seconds("2m") == 43200

    def test_fractional_count_truncates(self):
        assert describe_interval("1.5h").count == 1

    def test_unit_found_inside_longer_text(self):
        assert describe_interval("interval 10s").count == 10

    @pytest.mark.parametrize("value", ["", "abc", "5x", "0"])
    def test_invalid_values_raise(self, value):
        with pytest.raises(InvalidIntervalError) as exc_info:
            describe_interval(value)

        assert 'y, M, w, d, h, m, s, ms' in str(exc_info.value)
        assert exc_info.value.value == value

    def test_invalid_interval_is_a_value_error(self):
        with pytest.raises(ValueError):
            describe_interval("nonsense")


class TestIntervalConversions:
    """Test conversions to seconds and milliseconds"""

    def test_interval_to_ms(self):
        assert interval_to_ms("5m") == 300000

    def test_interval_to_seconds(self):
        assert interval_to_seconds("2h") == 7200

    def test_week_and_year_are_fixed_length(self):
        assert interval_to_seconds("1w") == 604800
        assert interval_to_seconds("1y") == 31536000
        assert interval_to_seconds("1M") == 2592000

    def test_milliseconds(self):
        assert interval_to_ms("250ms") == pytest.approx(250)


class TestRoundInterval:
    """Test snapping to the interval ladder"""

    @pytest.mark.parametrize("interval,expected", [
        (0, 1),
        (9, 1),
        (10, 10),
        (14, 10),
        (15, 20),
        (1499, 1000),
        (1500, 2000),
        (12499, 10000),
        (12500, 10000),
        (14999, 10000),
        (15000, 15000),
        (89999, 60000),
        (90000, 120000),
        (86399999, 43200000),
        (86400000, 86400000),
        (3628799999, 2592000000),
        (3628800000, 31536000000),
    ])
    def test_boundaries(self, interval, expected):
        assert round_interval(interval) == expected

    def test_every_result_is_a_ladder_step(self):
        for interval in range(0, 4000000, 997):
            assert round_interval(interval) in LADDER_STEPS


class TestCalculateInterval:
    """Test query step calculation"""

    def test_one_hour_at_100_points(self):
        """Test that 3600000ms / 100 = 36000ms snaps to 30s"""
        values = calculate_interval(make_range(timedelta(hours=1)), 100)

        assert values.interval_ms == 30000
        assert values.interval == "30s"
        assert values.interval_ms in LADDER_STEPS

    def test_low_limit_wins_when_larger(self):
        values = calculate_interval(make_range(timedelta(hours=1)), 100, "1m")

        assert values.interval_ms == 60000
        assert values.interval == "1m"

    def test_low_limit_ignored_when_smaller(self):
        values = calculate_interval(make_range(timedelta(hours=1)), 100, "1s")

        assert values.interval_ms == 30000

    def test_never_below_low_limit(self):
        for limit in ("10ms", "1s", "15s", "1m", "5m", "1h"):
            values = calculate_interval(make_range(timedelta(hours=1)), 1000, limit)
            assert values.interval_ms >= interval_to_ms(limit)

    def test_default_low_limit_is_one_millisecond(self):
        values = calculate_interval(make_range(timedelta(milliseconds=5)), 1000)

        assert values.interval_ms == 1
        assert values.interval == "1ms"

    def test_long_range(self):
        values = calculate_interval(make_range(timedelta(days=30)), 30)

        assert values.interval_ms == 86400000
        assert values.interval == "1d"

    @pytest.mark.parametrize("resolution", [0, -10])
    def test_non_positive_resolution_raises(self, resolution):
        with pytest.raises(InvalidResolutionError):
            calculate_interval(make_range(timedelta(hours=1)), resolution)

    def test_invalid_low_limit_raises(self):
        with pytest.raises(InvalidIntervalError):
            calculate_interval(make_range(timedelta(hours=1)), 100, "soon")

    def test_to_dict(self):
        values = calculate_interval(make_range(timedelta(hours=1)), 100)

        assert values.to_dict() == {"interval_ms": 30000, "interval": "30s"}


class TestSecondsToHms:
    """Test single-unit duration labels"""

    @pytest.mark.parametrize("seconds,expected", [
        (31536000, "1y"),
        (63072000 + 86400, "2y"),
        (172800, "2d"),
        (7200, "2h"),
        (90, "1m"),
        (45, "45s"),
        (0.25, "250ms"),
        (0.0001, "less than a millisecond"),
        (0, "less than a millisecond"),
    ])
    def test_labels(self, seconds, expected):
        assert seconds_to_hms(seconds) == expected


class TestMsRangeToTimeString:
    """Test multi-unit span labels"""

    def test_hours_minutes_seconds(self):
        assert ms_range_to_time_string(3723000) == "1h 2min 3sec"

    def test_skips_zero_parts(self):
        assert ms_range_to_time_string(3600000) == "1h"
        assert ms_range_to_time_string(61000) == "1min 1sec"

    def test_rounds_to_nearest_second(self):
        assert ms_range_to_time_string(1500) == "2sec"

    def test_less_than_a_second(self):
        assert ms_range_to_time_string(400) == "less than 1sec"
