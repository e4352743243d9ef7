"""
Ranges Module - Time range resolution, description and query intervals
"""

from rangekit.ranges.describer import describe_text_range
from rangekit.ranges.exceptions import InvalidIntervalError, InvalidResolutionError, TimeRangeError
from rangekit.ranges.interval import (
    calculate_interval,
    describe_interval,
    interval_to_ms,
    interval_to_seconds,
    ms_range_to_time_string,
    round_interval,
    seconds_to_hms,
)
from rangekit.ranges.models import (
    DescribedRange,
    IntervalSpec,
    IntervalValues,
    RawTimeRange,
    RelativeTimeRange,
    TimeOption,
    TimeRange,
    UnparseableRange,
)
from rangekit.ranges.normalizer import (
    convert_raw_to_range,
    describe_time_range,
    describe_time_range_abbreviation,
    is_fiscal,
    is_relative_time_range,
    is_valid_time_span,
)
from rangekit.ranges.presets import HIDDEN_RANGE_OPTIONS, RANGE_OPTIONS, list_range_options
from rangekit.ranges.relative import relative_to_time_range, time_range_to_relative

__all__ = [
    'describe_text_range',
    'calculate_interval',
    'describe_interval',
    'interval_to_ms',
    'interval_to_seconds',
    'ms_range_to_time_string',
    'round_interval',
    'seconds_to_hms',
    'convert_raw_to_range',
    'describe_time_range',
    'describe_time_range_abbreviation',
    'is_fiscal',
    'is_relative_time_range',
    'is_valid_time_span',
    'list_range_options',
    'relative_to_time_range',
    'time_range_to_relative',
    'RANGE_OPTIONS',
    'HIDDEN_RANGE_OPTIONS',
    'DescribedRange',
    'IntervalSpec',
    'IntervalValues',
    'RawTimeRange',
    'RelativeTimeRange',
    'TimeOption',
    'TimeRange',
    'UnparseableRange',
    'TimeRangeError',
    'InvalidIntervalError',
    'InvalidResolutionError',
]
