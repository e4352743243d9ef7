"""
Interval Module - Duration parsing and query step sizing

This module provides:
- describe_interval(str) -> IntervalSpec
- interval_to_seconds / interval_to_ms
- round_interval(ms) -> ms snapped to a ladder of human-friendly steps
- calculate_interval(range, resolution, low_limit) -> IntervalValues
- seconds_to_hms / ms_range_to_time_string labels

Month and year are fixed-length approximations (30 and 365 days).
"""

import math
import re
from bisect import bisect_right
from typing import Optional

import structlog

from rangekit.ranges.exceptions import InvalidIntervalError, InvalidResolutionError
from rangekit.ranges.models import IntervalSpec, IntervalValues, TimeRange

logger = structlog.get_logger(__name__)


INTERVAL_PATTERN = re.compile(r"(-?\d+(?:\.\d+)?)(ms|[Mwdhmsy])")
NUMBER_PATTERN = re.compile(r"^\s*[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?\s*$")
LEADING_INT_PATTERN = re.compile(r"^\s*([-+]?\d+)")

INTERVALS_IN_SECONDS = {
    "y": 31536000,
    "M": 2592000,
    "w": 604800,
    "d": 86400,
    "h": 3600,
    "m": 60,
    "s": 1,
    "ms": 0.001,
}

# (upper bound exclusive, step) in milliseconds; anything above the last
# bound snaps to one year
INTERVAL_LADDER = (
    (10, 1),
    (15, 10),
    (35, 20),
    (75, 50),
    (150, 100),
    (350, 200),
    (750, 500),
    (1500, 1000),                # 1s
    (3500, 2000),
    (7500, 5000),
    (15000, 10000),
    (17500, 15000),
    (25000, 20000),
    (45000, 30000),
    (90000, 60000),              # 1m
    (210000, 120000),
    (450000, 300000),
    (750000, 600000),
    (1050000, 900000),
    (1500000, 1200000),
    (2700000, 1800000),
    (5400000, 3600000),          # 1h
    (9000000, 7200000),
    (16200000, 10800000),
    (32400000, 21600000),
    (86400000, 43200000),
    (604800000, 86400000),       # 1d
    (1814400000, 604800000),     # 1w
    (3628800000, 2592000000),    # 30d
)
MAX_INTERVAL_MS = 31536000000    # 1y

_LADDER_BOUNDS = tuple(bound for bound, _ in INTERVAL_LADDER)

DEFAULT_LOW_LIMIT_MS = 1


def _leading_int(value: str) -> int:
    match = LEADING_INT_PATTERN.match(value)
    return int(match.group(1)) if match else 0


def describe_interval(value: str) -> IntervalSpec:
    """
    Parse a duration string such as "5m", "2M" or "30".

    A unit-less, non-zero number is taken as seconds.

    Raises:
        InvalidIntervalError: if no number followed by a known unit is found
    """
    if NUMBER_PATTERN.match(value) and float(value) != 0:
        return IntervalSpec(sec=INTERVALS_IN_SECONDS["s"], type="s", count=_leading_int(value))

    match = INTERVAL_PATTERN.search(value)
    if not match or match.group(2) not in INTERVALS_IN_SECONDS:
        raise InvalidIntervalError(value, INTERVALS_IN_SECONDS)

    unit = match.group(2)
    return IntervalSpec(sec=INTERVALS_IN_SECONDS[unit], type=unit, count=_leading_int(match.group(1)))


def interval_to_seconds(value: str) -> float:
    info = describe_interval(value)
    return info.sec * info.count


def interval_to_ms(value: str) -> float:
    info = describe_interval(value)
    return info.sec * 1000 * info.count


def round_interval(interval: float) -> int:
    """Snap a millisecond step to the nearest rung of the interval ladder"""
    index = bisect_right(_LADDER_BOUNDS, interval)
    if index == len(INTERVAL_LADDER):
        return MAX_INTERVAL_MS
    return INTERVAL_LADDER[index][1]


def seconds_to_hms(seconds: float) -> str:
    """
    Label a duration with its largest non-zero unit only.

    Examples: 90 -> "1m", 3600 -> "1h", 0.25 -> "250ms"
    """
    num_years = math.floor(seconds / 31536000)
    if num_years:
        return f"{num_years}y"
    num_days = math.floor((seconds % 31536000) / 86400)
    if num_days:
        return f"{num_days}d"
    num_hours = math.floor(((seconds % 31536000) % 86400) / 3600)
    if num_hours:
        return f"{num_hours}h"
    num_minutes = math.floor((((seconds % 31536000) % 86400) % 3600) / 60)
    if num_minutes:
        return f"{num_minutes}m"
    num_seconds = math.floor((((seconds % 31536000) % 86400) % 3600) % 60)
    if num_seconds:
        return f"{num_seconds}s"
    num_milliseconds = math.floor(seconds * 1000.0)
    if num_milliseconds:
        return f"{num_milliseconds}ms"

    return "less than a millisecond"


def ms_range_to_time_string(range_ms: float) -> str:
    """Format a span as "1h 2min 3sec", used in log meta info"""
    range_sec = math.floor(range_ms / 1000 + 0.5)

    hours = math.floor(range_sec / 60 / 60)
    minutes = math.floor(range_sec / 60) - hours * 60
    seconds = range_sec % 60

    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}min")
    if seconds:
        parts.append(f"{seconds}sec")

    return " ".join(parts) or "less than 1sec"


def calculate_interval(
    time_range: TimeRange,
    resolution: float,
    low_limit_interval: Optional[str] = None
) -> IntervalValues:
    """
    Derive a query step for a resolved range.

    Args:
        time_range: Resolved range; both instants must be set
        resolution: Desired number of data points across the range
        low_limit_interval: Optional minimum step, e.g. "1m"

    Returns:
        IntervalValues with the step in milliseconds and a single-unit label
    """
    if not resolution or resolution <= 0:
        raise InvalidResolutionError(resolution)

    low_limit_ms = DEFAULT_LOW_LIMIT_MS
    if low_limit_interval:
        low_limit_ms = interval_to_ms(low_limit_interval)

    span_ms = (time_range.end - time_range.start).total_seconds() * 1000
    interval_ms = round_interval(span_ms / resolution)
    if low_limit_ms > interval_ms:
        logger.debug(
            "Interval raised to low limit",
            interval_ms=interval_ms,
            low_limit_ms=low_limit_ms
        )
        interval_ms = low_limit_ms

    return IntervalValues(interval_ms=interval_ms, interval=seconds_to_hms(interval_ms / 1000))
