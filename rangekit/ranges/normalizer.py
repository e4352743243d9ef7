"""
Range Normalizer - Resolve raw ranges and describe them for display

This module provides:
- convert_raw_to_range(raw, time_zone, fiscal_year_start_month) -> TimeRange
- describe_time_range(raw, time_zone) -> str
- is_valid_time_span(value), is_fiscal(range), is_relative_time_range(raw)
- describe_time_range_abbreviation(range, time_zone)

Precedence rules for describe_time_range (first match wins):
1. Preset label for the exact "<from> to <to>" pair
2. Both sides are instants: both formatted
3. Only from is an instant: formatted from, time-ago of to
4. Only to is an instant: time-ago of from, formatted to
5. to is "now": the expression describer's label for from
6. The raw pair as "<from> to <to>"

Resolution goes through a DateMath collaborator. Unparseable input never
raises here; it degrades to the reference now, None or an empty label.
"""

from datetime import datetime
from typing import Optional

import structlog

from rangekit.datemath import DateMath, get_date_math
from rangekit.ranges.describer import describe_text_range
from rangekit.ranges.models import RawTimeRange, RawValue, TimeRange
from rangekit.ranges.presets import lookup_preset

logger = structlog.get_logger(__name__)


def convert_raw_to_range(
    raw: RawTimeRange,
    time_zone: Optional[str] = None,
    fiscal_year_start_month: Optional[int] = None,
    *,
    now: Optional[datetime] = None,
    date_math: Optional[DateMath] = None
) -> TimeRange:
    """
    Resolve both sides of a raw range.

    The start rounds down and the end rounds up, so "now/d" to "now/d"
    covers the whole day. When either side is a math expression the raw
    pair is kept so the range can be re-anchored later; otherwise raw is
    replaced by the resolved instants.

    Args:
        raw: Pair of instants or expressions
        time_zone: Zone name ("utc", "browser", IANA); the collaborator's default if None
        fiscal_year_start_month: 0-based fiscal start month; the collaborator's default if None
        now: Reference instant for relative expressions
        date_math: Collaborator to resolve with; the process default if None
    """
    dm = date_math or get_date_math()

    start = dm.parse_instant(raw.start, round_up=False, time_zone=time_zone,
                             fiscal_year_start_month=fiscal_year_start_month, now=now)
    end = dm.parse_instant(raw.end, round_up=True, time_zone=time_zone,
                           fiscal_year_start_month=fiscal_year_start_month, now=now)

    if dm.is_math_string(raw.start) or dm.is_math_string(raw.end):
        return TimeRange(start=start, end=end, raw=raw)

    return TimeRange(start=start, end=end, raw=RawTimeRange(start=start, end=end))


def describe_time_range(
    raw: RawTimeRange,
    time_zone: Optional[str] = None,
    *,
    now: Optional[datetime] = None,
    date_math: Optional[DateMath] = None
) -> str:
    """Human label for a raw range"""
    option = lookup_preset(raw.start, raw.end)
    if option:
        return option.display

    dm = date_math or get_date_math()
    start_is_instant = isinstance(raw.start, datetime)
    end_is_instant = isinstance(raw.end, datetime)

    if start_is_instant and end_is_instant:
        return f"{dm.format(raw.start, time_zone)} to {dm.format(raw.end, time_zone)}"

    if start_is_instant:
        parsed = dm.parse(raw.end, True, "utc", now=now)
        if parsed is None:
            logger.warning("Could not resolve range end for display", to=raw.end)
            return ""
        return f"{dm.format(raw.start, time_zone)} to {dm.format_time_ago(parsed, time_zone, now=now)}"

    if end_is_instant:
        parsed = dm.parse(raw.start, False, "utc", now=now)
        if parsed is None:
            logger.warning("Could not resolve range start for display", **{"from": raw.start})
            return ""
        return f"{dm.format_time_ago(parsed, time_zone, now=now)} to {dm.format(raw.end, time_zone)}"

    if str(raw.end) == "now":
        return describe_text_range(str(raw.start)).display

    return f"{raw.start} to {raw.end}"


def is_valid_time_span(value: str) -> bool:
    """
    Check whether a duration entered by a user can be described.

    Template variables ("$interval", "+$offset") are accepted as-is since
    they are only known once interpolated.
    """
    if value.startswith("$") or value.startswith("+$"):
        return True

    return not describe_text_range(value).invalid


def _has_fiscal_marker(value: RawValue) -> bool:
    return isinstance(value, str) and value.find("f") > 0


def is_fiscal(time_range: TimeRange) -> bool:
    """True when either raw side uses fiscal rounding (an "f" past the first character)"""
    return _has_fiscal_marker(time_range.raw.start) or _has_fiscal_marker(time_range.raw.end)


def _is_relative(value: RawValue) -> bool:
    return isinstance(value, str) and "now" in value


def is_relative_time_range(raw: RawTimeRange) -> bool:
    return _is_relative(raw.start) or _is_relative(raw.end)


def describe_time_range_abbreviation(
    time_range: TimeRange,
    time_zone: Optional[str] = None,
    *,
    now: Optional[datetime] = None,
    date_math: Optional[DateMath] = None
) -> str:
    """Time zone abbreviation in effect at the start of the range, e.g. "CEST" """
    dm = date_math or get_date_math()

    if isinstance(time_range.start, datetime):
        return dm.timezone_abbreviation(time_range.start, time_zone)

    parsed = dm.parse(time_range.raw.start, True, now=now)
    if parsed is None:
        return ""
    return dm.timezone_abbreviation(parsed, time_zone)
