"""
Date Math Parser - Resolve "now-7d/d" style expressions to instants

Grammar (whitespace ignored):
    expr    := anchor math*
    anchor  := "now" | <ISO 8601 instant> "||"
    math    := "/" ["f"] unit           round to start (or end) of unit
             | ("+" | "-") [digits] unit  shift by N units (default 1)
    unit    := y | Q | M | w | d | h | m | s

Calendar units (y, Q, M, w, d) move wall-clock time in the target zone,
h/m/s move absolute time. Rounding with round_up lands on the last
millisecond of the unit. The "f" prefix rounds to fiscal years or quarters
that start at fiscal_year_start_month (0 = January).
"""

import re
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Optional

import structlog
from dateutil import parser as dateutil_parser
from dateutil.relativedelta import relativedelta

from rangekit.datemath.timezones import localize, now_in, to_zone

logger = structlog.get_logger(__name__)


UNITS = ("y", "M", "w", "d", "h", "m", "s", "Q")
ABSOLUTE_UNITS = ("h", "m", "s")

# Python weekday numbers (Monday = 0) of the supported first days of the week
WEEK_STARTS = {
    "monday": 0,
    "saturday": 5,
    "sunday": 6,
}

MAX_MATH_DIGIT_INDEX = 10

_WHITESPACE = re.compile(r"\s")
_DIGITS = "0123456789"


def is_math_string(text: object) -> bool:
    """True for expressions anchored at now or at an instant with "||" math"""
    if not text or not isinstance(text, str):
        return False
    return text[:3] == "now" or "||" in text


def _relativedelta(amount: int, unit: str) -> relativedelta:
    if unit == "y":
        return relativedelta(years=amount)
    if unit == "Q":
        return relativedelta(months=3 * amount)
    if unit == "M":
        return relativedelta(months=amount)
    if unit == "w":
        return relativedelta(weeks=amount)
    return relativedelta(days=amount)


def _absolute_delta(amount: int, unit: str) -> timedelta:
    if unit == "h":
        return timedelta(hours=amount)
    if unit == "m":
        return timedelta(minutes=amount)
    return timedelta(seconds=amount)


def shift(value: datetime, amount: int, unit: str, zone: tzinfo) -> datetime:
    """Move ``value`` by ``amount`` units"""
    if unit in ABSOLUTE_UNITS:
        moved = value.astimezone(timezone.utc) + _absolute_delta(amount, unit)
        return moved.astimezone(zone)

    wall = value.astimezone(zone).replace(tzinfo=None)
    return localize(zone, wall + _relativedelta(amount, unit))


def start_of(value: datetime, unit: str, zone: tzinfo, week_start: str = "sunday") -> datetime:
    wall = value.astimezone(zone).replace(tzinfo=None)

    if unit == "s":
        wall = wall.replace(microsecond=0)
    elif unit == "m":
        wall = wall.replace(second=0, microsecond=0)
    elif unit == "h":
        wall = wall.replace(minute=0, second=0, microsecond=0)
    else:
        wall = wall.replace(hour=0, minute=0, second=0, microsecond=0)
        if unit == "w":
            wall -= timedelta(days=(wall.weekday() - WEEK_STARTS[week_start]) % 7)
        elif unit == "M":
            wall = wall.replace(day=1)
        elif unit == "Q":
            wall = wall.replace(month=((wall.month - 1) // 3) * 3 + 1, day=1)
        elif unit == "y":
            wall = wall.replace(month=1, day=1)

    return localize(zone, wall)


def end_of(value: datetime, unit: str, zone: tzinfo, week_start: str = "sunday") -> datetime:
    """Last millisecond of the unit containing ``value``"""
    next_start = shift(start_of(value, unit, zone, week_start), 1, unit, zone)
    return (next_start.astimezone(timezone.utc) - timedelta(milliseconds=1)).astimezone(zone)


def round_to_fiscal(
    fiscal_year_start_month: int,
    value: datetime,
    unit: str,
    round_up: bool,
    zone: tzinfo
) -> datetime:
    """Round to the start (or end) of the fiscal year or quarter"""
    if unit == "y":
        if round_up:
            start = round_to_fiscal(fiscal_year_start_month, value, unit, False, zone)
            return end_of(shift(start, 11, "M", zone), "M", zone)
        month = value.astimezone(zone).month - 1
        back = (month - fiscal_year_start_month + 12) % 12
        return start_of(shift(value, -back, "M", zone), "M", zone)

    if unit == "Q":
        if round_up:
            start = round_to_fiscal(fiscal_year_start_month, value, unit, False, zone)
            return end_of(shift(start, 2, "M", zone), "M", zone)
        month = value.astimezone(zone).month - 1
        back = (month - fiscal_year_start_month + 3) % 3
        return start_of(shift(value, -back, "M", zone), "M", zone)

    return value


def parse_date_math(
    math_string: str,
    time: datetime,
    round_up: bool = False,
    fiscal_year_start_month: int = 0,
    zone: tzinfo = timezone.utc,
    week_start: str = "sunday"
) -> Optional[datetime]:
    """
    Apply the math part of an expression (everything after the anchor).

    Returns:
        The resulting instant, or None when any step is malformed
    """
    stripped = _WHITESPACE.sub("", math_string)
    length = len(stripped)
    result = time
    i = 0

    while i < length:
        char = stripped[i]
        i += 1

        if char == "/":
            operation = "round"
        elif char == "+":
            operation = "add"
        elif char == "-":
            operation = "subtract"
        else:
            return None

        if i >= length or stripped[i] not in _DIGITS:
            amount = 1
        else:
            digits_from = i
            while i < length and stripped[i] in _DIGITS:
                i += 1
                if i > MAX_MATH_DIGIT_INDEX:
                    return None
            amount = int(stripped[digits_from:i])

        if operation == "round" and amount != 1:
            return None

        unit = stripped[i] if i < length else ""
        is_fiscal = False
        if unit == "f":
            i += 1
            unit = stripped[i] if i < length else ""
            is_fiscal = True

        if unit not in UNITS:
            return None

        if operation == "round":
            if is_fiscal:
                result = round_to_fiscal(fiscal_year_start_month, result, unit, round_up, zone)
            elif round_up:
                result = end_of(result, unit, zone, week_start)
            else:
                result = start_of(result, unit, zone, week_start)
        elif operation == "add":
            result = shift(result, amount, unit, zone)
        else:
            result = shift(result, -amount, unit, zone)
        i += 1

    return result


def parse_iso(value: str, zone: tzinfo) -> Optional[datetime]:
    try:
        parsed = dateutil_parser.isoparse(value)
    except (ValueError, OverflowError):
        return None
    return to_zone(parsed, zone)


def parse(
    text: object,
    round_up: bool = False,
    zone: tzinfo = timezone.utc,
    fiscal_year_start_month: int = 0,
    now: Optional[datetime] = None,
    week_start: str = "sunday"
) -> Optional[datetime]:
    """
    Resolve an expression or instant.

    Args:
        text: "now..." expression, "<iso>||<math>" expression, ISO string or datetime
        round_up: Round to the end of units instead of the start
        zone: Zone that calendar math and rounding happen in
        fiscal_year_start_month: 0-based first month of the fiscal year
        now: Reference instant for "now" (defaults to the current time)
        week_start: First day of the week for "/w" rounding

    Returns:
        An aware datetime, or None if the input cannot be resolved
    """
    if not text:
        return None

    if isinstance(text, datetime):
        return to_zone(text, zone)

    if not isinstance(text, str):
        return None

    if text[:3] == "now":
        time = now_in(zone, now)
        math_string = text[3:]
    else:
        index = text.find("||")
        if index == -1:
            parse_string = text
            math_string = ""
        else:
            parse_string = text[:index]
            math_string = text[index + 2:]

        time = parse_iso(parse_string, zone)
        if time is None:
            return None

    if not math_string:
        return time

    return parse_date_math(math_string, time, round_up, fiscal_year_start_month, zone, week_start)


def parse_absolute(value: str, zone: tzinfo) -> Optional[datetime]:
    """Parse a free-form absolute date-time string, read in ``zone`` when naive"""
    try:
        parsed = dateutil_parser.parse(value)
    except (ValueError, OverflowError) as e:
        logger.warning("Unparseable absolute time", value=value, error=str(e))
        return None
    return to_zone(parsed, zone)
