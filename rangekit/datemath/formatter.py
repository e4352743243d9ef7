"""
Date formatting helpers used for range display strings
"""

from datetime import datetime, timezone, tzinfo
from typing import Optional

import humanize

from rangekit.datemath.timezones import to_zone

DEFAULT_DATE_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_datetime(value: datetime, zone: tzinfo, fmt: str = DEFAULT_DATE_TIME_FORMAT) -> str:
    return to_zone(value, zone).strftime(fmt)


def format_time_ago(value: datetime, zone: tzinfo, now: Optional[datetime] = None) -> str:
    """Relative description of ``value`` against ``now``, e.g. "an hour ago" """
    if now is None:
        now = datetime.now(timezone.utc)
    value_utc = to_zone(value, zone).astimezone(timezone.utc).replace(tzinfo=None)
    now_utc = to_zone(now, zone).astimezone(timezone.utc).replace(tzinfo=None)
    return humanize.naturaltime(value_utc, when=now_utc)


def timezone_abbreviation(value: datetime, zone: tzinfo) -> str:
    """Zone abbreviation in effect at ``value``, e.g. "UTC" or "CEST" """
    return to_zone(value, zone).tzname() or ""
