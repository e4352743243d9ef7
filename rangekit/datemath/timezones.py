"""
Time zone helpers for date math

Zone names follow the picker conventions:
- None, "" or "browser" -> the host's local zone
- "utc" -> UTC
- anything else -> an IANA zone name resolved through pytz
"""

from datetime import datetime, timezone, tzinfo
from typing import Optional

import pytz
from dateutil.tz import tzlocal

BROWSER_TIMEZONE = "browser"
UTC_TIMEZONE = "utc"


def resolve_timezone(name: Optional[str]) -> tzinfo:
    """
    Resolve a zone name to a tzinfo.

    Raises:
        pytz.UnknownTimeZoneError: for names pytz does not know
    """
    if not name or name.lower() == BROWSER_TIMEZONE:
        return tzlocal()
    if name.lower() == UTC_TIMEZONE:
        return pytz.utc
    return pytz.timezone(name)


def localize(zone: tzinfo, naive: datetime) -> datetime:
    """Attach a zone to a wall-clock datetime"""
    if hasattr(zone, "localize"):
        return zone.localize(naive)
    return naive.replace(tzinfo=zone)


def to_zone(value: datetime, zone: tzinfo) -> datetime:
    """Express an instant in ``zone``; naive values are read as wall time in it"""
    if value.tzinfo is None:
        return localize(zone, value)
    return value.astimezone(zone)


def now_in(zone: tzinfo, now: Optional[datetime] = None) -> datetime:
    """The reference instant expressed in ``zone``"""
    if now is None:
        now = datetime.now(timezone.utc)
    return to_zone(now, zone)
