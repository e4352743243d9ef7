"""
Relative/Absolute Converter

Alert rules store query ranges as offsets in seconds before evaluation
time. These helpers translate between that form and resolved ranges.
"""

from datetime import datetime, timedelta
from typing import Optional

import pytz

from rangekit.ranges.models import RawTimeRange, RelativeTimeRange, TimeRange


def _reference_now(now: Optional[datetime]) -> datetime:
    return now if now is not None else datetime.now(pytz.utc)


def time_range_to_relative(time_range: TimeRange, now: Optional[datetime] = None) -> RelativeTimeRange:
    """
    Express a resolved range as seconds before ``now``.

    Offsets keep microsecond precision, so converting back with the same
    ``now`` reproduces the range. Ranges reaching into the future give
    negative offsets.
    """
    now = _reference_now(now)
    return RelativeTimeRange(
        start=(now - time_range.start).total_seconds(),
        end=(now - time_range.end).total_seconds(),
    )


def relative_to_time_range(relative: RelativeTimeRange, now: Optional[datetime] = None) -> TimeRange:
    """Anchor second offsets at ``now``; an end offset of 0 is ``now`` itself"""
    now = _reference_now(now)

    start = now - timedelta(seconds=relative.start)
    end = now if relative.end == 0 else now - timedelta(seconds=relative.end)

    return TimeRange(start=start, end=end, raw=RawTimeRange(start=start, end=end))
