"""
Preset Tables - Canonical quick ranges and their display labels

Two tables share one lookup index keyed by "<from> to <to>":
- RANGE_OPTIONS: presets offered to users (calendar, relative, fiscal)
- HIDDEN_RANGE_OPTIONS: forward-looking "next N" ranges; resolvable but
  never offered as choices

Sections group presets for pickers:
0 = last days and longer, 1 = previous periods, 2 = current periods,
3 = last minutes and hours.
"""

from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple

from rangekit.ranges.models import TimeOption


SECTION_LONG = 0
SECTION_PREVIOUS = 1
SECTION_CURRENT = 2
SECTION_SHORT = 3


RANGE_OPTIONS: Tuple[TimeOption, ...] = (
    TimeOption("now/d", "now/d", "Today", SECTION_CURRENT),
    TimeOption("now/d", "now", "Today so far", SECTION_CURRENT),
    TimeOption("now/w", "now/w", "This week", SECTION_CURRENT),
    TimeOption("now/w", "now", "This week so far", SECTION_CURRENT),
    TimeOption("now/M", "now/M", "This month", SECTION_CURRENT),
    TimeOption("now/M", "now", "This month so far", SECTION_CURRENT),
    TimeOption("now/y", "now/y", "This year", SECTION_CURRENT),
    TimeOption("now/y", "now", "This year so far", SECTION_CURRENT),

    TimeOption("now-1d/d", "now-1d/d", "Yesterday", SECTION_PREVIOUS),
    TimeOption("now-2d/d", "now-2d/d", "Day before yesterday", SECTION_PREVIOUS),
    TimeOption("now-7d/d", "now-7d/d", "This day last week", SECTION_PREVIOUS),
    TimeOption("now-1w/w", "now-1w/w", "Previous week", SECTION_PREVIOUS),
    TimeOption("now-1M/M", "now-1M/M", "Previous month", SECTION_PREVIOUS),
    TimeOption("now-1Q/fQ", "now-1Q/fQ", "Previous fiscal quarter", SECTION_PREVIOUS),
    TimeOption("now-1y/y", "now-1y/y", "Previous year", SECTION_PREVIOUS),
    TimeOption("now-1y/fy", "now-1y/fy", "Previous fiscal year", SECTION_PREVIOUS),

    TimeOption("now-5m", "now", "Last 5 minutes", SECTION_SHORT),
    TimeOption("now-15m", "now", "Last 15 minutes", SECTION_SHORT),
    TimeOption("now-30m", "now", "Last 30 minutes", SECTION_SHORT),
    TimeOption("now-1h", "now", "Last 1 hour", SECTION_SHORT),
    TimeOption("now-3h", "now", "Last 3 hours", SECTION_SHORT),
    TimeOption("now-6h", "now", "Last 6 hours", SECTION_SHORT),
    TimeOption("now-12h", "now", "Last 12 hours", SECTION_SHORT),
    TimeOption("now-24h", "now", "Last 24 hours", SECTION_SHORT),
    TimeOption("now-2d", "now", "Last 2 days", SECTION_LONG),
    TimeOption("now-7d", "now", "Last 7 days", SECTION_LONG),
    TimeOption("now-30d", "now", "Last 30 days", SECTION_LONG),
    TimeOption("now-90d", "now", "Last 90 days", SECTION_LONG),
    TimeOption("now-6M", "now", "Last 6 months", SECTION_LONG),
    TimeOption("now-1y", "now", "Last 1 year", SECTION_LONG),
    TimeOption("now-2y", "now", "Last 2 years", SECTION_LONG),
    TimeOption("now-5y", "now", "Last 5 years", SECTION_LONG),
    TimeOption("now/fQ", "now", "This fiscal quarter so far", SECTION_CURRENT),
    TimeOption("now/fQ", "now/fQ", "This fiscal quarter", SECTION_CURRENT),
    TimeOption("now/fy", "now", "This fiscal year so far", SECTION_CURRENT),
    TimeOption("now/fy", "now/fy", "This fiscal year", SECTION_CURRENT),
)

HIDDEN_RANGE_OPTIONS: Tuple[TimeOption, ...] = (
    TimeOption("now", "now+1m", "Next minute"),
    TimeOption("now", "now+5m", "Next 5 minutes"),
    TimeOption("now", "now+15m", "Next 15 minutes"),
    TimeOption("now", "now+30m", "Next 30 minutes"),
    TimeOption("now", "now+1h", "Next hour"),
    TimeOption("now", "now+3h", "Next 3 hours"),
    TimeOption("now", "now+6h", "Next 6 hours"),
    TimeOption("now", "now+12h", "Next 12 hours"),
    TimeOption("now", "now+24h", "Next 24 hours"),
    TimeOption("now", "now+2d", "Next 2 days"),
    TimeOption("now", "now+7d", "Next 7 days"),
    TimeOption("now", "now+30d", "Next 30 days"),
    TimeOption("now", "now+90d", "Next 90 days"),
    TimeOption("now", "now+6M", "Next 6 months"),
    TimeOption("now", "now+1y", "Next year"),
    TimeOption("now", "now+2y", "Next 2 years"),
    TimeOption("now", "now+5y", "Next 5 years"),
)

RANGE_INDEX: Mapping[str, TimeOption] = MappingProxyType(
    {option.key(): option for option in RANGE_OPTIONS + HIDDEN_RANGE_OPTIONS}
)


def lookup_preset(start: object, end: object) -> Optional[TimeOption]:
    """Exact-string lookup of a preset by its two sides"""
    return RANGE_INDEX.get(f"{start} to {end}")


def list_range_options() -> List[TimeOption]:
    """Presets offered to users, in table order (hidden presets excluded)"""
    return list(RANGE_OPTIONS)
