"""
Expression Describer - Human labels for relative time expressions

Handles expressions like:
- "5m"      -> now-5m to now      -> "Last 5 minutes"
- "+5m"     -> now to now+5m      -> "Next 5 minutes"
- "now/d"   -> now/d to now       -> "Today so far"
- "now-3d"  -> now-3d to now      -> "Last 3 days"

Preset labels win over decomposition. Anything that neither matches a
preset nor tokenizes as now<sign><amount><unit> comes back as an
UnparseableRange.
"""

from dataclasses import dataclass
from typing import Optional

import structlog

from rangekit.ranges.models import DescribedRange, TextRangeDescription, UnparseableRange
from rangekit.ranges.presets import SECTION_LONG, SECTION_SHORT, lookup_preset

logger = structlog.get_logger(__name__)


NOW = "now"

# Case-sensitive: "m" is minutes, "M" is months
UNIT_NAMES = {
    "s": "second",
    "m": "minute",
    "h": "hour",
    "d": "day",
    "w": "week",
    "M": "month",
    "y": "year",
}

UNIT_SECTIONS = {
    "s": SECTION_SHORT,
    "m": SECTION_SHORT,
    "h": SECTION_SHORT,
    "d": SECTION_LONG,
    "w": SECTION_LONG,
    "M": SECTION_LONG,
    "y": SECTION_LONG,
}


@dataclass(frozen=True)
class OffsetToken:
    """The leading now<sign><amount><unit> of an expression"""
    sign: str
    amount: int
    unit: str


def tokenize_offset(expr: str) -> Optional[OffsetToken]:
    """
    Read "now", a sign, an integer and a unit letter from the start of expr.

    Anything after the unit letter (such as a "/d" rounding suffix) is
    ignored. Returns None if any part is missing or the unit is unknown.
    """
    if not expr.startswith(NOW):
        return None

    position = len(NOW)
    if position >= len(expr) or expr[position] not in "+-":
        return None
    sign = expr[position]
    position += 1

    digits_from = position
    while position < len(expr) and expr[position].isascii() and expr[position].isdigit():
        position += 1
    if position == digits_from:
        return None
    amount = int(expr[digits_from:position])

    if position >= len(expr):
        return None
    unit = expr[position]
    if unit not in UNIT_NAMES:
        return None

    return OffsetToken(sign=sign, amount=amount, unit=unit)


def describe_text_range(expr: str) -> TextRangeDescription:
    """
    Describe a relative expression.

    Args:
        expr: Bare duration ("5m", "+5m") or a now-expression ("now-5m", "now/d")

    Returns:
        DescribedRange, or UnparseableRange when the expression cannot be
        decomposed
    """
    is_last = not expr.startswith("+")
    if NOW not in expr:
        expr = ("now-" if is_last else NOW) + expr

    if is_last:
        start, end = expr, NOW
    else:
        start, end = NOW, expr

    option = lookup_preset(start, end)
    if option:
        return DescribedRange(start=option.start, end=option.end, display=option.display,
                              section=option.section)

    token = tokenize_offset(expr)
    if token is None:
        logger.debug("Unparseable time expression", expr=expr)
        return UnparseableRange(start=start, end=end)

    display = ("Last " if is_last else "Next ") + f"{token.amount} {UNIT_NAMES[token.unit]}"
    if token.amount > 1:
        display += "s"

    return DescribedRange(start=start, end=end, display=display, section=UNIT_SECTIONS[token.unit])
