"""Date math collaborator: expression parsing, zones and formatting"""

from rangekit.datemath.parser import is_math_string, parse, parse_date_math
from rangekit.datemath.service import DateMath, clear_date_math_cache, get_date_math
from rangekit.datemath.timezones import resolve_timezone

__all__ = [
    "DateMath",
    "get_date_math",
    "clear_date_math_cache",
    "is_math_string",
    "parse",
    "parse_date_math",
    "resolve_timezone",
]
