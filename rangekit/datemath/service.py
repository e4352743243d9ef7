"""
Date Math Service - Instant parsing and formatting collaborator

The range engine never resolves expressions itself; it calls a DateMath
instance. Callers can inject their own (for a different "now", zone or
fiscal calendar); get_date_math() returns the process default built from
settings.
"""

from datetime import datetime, timezone
from functools import lru_cache
from typing import Optional, Union

import structlog

from rangekit.config.settings import get_settings
from rangekit.datemath import formatter, parser
from rangekit.datemath.timezones import now_in, resolve_timezone, to_zone

logger = structlog.get_logger(__name__)

InstantInput = Union[datetime, str, int, float]


class DateMath:
    """Parse and format instants with a default zone and fiscal calendar"""

    def __init__(
        self,
        time_zone: Optional[str] = None,
        fiscal_year_start_month: int = 0,
        week_start: str = "sunday"
    ):
        if week_start not in parser.WEEK_STARTS:
            raise ValueError(f"week_start must be one of {sorted(parser.WEEK_STARTS)}")
        self.time_zone = time_zone
        self.fiscal_year_start_month = fiscal_year_start_month
        self.week_start = week_start

    def _zone(self, time_zone: Optional[str]):
        return resolve_timezone(time_zone if time_zone is not None else self.time_zone)

    def _fiscal(self, fiscal_year_start_month: Optional[int]) -> int:
        if fiscal_year_start_month is None:
            return self.fiscal_year_start_month
        return fiscal_year_start_month

    def is_math_string(self, text: object) -> bool:
        return parser.is_math_string(text)

    def parse(
        self,
        text: object,
        round_up: bool = False,
        time_zone: Optional[str] = None,
        fiscal_year_start_month: Optional[int] = None,
        now: Optional[datetime] = None
    ) -> Optional[datetime]:
        """Resolve an expression; None when it is not valid date math"""
        return parser.parse(
            text,
            round_up=round_up,
            zone=self._zone(time_zone),
            fiscal_year_start_month=self._fiscal(fiscal_year_start_month),
            now=now,
            week_start=self.week_start,
        )

    def is_valid(self, text: object, now: Optional[datetime] = None) -> bool:
        return self.parse(text, now=now) is not None

    def parse_instant(
        self,
        value: InstantInput,
        round_up: bool = False,
        time_zone: Optional[str] = None,
        fiscal_year_start_month: Optional[int] = None,
        now: Optional[datetime] = None
    ) -> Optional[datetime]:
        """
        Resolve one side of a raw range.

        Relative expressions that fail to parse fall back to the reference
        now. Absolute strings that fail to parse resolve to None. Numbers are
        epoch milliseconds.
        """
        zone = self._zone(time_zone)

        if isinstance(value, datetime):
            return to_zone(value, zone)

        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc).astimezone(zone)

        if isinstance(value, str):
            if "now" in value:
                parsed = self.parse(value, round_up, time_zone, fiscal_year_start_month, now)
                if parsed is None:
                    logger.warning("Invalid relative time, falling back to now", value=value)
                    return now_in(zone, now)
                return parsed
            return parser.parse_absolute(value, zone)

        return None

    def format(self, value: datetime, time_zone: Optional[str] = None,
               fmt: str = formatter.DEFAULT_DATE_TIME_FORMAT) -> str:
        return formatter.format_datetime(value, self._zone(time_zone), fmt)

    def format_time_ago(self, value: datetime, time_zone: Optional[str] = None,
                        now: Optional[datetime] = None) -> str:
        return formatter.format_time_ago(value, self._zone(time_zone), now)

    def timezone_abbreviation(self, value: datetime, time_zone: Optional[str] = None) -> str:
        return formatter.timezone_abbreviation(value, self._zone(time_zone))


@lru_cache()
def get_date_math() -> DateMath:
    """Process-wide DateMath configured from settings"""
    settings = get_settings()
    return DateMath(
        time_zone=settings.default_timezone,
        fiscal_year_start_month=settings.fiscal_year_start_month,
        week_start=settings.week_start,
    )


def clear_date_math_cache() -> None:
    """Drop the cached default so the next call re-reads settings (tests)"""
    get_date_math.cache_clear()
