"""
Time range exceptions

Domain errors raised by the range engine. The HTTP layer maps them onto
validation responses via rangekit.utils.errors.
"""

from typing import Iterable, Optional


class TimeRangeError(ValueError):
    """Base class for range engine errors"""


class InvalidIntervalError(TimeRangeError):
    """Raised when a duration string cannot be parsed"""

    def __init__(self, value: str, units: Iterable[str]):
        self.value = value
        self.units = tuple(units)
        super().__init__(
            "Invalid interval string, has to be either unit-less or end with one of "
            f'the following units: "{", ".join(self.units)}"'
        )


class InvalidResolutionError(TimeRangeError):
    """Raised when an interval is requested for a non-positive resolution"""

    def __init__(self, resolution: Optional[float]):
        self.resolution = resolution
        super().__init__(f"Resolution must be a positive number, got {resolution!r}")
