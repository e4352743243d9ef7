"""
Range Models - Value objects shared by the range engine

All models are frozen: ranges are recomputed whenever they need to be
re-anchored to a new "now", never mutated in place.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Union

# An instant, or a relative/absolute expression that resolves to one
RawValue = Union[datetime, str]


def _serialize(value: Optional[RawValue]) -> Optional[str]:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


@dataclass(frozen=True)
class RawTimeRange:
    """A range as entered by the caller, each side an instant or an expression"""
    start: RawValue
    end: RawValue

    def key(self) -> str:
        """Preset index key for this pair"""
        return f"{self.start} to {self.end}"

    def to_dict(self) -> Dict[str, Any]:
        return {"from": _serialize(self.start), "to": _serialize(self.end)}


@dataclass(frozen=True)
class TimeRange:
    """A resolved range; ``raw`` keeps the expressions it was resolved from"""
    start: Optional[datetime]
    end: Optional[datetime]
    raw: RawTimeRange

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from": _serialize(self.start),
            "to": _serialize(self.end),
            "raw": self.raw.to_dict(),
        }


@dataclass(frozen=True)
class TimeOption:
    """A preset table entry"""
    start: str
    end: str
    display: str
    section: Optional[int] = None

    def key(self) -> str:
        return f"{self.start} to {self.end}"


@dataclass(frozen=True)
class DescribedRange:
    """An expression that matched a preset or decomposed into amount and unit"""
    start: str
    end: str
    display: str
    section: Optional[int] = None

    invalid = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from": self.start,
            "to": self.end,
            "display": self.display,
            "section": self.section,
            "invalid": self.invalid,
        }


@dataclass(frozen=True)
class UnparseableRange:
    """An expression the describer could not make sense of"""
    start: str
    end: str

    invalid = True
    section = None

    @property
    def display(self) -> str:
        return f"{self.start} to {self.end}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from": self.start,
            "to": self.end,
            "display": self.display,
            "section": None,
            "invalid": self.invalid,
        }


TextRangeDescription = Union[DescribedRange, UnparseableRange]


@dataclass(frozen=True)
class IntervalSpec:
    """A parsed duration: seconds per unit, unit letter and magnitude"""
    sec: float
    type: str
    count: int


@dataclass(frozen=True)
class IntervalValues:
    """A query step in milliseconds with its single-unit label"""
    interval_ms: float
    interval: str

    def to_dict(self) -> Dict[str, Any]:
        return {"interval_ms": self.interval_ms, "interval": self.interval}


@dataclass(frozen=True)
class RelativeTimeRange:
    """Offsets in seconds before a reference instant; ``end == 0`` is exactly now"""
    start: float
    end: float

    def to_dict(self) -> Dict[str, Any]:
        return {"from": self.start, "to": self.end}
