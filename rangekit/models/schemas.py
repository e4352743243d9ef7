"""
Pydantic models for API request/response schemas and data validation
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union, Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator

from rangekit.ranges.models import RawTimeRange

# Instants are tried first so ISO strings arrive as datetimes; expressions
# such as "now-6h" fall through as strings
RawValueField = Union[datetime, str]


class RawRangeModel(BaseModel):
    """A raw range as sent by pickers and query editors"""
    from_: RawValueField = Field(..., alias="from", union_mode="left_to_right",
                                 description='Instant or expression, e.g. "now-6h"')
    to: RawValueField = Field(..., union_mode="left_to_right",
                              description='Instant or expression, e.g. "now"')

    model_config = ConfigDict(populate_by_name=True)

    @field_validator('from_', 'to')
    @classmethod
    def validate_side(cls, v):
        if isinstance(v, str):
            if not v.strip():
                raise ValueError('Range side cannot be empty or whitespace only')
            return v.strip()
        return v

    def to_raw(self) -> RawTimeRange:
        return RawTimeRange(start=self.from_, end=self.to)


# Request Models
class ResolveRangeRequest(RawRangeModel):
    """Resolve a raw range into instants"""
    time_zone: Optional[str] = Field(None, description='"utc", "browser" or an IANA zone name')
    fiscal_year_start_month: Optional[int] = Field(None, ge=0, le=11, description="0 = January")
    now: Optional[datetime] = Field(None, description="Reference instant for relative expressions")


class DescribeRangeRequest(RawRangeModel):
    """Build a display label for a raw range"""
    time_zone: Optional[str] = None
    now: Optional[datetime] = None


class IntervalRequest(RawRangeModel):
    """Compute a query step for a range"""
    resolution: Optional[int] = Field(None, gt=0, description="Data points across the range")
    min_interval: Optional[str] = Field(None, description='Lower bound for the step, e.g. "1m"')
    time_zone: Optional[str] = None
    now: Optional[datetime] = None


class ToRelativeRequest(RawRangeModel):
    """Express a range as second offsets before now"""
    time_zone: Optional[str] = None
    now: Optional[datetime] = None


class ToAbsoluteRequest(BaseModel):
    """Anchor second offsets at now"""
    from_: float = Field(..., alias="from", description="Seconds before now at which the range starts")
    to: float = Field(..., description="Seconds before now at which the range ends; 0 is now")
    now: Optional[datetime] = None

    model_config = ConfigDict(populate_by_name=True)


# Response Models
class ResolvedRangeResponse(BaseModel):
    """A resolved range with its raw pair and display metadata"""
    from_: Optional[datetime] = Field(None, alias="from")
    to: Optional[datetime] = None
    raw: Dict[str, Any]
    display: Optional[str] = None
    is_relative: bool = False
    is_fiscal: bool = False
    time_zone_abbreviation: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class DescribeRangeResponse(BaseModel):
    """Display label for a range"""
    display: str


class TextRangeResponse(BaseModel):
    """Describer result for a single expression"""
    from_: str = Field(..., alias="from")
    to: str
    display: str
    section: Optional[int] = None
    invalid: bool = False

    model_config = ConfigDict(populate_by_name=True)


class TimeOptionResponse(BaseModel):
    """A preset offered by range pickers"""
    from_: str = Field(..., alias="from")
    to: str
    display: str
    section: Optional[int] = None

    model_config = ConfigDict(populate_by_name=True)


class ValidateTimeSpanResponse(BaseModel):
    """Validity of a user-entered duration"""
    value: str
    valid: bool


class IntervalResponse(BaseModel):
    """Computed query step"""
    interval_ms: float
    interval: str
    resolution: int


class IntervalDescriptionResponse(BaseModel):
    """A parsed duration string"""
    value: str
    sec: float
    type: str
    count: int
    seconds: float
    ms: float


class RelativeRangeResponse(BaseModel):
    """Second offsets before now"""
    from_: float = Field(..., alias="from")
    to: float

    model_config = ConfigDict(populate_by_name=True)


class HealthCheck(BaseModel):
    """Health check response"""
    status: Literal["healthy", "unhealthy", "degraded"]
    version: str
    timestamp: datetime
    services: Dict[str, Dict[str, Any]]
    uptime: float


class ErrorDetail(BaseModel):
    """Body of a standardized error"""
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None


class ErrorBody(BaseModel):
    """Standardized error built by rangekit.utils.errors.create_error_response"""
    error: ErrorDetail


class ErrorResponse(BaseModel):
    """Error response model; HTTPException wraps the body in "detail" """
    detail: ErrorBody


class TimeOptionList(BaseModel):
    """Presets in table order"""
    options: List[TimeOptionResponse]
