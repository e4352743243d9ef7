"""
Time range API endpoints
Resolve, describe and validate ranges, and size query intervals for them.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
import pytz
import structlog

from rangekit.api.dependencies import get_app_settings
from rangekit.config.settings import Settings
from rangekit.datemath import DateMath, get_date_math
from rangekit.models.schemas import (
    DescribeRangeRequest,
    DescribeRangeResponse,
    ErrorResponse,
    IntervalDescriptionResponse,
    IntervalRequest,
    IntervalResponse,
    RelativeRangeResponse,
    ResolveRangeRequest,
    ResolvedRangeResponse,
    TextRangeResponse,
    TimeOptionList,
    TimeOptionResponse,
    ToAbsoluteRequest,
    ToRelativeRequest,
    ValidateTimeSpanResponse,
)
from rangekit.ranges import (
    RelativeTimeRange,
    TimeRange,
    TimeRangeError,
    calculate_interval,
    convert_raw_to_range,
    describe_interval,
    describe_text_range,
    describe_time_range,
    describe_time_range_abbreviation,
    interval_to_ms,
    interval_to_seconds,
    is_fiscal,
    is_relative_time_range,
    is_valid_time_span,
    list_range_options,
    relative_to_time_range,
    time_range_to_relative,
)
from rangekit.utils.errors import (
    ErrorCode,
    raise_time_range_error,
    raise_unknown_timezone,
    raise_validation_error,
)

router = APIRouter()
logger = structlog.get_logger(__name__)

# Body of the 400s raised through rangekit.utils.errors
ERROR_RESPONSES = {400: {"model": ErrorResponse, "description": "Invalid range, interval or time zone"}}


def _request_now(request) -> datetime:
    """The reference instant for a request, read from the clock at most once"""
    return request.now if request.now is not None else datetime.now(pytz.utc)


def _resolve(
    request,
    date_math: DateMath,
    now: datetime,
    fiscal_year_start_month: Optional[int] = None
) -> TimeRange:
    """Resolve a request's raw range, translating unknown zones into 400s"""
    try:
        return convert_raw_to_range(
            request.to_raw(),
            request.time_zone,
            fiscal_year_start_month,
            now=now,
            date_math=date_math,
        )
    except pytz.UnknownTimeZoneError:
        raise_unknown_timezone(request.time_zone)


def _require_instants(time_range: TimeRange) -> None:
    if time_range.start is None or time_range.end is None:
        raise_validation_error(
            "Both sides of the range must resolve to an instant.",
            "from" if time_range.start is None else "to",
            ErrorCode.INVALID_TIME_RANGE,
        )


@router.post("/ranges/resolve", response_model=ResolvedRangeResponse, responses=ERROR_RESPONSES)
async def resolve_range(
    request: ResolveRangeRequest,
    date_math: DateMath = Depends(get_date_math)
) -> ResolvedRangeResponse:
    """Resolve a raw range to instants, with its display label and flags"""
    now = _request_now(request)
    time_range = _resolve(request, date_math, now, request.fiscal_year_start_month)
    raw = request.to_raw()

    display = describe_time_range(raw, request.time_zone, now=now, date_math=date_math)
    abbreviation = describe_time_range_abbreviation(
        time_range, request.time_zone, now=now, date_math=date_math
    )

    logger.info(
        "Resolved time range",
        raw=raw.to_dict(),
        start=time_range.start.isoformat() if time_range.start else None,
        end=time_range.end.isoformat() if time_range.end else None,
    )

    return ResolvedRangeResponse(
        from_=time_range.start,
        to=time_range.end,
        raw=time_range.raw.to_dict(),
        display=display,
        is_relative=is_relative_time_range(raw),
        is_fiscal=is_fiscal(time_range),
        time_zone_abbreviation=abbreviation,
    )


@router.post("/ranges/describe", response_model=DescribeRangeResponse, responses=ERROR_RESPONSES)
async def describe_range(
    request: DescribeRangeRequest,
    date_math: DateMath = Depends(get_date_math)
) -> DescribeRangeResponse:
    """Display label for a raw range, e.g. "Last 6 hours" """
    try:
        display = describe_time_range(
            request.to_raw(), request.time_zone, now=_request_now(request), date_math=date_math
        )
    except pytz.UnknownTimeZoneError:
        raise_unknown_timezone(request.time_zone)

    return DescribeRangeResponse(display=display)


@router.get("/ranges/describe-text", response_model=TextRangeResponse)
async def describe_text(
    expr: str = Query(..., min_length=1, description='Expression such as "5m", "+1h" or "now/d"')
) -> TextRangeResponse:
    """Describe a single relative expression"""
    info = describe_text_range(expr)
    return TextRangeResponse(
        from_=info.start,
        to=info.end,
        display=info.display,
        section=info.section,
        invalid=info.invalid,
    )


@router.get("/ranges/validate", response_model=ValidateTimeSpanResponse)
async def validate_time_span(
    value: str = Query(..., min_length=1, description="Duration entered by a user")
) -> ValidateTimeSpanResponse:
    """Check a user-entered duration"""
    return ValidateTimeSpanResponse(value=value, valid=is_valid_time_span(value))


@router.get("/ranges/options", response_model=TimeOptionList)
async def range_options() -> TimeOptionList:
    """Presets offered by range pickers"""
    return TimeOptionList(options=[
        TimeOptionResponse(from_=option.start, to=option.end, display=option.display, section=option.section)
        for option in list_range_options()
    ])


@router.post("/ranges/interval", response_model=IntervalResponse, responses=ERROR_RESPONSES)
async def range_interval(
    request: IntervalRequest,
    date_math: DateMath = Depends(get_date_math),
    settings: Settings = Depends(get_app_settings)
) -> IntervalResponse:
    """Query step for a range at the requested resolution"""
    time_range = _resolve(request, date_math, _request_now(request))
    _require_instants(time_range)

    resolution = request.resolution or settings.default_resolution
    try:
        values = calculate_interval(time_range, resolution, request.min_interval)
    except TimeRangeError as e:
        raise_time_range_error(e, "min_interval")

    return IntervalResponse(interval_ms=values.interval_ms, interval=values.interval, resolution=resolution)


@router.get("/intervals/{value}", response_model=IntervalDescriptionResponse, responses=ERROR_RESPONSES)
async def describe_interval_value(value: str) -> IntervalDescriptionResponse:
    """Parse a duration string such as "5m" or "250ms" """
    try:
        info = describe_interval(value)
        seconds = interval_to_seconds(value)
        ms = interval_to_ms(value)
    except TimeRangeError as e:
        raise_time_range_error(e, "value")

    return IntervalDescriptionResponse(
        value=value,
        sec=info.sec,
        type=info.type,
        count=info.count,
        seconds=seconds,
        ms=ms,
    )


@router.post("/ranges/to-relative", response_model=RelativeRangeResponse, responses=ERROR_RESPONSES)
async def to_relative(
    request: ToRelativeRequest,
    date_math: DateMath = Depends(get_date_math)
) -> RelativeRangeResponse:
    """Express a range as seconds before now"""
    now = _request_now(request)
    time_range = _resolve(request, date_math, now)
    _require_instants(time_range)

    relative = time_range_to_relative(time_range, now=now)
    return RelativeRangeResponse(from_=relative.start, to=relative.end)


@router.post("/ranges/to-absolute", response_model=ResolvedRangeResponse)
async def to_absolute(request: ToAbsoluteRequest) -> ResolvedRangeResponse:
    """Anchor second offsets at now"""
    time_range = relative_to_time_range(RelativeTimeRange(start=request.from_, end=request.to), now=request.now)
    return ResolvedRangeResponse(
        from_=time_range.start,
        to=time_range.end,
        raw=time_range.raw.to_dict(),
    )
