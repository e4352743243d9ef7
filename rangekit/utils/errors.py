"""
Centralized Error Handling Utilities

Provides user-friendly error messages and consistent error response format.
"""

from typing import Optional, Dict, Any
from enum import Enum
import structlog
from fastapi import HTTPException, status

from rangekit.ranges.exceptions import InvalidIntervalError, InvalidResolutionError, TimeRangeError

logger = structlog.get_logger(__name__)


class ErrorCode(str, Enum):
    """Standard error codes for consistent API responses"""
    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Range engine errors
    INVALID_INTERVAL = "INVALID_INTERVAL"
    INVALID_RESOLUTION = "INVALID_RESOLUTION"
    INVALID_TIME_RANGE = "INVALID_TIME_RANGE"
    UNKNOWN_TIMEZONE = "UNKNOWN_TIMEZONE"


# User-friendly error messages (do not expose internal details)
USER_FRIENDLY_MESSAGES = {
    ErrorCode.INTERNAL_ERROR: "An unexpected error occurred. Please try again later.",
    ErrorCode.VALIDATION_ERROR: "The request contains invalid data. Please check your input.",

    ErrorCode.INVALID_INTERVAL: "The interval could not be parsed.",
    ErrorCode.INVALID_RESOLUTION: "Resolution must be a positive number of data points.",
    ErrorCode.INVALID_TIME_RANGE: "The time range could not be resolved.",
    ErrorCode.UNKNOWN_TIMEZONE: "The time zone is not recognized.",
}


def create_error_response(
    code: ErrorCode,
    message: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Create a standardized error response.

    Args:
        code: Error code enum
        message: Optional custom message (defaults to user-friendly message)
        details: Optional additional details (be careful not to expose sensitive info)

    Returns:
        Standardized error response dict
    """
    return {
        "error": {
            "code": code.value,
            "message": message or USER_FRIENDLY_MESSAGES.get(code, USER_FRIENDLY_MESSAGES[ErrorCode.INTERNAL_ERROR]),
            **({"details": details} if details else {}),
        }
    }


def raise_validation_error(
    message: str,
    field: Optional[str] = None,
    code: ErrorCode = ErrorCode.VALIDATION_ERROR,
) -> None:
    """
    Raise a 400 Validation error with user-friendly message.

    Args:
        message: Description of what's invalid
        field: Optional field name that has the error
        code: Error code to report (defaults to VALIDATION_ERROR)
    """
    details = {"field": field} if field else None

    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=create_error_response(code, message, details),
    )


def raise_time_range_error(
    exception: TimeRangeError,
    field: Optional[str] = None,
) -> None:
    """
    Translate a range engine error into a 400 response.

    The engine's messages name the offending value and the accepted units,
    so they are safe to pass through to the caller.

    Args:
        exception: Error raised by the range engine
        field: Optional request field the value came from
    """
    if isinstance(exception, InvalidIntervalError):
        code = ErrorCode.INVALID_INTERVAL
    elif isinstance(exception, InvalidResolutionError):
        code = ErrorCode.INVALID_RESOLUTION
    else:
        code = ErrorCode.INVALID_TIME_RANGE

    logger.info("Rejected time range request", code=code.value, error=str(exception))
    raise_validation_error(str(exception), field, code)


def raise_unknown_timezone(time_zone: str) -> None:
    """Raise a 400 error for a zone name pytz does not know"""
    raise_validation_error(
        f"Unknown time zone '{time_zone}'.",
        "time_zone",
        ErrorCode.UNKNOWN_TIMEZONE,
    )
