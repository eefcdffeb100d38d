"""
Structural validation of search requests
"""
from query_service.core.exceptions import RequestValidationFailed

from .models import SearchRequest

MAX_PAGE_SIZE = 1000

# Keep in sync with RELATIVE_TIME_WINDOWS in time_range.py
RELATIVE_TIME_KEYS = frozenset({"1m", "5m", "15m", "1h", "4h", "1d", "7d", "30d"})


def validate_search_request(request: SearchRequest) -> None:
    """
    Check pagination bounds and time range consistency.

    Raises:
        RequestValidationFailed: describing the first violation found
    """
    if request.page < 1:
        raise RequestValidationFailed("page must be >= 1")
    if request.page_size < 1 or request.page_size > MAX_PAGE_SIZE:
        raise RequestValidationFailed(
            f"page_size must be between 1 and {MAX_PAGE_SIZE}"
        )

    if request.time_range_type == "relative":
        if not request.relative_time_key:
            raise RequestValidationFailed(
                "relative_time_key is required when time_range_type is 'relative'"
            )
        if request.relative_time_key not in RELATIVE_TIME_KEYS:
            raise RequestValidationFailed(
                f"invalid relative_time_key: {request.relative_time_key}"
            )
    elif request.time_range_type == "absolute":
        if request.start_time is None or request.end_time is None:
            raise RequestValidationFailed(
                "start_time and end_time are required when time_range_type is 'absolute'"
            )
        if request.start_time >= request.end_time:
            raise RequestValidationFailed("start_time must be before end_time")
    else:
        raise RequestValidationFailed(
            f"invalid time_range_type: {request.time_range_type}"
        )
