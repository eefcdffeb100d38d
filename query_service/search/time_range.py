"""
Resolve a request's time specification into a concrete window
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

from query_service.core.exceptions import TimeRangeResolutionError

from .models import ResolvedTimeRange, SearchRequest

RELATIVE_TIME_WINDOWS = {
    "1m": timedelta(minutes=1),
    "5m": timedelta(minutes=5),
    "15m": timedelta(minutes=15),
    "1h": timedelta(hours=1),
    "4h": timedelta(hours=4),
    "1d": timedelta(days=1),
    "7d": timedelta(days=7),
    "30d": timedelta(days=30),
}


def trailing_window(duration: timedelta, now: Optional[datetime] = None) -> ResolvedTimeRange:
    """Window of the given length ending at now."""
    end = now or datetime.now(timezone.utc)
    return ResolvedTimeRange(start=end - duration, end=end)


def resolve_time_range(
    request: SearchRequest, now: Optional[datetime] = None
) -> ResolvedTimeRange:
    """
    Compute the [start, end) window for a validated request.

    Relative keys end at ``now`` (captured once); absolute bounds pass through.

    Raises:
        TimeRangeResolutionError: unknown key or mode, i.e. validation was skipped
    """
    if request.time_range_type == "relative":
        window = RELATIVE_TIME_WINDOWS.get(request.relative_time_key or "")
        if window is None:
            raise TimeRangeResolutionError(
                f"unknown relative_time_key: {request.relative_time_key}"
            )
        return trailing_window(window, now)

    if request.time_range_type == "absolute":
        if request.start_time is None or request.end_time is None:
            raise TimeRangeResolutionError("missing start_time or end_time")
        try:
            return ResolvedTimeRange(start=request.start_time, end=request.end_time)
        except ValueError as e:
            raise TimeRangeResolutionError(str(e)) from e

    raise TimeRangeResolutionError(
        f"unknown time_range_type: {request.time_range_type}"
    )
