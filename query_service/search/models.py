"""
Data models for log search requests, Quickwit queries and responses
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class SearchRequest(BaseModel):
    """Client log search request"""

    query: str = Field(description="Query string in Quickwit (Lucene-like) syntax")
    filters: Dict[str, str] = Field(
        default_factory=dict,
        description="Field filters ANDed into the query (field -> value)",
    )
    time_range_type: str = Field(
        default="absolute", description="Time range mode: 'relative' or 'absolute'"
    )
    relative_time_key: Optional[str] = Field(
        default=None,
        description="Relative window (1m, 5m, 15m, 1h, 4h, 1d, 7d, 30d) for relative mode",
    )
    start_time: Optional[datetime] = Field(
        default=None, description="Inclusive start (absolute mode)"
    )
    end_time: Optional[datetime] = Field(
        default=None, description="Exclusive end (absolute mode)"
    )
    page: int = Field(default=1, description="1-based page number")
    page_size: int = Field(default=50, description="Hits per page (1-1000)")
    sort_by: str = Field(default="timestamp", description="Field to sort on")
    sort_desc: bool = Field(default=True, description="Newest first when true")

    @field_validator("start_time", "end_time")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # Naive datetimes are taken as UTC so bounds stay comparable
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class ResolvedTimeRange(BaseModel):
    """Concrete [start, end) window computed once per request"""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    @model_validator(mode="after")
    def _check_order(self) -> "ResolvedTimeRange":
        if self.start >= self.end:
            raise ValueError("start must be before end")
        return self

    @property
    def start_timestamp(self) -> int:
        return int(self.start.timestamp())

    @property
    def end_timestamp(self) -> int:
        return int(self.end.timestamp())


class BackendQuery(BaseModel):
    """JSON body for the Quickwit search endpoint"""

    query: str
    start_timestamp: int = Field(description="Epoch seconds")
    end_timestamp: int = Field(description="Epoch seconds")
    max_hits: int
    start_offset: Optional[int] = None
    sort_by: Optional[str] = Field(
        default=None,
        description="Bare field sorts newest first, '-field' oldest first",
    )
    aggs: Optional[Dict[str, Any]] = None

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class LogHit(BaseModel):
    """Single normalized log record"""

    timestamp: datetime
    message: str
    level: str
    service: str
    host: Optional[str] = None
    env: str
    trace_id: Optional[str] = None
    span_id: Optional[str] = None
    stack_trace: Optional[str] = None
    labels: Optional[Any] = None


class SearchResponse(BaseModel):
    """Search results for one page"""

    total: int = Field(description="Hit count reported by the backend")
    hits: List[LogHit] = Field(description="Hits that parsed successfully")
    page: int
    page_size: int
    took_ms: int = Field(description="Backend round trip in milliseconds")


class ServicesResponse(BaseModel):
    """Distinct services seen in recent logs"""

    services: List[str]


class FieldsResponse(BaseModel):
    """Searchable log fields"""

    fields: List[str]
