"""
Translate validated search requests into Quickwit query payloads
"""
from typing import Dict

from .models import BackendQuery, ResolvedTimeRange, SearchRequest

MATCH_ALL = "*"


def build_query_string(query: str, filters: Dict[str, str]) -> str:
    """
    Join the free-text query and ``field:value`` filter clauses with AND.

    Filters keep the mapping's insertion order. Falls back to the match-all
    token when every part is empty.
    """
    parts = [query] + [f"{field}:{value}" for field, value in filters.items()]
    non_empty = [part for part in parts if part]
    if not non_empty:
        return MATCH_ALL
    return " AND ".join(non_empty)


def build_sort_field(sort_by: str, sort_desc: bool) -> str:
    """
    Encode sort direction for Quickwit.

    Quickwit reads the marker the other way round: a bare field returns newest
    first and ``-field`` returns oldest first.
    """
    if sort_desc:
        return sort_by
    return f"-{sort_by}"


def build_backend_query(
    request: SearchRequest, time_range: ResolvedTimeRange
) -> BackendQuery:
    """Build the search payload for one page of results."""
    return BackendQuery(
        query=build_query_string(request.query, request.filters),
        start_timestamp=time_range.start_timestamp,
        end_timestamp=time_range.end_timestamp,
        max_hits=request.page_size,
        start_offset=(request.page - 1) * request.page_size,
        sort_by=build_sort_field(request.sort_by, request.sort_desc),
    )


def build_services_aggregation_query(
    time_range: ResolvedTimeRange, size: int = 200
) -> BackendQuery:
    """Aggregation-only query: term buckets on the service field, no hits."""
    return BackendQuery(
        query=MATCH_ALL,
        start_timestamp=time_range.start_timestamp,
        end_timestamp=time_range.end_timestamp,
        max_hits=0,
        aggs={"services": {"terms": {"field": "service", "size": size}}},
    )
