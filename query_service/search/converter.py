"""
Reshape raw Quickwit search responses into the client-facing schema
"""
import logging
from typing import Any, List, Optional

from pydantic import ValidationError

from query_service.core.exceptions import BackendParseError

from .models import LogHit, SearchRequest, SearchResponse

logger = logging.getLogger(__name__)

# Share of malformed rows on one page above which a warning is logged
ROW_FAILURE_WARNING_RATIO = 0.1


def read_total(payload: Any) -> int:
    """Backend hit count; absent or mistyped values count as zero."""
    if not isinstance(payload, dict):
        return 0
    value = payload.get("num_hits")
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return 0
    return value


def extract_hits(payload: Any) -> Optional[List[Any]]:
    if not isinstance(payload, dict):
        return None
    hits = payload.get("hits")
    return hits if isinstance(hits, list) else None


def convert_response(
    payload: Any, request: SearchRequest, took_ms: int
) -> SearchResponse:
    """
    Convert a Quickwit response into a SearchResponse.

    Rows are parsed independently; a row that fails validation is dropped and
    counted. The page still succeeds with whatever parsed.

    Raises:
        BackendParseError: when the response has no hits array at all
    """
    raw_hits = extract_hits(payload)
    if raw_hits is None:
        raise BackendParseError("Missing hits field")

    hits: List[LogHit] = []
    parse_errors = 0
    for raw_hit in raw_hits:
        try:
            hits.append(LogHit.model_validate(raw_hit))
        except ValidationError as e:
            parse_errors += 1
            logger.debug(f"Failed to parse hit: {e.errors()} raw={raw_hit!r}")

    if parse_errors and parse_errors / len(raw_hits) > ROW_FAILURE_WARNING_RATIO:
        logger.warning(f"{parse_errors} of {len(raw_hits)} hits failed to parse")

    return SearchResponse(
        total=read_total(payload),
        hits=hits,
        page=request.page,
        page_size=request.page_size,
        took_ms=took_ms,
    )
