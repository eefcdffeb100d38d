"""
FastAPI router for log search endpoints
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from query_service.core.exceptions import QueryServiceError

from .models import FieldsResponse, SearchRequest, SearchResponse, ServicesResponse
from .service import QuickwitClient, search_logs

logger = logging.getLogger(__name__)

router = APIRouter(tags=["search"])

SEARCHABLE_FIELDS = [
    "timestamp",
    "message",
    "level",
    "service",
    "host",
    "env",
    "trace_id",
    "span_id",
    "source_file",
    "line_number",
]


async def get_quickwit_client(request: Request) -> QuickwitClient:
    """Dependency returning the shared Quickwit client built at startup"""
    return request.app.state.quickwit


@router.post(
    "/search", response_model=SearchResponse, response_model_exclude_none=True
)
async def search(
    payload: SearchRequest,
    quickwit: QuickwitClient = Depends(get_quickwit_client),
):
    """
    Search logs.

    - `time_range_type="relative"` with `relative_time_key` in
      1m, 5m, 15m, 1h, 4h, 1d, 7d, 30d
    - `time_range_type="absolute"` with `start_time` < `end_time`
    - `filters` are ANDed into `query` as `field:value`
    - `sort_desc=true` returns newest first

    Errors carry `{"kind", "message"}`: 400 validation_error,
    502 backend_error, 500 parse_error.
    """
    try:
        return await search_logs(quickwit, payload)
    except QueryServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())


@router.get("/services", response_model=ServicesResponse)
async def list_services(quickwit: QuickwitClient = Depends(get_quickwit_client)):
    """Distinct service names seen in the last 24 hours, sorted"""
    try:
        services = await quickwit.list_services()
    except QueryServiceError as e:
        logger.error(f"Failed to list services: {e.message}")
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())
    return ServicesResponse(services=services)


@router.get("/fields", response_model=FieldsResponse)
async def get_fields():
    """Fields that can be used in queries and filters"""
    return FieldsResponse(fields=SEARCHABLE_FIELDS)
