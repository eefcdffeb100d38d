"""
Quickwit search service: backend client, search pipeline and service enumeration
"""
import logging
import time
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

import httpx

from query_service.core.config import settings
from query_service.core.exceptions import BackendError

from .converter import convert_response
from .models import ResolvedTimeRange, SearchRequest, SearchResponse
from .query_builder import (
    MATCH_ALL,
    build_backend_query,
    build_services_aggregation_query,
)
from .time_range import resolve_time_range, trailing_window
from .validation import validate_search_request

logger = logging.getLogger(__name__)

# Known response shapes carrying the service term buckets, tried in order
_BUCKET_PATHS = (
    ("aggs", "services", "buckets"),
    ("aggregations", "services", "buckets"),
)


def extract_buckets(payload: Any) -> Optional[List[Any]]:
    """Return the service buckets from whichever known path is present."""
    for path in _BUCKET_PATHS:
        node = payload
        for key in path:
            node = node.get(key) if isinstance(node, dict) else None
        if isinstance(node, list):
            return node
    return None


class QuickwitClient:
    """
    Long-lived handle on one Quickwit index.

    Shared read-only across concurrent requests; the wrapped AsyncClient owns
    the connection pool.
    """

    def __init__(
        self,
        base_url: str,
        index_id: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
        services_lookback_hours: int = 24,
        services_aggregation_size: int = 200,
        services_scan_page_size: int = 500,
        services_scan_max_pages: int = 10,
    ):
        self.base_url = base_url.rstrip("/")
        self.index_id = index_id
        self.search_url = f"{self.base_url}/api/v1/{index_id}/search"
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self.services_lookback = timedelta(hours=services_lookback_hours)
        self.services_aggregation_size = services_aggregation_size
        self.services_scan_page_size = services_scan_page_size
        self.services_scan_max_pages = services_scan_max_pages

    @classmethod
    def from_settings(cls) -> "QuickwitClient":
        return cls(
            base_url=settings.QUICKWIT_URL,
            index_id=settings.QUICKWIT_INDEX_ID,
            timeout=settings.QUICKWIT_TIMEOUT_SECONDS,
            services_lookback_hours=settings.SERVICES_LOOKBACK_HOURS,
            services_aggregation_size=settings.SERVICES_AGGREGATION_SIZE,
            services_scan_page_size=settings.SERVICES_SCAN_PAGE_SIZE,
            services_scan_max_pages=settings.SERVICES_SCAN_MAX_PAGES,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _post_search(self, payload: Dict[str, Any]) -> Any:
        """POST a query to the index search endpoint and decode the JSON body."""
        logger.debug(f"Querying Quickwit: {self.search_url} with payload: {payload}")
        try:
            response = await self._client.post(self.search_url, json=payload)
        except httpx.TimeoutException as e:
            logger.error(f"Quickwit request timeout: {e}")
            raise BackendError("Request timeout - Quickwit did not respond") from e
        except httpx.HTTPError as e:
            logger.error(f"Quickwit request failed: {e}")
            raise BackendError(str(e) or e.__class__.__name__) from e

        if not response.is_success:
            logger.error(
                f"Quickwit returned HTTP {response.status_code}: {response.text[:300]}"
            )
            raise BackendError(
                response.text or f"Quickwit returned HTTP {response.status_code}"
            )

        try:
            return response.json()
        except ValueError as e:
            raise BackendError(f"Invalid JSON from Quickwit: {e}") from e

    async def search(
        self, request: SearchRequest, time_range: ResolvedTimeRange
    ) -> SearchResponse:
        """Run one page of a validated search over a resolved window."""
        query = build_backend_query(request, time_range)

        started = time.perf_counter()
        payload = await self._post_search(query.to_payload())
        took_ms = int((time.perf_counter() - started) * 1000)

        return convert_response(payload, request, took_ms)

    async def list_services(self, now: Optional[datetime] = None) -> List[str]:
        """
        Distinct service names over the trailing lookback window, sorted.

        Asks Quickwit for a terms aggregation first. Deployments that do not
        return buckets fall back to a bounded scan of ordinary search pages.
        """
        time_range = trailing_window(self.services_lookback, now)
        query = build_services_aggregation_query(
            time_range, size=self.services_aggregation_size
        )
        payload = await self._post_search(query.to_payload())

        buckets = extract_buckets(payload)
        if buckets is not None:
            keys = {
                bucket["key"]
                for bucket in buckets
                if isinstance(bucket, dict) and isinstance(bucket.get("key"), str)
            }
            return sorted(keys)

        logger.warning("Quickwit response missing aggregations; falling back to scan")
        return await self._scan_services(time_range)

    async def _scan_services(self, time_range: ResolvedTimeRange) -> List[str]:
        """
        Collect services page by page until a page is empty, the page cap is
        reached, or the backend total has been covered.

        Pages run sequentially; each stop check reads the previous page.
        """
        services: set[str] = set()
        page_size = self.services_scan_page_size
        page = 1
        has_more = True

        while has_more:
            request = SearchRequest(
                query=MATCH_ALL,
                time_range_type="absolute",
                start_time=time_range.start,
                end_time=time_range.end,
                page=page,
                page_size=page_size,
            )
            response = await self.search(request, time_range)
            if not response.hits:
                break

            services.update(hit.service for hit in response.hits)

            fetched = page * page_size
            has_more = page < self.services_scan_max_pages and fetched < response.total
            page += 1

        logger.info(f"Service scan collected {len(services)} services")
        return sorted(services)


async def search_logs(
    client: QuickwitClient, request: SearchRequest, now: Optional[datetime] = None
) -> SearchResponse:
    """
    Full search pipeline: validate, resolve the window once, query, convert.

    Raises:
        RequestValidationFailed: invalid client input (no backend call made)
        BackendError: Quickwit unreachable, non-2xx or unreadable body
        BackendParseError: response without a hits array
    """
    validate_search_request(request)
    time_range = resolve_time_range(request, now)

    logger.info(
        f"Search request: query={request.query!r}, "
        f"time_range_type={request.time_range_type}, "
        f"start_time={time_range.start.isoformat()}, "
        f"end_time={time_range.end.isoformat()}, "
        f"page={request.page}, page_size={request.page_size}"
    )

    return await client.search(request, time_range)
