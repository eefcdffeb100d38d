"""
AI error analysis - summarizes a trace's error logs with an OpenAI-compatible
chat completions API
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import httpx

from query_service.core.config import settings
from query_service.core.exceptions import BackendError, RequestValidationFailed
from query_service.search.models import LogHit, SearchRequest
from query_service.search.service import QuickwitClient, search_logs

from .schemas import AiAnalyzeResponse

logger = logging.getLogger(__name__)

MAX_LOGS = 50
MAX_LOG_LENGTH = 500
MAX_PROMPT_LOGS_LENGTH = 15000
TRACE_LOOKBACK = timedelta(hours=24)
TRACE_PAGE_SIZE = 20

NO_LOGS_MESSAGE = "No related error logs were found to analyze."
TRACE_NOT_FOUND_MESSAGE = "No error logs found for this trace_id."
UNPARSEABLE_RESPONSE_MESSAGE = "Unable to parse AI response"

SYSTEM_PROMPT = (
    "You are a professional log analysis assistant, skilled at quickly "
    "diagnosing system errors and performance problems. Answer concisely."
)

ANALYSIS_PROMPT = """You are a senior systems architect and troubleshooting expert. Briefly analyze the following error logs.

Trace ID: {trace_id}

Logs:
{logs}

Requirements:
1. State the main error concisely (1-2 sentences)
2. Analyze likely causes (2-3 key points)
3. Suggest fixes (2-3 items)
4. Keep the answer under 500 words"""


def format_log_line(hit: LogHit) -> str:
    """Render a hit as ``[timestamp] [level] [service] message``."""
    ts = hit.timestamp.strftime("%Y-%m-%d %H:%M:%S.") + f"{hit.timestamp.microsecond // 1000:03d}"
    return f"[{ts}] [{hit.level}] [{hit.service}] {hit.message}"


def build_prompt(logs: List[str], trace_id: str) -> str:
    """Truncate each log and the joined text, then fill the analysis template."""
    truncated = []
    for log in logs:
        if len(log) > MAX_LOG_LENGTH:
            omitted = len(log) - MAX_LOG_LENGTH
            log = f"{log[:MAX_LOG_LENGTH]}...({omitted} characters omitted)"
        truncated.append(log)

    logs_text = "\n\n---\n\n".join(truncated)
    if len(logs_text) > MAX_PROMPT_LOGS_LENGTH:
        logs_text = f"{logs_text[:MAX_PROMPT_LOGS_LENGTH]}...(content truncated)"

    return ANALYSIS_PROMPT.format(trace_id=trace_id, logs=logs_text)


def resolve_completions_url(base_url: str) -> str:
    """
    Chat completions URL for a provider base URL.

    OpenRouter-style bases end in /api/v1, some proxies in /api, OpenAI in
    /v1 or nothing.
    """
    base = base_url.rstrip("/")
    if base.endswith("/api/v1") or base.endswith("/v1"):
        return f"{base}/chat/completions"
    return f"{base}/v1/chat/completions"


def extract_content(payload: Any) -> str:
    """choices[0].message.content, or a fixed fallback text."""
    try:
        content = payload["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return UNPARSEABLE_RESPONSE_MESSAGE
    return content if isinstance(content, str) else UNPARSEABLE_RESPONSE_MESSAGE


class AiAnalyzerClient:
    """Client for the AI analysis endpoint"""

    def __init__(
        self,
        base_url: str,
        model: str,
        api_key: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 180.0,
        connect_timeout: float = 30.0,
    ):
        self.base_url = base_url
        self.model = model
        self.api_key = api_key
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout, connect=connect_timeout)
        )

    @classmethod
    def from_settings(cls) -> "AiAnalyzerClient":
        if not settings.AI_ANALYZER_API_KEY:
            logger.warning("AI_ANALYZER_API_KEY not configured - requests are unauthenticated")
        return cls(
            base_url=settings.AI_ANALYZER_BASE_URL,
            model=settings.AI_ANALYZER_MODEL,
            api_key=settings.AI_ANALYZER_API_KEY,
            timeout=settings.AI_ANALYZER_TIMEOUT_SECONDS,
            connect_timeout=settings.AI_ANALYZER_CONNECT_TIMEOUT_SECONDS,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    def _get_headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def analyze_error_logs(self, logs: List[str], trace_id: str) -> str:
        """Ask the model to diagnose a trace's formatted error logs."""
        if not logs:
            return NO_LOGS_MESSAGE

        if len(logs) > MAX_LOGS:
            logger.info(f"Found {len(logs)} logs, truncating to {MAX_LOGS} for AI analysis")
            logs = logs[:MAX_LOGS]

        logger.info(f"Starting AI analysis for trace_id: {trace_id}, logs count: {len(logs)}")
        prompt = build_prompt(logs, trace_id)
        logger.info(f"Prompt size: {len(prompt)} characters")

        return await self._call_ai_api(prompt)

    async def _call_ai_api(self, prompt: str) -> str:
        url = resolve_completions_url(self.base_url)
        body = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "temperature": 0.3,
            "max_tokens": 1500,
            "top_p": 0.9,
        }

        logger.debug(f"Calling AI API at: {url}")
        try:
            response = await self._client.post(url, json=body, headers=self._get_headers())
        except httpx.HTTPError as e:
            logger.error(f"AI API request failed: {e}")
            raise BackendError(f"AI API request failed: {e}") from e

        if not response.is_success:
            logger.error(f"AI API error response: {response.text[:500]}")
            raise BackendError(
                f"AI API error: {response.status_code} - {response.text}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise BackendError(f"Failed to parse AI response: {e}") from e

        return extract_content(payload)


async def get_error_logs_by_trace_id(
    quickwit: QuickwitClient, trace_id: str, now: Optional[datetime] = None
) -> List[LogHit]:
    """Newest ERROR logs for a trace over the last 24 hours."""
    end_time = now or datetime.now(timezone.utc)
    request = SearchRequest(
        query=f"trace_id:{trace_id} AND level:ERROR",
        time_range_type="absolute",
        start_time=end_time - TRACE_LOOKBACK,
        end_time=end_time,
        page=1,
        page_size=TRACE_PAGE_SIZE,
    )
    response = await search_logs(quickwit, request)
    return response.hits


async def analyze_trace(
    quickwit: QuickwitClient, analyzer: AiAnalyzerClient, trace_id: str
) -> AiAnalyzeResponse:
    """
    Fetch a trace's error logs and return the model's analysis.

    Raises:
        RequestValidationFailed: empty trace_id
        BackendError / BackendParseError: from Quickwit or the AI API
    """
    if not trace_id:
        raise RequestValidationFailed("trace_id cannot be empty")

    logger.info(f"AI analyze request for trace_id: {trace_id}")
    error_logs = await get_error_logs_by_trace_id(quickwit, trace_id)

    if not error_logs:
        return AiAnalyzeResponse(analysis=TRACE_NOT_FOUND_MESSAGE, trace_id=trace_id)

    analysis = await analyzer.analyze_error_logs(
        [format_log_line(hit) for hit in error_logs], trace_id
    )
    logger.info(f"AI analysis completed for trace_id: {trace_id}")

    return AiAnalyzeResponse(analysis=analysis, trace_id=trace_id)
