"""
AI Analysis API Router
"""
from fastapi import APIRouter, Depends, HTTPException, Request

from query_service.core.exceptions import QueryServiceError
from query_service.search.router import get_quickwit_client
from query_service.search.service import QuickwitClient

from .schemas import AiAnalyzeRequest, AiAnalyzeResponse
from .service import AiAnalyzerClient, analyze_trace

router = APIRouter(prefix="/ai", tags=["ai-analysis"])


async def get_ai_analyzer(request: Request) -> AiAnalyzerClient:
    """Dependency returning the shared AI analyzer built at startup"""
    return request.app.state.ai_analyzer


@router.post("/analyze", response_model=AiAnalyzeResponse)
async def analyze_error(
    payload: AiAnalyzeRequest,
    quickwit: QuickwitClient = Depends(get_quickwit_client),
    analyzer: AiAnalyzerClient = Depends(get_ai_analyzer),
):
    """
    Analyze the ERROR logs of a trace with the configured AI model

    Looks up to 20 of the newest ERROR logs for `trace_id` in the last 24 hours.
    Returns a fixed message without calling the model when none are found.
    """
    try:
        return await analyze_trace(quickwit, analyzer, payload.trace_id)
    except QueryServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())
