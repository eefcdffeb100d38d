"""
Pydantic schemas for AI error analysis
"""
from pydantic import BaseModel, Field


class AiAnalyzeRequest(BaseModel):
    """Request schema for analyzing the error logs of one trace"""

    trace_id: str = Field(..., description="Trace whose ERROR logs should be analyzed")


class AiAnalyzeResponse(BaseModel):
    """AI analysis result"""

    analysis: str = Field(..., description="Model-written diagnosis")
    trace_id: str = Field(..., description="Echoed trace id")
