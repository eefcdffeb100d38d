"""AI error analysis for traces found in the log index."""

from query_service.ai.service import AiAnalyzerClient, analyze_trace

__all__ = ["AiAnalyzerClient", "analyze_trace"]
