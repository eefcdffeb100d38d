"""
Pytest configuration and shared fixtures for the query service tests.
"""

import os

# Set environment variables BEFORE importing app modules
os.environ.setdefault("LOG_LEVEL", "INFO")
os.environ.setdefault("QUICKWIT_URL", "http://quickwit.test:7280")
os.environ.setdefault("QUICKWIT_INDEX_ID", "logs")
os.environ.setdefault("AI_ANALYZER_BASE_URL", "http://ai.test/v1")
os.environ.setdefault("AI_ANALYZER_MODEL", "test-model")

import json
from typing import Any, Callable, Dict, List

import httpx
import pytest

from query_service.search.service import QuickwitClient


SEARCH_URL = "http://quickwit.test:7280/api/v1/logs/search"


def make_hit(**overrides: Any) -> Dict[str, Any]:
    """Build a raw Quickwit hit with all required LogHit fields."""
    hit = {
        "timestamp": "2025-01-15T10:30:00Z",
        "message": "request handled",
        "level": "INFO",
        "service": "api-gateway",
        "env": "prod",
    }
    hit.update(overrides)
    return hit


@pytest.fixture
def hit_factory() -> Callable[..., Dict[str, Any]]:
    return make_hit


class RecordingBackend:
    """
    Scripted Quickwit stand-in for httpx.MockTransport.

    Replays queued responses in order and records every JSON body received.
    """

    def __init__(self):
        self.responses: List[httpx.Response] = []
        self.requests: List[Dict[str, Any]] = []

    def queue_json(self, payload: Any, status_code: int = 200) -> None:
        self.responses.append(httpx.Response(status_code, json=payload))

    def queue(self, response: httpx.Response) -> None:
        self.responses.append(response)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(json.loads(request.content))
        if not self.responses:
            raise AssertionError(f"Unexpected backend call: {request.url}")
        return self.responses.pop(0)


@pytest.fixture
def backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture
def quickwit(backend) -> QuickwitClient:
    """QuickwitClient wired to the scripted backend."""
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(backend))
    return QuickwitClient(
        base_url="http://quickwit.test:7280",
        index_id="logs",
        client=http_client,
    )
