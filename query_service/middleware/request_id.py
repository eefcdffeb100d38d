"""
Request ID middleware for FastAPI.

Generates a unique request_id for each incoming request. The request_id is:
- Added to the request state
- Added to response headers (X-Request-ID)
- Set in context variables so all logs in this request include it
"""

import uuid
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from query_service.core.logging_config import set_request_id, clear_request_id


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Middleware that adds a unique request_id to each request and sets it in context."""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        set_request_id(request_id)

        try:
            logger.info(f"{request.method} {request.url.path} - Request started")

            response: Response = await call_next(request)
            response.headers["X-Request-ID"] = request_id

            logger.info(
                f"{request.method} {request.url.path} - Request completed with status {response.status_code}"
            )

            return response

        except Exception as e:
            logger.error(f"{request.method} {request.url.path} - Request failed: {e}")
            raise
        finally:
            clear_request_id()
