"""
Error taxonomy for the query service.

Every failure that reaches the HTTP boundary carries a stable ``kind`` tag and
the status code it maps to.
"""


class QueryServiceError(Exception):
    """Base class for errors surfaced to API clients."""

    kind = "internal_error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_detail(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class RequestValidationFailed(QueryServiceError):
    """Malformed or inconsistent client input, detected before any backend call."""

    kind = "validation_error"
    status_code = 400


class BackendError(QueryServiceError):
    """Non-success status, transport failure or unreadable body from an upstream."""

    kind = "backend_error"
    status_code = 502


class BackendParseError(QueryServiceError):
    """Well-formed backend response missing a required structural field."""

    kind = "parse_error"
    status_code = 500


class TimeRangeResolutionError(QueryServiceError, RuntimeError):
    """Time range could not be resolved for a request that passed validation."""

    kind = "internal_error"
    status_code = 500
