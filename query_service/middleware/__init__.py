"""Middleware package for the application."""

from query_service.middleware.request_id import RequestIDMiddleware

__all__ = ["RequestIDMiddleware"]
