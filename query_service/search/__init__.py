"""Log search: validation, time ranges, Quickwit query translation and conversion."""

from query_service.search.service import QuickwitClient, search_logs

__all__ = ["QuickwitClient", "search_logs"]
