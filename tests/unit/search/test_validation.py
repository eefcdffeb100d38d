"""
Unit tests for search request validation.

Covers pagination bounds and both time range modes.
"""

from datetime import datetime, timedelta, timezone

import pytest

from query_service.core.exceptions import RequestValidationFailed
from query_service.search.models import SearchRequest
from query_service.search.validation import RELATIVE_TIME_KEYS, validate_search_request


START = datetime(2025, 1, 15, 10, 0, tzinfo=timezone.utc)
END = START + timedelta(hours=1)


def absolute_request(**overrides) -> SearchRequest:
    fields = {
        "query": "error",
        "time_range_type": "absolute",
        "start_time": START,
        "end_time": END,
    }
    fields.update(overrides)
    return SearchRequest(**fields)


def relative_request(key="1h", **overrides) -> SearchRequest:
    return SearchRequest(
        query="", time_range_type="relative", relative_time_key=key, **overrides
    )


# =============================================================================
# Tests: pagination
# =============================================================================


class TestPagination:
    @pytest.mark.parametrize("page", [1, 2, 10, 10_000])
    @pytest.mark.parametrize("page_size", [1, 50, 999, 1000])
    def test_valid_bounds_pass(self, page, page_size):
        validate_search_request(absolute_request(page=page, page_size=page_size))

    @pytest.mark.parametrize("page", [0, -1])
    def test_page_below_one_rejected(self, page):
        with pytest.raises(RequestValidationFailed, match="page must be >= 1"):
            validate_search_request(absolute_request(page=page))

    @pytest.mark.parametrize("page_size", [0, 1001, -5])
    def test_page_size_out_of_range_rejected(self, page_size):
        with pytest.raises(RequestValidationFailed, match="page_size"):
            validate_search_request(absolute_request(page_size=page_size))


# =============================================================================
# Tests: relative mode
# =============================================================================


class TestRelativeMode:
    @pytest.mark.parametrize("key", sorted(RELATIVE_TIME_KEYS))
    def test_known_keys_pass(self, key):
        validate_search_request(relative_request(key))

    @pytest.mark.parametrize("key", ["2h", "1w", "60m", "1H", " 1h"])
    def test_unknown_key_rejected(self, key):
        with pytest.raises(RequestValidationFailed, match="invalid relative_time_key"):
            validate_search_request(relative_request(key))

    @pytest.mark.parametrize("key", [None, ""])
    def test_missing_key_rejected(self, key):
        with pytest.raises(RequestValidationFailed, match="relative_time_key is required"):
            validate_search_request(relative_request(key))

    def test_absolute_bounds_not_needed(self):
        validate_search_request(relative_request("15m", start_time=None, end_time=None))


# =============================================================================
# Tests: absolute mode
# =============================================================================


class TestAbsoluteMode:
    def test_missing_start_rejected(self):
        with pytest.raises(RequestValidationFailed, match="start_time and end_time are required"):
            validate_search_request(absolute_request(start_time=None))

    def test_missing_end_rejected(self):
        with pytest.raises(RequestValidationFailed, match="start_time and end_time are required"):
            validate_search_request(absolute_request(end_time=None))

    def test_equal_bounds_rejected(self):
        with pytest.raises(RequestValidationFailed, match="start_time must be before end_time"):
            validate_search_request(absolute_request(end_time=START))

    def test_reversed_bounds_rejected(self):
        with pytest.raises(RequestValidationFailed, match="start_time must be before end_time"):
            validate_search_request(absolute_request(start_time=END, end_time=START))

    def test_naive_bounds_are_treated_as_utc(self):
        request = absolute_request(
            start_time=datetime(2025, 1, 15, 10, 0),
            end_time=datetime(2025, 1, 15, 11, 0),
        )
        assert request.start_time.tzinfo == timezone.utc
        validate_search_request(request)

    def test_is_default_mode(self):
        request = SearchRequest(query="x")
        assert request.time_range_type == "absolute"
        with pytest.raises(RequestValidationFailed):
            validate_search_request(request)


def test_unknown_time_range_type_rejected():
    with pytest.raises(RequestValidationFailed, match="invalid time_range_type: rolling"):
        validate_search_request(absolute_request(time_range_type="rolling"))


def test_error_kind_and_status():
    with pytest.raises(RequestValidationFailed) as exc_info:
        validate_search_request(absolute_request(page=0))
    assert exc_info.value.kind == "validation_error"
    assert exc_info.value.status_code == 400
