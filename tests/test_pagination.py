"""Tests for core.pagination strategies."""

import pytest

from core.pagination import CursorPagination, OffsetPagination
from core.types import HubspotPaginatedResponse, LegacyHubspotPaginatedResponse


def test_cursor_initial_params_copy_fixed_params():
    pagination = CursorPagination({"archived": "false"})
    params = pagination.initial_params()
    params["after"] = "x"
    assert pagination.initial_params() == {"archived": "false"}


def test_cursor_next_params_merges_after():
    page = HubspotPaginatedResponse(results=[{"id": "1"}], after="NTA=")
    assert CursorPagination().next_params({"archived": "false"}, page) == {"archived": "false", "after": "NTA="}


def test_cursor_last_page_without_token():
    page = HubspotPaginatedResponse(results=[{"id": "1"}])
    assert CursorPagination().next_params({}, page) is None


def test_cursor_empty_page_stops_even_with_token():
    page = HubspotPaginatedResponse(results=[], after="NTA=")
    assert CursorPagination().next_params({}, page) is None


def test_offset_initial_params():
    pagination = OffsetPagination({"since": 1700000000000})
    assert pagination.initial_params() == {"since": 1700000000000, "count": 30, "offset": 0}


def test_offset_next_params_keeps_fixed_params():
    pagination = OffsetPagination({"since": 5}, page_size=10)
    page = LegacyHubspotPaginatedResponse(results=[{}], offset=10, has_more=True)
    assert pagination.next_params(pagination.initial_params(), page) == {"since": 5, "count": 10, "offset": 10}


@pytest.mark.parametrize("page", [
    LegacyHubspotPaginatedResponse(results=[{}], offset=30, has_more=False),
    LegacyHubspotPaginatedResponse(results=[], offset=30, has_more=True),
])
def test_offset_last_page(page):
    assert OffsetPagination().next_params({}, page) is None


def test_offset_has_more_without_offset():
    page = LegacyHubspotPaginatedResponse(results=[{}], offset=None, has_more=True)
    with pytest.raises(ValueError):
        OffsetPagination().next_params({}, page)


def test_parse_page_variants():
    cursor_page = CursorPagination().parse_page({"results": [1], "paging": {"next": {"after": "a"}}})
    offset_page = OffsetPagination().parse_page({"results": [1], "offset": 30, "hasMore": True})
    assert cursor_page.after == "a"
    assert offset_page.offset == 30
    assert offset_page.has_more is True
