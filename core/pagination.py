"""
Pagination — The two HubSpot page-walking protocols behind one interface.

The API client runs a single loop (query, call back for every item, ask the
strategy for the next request's params) and delegates the protocol details
to one of these strategies:

  CursorPagination   v3 endpoints. The next request carries `after` set to
                     the previous page's paging.next.after token.

  OffsetPagination   v2 ("legacy") endpoints. Every request carries a fixed
                     `count` and the `offset` returned by the previous page.

A strategy returns None from next_params() when the page just processed was
the last one. Strategies hold no state between pages; everything is derived
from the page that was just returned.
"""

from typing import Any, Dict, Optional

from config import LEGACY_MAX_PER_PAGE

from .types import HubspotPaginatedResponse, LegacyHubspotPaginatedResponse


class CursorPagination:
    """Cursor pagination using the `paging.next.after` token."""

    def __init__(self, params: Optional[Dict[str, Any]] = None):
        self.params = dict(params or {})

    def initial_params(self) -> Dict[str, Any]:
        return dict(self.params)

    def parse_page(self, data: Any) -> HubspotPaginatedResponse:
        return HubspotPaginatedResponse.from_dict(data)

    def next_params(self, params: Dict[str, Any], page: HubspotPaginatedResponse) -> Optional[Dict[str, Any]]:
        if not page.results or not page.after:
            return None
        return {**params, "after": page.after}


class OffsetPagination:
    """Offset/count pagination for the legacy v2 endpoints.

    Args:
        params: Extra parameters sent unchanged on every page (e.g. `since`).
        page_size: Value of `count` on every request.
    """

    def __init__(self, params: Optional[Dict[str, Any]] = None, page_size: int = LEGACY_MAX_PER_PAGE):
        self.params = dict(params or {})
        self.page_size = page_size

    def initial_params(self) -> Dict[str, Any]:
        return {**self.params, "count": self.page_size, "offset": 0}

    def parse_page(self, data: Any) -> LegacyHubspotPaginatedResponse:
        return LegacyHubspotPaginatedResponse.from_dict(data)

    def next_params(
        self, params: Dict[str, Any], page: LegacyHubspotPaginatedResponse
    ) -> Optional[Dict[str, Any]]:
        if not page.results or not page.has_more:
            return None
        if page.offset is None:
            # Re-requesting the same offset would never terminate
            raise ValueError("Legacy page reported hasMore without an offset")
        return {**params, "count": self.page_size, "offset": page.offset}
