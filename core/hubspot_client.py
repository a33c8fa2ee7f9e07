"""
HubSpot API Client — Handles authentication and paginated API calls to HubSpot.

This module is responsible for all HTTP communication with HubSpot. Every
request is a GET against the configured API base URL with the app's OAuth
access token attached as a Bearer header.

Endpoints used:

  GET /crm/v3/properties/contacts                 Authentication probe
  GET /crm/v3/owners                              Owners (cursor paginated)
  GET /settings/v3/users/roles                    Roles (cursor paginated)
  GET /settings/v3/users/{userId}                 Single user
  GET /companies/v2/companies/recent/modified     Companies (offset paginated)

Pagination:
    v3 endpoints return {"results": [...], "paging": {"next": {"after": ...}}}
    and are walked with CursorPagination. The v2 recently-modified companies
    endpoint returns {"results": [...], "offset": N, "hasMore": bool} and is
    walked with OffsetPagination (30 per page). The v2 endpoint is used for
    companies because it accepts `since`, which makes the fetch incremental:
    the first run passes since=0 and gets every company, later runs pass the
    start time of the last successful run.

Errors:
    The query primitive raises IntegrationProviderAPIError with the full URL.
    Each public method re-raises any failure as IntegrationProviderAPIError
    (or IntegrationProviderAuthenticationError for verify_authentication) with
    the literal resource path, keeping the original error as the cause.
    Nothing is retried.

Pipeline context:
    Used in Step 1 (authentication) and Steps 2-4 (roles, owners, companies)
    of the orchestrator pipeline, through EntityExtractor.
"""

from typing import Any, Dict, Optional

import requests

from config import LEGACY_MAX_PER_PAGE

from .errors import (
    IntegrationProviderAPIError,
    IntegrationProviderAuthenticationError,
    wrap_provider_error,
)
from .pagination import CursorPagination, OffsetPagination
from .types import (
    Company,
    ExecutionHistory,
    IntegrationConfig,
    Owner,
    ResourceIteratee,
    Role,
    User,
)

AUTH_PROBE_ENDPOINT = "/crm/v3/properties/contacts"
OWNERS_ENDPOINT = "/crm/v3/owners"
ROLES_ENDPOINT = "/settings/v3/users/roles"
USER_ENDPOINT = "/settings/v3/users/{userId}"
COMPANIES_ENDPOINT = "/companies/v2/companies/recent/modified"


class APIClient:
    """Client for the HubSpot REST API.

    Manages a requests.Session shared by every call. The client holds only
    immutable configuration, so one instance can iterate several resources
    one after another.

    Attributes:
        integration_config: Account configuration (app id, token, base URL).
        execution_history: Previous-run information used for incremental fetch.
        timeout: Seconds to wait on each request (passed to requests).
        debug: If True, print each request URL and page size.
    """

    legacy_max_per_page = LEGACY_MAX_PER_PAGE

    def __init__(
        self,
        integration_config: IntegrationConfig,
        execution_history: Optional[ExecutionHistory] = None,
        timeout: Optional[float] = 30,
        debug: bool = False,
    ):
        self.integration_config = integration_config
        self.execution_history = execution_history or ExecutionHistory()
        self.api_base_url = integration_config.api_base_url.rstrip("/")
        self.timeout = timeout
        self.debug = debug
        self._session = requests.Session()

    def _query(self, resource: str, params: Optional[Dict[str, Any]] = None, method: str = "GET") -> Any:
        """Issue one authenticated request and return the parsed JSON body.

        Args:
            resource: Path relative to the API base URL (e.g. "/crm/v3/owners").
            params: Query parameters, url-encoded by requests.
            method: HTTP method.

        Returns:
            The decoded JSON body, or None when the body is empty or not JSON.

        Raises:
            IntegrationProviderAPIError: On a transport failure, a non-2xx
                status, or a body whose "status" field is "error".
        """
        url = f"{self.api_base_url}{resource}"
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.integration_config.oauth_access_token}",
        }

        if self.debug:
            print(f"  {method} {url} {params or ''}")

        try:
            response = self._session.request(method, url, params=params, headers=headers, timeout=self.timeout)
        except requests.RequestException as err:
            raise IntegrationProviderAPIError(endpoint=url, cause=err) from err

        try:
            data = response.json()
        except ValueError:
            data = None

        body_status = data.get("status") if isinstance(data, dict) else None
        if not response.ok or body_status == "error":
            raise IntegrationProviderAPIError(
                endpoint=response.url or url,
                status=response.status_code,
                status_text=response.reason,
            )

        return data

    def _get(self, resource: str) -> Any:
        return self._query(resource)

    def _iterate(self, resource: str, iteratee: ResourceIteratee, record_type, pagination) -> None:
        """Walk every page of `resource`, calling `iteratee` once per record.

        All callbacks for a page finish before the next page is requested.
        """
        params = pagination.initial_params()
        while params is not None:
            page = pagination.parse_page(self._query(resource, params))

            if self.debug:
                print(f"    Page of {len(page.results)} from {resource}")

            for item in page.results:
                iteratee(record_type.from_dict(item))

            params = pagination.next_params(params, page)

    def verify_authentication(self) -> None:
        """Probe a lightweight endpoint to confirm the access token works.

        Raises:
            IntegrationProviderAuthenticationError: If the probe fails or
                returns an empty body.
        """
        try:
            body = self._get(AUTH_PROBE_ENDPOINT)
            if not body:
                raise RuntimeError("Provider authentication failed")
        except Exception as err:
            raise wrap_provider_error(IntegrationProviderAuthenticationError, err, AUTH_PROBE_ENDPOINT) from err

    def iterate_owners(self, iteratee: ResourceIteratee[Owner]) -> None:
        try:
            self._iterate(OWNERS_ENDPOINT, iteratee, Owner, CursorPagination())
        except Exception as err:
            raise wrap_provider_error(IntegrationProviderAPIError, err, OWNERS_ENDPOINT) from err

    def iterate_roles(self, iteratee: ResourceIteratee[Role]) -> None:
        try:
            self._iterate(ROLES_ENDPOINT, iteratee, Role, CursorPagination())
        except Exception as err:
            raise wrap_provider_error(IntegrationProviderAPIError, err, ROLES_ENDPOINT) from err

    def fetch_user(self, user_id: str) -> User:
        """Fetch a single HubSpot user (seat) by id.

        Raises:
            IntegrationProviderAPIError: With endpoint "/settings/v3/users/{userId}".
        """
        try:
            return User.from_dict(self._get(f"/settings/v3/users/{user_id}"))
        except Exception as err:
            raise wrap_provider_error(IntegrationProviderAPIError, err, USER_ENDPOINT) from err

    def iterate_companies(self, iteratee: ResourceIteratee[Company]) -> None:
        """Iterate companies modified since the last successful run.

        The v2 endpoint is the one that accepts `since`. On the first run the
        watermark is 0, which fetches every company; later runs only fetch
        what changed.
        """
        since = self.execution_history.watermark
        pagination = OffsetPagination(params={"since": since}, page_size=self.legacy_max_per_page)
        try:
            self._iterate(COMPANIES_ENDPOINT, iteratee, Company, pagination)
        except Exception as err:
            raise wrap_provider_error(IntegrationProviderAPIError, err, COMPANIES_ENDPOINT) from err


def create_api_client(
    config: IntegrationConfig,
    execution_history: Optional[ExecutionHistory] = None,
    timeout: Optional[float] = 30,
    debug: bool = False,
) -> APIClient:
    return APIClient(config, execution_history, timeout=timeout, debug=debug)
