"""
Types — Typed records for configuration, run history, and HubSpot payloads.

HubSpot returns loosely shaped JSON. Each payload is converted into a frozen
dataclass at the client boundary via `from_dict()`, which rejects payloads
that are not JSON objects or that lack their identifier. The untouched
payload is kept on `raw` for anything the typed fields do not cover.

Two page envelopes are modelled:

  HubspotPaginatedResponse (v3 cursor style)
      {"results": [...], "paging": {"next": {"after": "<token>"}}}
      A missing paging.next.after means the last page.

  LegacyHubspotPaginatedResponse (v2 offset style)
      {"results": [...], "offset": 30, "hasMore": true}
      hasMore false or empty results means the last page.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, TypeVar

T = TypeVar("T")

# Called once per record, in page order then item order
ResourceIteratee = Callable[[T], Any]


def _require_object(payload: Any, kind: str) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise ValueError(f"{kind} payload must be a JSON object, got {type(payload).__name__}")
    return payload


def _require_key(payload: Dict[str, Any], key: str, kind: str) -> Any:
    value = payload.get(key)
    if value is None or value == "":
        raise ValueError(f"{kind} payload is missing '{key}'")
    return value


def _optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


@dataclass(frozen=True)
class IntegrationConfig:
    """Connection settings for one HubSpot account.

    Attributes:
        app_id: The HubSpot app's unique ID.
        oauth_access_token: Sent as the Bearer token on every request.
        api_base_url: HubSpot API root, e.g. "https://api.hubapi.com".
    """

    app_id: str
    oauth_access_token: str
    api_base_url: str


@dataclass(frozen=True)
class LastSuccessfulRun:
    started_on: int  # epoch milliseconds


@dataclass(frozen=True)
class ExecutionHistory:
    """What is known about previous runs. Empty on the first run.

    `companies` is the company entity set pushed by the last successful run,
    keyed by company id. Companies fetched incrementally are applied on top
    of it so every push carries the complete set.
    """

    last_successful: Optional[LastSuccessfulRun] = None
    companies: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    @property
    def watermark(self) -> int:
        """Start time of the last successful run, or 0 when there was none."""
        if self.last_successful is None:
            return 0
        return self.last_successful.started_on or 0


@dataclass(frozen=True)
class HubspotPaginatedResponse:
    results: List[Any]
    after: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Any) -> "HubspotPaginatedResponse":
        payload = _require_object(payload, "Paginated response")
        next_page = (payload.get("paging") or {}).get("next") or {}
        after = next_page.get("after")
        return cls(results=payload.get("results") or [], after=_optional_str(after) or None)


@dataclass(frozen=True)
class LegacyHubspotPaginatedResponse:
    results: List[Any]
    offset: Optional[int] = None
    has_more: bool = False

    @classmethod
    def from_dict(cls, payload: Any) -> "LegacyHubspotPaginatedResponse":
        payload = _require_object(payload, "Legacy paginated response")
        return cls(
            results=payload.get("results") or [],
            offset=payload.get("offset"),
            has_more=payload.get("hasMore") is True,
        )


@dataclass(frozen=True)
class Owner:
    id: str
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    user_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    archived: bool = False
    teams: List[Dict[str, Any]] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, payload: Any) -> "Owner":
        payload = _require_object(payload, "Owner")
        return cls(
            id=str(_require_key(payload, "id", "Owner")),
            email=payload.get("email") or "",
            first_name=payload.get("firstName") or "",
            last_name=payload.get("lastName") or "",
            user_id=_optional_str(payload.get("userId")),
            created_at=payload.get("createdAt"),
            updated_at=payload.get("updatedAt"),
            archived=bool(payload.get("archived", False)),
            teams=list(payload.get("teams") or []),
            raw=payload,
        )

    @property
    def name(self) -> str:
        full_name = f"{self.first_name} {self.last_name}".strip()
        return full_name or self.email or self.id


@dataclass(frozen=True)
class Role:
    id: str
    name: str = ""
    requires_billing_write: bool = False
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, payload: Any) -> "Role":
        payload = _require_object(payload, "Role")
        return cls(
            id=str(_require_key(payload, "id", "Role")),
            name=payload.get("name") or "",
            requires_billing_write=bool(payload.get("requiresBillingWrite", False)),
            raw=payload,
        )


@dataclass(frozen=True)
class User:
    id: str
    email: str = ""
    role_id: Optional[str] = None
    primary_team_id: Optional[str] = None
    super_admin: bool = False
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, payload: Any) -> "User":
        payload = _require_object(payload, "User")
        return cls(
            id=str(_require_key(payload, "id", "User")),
            email=payload.get("email") or "",
            role_id=_optional_str(payload.get("roleId")),
            primary_team_id=_optional_str(payload.get("primaryTeamId")),
            super_admin=bool(payload.get("superAdmin", False)),
            raw=payload,
        )


@dataclass(frozen=True)
class Company:
    """A company from the legacy v2 API.

    v2 wraps every property as {"value": ..., "timestamp": ..., "source": ...};
    `properties` holds only the values.
    """

    company_id: str
    portal_id: Optional[str] = None
    is_deleted: bool = False
    properties: Dict[str, Any] = field(default_factory=dict)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, payload: Any) -> "Company":
        payload = _require_object(payload, "Company")
        properties = {}
        for name, prop in (payload.get("properties") or {}).items():
            properties[name] = prop.get("value") if isinstance(prop, dict) else prop
        return cls(
            company_id=str(_require_key(payload, "companyId", "Company")),
            portal_id=_optional_str(payload.get("portalId")),
            is_deleted=bool(payload.get("isDeleted", False)),
            properties=properties,
            raw=payload,
        )

    @property
    def name(self) -> str:
        return self.properties.get("name") or self.company_id

    @property
    def owner_id(self) -> Optional[str]:
        return _optional_str(self.properties.get("hubspot_owner_id")) or None
