"""
Entity Extractor — Fetches HubSpot records and normalizes them into entities.

This module holds the step functions of the pipeline. Each step walks one
resource through the APIClient, converts every typed record into a flat
entity dict, and collects the results. Downstream modules (ApplicationBuilder,
RelationshipBuilder) consume these dicts without knowing anything about the
HubSpot payload shapes.

Output format (returned by extract()):
    {
      "roles":     [ { "id", "name", "requires_billing_write" } ],
      "owners":    [ { "id", "email", "first_name", "last_name", "name",
                       "user_id", "created_at", "updated_at", "archived",
                       "is_active", "role_id", "is_super_admin",
                       "primary_team_id" } ],
      "companies": [ { "id", "name", "domain", "owner_id", "created_at",
                       "last_modified_at", "portal_id" } ],
      "owner_roles":    [ { "owner_id", "role_id" } ],
      "company_owners": [ { "company_id", "owner_id" } ],
    }

Key behaviors:
  - Owners don't carry their role; it lives on the HubSpot user (seat). For
    every owner with a userId, the user is fetched and its roleId copied onto
    the owner entity. A user that no longer exists (404) is reported and the
    owner is kept without a role.
  - Companies arrive incrementally and are applied to the set pushed by the
    last successful run. Deleted companies are removed from it.
  - Relationships are only emitted when both ends were extracted.

Pipeline context:
    Used in Steps 2-4 of the orchestrator pipeline. Output feeds into
    ApplicationBuilder.build() (Step 5) and RelationshipBuilder.build_all() (Step 6).
"""

from typing import Any, Dict, List, Optional

from .errors import IntegrationProviderAPIError
from .types import Company, Owner, Role, User


def create_role_entity(role: Role) -> Dict[str, Any]:
    return {
        "id": role.id,
        "name": role.name or role.id,
        "requires_billing_write": role.requires_billing_write,
    }


def create_owner_entity(owner: Owner, user: Optional[User] = None) -> Dict[str, Any]:
    """Convert an owner (and its user record, if fetched) into an owner entity."""
    return {
        "id": owner.id,
        "email": owner.email,
        "first_name": owner.first_name,
        "last_name": owner.last_name,
        "name": owner.name,
        "user_id": owner.user_id,
        "created_at": owner.created_at,
        "updated_at": owner.updated_at,
        "archived": owner.archived,
        "is_active": not owner.archived,
        "role_id": user.role_id if user else None,
        "is_super_admin": user.super_admin if user else False,
        "primary_team_id": user.primary_team_id if user else None,
    }


def create_company_entity(company: Company) -> Dict[str, Any]:
    props = company.properties
    return {
        "id": company.company_id,
        "name": company.name,
        "domain": props.get("domain") or "",
        "owner_id": company.owner_id,
        "created_at": props.get("createdate"),
        "last_modified_at": props.get("hs_lastmodifieddate"),
        "portal_id": company.portal_id,
    }


class EntityExtractor:
    """Runs the fetch steps against an APIClient and normalizes the results.

    Attributes:
        client: The APIClient to fetch through.
        debug: If True, prints per-record details.
    """

    def __init__(self, client, debug: bool = False):
        self.client = client
        self.debug = debug

    def fetch_roles(self) -> List[Dict[str, Any]]:
        roles = []

        def on_role(role: Role):
            roles.append(create_role_entity(role))

        self.client.iterate_roles(on_role)
        return roles

    def fetch_owners(self) -> List[Dict[str, Any]]:
        """Fetch every owner, looking up each owner's user for its role.

        Returns:
            A list of owner entity dicts.

        Raises:
            IntegrationProviderAPIError: If owners cannot be listed, or a user
                lookup fails with anything other than 404. A failed lookup
                surfaces through iterate_owners, so the error's endpoint is
                the owners listing; the lookup error is its `cause` and
                names /settings/v3/users/{userId} in the message.
        """
        owners = []

        def on_owner(owner: Owner):
            user = None
            if owner.user_id:
                try:
                    user = self.client.fetch_user(owner.user_id)
                except IntegrationProviderAPIError as e:
                    if e.status != 404:
                        raise
                    print(f"  Warning: User {owner.user_id} for owner {owner.id} not found, skipping role")
            owners.append(create_owner_entity(owner, user))

            if self.debug:
                print(f"    Owner {owner.id} ({owner.email}) role={user.role_id if user else None}")

        self.client.iterate_owners(on_owner)
        return owners

    def fetch_companies(self, previous: Optional[Dict[str, Dict[str, Any]]] = None) -> List[Dict[str, Any]]:
        """Fetch companies and apply them to the previously pushed set.

        Args:
            previous: Company entities from the last successful run, keyed by
                id. A fetched company replaces its entry, a deleted one is
                removed, and entries HubSpot did not return are kept.

        Returns:
            The complete list of live company entities.
        """
        companies = dict(previous or {})
        deleted = 0

        def on_company(company: Company):
            nonlocal deleted
            if company.is_deleted:
                deleted += 1
                companies.pop(company.company_id, None)
                return
            companies[company.company_id] = create_company_entity(company)

        self.client.iterate_companies(on_company)

        if self.debug:
            if previous:
                print(f"    Applied changes to {len(previous)} previously pushed companies")
            if deleted:
                print(f"    Dropped {deleted} deleted companies")

        return list(companies.values())

    def extract(self) -> Dict[str, Any]:
        """Run all fetch steps and resolve relationships.

        Returns:
            A dict with keys roles, owners, companies, owner_roles,
            company_owners. See module docstring for the full schema.
        """
        roles = self.fetch_roles()
        owners = self.fetch_owners()
        companies = self.fetch_companies()
        return self.resolve(roles, owners, companies)

    def resolve(
        self,
        roles: List[Dict[str, Any]],
        owners: List[Dict[str, Any]],
        companies: List[Dict[str, Any]],
    ) -> Dict[str, Any]:
        """Link owners to roles and companies to owners.

        Links whose other end was not extracted (a role that isn't listed, a
        company owned by a user who isn't an owner) are dropped.
        """
        role_ids = {role["id"] for role in roles}
        owner_ids = {owner["id"] for owner in owners}

        owner_roles = [
            {"owner_id": owner["id"], "role_id": owner["role_id"]}
            for owner in owners
            if owner.get("role_id") in role_ids
        ]
        company_owners = [
            {"company_id": company["id"], "owner_id": company["owner_id"]}
            for company in companies
            if company.get("owner_id") in owner_ids
        ]

        if self.debug:
            print(f"  Resolved {len(owner_roles)} owner->role and "
                  f"{len(company_owners)} company->owner links")

        return {
            "roles": roles,
            "owners": owners,
            "companies": companies,
            "owner_roles": owner_roles,
            "company_owners": company_owners,
        }
