"""
Application Builder — Builds the OAA CustomApplication from HubSpot entities.

This module creates and populates a Veza OAA CustomApplication from the
normalized entities dict produced by EntityExtractor. It handles:

  1. Property schema definitions (application, user, role, company resource)
  2. The "Owner" custom permission granted on owned companies
  3. Role creation (one local role per HubSpot role)
  4. User creation (one local user per HubSpot owner)
  5. Resource creation (one "company" resource per HubSpot company)

Naming:
  Application:  hubspot_{app_id}
  Local role:   role_{role_id}
  Local user:   owner_{owner_id}   (identity = owner email)
  Resource:     company_{company_id}

OAA property schemas defined:
  Application: api_base_url, app_id, sync_timestamp
  User:        hubspot_owner_id, hubspot_user_id, archived, is_super_admin,
               primary_team_id, updated_at
  Role:        hubspot_role_id, requires_billing_write
  Company:     hubspot_company_id, domain, portal_id, created_at, last_modified_at

Pipeline context:
    Used in Step 5 of the orchestrator pipeline. Input is the entities dict
    from EntityExtractor (Steps 2-4). Output is a CustomApplication that
    RelationshipBuilder (Step 6) then wires with relationships.
"""

from typing import Dict, Any
from datetime import datetime, timezone

from oaaclient.templates import CustomApplication, OAAPermission, OAAPropertyType

APPLICATION_TYPE = "HubSpot"
COMPANY_RESOURCE_TYPE = "company"
OWNER_PERMISSION = "Owner"


def role_unique_id(role_id: str) -> str:
    return f"role_{role_id}"


def owner_unique_id(owner_id: str) -> str:
    return f"owner_{owner_id}"


def company_unique_id(company_id: str) -> str:
    return f"company_{company_id}"


class ApplicationBuilder:
    """Builds an OAA CustomApplication from extracted HubSpot entities.

    Attributes:
        app_id: HubSpot app id (part of the OAA application name).
        api_base_url: HubSpot API root (stored as an application property).
        debug: If True, prints verbose build details.
    """

    def __init__(self, app_id: str, api_base_url: str = "", debug: bool = False):
        self.app_id = app_id
        self.api_base_url = api_base_url
        self.debug = debug

    def build(self, entities: Dict[str, Any]) -> CustomApplication:
        """Build a complete OAA CustomApplication from extracted entities.

        Args:
            entities: Output from EntityExtractor.extract() with keys:
                      roles, owners, companies.

        Returns:
            A populated CustomApplication (without relationships, which
            RelationshipBuilder adds in Step 6).
        """
        app_name = f"hubspot_{self.app_id}"

        app = CustomApplication(
            name=app_name,
            application_type=APPLICATION_TYPE,
            description=f"HubSpot account for app {self.app_id}",
        )

        # Property schemas must exist before any set_property() call
        self._define_properties(app)

        app.set_property("api_base_url", self.api_base_url)
        app.set_property("app_id", str(self.app_id))
        app.set_property("sync_timestamp", datetime.now(timezone.utc).isoformat())

        app.add_custom_permission(OWNER_PERMISSION, [OAAPermission.DataRead, OAAPermission.DataWrite])

        for role in entities["roles"]:
            self._add_role(app, role)

        for owner in entities["owners"]:
            self._add_owner(app, owner)

        for company in entities["companies"]:
            self._add_company(app, company)

        if self.debug:
            print(f"  Built application: {app_name}")
            print(f"    Users: {len(app.local_users)}")
            print(f"    Roles: {len(app.local_roles)}")
            print(f"    Companies: {len(app.resources)}")

        return app

    def _define_properties(self, app: CustomApplication):
        definitions = app.property_definitions

        definitions.define_application_property("api_base_url", OAAPropertyType.STRING)
        definitions.define_application_property("app_id", OAAPropertyType.STRING)
        definitions.define_application_property("sync_timestamp", OAAPropertyType.STRING)

        definitions.define_local_user_property("hubspot_owner_id", OAAPropertyType.STRING)
        definitions.define_local_user_property("hubspot_user_id", OAAPropertyType.STRING)
        definitions.define_local_user_property("archived", OAAPropertyType.BOOLEAN)
        definitions.define_local_user_property("is_super_admin", OAAPropertyType.BOOLEAN)
        definitions.define_local_user_property("primary_team_id", OAAPropertyType.STRING)
        definitions.define_local_user_property("updated_at", OAAPropertyType.STRING)

        definitions.define_local_role_property("hubspot_role_id", OAAPropertyType.STRING)
        definitions.define_local_role_property("requires_billing_write", OAAPropertyType.BOOLEAN)

        definitions.define_resource_property(COMPANY_RESOURCE_TYPE, "hubspot_company_id", OAAPropertyType.STRING)
        definitions.define_resource_property(COMPANY_RESOURCE_TYPE, "domain", OAAPropertyType.STRING)
        definitions.define_resource_property(COMPANY_RESOURCE_TYPE, "portal_id", OAAPropertyType.STRING)
        definitions.define_resource_property(COMPANY_RESOURCE_TYPE, "created_at", OAAPropertyType.STRING)
        definitions.define_resource_property(COMPANY_RESOURCE_TYPE, "last_modified_at", OAAPropertyType.STRING)

    def _add_role(self, app: CustomApplication, role: Dict):
        local_role = app.add_local_role(name=role["name"], unique_id=role_unique_id(role["id"]))
        local_role.set_property("hubspot_role_id", role["id"])
        local_role.set_property("requires_billing_write", role.get("requires_billing_write", False))

    def _add_owner(self, app: CustomApplication, owner: Dict):
        """Add an owner as a local user.

        The email, when present, is also the user's identity so Veza can link
        the HubSpot owner to the same person in the identity provider.
        """
        local_user = app.add_local_user(name=owner["name"], unique_id=owner_unique_id(owner["id"]))
        local_user.is_active = owner.get("is_active", True)
        if owner.get("email"):
            local_user.email = owner["email"]
            local_user.add_identity(owner["email"])
        if owner.get("first_name"):
            local_user.first_name = owner["first_name"]
        if owner.get("last_name"):
            local_user.last_name = owner["last_name"]
        if owner.get("created_at"):
            local_user.created_at = owner["created_at"]

        local_user.set_property("hubspot_owner_id", owner["id"])
        if owner.get("user_id"):
            local_user.set_property("hubspot_user_id", owner["user_id"])
        local_user.set_property("archived", owner.get("archived", False))
        local_user.set_property("is_super_admin", owner.get("is_super_admin", False))
        if owner.get("primary_team_id"):
            local_user.set_property("primary_team_id", owner["primary_team_id"])
        if owner.get("updated_at"):
            local_user.set_property("updated_at", owner["updated_at"])

    def _add_company(self, app: CustomApplication, company: Dict):
        resource = app.add_resource(
            name=company["name"],
            resource_type=COMPANY_RESOURCE_TYPE,
            unique_id=company_unique_id(company["id"]),
        )
        resource.set_property("hubspot_company_id", company["id"])
        if company.get("domain"):
            resource.set_property("domain", company["domain"])
        if company.get("portal_id"):
            resource.set_property("portal_id", company["portal_id"])
        if company.get("created_at"):
            resource.set_property("created_at", str(company["created_at"]))
        if company.get("last_modified_at"):
            resource.set_property("last_modified_at", str(company["last_modified_at"]))
