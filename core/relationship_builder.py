"""
Relationship Builder — Wires the OAA relationships between HubSpot entities.

After the ApplicationBuilder (Step 5) creates the OAA users, roles, and
company resources, this module connects them:

  1. Owner -> Role (role assignment)
     An owner whose HubSpot user has a role is assigned that local role at
     the application level (apply_to_application=True).

  2. Owner -> Company (ownership)
     An owner named as a company's hubspot_owner_id is granted the "Owner"
     custom permission on that company resource.

Both link lists come pre-resolved from EntityExtractor, so every link here
refers to entities that exist in the application.

Pipeline context:
    Used in Step 6 of the orchestrator pipeline. Takes the CustomApplication
    from ApplicationBuilder (Step 5) and the entities dict from
    EntityExtractor (Steps 2-4).
"""

from typing import Dict, List, Any
from oaaclient.templates import CustomApplication

from .application_builder import OWNER_PERMISSION, company_unique_id, owner_unique_id, role_unique_id


class RelationshipBuilder:
    """Builds all OAA relationships from extracted entities.

    Attributes:
        debug: If True, prints relationship counts.
    """

    def __init__(self, debug: bool = False):
        self.debug = debug

    def build_all(self, app: CustomApplication, entities: Dict[str, Any]):
        """Build both relationship types.

        Args:
            app: The CustomApplication populated by ApplicationBuilder.
            entities: Output from EntityExtractor.extract().

        Returns:
            Dict of relationship counts: {"owner_roles": n, "company_owners": n}.
        """
        counts = {
            "owner_roles": self._build_owner_roles(app, entities.get("owner_roles", [])),
            "company_owners": self._build_company_owners(app, entities.get("company_owners", [])),
        }

        if self.debug:
            print(f"  Relationships built: {counts['owner_roles']} role assignments, "
                  f"{counts['company_owners']} company owners")

        return counts

    def _build_owner_roles(self, app: CustomApplication, owner_roles: List[Dict]) -> int:
        built = 0
        for link in owner_roles:
            local_user = app.local_users.get(owner_unique_id(link["owner_id"]))
            role_id = role_unique_id(link["role_id"])
            if local_user and role_id in app.local_roles:
                local_user.add_role(role=role_id, apply_to_application=True)
                built += 1
        return built

    def _build_company_owners(self, app: CustomApplication, company_owners: List[Dict]) -> int:
        built = 0
        for link in company_owners:
            local_user = app.local_users.get(owner_unique_id(link["owner_id"]))
            resource = app.resources.get(company_unique_id(link["company_id"]))
            if local_user and resource:
                local_user.add_permission(permission=OWNER_PERMISSION, resources=[resource])
                built += 1
        return built
