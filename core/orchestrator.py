"""
HubSpot Orchestrator — Pipeline coordination for HubSpot -> Veza OAA extraction.

This module ties together all other modules (APIClient, EntityExtractor,
ApplicationBuilder, RelationshipBuilder) into a sequential 8-step workflow:

  Step 1: AUTHENTICATION
      Validates the configuration and calls APIClient.verify_authentication(),
      which probes GET /crm/v3/properties/contacts with the access token.

  Step 2: FETCH ROLES
      Walks GET /settings/v3/users/roles (cursor pagination).

  Step 3: FETCH OWNERS
      Walks GET /crm/v3/owners (cursor pagination) and looks up each owner's
      HubSpot user (GET /settings/v3/users/{userId}) for its role.

  Step 4: FETCH COMPANIES
      Walks GET /companies/v2/companies/recent/modified (offset pagination),
      limited to companies modified since the last successful run unless
      FULL_SYNC is set. The changes are applied to the company set pushed
      last time (new and modified replace, deleted are removed), so the
      application always carries every live company.

  Step 5: BUILD OAA APPLICATION
      ApplicationBuilder creates the CustomApplication with owners as local
      users, roles as local roles, and companies as resources.

  Step 6: BUILD RELATIONSHIPS
      RelationshipBuilder wires owner->role and owner->company links.

  Step 7: SAVE OUTPUT
      Writes oaa_payload.json into this run's output folder.

  Step 8: PUSH TO VEZA (skipped on dry runs)
      Pushes the application, then records the run start time as the
      watermark for the next incremental companies fetch, together with the
      pushed company set.

Configuration:
    Every setting comes from the environment, usually through a .env file.
    Required: HUBSPOT_APP_ID, HUBSPOT_OAUTH_ACCESS_TOKEN, HUBSPOT_API_BASE_URL
    (the last defaults to https://api.hubapi.com). VEZA_URL and VEZA_API_KEY
    are required when DRY_RUN=false. See config/settings.py for defaults.

Typical usage:
    orchestrator = HubSpotOrchestrator(env_file="./.env")
    if orchestrator.validate_config():
        results = orchestrator.run()
        orchestrator.print_summary(results)
"""

import os
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Any

from dotenv import load_dotenv

from .hubspot_client import create_api_client
from .entity_extractor import EntityExtractor
from .application_builder import ApplicationBuilder
from .relationship_builder import RelationshipBuilder
from .execution_history import ExecutionHistoryStore
from .errors import IntegrationValidationError
from .types import ExecutionHistory, IntegrationConfig
from .validation import missing_config_fields, validate_invocation

from hubspot_oaa_shared import OutputManager, VezaClient, execute_veza_push

from config import DEFAULT_SETTINGS


def _env_flag(name: str) -> bool:
    return os.getenv(name, str(DEFAULT_SETTINGS[name])).lower() == "true"


def _banner(title: str):
    print(f"\n{'='*60}")
    print(title)
    print("="*60)


class HubSpotOrchestrator:
    """Orchestrates the HubSpot extraction pipeline.

    Attributes:
        config: HubSpot connection settings (IntegrationConfig).
        veza_url / veza_api_key: Veza credentials (needed only to push).
        provider_name / provider_prefix: Veza provider naming.
        dry_run: Skip the Veza push (default: True).
        save_json: Whether to write the OAA payload to disk (default: True).
        debug: Verbose output (default: False).
        full_sync: Ignore execution history and fetch every company.
        request_timeout: Seconds to wait on each HubSpot request.
        output_manager: Run folders, JSON files, and retention cleanup.
        history_store: Persists the last successful run start time.
    """

    def __init__(self, env_file: str = "./.env"):
        """Read connector settings from the environment into attributes.

        Args:
            env_file: Optional .env file, loaded with python-dotenv when it
                      exists. Variables already in the environment are kept.
        """
        env_path = Path(env_file)
        if env_path.exists():
            load_dotenv(env_path)
            print(f"Loaded configuration from: {env_file}")
        else:
            print(f"Warning: {env_file} not found, using defaults/environment")

        self.config = IntegrationConfig(
            app_id=os.getenv("HUBSPOT_APP_ID", ""),
            oauth_access_token=os.getenv("HUBSPOT_OAUTH_ACCESS_TOKEN", ""),
            api_base_url=os.getenv("HUBSPOT_API_BASE_URL", DEFAULT_SETTINGS["HUBSPOT_API_BASE_URL"]),
        )

        self.veza_url = os.getenv("VEZA_URL", "")
        self.veza_api_key = os.getenv("VEZA_API_KEY", "")

        self.provider_name = os.getenv("PROVIDER_NAME", DEFAULT_SETTINGS["PROVIDER_NAME"])
        self.provider_prefix = os.getenv("PROVIDER_PREFIX", DEFAULT_SETTINGS["PROVIDER_PREFIX"])

        output_dir = os.getenv("OUTPUT_DIR", DEFAULT_SETTINGS["OUTPUT_DIR"])
        retention_days = int(os.getenv("OUTPUT_RETENTION_DAYS", str(DEFAULT_SETTINGS["OUTPUT_RETENTION_DAYS"])))

        self.dry_run = _env_flag("DRY_RUN")
        self.save_json = _env_flag("SAVE_JSON")
        self.debug = _env_flag("DEBUG")
        self.full_sync = _env_flag("FULL_SYNC")
        self.request_timeout = float(os.getenv("REQUEST_TIMEOUT", str(DEFAULT_SETTINGS["REQUEST_TIMEOUT"])))

        self.output_manager = OutputManager(output_dir, self.provider_name, retention_days)
        self.history_store = ExecutionHistoryStore(output_dir)

    def validate_config(self) -> bool:
        """Check HubSpot settings, plus Veza credentials when pushing.

        Returns:
            False if anything required is missing.
            Each missing setting is printed by name.
        """
        errors = [f"{env_var} is required" for env_var in missing_config_fields(self.config)]
        if not self.dry_run:
            if not self.veza_url:
                errors.append("VEZA_URL is required when DRY_RUN=false")
            if not self.veza_api_key:
                errors.append("VEZA_API_KEY is required when DRY_RUN=false")

        if errors:
            print("\nConfiguration Errors:")
            for err in errors:
                print(f"  - {err}")
            return False
        return True

    def load_execution_history(self) -> ExecutionHistory:
        if self.full_sync:
            print("  Full sync requested, ignoring execution history")
            return ExecutionHistory()
        self.history_store.debug = self.debug
        return self.history_store.load()

    def run(self) -> Dict[str, Any]:
        """Execute the full extraction pipeline.

        Returns:
            A dict containing:
                - started_at/completed_at: ISO timestamps
                - connector: "hubspot"
                - config: API base URL, app id, dry_run, incremental watermark
                - success: True when every step finished
                - summary: Entity and relationship counts
                - json_path: Where oaa_payload.json was written (save_json only)
                - provider_name: Veza provider pushed to (if not dry_run)
                - error: Why the run failed (only when success is False)
        """
        started_on = int(time.time() * 1000)
        history = self.load_execution_history()

        results = {
            "started_at": datetime.now(timezone.utc).isoformat(),
            "connector": "hubspot",
            "config": {
                "api_base_url": self.config.api_base_url,
                "app_id": self.config.app_id,
                "dry_run": self.dry_run,
                "since": history.watermark,
            },
            "success": False,
        }

        try:
            _banner("STEP 1: AUTHENTICATION")
            client = create_api_client(self.config, history, timeout=self.request_timeout, debug=self.debug)
            validate_invocation(self.config, client)
            print("  Authentication successful")

            extractor = EntityExtractor(client, self.debug)

            _banner("STEP 2: FETCH ROLES")
            roles = extractor.fetch_roles()
            print(f"  Roles: {len(roles)}")

            _banner("STEP 3: FETCH OWNERS")
            owners = extractor.fetch_owners()
            print(f"  Owners: {len(owners)}")

            _banner("STEP 4: FETCH COMPANIES")
            if history.watermark:
                print(f"  Incremental: companies modified since {history.watermark}, "
                      f"applied to {len(history.companies)} previously pushed")
            companies = extractor.fetch_companies(history.companies)
            print(f"  Companies: {len(companies)}")

            entities = extractor.resolve(roles, owners, companies)

            _banner("STEP 5: BUILD OAA APPLICATION")
            builder = ApplicationBuilder(self.config.app_id, self.config.api_base_url, self.debug)
            app = builder.build(entities)
            print(f"  Application built: {app.name}")

            _banner("STEP 6: BUILD RELATIONSHIPS")
            counts = RelationshipBuilder(self.debug).build_all(app, entities)
            print(f"  Role assignments: {counts['owner_roles']}")
            print(f"  Company owners: {counts['company_owners']}")

            _banner("STEP 7: SAVE OUTPUT")
            self.output_manager.create_timestamped_dir()
            if self.save_json:
                results["json_path"] = self.output_manager.write_json("oaa_payload.json", app.get_payload())
                print(f"  Saved OAA payload: {results['json_path']}")

            _banner("STEP 8: PUSH TO VEZA")
            if self.dry_run:
                print("  Dry run, skipping push (execution history not updated)")
            else:
                veza_client = VezaClient(self.veza_url, self.veza_api_key, self.debug)
                push_result = execute_veza_push(
                    veza_client,
                    app,
                    provider_name=self.provider_name,
                    provider_prefix=self.provider_prefix,
                    data_source_name=app.name,
                )
                results["provider_name"] = push_result["provider_name"]
                self.history_store.record_success(started_on, companies)
                print(f"  Execution history updated: {started_on}")

            results["success"] = True
            results["summary"] = {
                "roles": len(roles),
                "owners": len(owners),
                "companies": len(companies),
                "owner_roles": counts["owner_roles"],
                "company_owners": counts["company_owners"],
            }

        except IntegrationValidationError as e:
            results["error"] = str(e)
            print(f"\n  CONFIGURATION ERROR: {e}")
        except Exception as e:
            results["error"] = str(e)
            print(f"\n  ERROR: {e}")
            if self.debug:
                import traceback
                traceback.print_exc()

        results["completed_at"] = datetime.now(timezone.utc).isoformat()

        if self.output_manager.current_dir:
            results_path = self.output_manager.write_json("extraction_results.json", results)
            print(f"\n  Results saved to: {results_path}")

        return results

    def print_summary(self, results: Dict):
        """Print the final status, entity counts and any error.

        Args:
            results: The dict returned by run().
        """
        _banner("EXTRACTION COMPLETE")
        print(f"Status: {'SUCCESS' if results.get('success') else 'FAILED'}")

        summary = results.get("summary", {})
        if summary:
            print(f"Roles: {summary.get('roles', 0)}")
            print(f"Owners: {summary.get('owners', 0)}")
            print(f"Companies: {summary.get('companies', 0)}")

        if results.get("provider_name"):
            print(f"Veza provider: {results['provider_name']}")

        if results.get("error"):
            print(f"Error: {results['error']}")
