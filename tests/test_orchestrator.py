"""Tests for core.orchestrator.HubSpotOrchestrator."""

import json
import os
from unittest.mock import patch, MagicMock

import pytest

pytest.importorskip("oaaclient", reason="oaaclient not installed")

from core.errors import IntegrationProviderAuthenticationError  # noqa: E402
from core.types import Company, Owner, Role, User  # noqa: E402


_BASE_ENV = {
    "HUBSPOT_APP_ID": "12494002",
    "HUBSPOT_OAUTH_ACCESS_TOKEN": "dummy-access_token",
    "HUBSPOT_API_BASE_URL": "https://api.hubapi.com",
    "VEZA_URL": "https://veza.example.com",
    "VEZA_API_KEY": "api-key-abc",
    "DRY_RUN": "true",
    "SAVE_JSON": "true",
    "DEBUG": "false",
    "FULL_SYNC": "false",
    "OUTPUT_RETENTION_DAYS": "30",
    "PROVIDER_NAME": "HubSpot",
    "PROVIDER_PREFIX": "",
}


def _make_orchestrator(output_dir="/tmp/hubspot_test_output", env_overrides=None):
    env = dict(_BASE_ENV, OUTPUT_DIR=str(output_dir))
    if env_overrides:
        env.update(env_overrides)

    with patch.dict(os.environ, env, clear=True):
        from core.orchestrator import HubSpotOrchestrator
        orchestrator = HubSpotOrchestrator(env_file="/nonexistent/.env")
    return orchestrator


def _feed(records):
    def iterate(iteratee):
        for record in records:
            iteratee(record)
    return iterate


@pytest.fixture
def hubspot_client(owners_page, roles_page, companies_page, user_payload):
    client = MagicMock()
    client.iterate_roles.side_effect = _feed([Role.from_dict(r) for r in roles_page["results"]])
    client.iterate_owners.side_effect = _feed([Owner.from_dict(o) for o in owners_page["results"]])
    client.iterate_companies.side_effect = _feed([Company.from_dict(c) for c in companies_page["results"]])
    users = {
        "9001": User.from_dict(user_payload),
        "9002": User.from_dict({"id": "9002", "roleId": "302"}),
    }
    client.fetch_user.side_effect = lambda user_id: users[user_id]
    return client


# --- configuration ---

def test_defaults():
    orch = _make_orchestrator()
    assert orch.config.app_id == "12494002"
    assert orch.dry_run is True
    assert orch.full_sync is False
    assert orch.request_timeout == 30


def test_api_base_url_default():
    env = dict(_BASE_ENV)
    del env["HUBSPOT_API_BASE_URL"]
    with patch.dict(os.environ, env, clear=True):
        from core.orchestrator import HubSpotOrchestrator
        orch = HubSpotOrchestrator(env_file="/nonexistent/.env")
    assert orch.config.api_base_url == "https://api.hubapi.com"


def test_validate_config_valid():
    assert _make_orchestrator().validate_config() is True


def test_validate_config_missing_token():
    orch = _make_orchestrator(env_overrides={"HUBSPOT_OAUTH_ACCESS_TOKEN": ""})
    assert orch.validate_config() is False


def test_validate_config_missing_app_id():
    orch = _make_orchestrator(env_overrides={"HUBSPOT_APP_ID": ""})
    assert orch.validate_config() is False


def test_validate_config_veza_required_for_push():
    orch = _make_orchestrator(env_overrides={"DRY_RUN": "false", "VEZA_API_KEY": ""})
    assert orch.validate_config() is False


def test_validate_config_veza_not_required_in_dry_run():
    orch = _make_orchestrator(env_overrides={"VEZA_URL": "", "VEZA_API_KEY": ""})
    assert orch.validate_config() is True


# --- execution history ---

def test_full_sync_ignores_history(tmp_path):
    orch = _make_orchestrator(tmp_path, {"FULL_SYNC": "true"})
    orch.history_store.record_success(1718000000000)
    assert orch.load_execution_history().watermark == 0


def test_history_loaded_when_incremental(tmp_path):
    orch = _make_orchestrator(tmp_path)
    orch.history_store.record_success(1718000000000)
    assert orch.load_execution_history().watermark == 1718000000000


# --- run ---

def test_dry_run_pipeline(tmp_path, hubspot_client):
    orch = _make_orchestrator(tmp_path)

    with patch("core.orchestrator.create_api_client", return_value=hubspot_client), \
         patch("core.orchestrator.execute_veza_push") as push:
        results = orch.run()

    assert results["success"] is True
    assert results["summary"] == {
        "roles": 2,
        "owners": 3,
        "companies": 2,
        "owner_roles": 2,
        "company_owners": 2,
    }
    assert os.path.exists(results["json_path"])
    push.assert_not_called()
    assert not os.path.exists(orch.history_store.get_history_path())

    with open(os.path.join(orch.output_manager.current_dir, "extraction_results.json")) as f:
        assert json.load(f)["connector"] == "hubspot"


def test_live_run_pushes_and_records_history(tmp_path, hubspot_client):
    orch = _make_orchestrator(tmp_path, {"DRY_RUN": "false"})

    with patch("core.orchestrator.create_api_client", return_value=hubspot_client), \
         patch("core.orchestrator.VezaClient", return_value=MagicMock()), \
         patch("core.orchestrator.execute_veza_push",
               return_value={"provider_name": "HubSpot", "veza_response": {}}) as push:
        results = orch.run()

    assert results["success"] is True
    assert results["provider_name"] == "HubSpot"
    assert push.call_args.kwargs["data_source_name"] == "hubspot_12494002"
    assert orch.history_store.load().watermark > 0


def test_run_passes_history_to_client(tmp_path, hubspot_client):
    orch = _make_orchestrator(tmp_path)
    orch.history_store.record_success(1718000000000)

    with patch("core.orchestrator.create_api_client", return_value=hubspot_client) as factory:
        results = orch.run()

    history = factory.call_args.args[1]
    assert history.watermark == 1718000000000
    assert results["config"]["since"] == 1718000000000


def test_failed_push_keeps_previous_watermark(tmp_path, hubspot_client):
    orch = _make_orchestrator(tmp_path, {"DRY_RUN": "false"})
    orch.history_store.record_success(1718000000000)

    with patch("core.orchestrator.create_api_client", return_value=hubspot_client), \
         patch("core.orchestrator.VezaClient", return_value=MagicMock()), \
         patch("core.orchestrator.execute_veza_push", side_effect=RuntimeError("push rejected")):
        results = orch.run()

    assert results["success"] is False
    assert results["error"] == "push rejected"
    assert orch.history_store.load().watermark == 1718000000000


def test_authentication_failure_stops_run(tmp_path, hubspot_client):
    hubspot_client.verify_authentication.side_effect = IntegrationProviderAuthenticationError(
        endpoint="https://api.hubapi.com/crm/v3/properties/contacts", status=401, status_text="Unauthorized"
    )
    orch = _make_orchestrator(tmp_path)

    with patch("core.orchestrator.create_api_client", return_value=hubspot_client):
        results = orch.run()

    assert results["success"] is False
    assert "401" in results["error"]
    hubspot_client.iterate_roles.assert_not_called()
    assert orch.output_manager.current_dir is None


def _company(company_id, name, owner_id=None, deleted=False):
    properties = {"name": {"value": name}}
    if owner_id:
        properties["hubspot_owner_id"] = {"value": owner_id}
    return Company.from_dict({
        "portalId": 62515,
        "companyId": company_id,
        "isDeleted": deleted,
        "properties": properties,
    })


def _live_run(orch, hubspot_client):
    with patch("core.orchestrator.create_api_client", return_value=hubspot_client) as factory, \
         patch("core.orchestrator.VezaClient", return_value=MagicMock()), \
         patch("core.orchestrator.execute_veza_push",
               return_value={"provider_name": "HubSpot", "veza_response": {}}) as push:
        results = orch.run()
    pushed_app = push.call_args.args[1]
    history = factory.call_args.args[1]
    return results, pushed_app, history


def test_incremental_run_pushes_complete_company_set(tmp_path, hubspot_client):
    orch = _make_orchestrator(tmp_path, {"DRY_RUN": "false"})

    _, first_app, _ = _live_run(orch, hubspot_client)
    assert sorted(first_app.resources) == ["company_5001", "company_5002"]

    # Only what changed since the first run comes back
    hubspot_client.iterate_companies.side_effect = _feed([
        _company(5002, "Compiler Corp", owner_id="102", deleted=True),
        _company(5004, "Difference Engines", owner_id="102"),
    ])
    results, second_app, history = _live_run(orch, hubspot_client)

    assert history.watermark > 0
    assert sorted(history.companies) == ["5001", "5002"]
    assert results["success"] is True
    assert sorted(second_app.resources) == ["company_5001", "company_5004"]
    assert second_app.resources["company_5001"].name == "Analytical Engines Ltd"
    assert results["summary"]["companies"] == 2
    assert results["summary"]["company_owners"] == 2
    assert sorted(orch.history_store.load().companies) == ["5001", "5004"]


def test_full_sync_does_not_reuse_previous_companies(tmp_path, hubspot_client):
    orch = _make_orchestrator(tmp_path, {"DRY_RUN": "false"})
    _live_run(orch, hubspot_client)

    orch.full_sync = True
    hubspot_client.iterate_companies.side_effect = _feed([_company(5004, "Difference Engines", owner_id="102")])
    _, app, history = _live_run(orch, hubspot_client)

    assert history.watermark == 0
    assert sorted(app.resources) == ["company_5004"]
