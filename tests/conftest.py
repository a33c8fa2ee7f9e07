"""Shared fixtures: HubSpot config, recorded payloads, and mock HTTP responses."""

import json
import os
from unittest.mock import MagicMock

import pytest

from core.types import IntegrationConfig

FIXTURES_DIR = os.path.join(os.path.dirname(__file__), "fixtures")

API_BASE_URL = "https://api.hubapi.com"


def load_fixture(name):
    with open(os.path.join(FIXTURES_DIR, name)) as f:
        return json.load(f)


def mock_response(body=None, status=200, reason="OK", url=API_BASE_URL):
    """A stand-in for requests.Response. body=None means a non-JSON body."""
    resp = MagicMock()
    resp.status_code = status
    resp.ok = status < 400
    resp.reason = reason
    resp.url = url
    if body is None:
        resp.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        resp.json.return_value = body
    return resp


@pytest.fixture
def integration_config():
    return IntegrationConfig(
        app_id="12494002",
        oauth_access_token="dummy-access_token",
        api_base_url=API_BASE_URL,
    )


@pytest.fixture
def owners_page():
    return load_fixture("owners_page.json")


@pytest.fixture
def roles_page():
    return load_fixture("roles_page.json")


@pytest.fixture
def user_payload():
    return load_fixture("user.json")


@pytest.fixture
def companies_page():
    return load_fixture("companies_page.json")
